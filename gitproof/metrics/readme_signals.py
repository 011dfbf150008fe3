"""
README section and quality signal detectors.

All detectors are plain substring or regex heuristics. They are loose: a
keyword following a '#' anywhere in the text (for example inside a
code block) still counts as a section header.
"""

import re

from gitproof.metrics.base import (
    CriticalSections,
    Formatting,
    QualitySignals,
    ReadmeSection,
)

CRITICAL_SECTION_KEYWORDS = {
    "installation": [
        "installation",
        "install",
        "getting started",
        "setup",
        "quick start",
    ],
    "usage": ["usage", "how to use", "examples", "api", "documentation"],
    "contribution": ["contributing", "contribution", "development", "developers"],
    "license": ["license", "licensing", "copyright"],
    "architecture": ["architecture", "design", "structure", "overview"],
}

# Phrases left behind by project scaffolding tools (Create React App et al.)
BOILERPLATE_SIGNALS = [
    "this project was bootstrapped with",
    "getting started with create react app",
    "npm start",
    "yarn start",
    "learn more",
]
BOILERPLATE_THRESHOLD = 3

API_DOC_SIGNALS = [
    "api reference",
    "endpoints",
    "parameters",
    "response",
    "request",
    "authentication",
    "authorization",
]

ENV_SETUP_SIGNALS = [
    ".env",
    "environment variables",
    "configuration",
    "prerequisites",
    "requirements",
]

TROUBLESHOOTING_SIGNALS = [
    "troubleshoot",
    "debugging",
    "common issues",
    "known issues",
    "faq",
    "frequently asked questions",
]

_SECTION_HEADER_RE = re.compile(r"^(#{1,3})[ \t]+(.+)$", re.MULTILINE)
_HEADER_RE = re.compile(r"^#{1,6}\s+", re.MULTILINE)
_LIST_RE = re.compile(r"^\s*[-*+]\s", re.MULTILINE)
_TABLE_RE = re.compile(r"\|.*\|.*\|")
_BADGE_RE = re.compile(r"!\[.*?\]\(.*?\)")
_INDENTED_CODE_RE = re.compile(r"^[ \t]{4}", re.MULTILINE)
_WORD_CHAR_RE = re.compile(r"\w")


def has_section(content: str, keywords: list[str]) -> bool:
    """
    Check whether any keyword appears right after a level 1-3 header marker.

    The test is a substring search, not a line-anchored header parse, so
    "see # usage" matches. A level-4 marker ("#### usage") does not.
    """
    lowered = content.lower()
    for keyword in keywords:
        pattern = r"(?<!#)#{1,3} " + re.escape(keyword.lower())
        if re.search(pattern, lowered):
            return True
    return False


def detect_critical_sections(content: str) -> CriticalSections:
    """Evaluate every critical section keyword group against the README."""
    lowered = content.lower()
    return CriticalSections(
        **{
            name: has_section(lowered, keywords)
            for name, keywords in CRITICAL_SECTION_KEYWORDS.items()
        }
    )


def _contains_any(content: str, signals: list[str]) -> bool:
    lowered = content.lower()
    return any(signal in lowered for signal in signals)


def is_boilerplate(content: str) -> bool:
    """True when at least three scaffolding phrases are present."""
    lowered = content.lower()
    matches = sum(1 for signal in BOILERPLATE_SIGNALS if signal in lowered)
    return matches >= BOILERPLATE_THRESHOLD


def has_api_documentation(content: str) -> bool:
    return _contains_any(content, API_DOC_SIGNALS)


def has_env_setup(content: str) -> bool:
    return _contains_any(content, ENV_SETUP_SIGNALS)


def has_code_examples(content: str) -> bool:
    """Fenced code block, or any line indented by four whitespace characters."""
    return "```" in content or bool(_INDENTED_CODE_RE.search(content))


def has_troubleshooting(content: str) -> bool:
    return _contains_any(content, TROUBLESHOOTING_SIGNALS)


def detect_quality_signals(content: str) -> QualitySignals:
    return QualitySignals(
        is_boilerplate=is_boilerplate(content),
        has_api_docs=has_api_documentation(content),
        has_env_setup=has_env_setup(content),
        has_examples=has_code_examples(content),
        has_troubleshooting=has_troubleshooting(content),
    )


def detect_formatting(content: str) -> Formatting:
    """
    Detect Markdown formatting features.

    Operates on the raw (not lower-cased) README text.
    """
    return Formatting(
        has_headers=bool(_HEADER_RE.search(content)),
        has_code_blocks="```" in content,
        has_lists=bool(_LIST_RE.search(content)),
        has_tables=bool(_TABLE_RE.search(content)),
        has_images="![" in content or "<img" in content,
        has_badges=len(_BADGE_RE.findall(content)) > 0,
    )


def extract_sections(content: str) -> list[ReadmeSection]:
    """
    Split a README into sections at level 1-3 headers.

    Each section covers the text between its header line and the next level
    1-3 header (or the end of the document), so sections never overlap.
    """
    headers = list(_SECTION_HEADER_RE.finditer(content))
    sections = []
    for index, match in enumerate(headers):
        start = match.end()
        end = headers[index + 1].start() if index + 1 < len(headers) else len(content)
        body = content[start:end]
        sections.append(
            ReadmeSection(
                name=match.group(2).strip(),
                content_length=len(body.strip()),
                has_code_examples=has_code_examples(body),
            )
        )
    return sections


def count_words(content: str) -> int:
    """
    Count whitespace-separated tokens that contain at least one word character.

    Markup-only tokens ("#", "-", "|", "---") are not counted.
    """
    return sum(1 for token in content.split() if _WORD_CHAR_RE.search(token))
