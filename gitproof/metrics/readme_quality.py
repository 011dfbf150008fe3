"""README quality metric."""

from gitproof.metrics.base import (
    CriticalSections,
    Formatting,
    QualitySignals,
    ReadmeMetrics,
    ReadmeSection,
)
from gitproof.metrics.readme_signals import (
    count_words,
    detect_critical_sections,
    detect_formatting,
    detect_quality_signals,
    extract_sections,
)

MAX_SCORE = 100

# (minimum word count, points) tiers; points accumulate
WORD_COUNT_TIERS = [(100, 10), (300, 10), (500, 10)]
CRITICAL_SECTION_POINTS = 10
FORMATTING_POINTS = 5
QUALITY_SIGNAL_POINTS = 5
BOILERPLATE_PENALTY = 20


def calculate_readme_score(
    sections: list[ReadmeSection],
    critical_sections: CriticalSections,
    formatting: Formatting,
    quality_signals: QualitySignals,
    word_count: int,
) -> int:
    """
    Combine README detector outputs into a single 0-100 score.

    Scoring:
    - Length: +10 each at 100, 300 and 500 words (max 30)
    - Critical sections: +10 per section present (max 50)
    - Formatting: +5 per feature present (max 30)
    - Quality signals: +5 per signal present, except boilerplate which
      subtracts 20
    - The sum is clamped to [0, 100]

    ``sections`` does not contribute points; it is accepted so callers can
    hand over a complete analysis.
    """
    score = 0

    for threshold, points in WORD_COUNT_TIERS:
        if word_count >= threshold:
            score += points

    score += sum(critical_sections) * CRITICAL_SECTION_POINTS
    score += sum(formatting) * FORMATTING_POINTS

    for signal, present in quality_signals._asdict().items():
        if not present:
            continue
        if signal == "is_boilerplate":
            score -= BOILERPLATE_PENALTY
        else:
            score += QUALITY_SIGNAL_POINTS

    return max(0, min(MAX_SCORE, score))


def analyze_readme_content(content: str) -> ReadmeMetrics:
    """Run every detector over decoded README text and score it."""
    sections = extract_sections(content)
    critical_sections = detect_critical_sections(content)
    formatting = detect_formatting(content)
    quality_signals = detect_quality_signals(content)
    word_count = count_words(content)

    score = calculate_readme_score(
        sections=sections,
        critical_sections=critical_sections,
        formatting=formatting,
        quality_signals=quality_signals,
        word_count=word_count,
    )

    return ReadmeMetrics(
        word_count=word_count,
        content=content,
        sections=sections,
        critical_sections=critical_sections,
        formatting=formatting,
        quality_signals=quality_signals,
        overall_score=score,
    )


def empty_readme_metrics() -> ReadmeMetrics:
    """All-false, zero-scored record used when no README could be read."""
    return ReadmeMetrics(
        word_count=0,
        content="",
        sections=[],
        critical_sections=CriticalSections(),
        formatting=Formatting(),
        quality_signals=QualitySignals(),
        overall_score=0,
    )
