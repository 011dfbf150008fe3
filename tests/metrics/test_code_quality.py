"""
Tests for the code quality and tech stack signals.
"""

import base64
import json

from gitproof.metrics.code_quality import (
    compute_code_quality,
    compute_tech_stack,
    decode_manifest,
    has_ci_configuration,
    has_test_directory,
)


def _encode(document) -> str:
    return base64.b64encode(json.dumps(document).encode("utf-8")).decode("ascii")


class TestListingSignals:
    def test_test_directories(self):
        for name in ("test", "tests", "__tests__"):
            assert has_test_directory([{"name": name, "type": "dir"}])

    def test_test_file_is_not_directory(self):
        assert not has_test_directory([{"name": "tests", "type": "file"}])

    def test_ci_from_github_directory(self):
        assert has_ci_configuration([{"name": ".github", "type": "dir"}])

    def test_ci_from_yml_file(self):
        assert has_ci_configuration([{"name": ".travis.yml", "type": "file"}])

    def test_no_ci(self):
        listing = [{"name": "src", "type": "dir"}, {"name": "README.md", "type": "file"}]
        assert not has_ci_configuration(listing)


class TestDecodeManifest:
    def test_valid(self):
        assert decode_manifest(_encode({"name": "app"})) == {"name": "app"}

    def test_invalid_base64(self):
        assert decode_manifest("!!!not base64!!!") is None

    def test_invalid_json(self):
        encoded = base64.b64encode(b"{not json").decode("ascii")
        assert decode_manifest(encoded) is None

    def test_non_object(self):
        assert decode_manifest(_encode(["react"])) is None


class TestComputeCodeQuality:
    def test_counts_dependencies(self):
        manifest = {
            "dependencies": {"react": "^18.0.0", "axios": "^1.0.0"},
            "devDependencies": {"eslint": "^8.0.0"},
        }
        listing = [{"name": "tests", "type": "dir"}, {"name": ".github", "type": "dir"}]
        quality = compute_code_quality(listing, manifest)
        assert quality.has_tests is True
        assert quality.has_ci is True
        assert quality.dependency_count == 2
        assert quality.dev_dependency_count == 1
        assert quality.has_linter is True
        assert quality.has_prettier is True
        assert quality.test_directory_files == 0

    def test_no_manifest(self):
        quality = compute_code_quality([], None)
        assert quality.dependency_count == 0
        assert quality.dev_dependency_count == 0
        assert quality.has_linter is False
        assert quality.has_prettier is False


class TestComputeTechStack:
    def test_detects_frameworks_in_fixed_order(self):
        manifest = {
            "dependencies": {"next": "14", "react": "18", "lodash": "4"},
            "devDependencies": {"typescript": "5"},
        }
        stack = compute_tech_stack(manifest)
        assert stack.frameworks == ["React", "Next.js"]
        assert stack.major_libraries == ["next", "react", "lodash"]
        assert stack.dev_tools == ["typescript"]

    def test_angular_reported_once(self):
        manifest = {"dependencies": {"angular": "1", "@angular/core": "17"}}
        assert compute_tech_stack(manifest).frameworks == ["Angular"]

    def test_dev_dependencies_do_not_imply_frameworks(self):
        manifest = {"devDependencies": {"react": "18"}}
        assert compute_tech_stack(manifest).frameworks == []

    def test_no_manifest(self):
        stack = compute_tech_stack(None)
        assert stack.frameworks == []
        assert stack.major_libraries == []
        assert stack.dev_tools == []
