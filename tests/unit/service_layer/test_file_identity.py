"""
Unit Tests for File Identity
"""

import pytest

from code_insight.analysis.file_identity import canonical_key, display_name


@pytest.mark.unit
class TestCanonicalKey:
    def test_equivalent_spellings_share_a_key(self, tmp_path):
        target = tmp_path / "src" / "app.py"

        assert canonical_key(target) == canonical_key(str(tmp_path / "src" / ".." / "src" / "app.py"))
        assert canonical_key(target).startswith("file://")


@pytest.mark.unit
class TestDisplayName:
    @pytest.mark.parametrize(
        "path, expected",
        [
            ("/workspace/src/app.ts", "app.ts"),
            ("C:\\Users\\dev\\project\\main.py", "main.py"),
            ("src\\lib/mixed.rs", "mixed.rs"),
            ("plain.go", "plain.go"),
        ],
    )
    def test_base_name_on_either_separator(self, path, expected):
        assert display_name(path) == expected
