"""Unit tests for whole-file renderers and line-number annotation."""

import re

import pytest

from azdo_tools.azure_devops.anchors import resolve_comment_anchor
from azdo_tools.azure_devops.models import ChangeKind
from azdo_tools.diff.annotate import (
    add_inline_comment_guidance,
    annotate_line_numbers,
    parse_hunk_header,
)
from azdo_tools.diff.engine import unified_diff
from azdo_tools.diff.renderers import (
    EMPTY_FILE_MARKER,
    render_added_file,
    render_deleted_file,
)

from conftest import make_entry

LINE_MARKER = re.compile(r"\[line (\d+), (left|right)\]$")
HIDDEN = re.compile(r"\((\d+) more (?:deleted )?lines: (\d+)-(\d+), all commentable\)")


def markers(text, side):
    found = []
    for line in text.split("\n"):
        match = LINE_MARKER.search(line)
        if match and match.group(2) == side:
            found.append(int(match.group(1)))
    return found


class TestAddedFileRenderer:
    """Tests for all-added renderings."""

    def test_small_file(self):
        text = render_added_file(["one", "two", "three"], "/src/new.py")

        assert text.startswith("--- /dev/null\n+++ b/src/new.py\n@@ -0,0 +1,3 @@")
        assert "+   1: one  [line 1, right]" in text
        assert "+   2: two  [line 2, right]" in text
        assert "+   3: three  [line 3, right]" in text
        assert markers(text, "right") == [1, 2, 3]

    def test_at_threshold_is_not_truncated(self):
        lines = [f"line {n}" for n in range(1, 251)]
        text = render_added_file(lines, "/big.py")

        assert markers(text, "right") == list(range(1, 251))
        assert "more lines" not in text

    def test_large_file_is_truncated(self):
        lines = [f"line {n}" for n in range(1, 301)]
        text = render_added_file(lines, "/big.py")

        shown = markers(text, "right")
        assert shown == list(range(1, 51)) + list(range(291, 301))
        assert "+... (240 more lines: 51-290, all commentable) ..." in text
        assert "+ 291: line 291  [line 291, right]" in text

    @pytest.mark.parametrize("total", [251, 300, 1000])
    def test_hidden_and_shown_lines_sum_to_total(self, total):
        text = render_added_file([f"x{n}" for n in range(total)], "/f.py")

        hidden, start, end = (int(g) for g in HIDDEN.search(text).groups())
        assert hidden + len(markers(text, "right")) == total
        assert end - start + 1 == hidden

    def test_empty_file(self):
        text = render_added_file([], "/empty.txt")

        assert EMPTY_FILE_MARKER in text
        assert "[line" not in text


class TestDeletedFileRenderer:
    """Tests for all-removed renderings."""

    def test_small_file(self):
        text = render_deleted_file(["first", "second"], "/src/old.py")

        assert text.startswith("--- a/src/old.py\n+++ /dev/null\n@@ -1,2 +0,0 @@")
        assert "-   1: first  [line 1, left]" in text
        assert "-   2: second  [line 2, left]" in text
        assert markers(text, "right") == []

    def test_threshold_is_lower_than_added(self):
        exactly = render_deleted_file([f"d{n}" for n in range(100)], "/f.py")
        over = render_deleted_file([f"d{n}" for n in range(101)], "/f.py")

        assert len(markers(exactly, "left")) == 100
        assert "-... (41 more deleted lines: 51-91, all commentable) ..." in over
        assert len(markers(over, "left")) == 60

    def test_custom_limits(self):
        text = render_deleted_file([str(n) for n in range(20)], "/f.py", max_lines=10, head_lines=3, tail_lines=2)

        assert markers(text, "left") == [1, 2, 3, 19, 20]
        assert "(15 more deleted lines: 4-18" in text

    def test_empty_file(self):
        text = render_deleted_file([], "/gone.txt")

        assert EMPTY_FILE_MARKER in text
        assert "[line" not in text


class TestAnnotation:
    """Tests for hunk header parsing and line markers."""

    def test_parse_hunk_header(self):
        assert parse_hunk_header("@@ -1,3 +1,4 @@") == (1, 3, 1, 4)

    def test_parse_hunk_header_default_counts(self):
        assert parse_hunk_header("@@ -5 +6 @@") == (5, 1, 6, 1)

    def test_parse_hunk_header_rejects_other_lines(self):
        assert parse_hunk_header("--- a/file") is None

    def test_modified_line_markers(self):
        annotated = annotate_line_numbers(unified_diff("a\nb\nc", "a\nx\nc", "/f.txt"))

        assert annotated[0] == "--- a/f.txt"
        assert annotated[1] == "+++ b/f.txt"
        assert " a  [line 1, right]" in annotated
        assert "-b  [line 2, left]" in annotated
        assert "+x  [line 2, right]" in annotated
        assert " c  [line 3, right]" in annotated

    def test_markers_follow_hunk_start(self):
        original = [f"l{n}" for n in range(1, 21)]
        current = list(original)
        current[17] = "Y"

        annotated = annotate_line_numbers(unified_diff("\n".join(original), "\n".join(current), "/f"))

        assert " l15  [line 15, right]" in annotated
        assert "-l18  [line 18, left]" in annotated
        assert "+Y  [line 18, right]" in annotated

    def test_removed_line_that_looks_like_a_header(self):
        annotated = annotate_line_numbers(unified_diff("x\n-- old", "x\nnew", "/q.sql"))

        assert "--- old  [line 2, left]" in annotated
        assert "+new  [line 2, right]" in annotated

    def test_guidance_for_modified_file(self):
        text = add_inline_comment_guidance(unified_diff("a\nb", "a\nc", "/f"), "edit")

        assert text.startswith("MODIFIED FILE")
        assert "Lines below can be commented on:" in text
        assert "Left numbers: comment on original content" not in text
        assert "cannot be anchored" in text

    def test_modified_file_guidance_matches_anchor_side(self):
        """Test modified-file guidance only offers the side comments are anchored on."""
        text = add_inline_comment_guidance(unified_diff("a\nb", "a\nc", "/f"), "edit")
        anchor = resolve_comment_anchor(make_entry("/f", ChangeKind.EDIT, "o", "n"), line=2)

        guidance = [line for line in text.split("\n") if not LINE_MARKER.search(line)]
        assert anchor.has_right and not anchor.has_left
        assert not any("[line N, left]" in line for line in guidance)
        assert any("[line N, right]" in line for line in guidance)

    def test_guidance_for_added_file(self):
        text = add_inline_comment_guidance(unified_diff("", "a", "/f"), "add")

        assert text.startswith("NEW FILE")
        assert "+a  [line 1, right]" in text
