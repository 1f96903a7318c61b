"""Diff reconstruction for two-version file comparisons."""

from .annotate import add_inline_comment_guidance, annotate_line_numbers, parse_hunk_header
from .engine import (
    NO_MEANINGFUL_CHANGES,
    AlignmentSegment,
    DiffHunk,
    SegmentKind,
    build_hunks,
    diff_lines,
    find_segments,
    normalize_line,
    split_lines,
    unified_diff,
)
from .renderers import EMPTY_FILE_MARKER, render_added_file, render_deleted_file

__all__ = [
    "NO_MEANINGFUL_CHANGES",
    "EMPTY_FILE_MARKER",
    "AlignmentSegment",
    "DiffHunk",
    "SegmentKind",
    "build_hunks",
    "diff_lines",
    "find_segments",
    "normalize_line",
    "split_lines",
    "unified_diff",
    "render_added_file",
    "render_deleted_file",
    "add_inline_comment_guidance",
    "annotate_line_numbers",
    "parse_hunk_header",
]
