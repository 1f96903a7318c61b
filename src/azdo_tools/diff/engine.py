"""Line-level diff between two versions of a file.

The pull-request API hands back two blobs and no patch, so the diff is
rebuilt here. Alignment uses a bounded look-ahead: after a mismatch the
walker searches a small window for the nearest pair of lines that agree
again and classifies the skipped span. The result is deterministic but not
guaranteed minimal; an LCS-based aligner can replace ``find_segments`` as
long as the hunk shape produced by ``build_hunks`` stays the same, because
line-number annotation reads those headers back.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple

DEFAULT_LOOK_AHEAD = 5
DEFAULT_CONTEXT_LINES = 3

NO_MEANINGFUL_CHANGES = "(No meaningful differences found - likely formatting changes)"

_WHITESPACE_RUN = re.compile(r"\s+")


class SegmentKind(Enum):
    """Classification of a divergent span."""
    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"


@dataclass(frozen=True)
class AlignmentSegment:
    """
    A region where the two versions disagree.

    Line numbers are 1-based and inclusive. A side with no lines has
    ``end == start - 1`` so that ``start`` still marks where the other
    side's lines sit.
    """
    kind: SegmentKind
    original_start: int
    original_end: int
    current_start: int
    current_end: int

    @property
    def original_count(self) -> int:
        return self.original_end - self.original_start + 1

    @property
    def current_count(self) -> int:
        return self.current_end - self.current_start + 1

    @property
    def description(self) -> str:
        if self.kind == SegmentKind.ADDED:
            return f"Added {self.current_count} lines"
        if self.kind == SegmentKind.REMOVED:
            return f"Removed {self.original_count} lines"
        return f"Modified {max(self.original_count, self.current_count)} lines"


@dataclass
class DiffHunk:
    """Rendered region of a diff: one or more segments plus context."""
    original_start: int
    original_count: int
    current_start: int
    current_count: int
    lines: List[str] = field(default_factory=list)
    segments: List[AlignmentSegment] = field(default_factory=list)
    note: Optional[str] = None

    @property
    def header(self) -> str:
        # Unified diff convention: an empty side points at the line before it.
        orig_start = self.original_start if self.original_count else self.original_start - 1
        curr_start = self.current_start if self.current_count else self.current_start - 1
        return f"@@ -{orig_start},{self.original_count} +{curr_start},{self.current_count} @@"

    def render(self) -> str:
        body = [self.header]
        if self.note:
            body.append(self.note)
        body.extend(self.lines)
        return "\n".join(body)


def split_lines(text: str) -> List[str]:
    """Split blob text into a line sequence; empty text has no lines."""
    if not text:
        return []
    return text.splitlines()


def normalize_line(line: str) -> str:
    """Comparison key for a line: outer whitespace trimmed, inner runs collapsed."""
    return _WHITESPACE_RUN.sub(" ", line.strip())


def _make_segment(
    original_index: int, original_count: int, current_index: int, current_count: int
) -> AlignmentSegment:
    if original_count == 0:
        kind = SegmentKind.ADDED
    elif current_count == 0:
        kind = SegmentKind.REMOVED
    else:
        kind = SegmentKind.MODIFIED

    return AlignmentSegment(
        kind=kind,
        original_start=original_index + 1,
        original_end=original_index + original_count,
        current_start=current_index + 1,
        current_end=current_index + current_count,
    )


def _find_realignment(
    original: Sequence[str],
    current: Sequence[str],
    original_index: int,
    current_index: int,
    look_ahead: int,
) -> Optional[Tuple[int, int]]:
    """Nearest (original_offset, current_offset) where normalized lines agree again."""
    for ahead in range(1, look_ahead + 1):
        for original_offset in range(ahead + 1):
            current_offset = ahead - original_offset
            i = original_index + original_offset
            j = current_index + current_offset
            if i < len(original) and j < len(current) and original[i] == current[j]:
                return original_offset, current_offset
    return None


def find_segments(
    original_lines: Sequence[str],
    current_lines: Sequence[str],
    look_ahead: int = DEFAULT_LOOK_AHEAD,
) -> List[AlignmentSegment]:
    """
    Align two line sequences and return the regions where they differ.

    Args:
        original_lines: Lines of the original (left) version
        current_lines: Lines of the current (right) version
        look_ahead: Combined offset budget searched after a mismatch

    Returns:
        Non-overlapping segments in increasing line order
    """
    original = [normalize_line(line) for line in original_lines]
    current = [normalize_line(line) for line in current_lines]

    segments: List[AlignmentSegment] = []
    i = j = 0

    while i < len(original) or j < len(current):
        while i < len(original) and j < len(current) and original[i] == current[j]:
            i += 1
            j += 1

        if i >= len(original) and j >= len(current):
            break

        match = _find_realignment(original, current, i, j, look_ahead)
        if match is None:
            # Nothing realigns inside the window: the rest is one change.
            segments.append(_make_segment(i, len(original) - i, j, len(current) - j))
            break

        original_offset, current_offset = match
        segments.append(_make_segment(i, original_offset, j, current_offset))
        i += original_offset
        j += current_offset

    return segments


def _group_segments(
    segments: Sequence[AlignmentSegment], context_lines: int
) -> List[List[AlignmentSegment]]:
    groups: List[List[AlignmentSegment]] = []
    for segment in segments:
        if groups:
            previous = groups[-1][-1]
            gap = segment.original_start - previous.original_end - 1
            if gap <= 2 * context_lines:
                groups[-1].append(segment)
                continue
        groups.append([segment])
    return groups


def _render_group(
    original_lines: Sequence[str],
    current_lines: Sequence[str],
    group: Sequence[AlignmentSegment],
    context_lines: int,
    previous_original_end: int,
) -> DiffHunk:
    first, last = group[0], group[-1]

    before = min(context_lines, first.original_start - 1 - previous_original_end)
    after = min(context_lines, len(original_lines) - last.original_end)

    hunk_original_start = first.original_start - before
    hunk_current_start = first.current_start - before

    lines = [f" {line}" for line in original_lines[hunk_original_start - 1:first.original_start - 1]]

    for index, segment in enumerate(group):
        lines.extend(
            f"-{line}" for line in original_lines[segment.original_start - 1:segment.original_end]
        )
        lines.extend(
            f"+{line}" for line in current_lines[segment.current_start - 1:segment.current_end]
        )
        if index + 1 < len(group):
            following = group[index + 1]
            lines.extend(
                f" {line}" for line in original_lines[segment.original_end:following.original_start - 1]
            )

    lines.extend(f" {line}" for line in original_lines[last.original_end:last.original_end + after])

    return DiffHunk(
        original_start=hunk_original_start,
        original_count=last.original_end + after - hunk_original_start + 1,
        current_start=hunk_current_start,
        current_count=last.current_end + after - hunk_current_start + 1,
        lines=lines,
        segments=list(group),
    )


def build_hunks(
    original_lines: Sequence[str],
    current_lines: Sequence[str],
    segments: Sequence[AlignmentSegment],
    context_lines: int = DEFAULT_CONTEXT_LINES,
) -> List[DiffHunk]:
    """
    Turn alignment segments into hunks with surrounding context.

    Context never reaches into a neighbouring segment; segments whose
    context windows would touch share one hunk.
    """
    if not segments:
        return [
            DiffHunk(
                original_start=1,
                original_count=len(original_lines),
                current_start=1,
                current_count=len(current_lines),
                note=NO_MEANINGFUL_CHANGES,
            )
        ]

    hunks = []
    previous_original_end = 0
    for group in _group_segments(segments, context_lines):
        hunks.append(
            _render_group(original_lines, current_lines, group, context_lines, previous_original_end)
        )
        previous_original_end = group[-1].original_end
    return hunks


def diff_lines(
    original_lines: Sequence[str],
    current_lines: Sequence[str],
    look_ahead: int = DEFAULT_LOOK_AHEAD,
    context_lines: int = DEFAULT_CONTEXT_LINES,
) -> List[DiffHunk]:
    """Compute hunks for two line sequences."""
    segments = find_segments(original_lines, current_lines, look_ahead)
    return build_hunks(original_lines, current_lines, segments, context_lines)


def unified_diff(
    original_text: str,
    current_text: str,
    file_path: str,
    look_ahead: int = DEFAULT_LOOK_AHEAD,
    context_lines: int = DEFAULT_CONTEXT_LINES,
) -> str:
    """
    Render a unified diff between two versions of a file.

    Args:
        original_text: Content of the original blob
        current_text: Content of the current blob
        file_path: Repository path, used in the ``---``/``+++`` headers

    Returns:
        Diff text with one block per hunk, blocks separated by a blank line
    """
    hunks = diff_lines(split_lines(original_text), split_lines(current_text), look_ahead, context_lines)

    output = [f"--- a{file_path}", f"+++ b{file_path}"]
    output.append("\n\n".join(hunk.render() for hunk in hunks))
    return "\n".join(output)
