"""Line-number markers for rendered diffs.

Markers tell a caller which ``(line, side)`` pair to use when anchoring an
inline comment: removed lines carry original (left) numbers, added and
context lines carry current (right) numbers.
"""

import re
from typing import List, Optional, Tuple

HUNK_HEADER = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")

_HEADERS = {
    "add": [
        "NEW FILE - all lines available for inline comments",
        "Use line numbers 1, 2, 3... for inline comments",
    ],
    "delete": [
        "DELETED FILE - original line numbers available for comments",
        "Use original line numbers from the deleted content for inline comments",
    ],
}
_DEFAULT_HEADER = [
    "MODIFIED FILE - new (right) lines available for inline comments",
    "Look for [line N, right] markers for inline comments",
]

_FOOTERS = {
    "add": ["Usage: any line number from 1 to the total line count can be commented"],
    "delete": ["Usage: use original line numbers for commenting on deleted content"],
}
_DEFAULT_FOOTER = [
    "Usage: look for [line N, right] markers above for valid line numbers",
    "Right numbers: comment on new content (what was added or unchanged)",
    "Left numbers mark removed lines; inline comments cannot be anchored to them in a modified file",
]


def parse_hunk_header(line: str) -> Optional[Tuple[int, int, int, int]]:
    """
    Parse ``@@ -a,b +c,d @@`` into ``(a, b, c, d)``.

    Omitted counts default to 1, as in unified diff output.
    """
    match = HUNK_HEADER.match(line)
    if not match:
        return None
    original_start, original_count, current_start, current_count = match.groups()
    return (
        int(original_start),
        int(original_count) if original_count is not None else 1,
        int(current_start),
        int(current_count) if current_count is not None else 1,
    )


def annotate_line_numbers(diff_text: str) -> List[str]:
    """Append ``[line N, side]`` markers to the changed and context lines of a diff."""
    annotated: List[str] = []
    left = right = 1
    in_hunk = False

    for line in diff_text.split("\n"):
        header = parse_hunk_header(line)
        if header is not None:
            left, _, right, _ = header
            in_hunk = True
            annotated.append(line)
            annotated.append("Lines below can be commented on:")
        elif not in_hunk:
            # File headers (---/+++) and anything else before the first hunk.
            annotated.append(line)
        elif line.startswith("+"):
            annotated.append(f"{line}  [line {right}, right]")
            right += 1
        elif line.startswith("-"):
            annotated.append(f"{line}  [line {left}, left]")
            left += 1
        elif line.startswith(" "):
            annotated.append(f"{line}  [line {right}, right]")
            left += 1
            right += 1
        else:
            annotated.append(line)

    return annotated


def add_inline_comment_guidance(diff_text: str, change_kind: str = "edit") -> str:
    """
    Wrap a unified diff with commenting guidance and line-number markers.

    Args:
        diff_text: Output of ``unified_diff``
        change_kind: Azure DevOps change type name ("add", "edit", "delete")

    Returns:
        Annotated diff text
    """
    output = list(_HEADERS.get(change_kind, _DEFAULT_HEADER))
    output.append("")
    output.extend(annotate_line_numbers(diff_text))
    output.append("")
    output.extend(_FOOTERS.get(change_kind, _DEFAULT_FOOTER))
    output.append("Format: inline comment with position {line: N, offset: 1}")
    return "\n".join(output)
