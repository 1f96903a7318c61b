"""Whole-file renderings for added and deleted files."""

from typing import List, Sequence

ADDED_FILE_MAX_LINES = 250
DELETED_FILE_MAX_LINES = 100
HEAD_LINES = 50
TAIL_LINES = 10

EMPTY_FILE_MARKER = "(empty file)"


def _numbered(sign: str, number: int, text: str, side: str) -> str:
    return f"{sign}{number:>4}: {text}  [line {number}, {side}]"


def _render_body(
    lines: Sequence[str],
    sign: str,
    side: str,
    hidden_label: str,
    max_lines: int,
    head_lines: int,
    tail_lines: int,
) -> List[str]:
    total = len(lines)
    if total <= max_lines:
        return [_numbered(sign, n, text, side) for n, text in enumerate(lines, 1)]

    tail_start = total - tail_lines
    body = [_numbered(sign, n, lines[n - 1], side) for n in range(1, head_lines + 1)]

    hidden = tail_start - head_lines
    if hidden > 0:
        body.append(
            f"{sign}... ({hidden} more {hidden_label}: {head_lines + 1}-{tail_start}, "
            f"all commentable) ..."
        )

    body.extend(_numbered(sign, n, lines[n - 1], side) for n in range(tail_start + 1, total + 1))
    return body


def render_added_file(
    lines: Sequence[str],
    file_path: str,
    max_lines: int = ADDED_FILE_MAX_LINES,
    head_lines: int = HEAD_LINES,
    tail_lines: int = TAIL_LINES,
) -> str:
    """
    Render a new file as an all-added diff with right-side line numbers.

    Files longer than ``max_lines`` show the first ``head_lines`` and the last
    ``tail_lines`` lines with a summary line naming the hidden range.

    Args:
        lines: Lines of the new file
        file_path: Repository path of the file

    Returns:
        Annotated diff text
    """
    total = len(lines)
    output = ["--- /dev/null", f"+++ b{file_path}"]

    if total == 0:
        output.append("@@ -0,0 +0,0 @@")
        output.append(f"NEW FILE {EMPTY_FILE_MARKER}")
        output.append("INLINE COMMENT LINES: none")
        return "\n".join(output)

    output.append(f"@@ -0,0 +1,{total} @@")
    output.append(f"NEW FILE ({total} lines)")
    output.append(f"INLINE COMMENT LINES: 1 to {total} (any line can be commented)")
    output.append("")
    output.extend(_render_body(lines, "+", "right", "lines", max_lines, head_lines, tail_lines))
    output.append("")
    output.append(f"Usage: comment with position line = 1 to {total}, offset = 1")

    return "\n".join(output)


def render_deleted_file(
    lines: Sequence[str],
    file_path: str,
    max_lines: int = DELETED_FILE_MAX_LINES,
    head_lines: int = HEAD_LINES,
    tail_lines: int = TAIL_LINES,
) -> str:
    """
    Render a removed file as an all-deleted diff with left-side line numbers.

    Args:
        lines: Lines of the file before deletion
        file_path: Repository path of the file

    Returns:
        Annotated diff text
    """
    total = len(lines)
    output = [f"--- a{file_path}", "+++ /dev/null"]

    if total == 0:
        output.append("@@ -0,0 +0,0 @@")
        output.append(f"DELETED FILE {EMPTY_FILE_MARKER}")
        output.append("INLINE COMMENT LINES: none")
        return "\n".join(output)

    output.append(f"@@ -1,{total} +0,0 @@")
    output.append(f"DELETED FILE ({total} lines removed)")
    output.append(f"INLINE COMMENT LINES: 1 to {total} (comment on deleted content)")
    output.append("")
    output.extend(
        _render_body(lines, "-", "left", "deleted lines", max_lines, head_lines, tail_lines)
    )
    output.append("")
    output.append(
        f"Usage: comment with position line = 1 to {total} (original line numbers), offset = 1"
    )

    return "\n".join(output)
