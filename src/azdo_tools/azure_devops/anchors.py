"""Thread anchors for inline pull request comments."""

from .models import ChangeEntry, ChangeKind, CommentAnchor, FilePosition


def resolve_comment_anchor(entry: ChangeEntry, line: int, offset: int = 1) -> CommentAnchor:
    """
    Build the anchor for a comment at ``(line, offset)`` in a changed file.

    Added files only have a right (new) side and deleted files only a left
    (original) side. Modified files are commented on the right side; the
    left side is left empty. Positions are not range-checked here, the
    remote API decides whether the line exists.

    Args:
        entry: Change entry of the file being commented on
        line: 1-based line number
        offset: 1-based character offset within the line

    Returns:
        CommentAnchor with start at ``offset`` and end at ``offset + 1``
    """
    start = FilePosition(line=line, offset=offset)
    end = FilePosition(line=line, offset=offset + 1)

    if entry.change_kind == ChangeKind.DELETE:
        return CommentAnchor(
            file_path=entry.path,
            change_tracking_id=entry.change_tracking_id,
            left_start=start,
            left_end=end,
        )

    return CommentAnchor(
        file_path=entry.path,
        change_tracking_id=entry.change_tracking_id,
        right_start=start,
        right_end=end,
    )
