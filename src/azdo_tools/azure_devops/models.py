"""Data models for Azure DevOps API responses."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class CommentThreadStatus(Enum):
    """Status of a comment thread."""
    ACTIVE = "active"
    FIXED = "fixed"
    WONT_FIX = "wontFix"
    CLOSED = "closed"
    BY_DESIGN = "byDesign"
    PENDING = "pending"
    UNKNOWN = "unknown"


class ChangeKind(Enum):
    """Type of file operation in a pull request iteration."""
    ADD = "add"
    EDIT = "edit"
    DELETE = "delete"
    RENAME = "rename"
    ENCODING = "encoding"
    OTHER = "other"

    @classmethod
    def from_api(cls, value: Any) -> "ChangeKind":
        """
        Map an API change type to a kind.

        Combined types such as "edit, rename" resolve to the strongest
        content change: delete, then add, then edit.
        """
        if not isinstance(value, str) or not value:
            return cls.OTHER

        parts = {part.strip().lower() for part in value.split(",")}
        for kind in (cls.DELETE, cls.ADD, cls.EDIT, cls.RENAME, cls.ENCODING):
            if kind.value in parts:
                return kind
        return cls.OTHER


def _parse_date(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, AttributeError):
        return None


@dataclass
class User:
    """Azure DevOps user."""
    id: str
    display_name: str
    unique_name: str

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "User":
        """Create User from API response."""
        return cls(
            id=data.get("id", ""),
            display_name=data.get("displayName", ""),
            unique_name=data.get("uniqueName", ""),
        )


@dataclass
class GitRepository:
    """Git repository information."""
    id: str
    name: str
    url: str = ""
    project_id: str = ""
    default_branch: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "GitRepository":
        """Create GitRepository from API response."""
        project = data.get("project") or {}
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            url=data.get("url", ""),
            project_id=project.get("id", ""),
            default_branch=data.get("defaultBranch"),
        )


@dataclass
class ChangeEntry:
    """One file touched by a pull request iteration."""
    path: str
    change_kind: ChangeKind
    change_tracking_id: Optional[int] = None
    original_object_id: Optional[str] = None
    object_id: Optional[str] = None
    original_path: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "ChangeEntry":
        """Create ChangeEntry from an iteration change entry."""
        item = data.get("item") or {}
        return cls(
            path=item.get("path", ""),
            change_kind=ChangeKind.from_api(data.get("changeType")),
            change_tracking_id=data.get("changeTrackingId"),
            original_object_id=item.get("originalObjectId"),
            object_id=item.get("objectId"),
            original_path=data.get("originalPath") or data.get("sourceServerItem"),
            raw=data,
        )

    @property
    def diff_kind(self) -> Optional[ChangeKind]:
        """
        Kind of diff that can be rendered for this entry.

        Returns ADD, EDIT or DELETE when the blobs that kind needs are
        present, otherwise None.
        """
        if self.change_kind == ChangeKind.ADD and self.object_id:
            return ChangeKind.ADD
        if self.change_kind == ChangeKind.DELETE and self.original_object_id:
            return ChangeKind.DELETE
        if self.original_object_id and self.object_id:
            if self.change_kind == ChangeKind.EDIT or self.original_object_id != self.object_id:
                return ChangeKind.EDIT
        return None

    @property
    def is_binary(self) -> bool:
        """Check if file is likely binary based on extension."""
        binary_extensions = {
            '.png', '.jpg', '.jpeg', '.gif', '.bmp', '.ico',
            '.pdf', '.zip', '.tar', '.gz', '.exe', '.dll',
            '.so', '.dylib', '.class', '.jar', '.war',
        }
        return any(self.path.lower().endswith(ext) for ext in binary_extensions)

    def matches_path(self, path: str) -> bool:
        """Compare paths ignoring a leading slash."""
        return self.path.lstrip("/") == path.lstrip("/")


@dataclass(frozen=True)
class FilePosition:
    """A (line, offset) position in one version of a file."""
    line: int
    offset: int

    def to_api(self) -> Dict[str, int]:
        return {"line": self.line, "offset": self.offset}


@dataclass(frozen=True)
class CommentAnchor:
    """
    Where a new inline comment thread attaches.

    Left positions address the original version, right positions the
    current version. An absent side is sent as an explicit null.
    """
    file_path: str
    change_tracking_id: Optional[int]
    left_start: Optional[FilePosition] = None
    left_end: Optional[FilePosition] = None
    right_start: Optional[FilePosition] = None
    right_end: Optional[FilePosition] = None

    @property
    def has_left(self) -> bool:
        return self.left_start is not None

    @property
    def has_right(self) -> bool:
        return self.right_start is not None

    def to_thread_context(self) -> Dict[str, Any]:
        """Convert to Azure DevOps thread context format."""
        def position(value: Optional[FilePosition]) -> Optional[Dict[str, int]]:
            return value.to_api() if value is not None else None

        return {
            "filePath": self.file_path,
            "leftFileStart": position(self.left_start),
            "leftFileEnd": position(self.left_end),
            "rightFileStart": position(self.right_start),
            "rightFileEnd": position(self.right_end),
        }

    def to_pull_request_thread_context(
        self, first_iteration: int = 1, second_iteration: int = 1
    ) -> Dict[str, Any]:
        """Context tying the thread to the change it was computed from."""
        return {
            "changeTrackingId": self.change_tracking_id,
            "iterationContext": {
                "firstComparingIteration": first_iteration,
                "secondComparingIteration": second_iteration,
            },
        }


@dataclass
class Comment:
    """Represents a single comment in a thread."""
    id: int
    content: str
    author: User
    published_date: Optional[datetime] = None
    comment_type: str = "text"

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Comment":
        """Create Comment from API response."""
        return cls(
            id=data.get("id", 0),
            content=data.get("content", ""),
            author=User.from_api(data.get("author") or {}),
            published_date=_parse_date(data.get("publishedDate")),
            comment_type=str(data.get("commentType", "text")),
        )


@dataclass
class CommentThread:
    """Represents a comment thread on a PR."""
    id: int
    status: CommentThreadStatus
    file_path: Optional[str] = None
    left_line: Optional[int] = None
    right_line: Optional[int] = None
    comments: List[Comment] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "CommentThread":
        """Create CommentThread from API response."""
        thread_context = data.get("threadContext") or {}
        left_start = thread_context.get("leftFileStart") or {}
        right_start = thread_context.get("rightFileStart") or {}

        status = CommentThreadStatus.UNKNOWN
        status_value = data.get("status", "unknown")
        if isinstance(status_value, str):
            try:
                status = CommentThreadStatus(status_value)
            except ValueError:
                pass
        elif status_value == 1:
            status = CommentThreadStatus.ACTIVE

        return cls(
            id=data.get("id", 0),
            status=status,
            file_path=thread_context.get("filePath"),
            left_line=left_start.get("line"),
            right_line=right_start.get("line"),
            comments=[Comment.from_api(c) for c in data.get("comments", [])],
        )

    @property
    def line_number(self) -> Optional[int]:
        return self.right_line if self.right_line is not None else self.left_line


@dataclass
class FileChange:
    """A change entry together with its rendered diff."""
    entry: ChangeEntry
    diff_content: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.entry.path,
            "changeType": self.entry.change_kind.value,
            "changeTrackingId": self.entry.change_tracking_id,
            "originalObjectId": self.entry.original_object_id,
            "objectId": self.entry.object_id,
            "diffContent": self.diff_content,
        }


@dataclass
class PullRequestChanges:
    """File changes of a pull request, possibly a sample of them."""
    pull_request_id: int
    repository_id: str
    changes: List[FileChange] = field(default_factory=list)
    total_changes: int = 0

    @property
    def processed_changes(self) -> int:
        return len(self.changes)

    @property
    def disclosure(self) -> str:
        return f"{self.processed_changes} of {self.total_changes} files shown"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pullRequestId": self.pull_request_id,
            "repositoryId": self.repository_id,
            "totalChanges": self.total_changes,
            "processedChanges": self.processed_changes,
            "disclosure": self.disclosure,
            "changeEntries": [change.to_dict() for change in self.changes],
        }


@dataclass
class ChangesCount:
    """Per-kind totals of a pull request's changes."""
    total: int = 0
    added: int = 0
    modified: int = 0
    deleted: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "totalChanges": self.total,
            "addedFiles": self.added,
            "modifiedFiles": self.modified,
            "deletedFiles": self.deleted,
        }
