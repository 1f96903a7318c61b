"""Azure DevOps API integration module."""

from .anchors import resolve_comment_anchor
from .auth import AzureDevOpsAuth
from .blob_fetcher import BlobContentFetcher
from .changes import ChangeClassifier, ClassifiedChange
from .client import AzureDevOpsClient, create_client
from .comment_client import CommentClient
from .errors import (
    AzureDevOpsError,
    BlobTimeoutError,
    ContentUnavailableError,
    FileNotInPullRequestError,
    InvalidAnchorError,
    RepositoryNotFoundError,
    RepositoryResolutionError,
)
from .git_client import GitClient
from .models import (
    ChangeEntry,
    ChangeKind,
    ChangesCount,
    Comment,
    CommentAnchor,
    CommentThread,
    CommentThreadStatus,
    FileChange,
    FilePosition,
    GitRepository,
    PullRequestChanges,
    User,
)
from .pr_changes import PullRequestChangesService, select_representative_changes
from .repository_resolver import RepositoryResolver, is_repository_id

__all__ = [
    "AzureDevOpsClient",
    "create_client",
    "AzureDevOpsAuth",
    "GitClient",
    "RepositoryResolver",
    "is_repository_id",
    "BlobContentFetcher",
    "ChangeClassifier",
    "ClassifiedChange",
    "PullRequestChangesService",
    "select_representative_changes",
    "CommentClient",
    "resolve_comment_anchor",
    "ChangeEntry",
    "ChangeKind",
    "ChangesCount",
    "Comment",
    "CommentAnchor",
    "CommentThread",
    "CommentThreadStatus",
    "FileChange",
    "FilePosition",
    "GitRepository",
    "PullRequestChanges",
    "User",
    "AzureDevOpsError",
    "BlobTimeoutError",
    "ContentUnavailableError",
    "FileNotInPullRequestError",
    "InvalidAnchorError",
    "RepositoryNotFoundError",
    "RepositoryResolutionError",
]
