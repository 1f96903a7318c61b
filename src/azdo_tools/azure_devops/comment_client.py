"""Comment operations for Azure DevOps pull requests."""

from typing import Any, Dict

import requests

from ..utils.logger import setup_logger
from .anchors import resolve_comment_anchor
from .errors import InvalidAnchorError
from .models import CommentThread
from .pr_changes import PullRequestChangesService
from .repository_resolver import RepositoryResolver

logger = setup_logger(__name__)

THREAD_STATUS_ACTIVE = 1
COMMENT_TYPE_TEXT = 1

_ANCHOR_ERROR_HINTS = ("line", "position", "range", "invalid")


def _text_thread(content: str) -> Dict[str, Any]:
    return {
        "comments": [{"parentCommentId": 0, "content": content, "commentType": COMMENT_TYPE_TEXT}],
        "status": THREAD_STATUS_ACTIVE,
    }


def _error_message(error: requests.exceptions.RequestException) -> str:
    response = getattr(error, "response", None)
    if response is not None:
        try:
            message = response.json().get("message")
        except ValueError:
            message = None
        if message:
            return message
        if response.text:
            return response.text
    return str(error)


def _is_anchor_rejection(error: requests.exceptions.RequestException, message: str) -> bool:
    response = getattr(error, "response", None)
    if response is None:
        return False
    if response.status_code == 400:
        return True
    lowered = message.lower()
    return any(hint in lowered for hint in _ANCHOR_ERROR_HINTS)


class CommentClient:
    """Client for posting comment threads on pull requests."""

    def __init__(self, git_client, resolver: RepositoryResolver, changes: PullRequestChangesService):
        """
        Args:
            git_client: Git REST client
            resolver: Repository name resolver
            changes: Change service used to find the change being commented on
        """
        self.git_client = git_client
        self.resolver = resolver
        self.changes = changes

    def add_inline_comment(
        self,
        repository: str,
        pull_request_id: int,
        path: str,
        content: str,
        line: int,
        offset: int = 1,
    ) -> CommentThread:
        """
        Add a comment thread anchored to a line of a changed file.

        Args:
            repository: Repository name or ID
            pull_request_id: Pull request ID
            path: File path (leading slash optional)
            content: Comment text
            line: Line number (right side, or left side for deleted files)
            offset: Character offset within the line

        Returns:
            Created CommentThread

        Raises:
            FileNotInPullRequestError: The file is not changed by the PR
            InvalidAnchorError: The API rejected the position
            requests.RequestException: On other API errors
        """
        repository_id, iteration_id, entry = self.changes.find_change_entry(
            repository, pull_request_id, path
        )
        anchor = resolve_comment_anchor(entry, line, offset)

        thread = _text_thread(content)
        thread["threadContext"] = anchor.to_thread_context()
        thread["pullRequestThreadContext"] = anchor.to_pull_request_thread_context(
            first_iteration=1, second_iteration=iteration_id or 1
        )

        logger.info(
            f"Creating inline comment on PR #{pull_request_id} at {entry.path}:{line} "
            f"({entry.change_kind.value})"
        )

        try:
            data = self.git_client.create_comment_thread(repository_id, pull_request_id, thread)
        except requests.exceptions.RequestException as e:
            message = _error_message(e)
            if _is_anchor_rejection(e, message):
                status_code = e.response.status_code if e.response is not None else None
                raise InvalidAnchorError(
                    path, line, repository, pull_request_id, message, status_code=status_code
                ) from e
            raise

        created = CommentThread.from_api(data)
        logger.info(f"Successfully created comment thread #{created.id}")
        return created

    def add_file_comment(
        self, repository: str, pull_request_id: int, path: str, content: str
    ) -> CommentThread:
        """
        Add a comment thread attached to a file but not to a line.

        Raises:
            requests.RequestException: On API errors
        """
        repository_id = self.resolver.resolve(repository)

        thread = _text_thread(content)
        thread["threadContext"] = {"filePath": path if path.startswith("/") else f"/{path}"}

        logger.info(f"Creating file comment on PR #{pull_request_id} for {path}")
        data = self.git_client.create_comment_thread(repository_id, pull_request_id, thread)
        return CommentThread.from_api(data)

    def add_comment(
        self, repository: str, pull_request_id: int, content: str
    ) -> CommentThread:
        """
        Add a general comment (not attached to a file).

        Raises:
            requests.RequestException: On API errors
        """
        repository_id = self.resolver.resolve(repository)

        logger.info(f"Creating general comment on PR #{pull_request_id}")
        data = self.git_client.create_comment_thread(
            repository_id, pull_request_id, _text_thread(content)
        )
        return CommentThread.from_api(data)
