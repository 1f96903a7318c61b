"""Per-file diff rendering for pull request change entries."""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional, Tuple

from ..config.config import DiffConfig
from ..diff import (
    add_inline_comment_guidance,
    render_added_file,
    render_deleted_file,
    split_lines,
    unified_diff,
)
from ..utils.logger import setup_logger
from .blob_fetcher import BlobContentFetcher
from .errors import PLACEHOLDER_CONTENT, PLACEHOLDER_DIFF, ContentUnavailableError
from .models import ChangeEntry, ChangeKind

logger = setup_logger(__name__)


@dataclass
class ClassifiedChange:
    """Diff rendering of one change entry."""
    kind: Optional[ChangeKind]
    diff_content: str

    @property
    def is_placeholder(self) -> bool:
        return self.diff_content in (PLACEHOLDER_CONTENT, PLACEHOLDER_DIFF)


class ChangeClassifier:
    """Picks the diff strategy for a change entry and renders it."""

    def __init__(self, fetcher: BlobContentFetcher, diff_config: Optional[DiffConfig] = None):
        """
        Args:
            fetcher: Blob content fetcher
            diff_config: Diff rendering settings
        """
        self.fetcher = fetcher
        self.diff_config = diff_config or DiffConfig()

    def classify(self, repository_id: str, entry: ChangeEntry) -> ClassifiedChange:
        """
        Render the diff for one change entry.

        Fetch failures are logged and replaced by placeholder text so that
        callers rendering many files keep going.
        """
        kind = entry.diff_kind

        if kind == ChangeKind.EDIT:
            return ClassifiedChange(kind, self._render_modified(repository_id, entry))
        if kind == ChangeKind.ADD:
            return ClassifiedChange(kind, self._render_added(repository_id, entry))
        if kind == ChangeKind.DELETE:
            return ClassifiedChange(kind, self._render_deleted(repository_id, entry))

        logger.debug(f"No diff for {entry.path} ({entry.change_kind.value})")
        return ClassifiedChange(None, "")

    def _fetch_text(self, repository_id: str, blob_id: Optional[str]) -> str:
        try:
            return self.fetcher.fetch_text(repository_id, blob_id)
        except Exception as e:
            # Any failure degrades this one file, never the batch.
            raise ContentUnavailableError(f"Content of objectId {blob_id} unavailable: {e}") from e

    def _fetch_both(self, repository_id: str, entry: ChangeEntry) -> Tuple[str, str]:
        with ThreadPoolExecutor(max_workers=2) as pool:
            original = pool.submit(self._fetch_text, repository_id, entry.original_object_id)
            current = pool.submit(self._fetch_text, repository_id, entry.object_id)
            return original.result(), current.result()

    def _render_modified(self, repository_id: str, entry: ChangeEntry) -> str:
        try:
            original_text, current_text = self._fetch_both(repository_id, entry)
        except ContentUnavailableError as e:
            logger.warning(f"Error getting diff for {entry.path}: {e}")
            return PLACEHOLDER_DIFF

        diff_text = unified_diff(
            original_text,
            current_text,
            entry.path,
            look_ahead=self.diff_config.look_ahead,
            context_lines=self.diff_config.context_lines,
        )
        return add_inline_comment_guidance(diff_text, ChangeKind.EDIT.value)

    def _render_added(self, repository_id: str, entry: ChangeEntry) -> str:
        try:
            text = self._fetch_text(repository_id, entry.object_id)
        except ContentUnavailableError as e:
            logger.warning(f"Error getting content for new file {entry.path}: {e}")
            return PLACEHOLDER_CONTENT

        return render_added_file(
            split_lines(text),
            entry.path,
            max_lines=self.diff_config.added_file_max_lines,
            head_lines=self.diff_config.head_lines,
            tail_lines=self.diff_config.tail_lines,
        )

    def _render_deleted(self, repository_id: str, entry: ChangeEntry) -> str:
        try:
            text = self._fetch_text(repository_id, entry.original_object_id)
        except ContentUnavailableError as e:
            logger.warning(f"Error getting content for deleted file {entry.path}: {e}")
            return PLACEHOLDER_CONTENT

        return render_deleted_file(
            split_lines(text),
            entry.path,
            max_lines=self.diff_config.deleted_file_max_lines,
            head_lines=self.diff_config.head_lines,
            tail_lines=self.diff_config.tail_lines,
        )
