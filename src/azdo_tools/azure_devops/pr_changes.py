"""Pull request change listing and batch diff rendering."""

from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple

import requests

from ..config.config import DiffConfig
from ..utils.logger import setup_logger
from .changes import ChangeClassifier
from .errors import FileNotInPullRequestError
from .models import ChangeEntry, ChangeKind, ChangesCount, FileChange, PullRequestChanges
from .repository_resolver import RepositoryResolver

logger = setup_logger(__name__)

# Per-kind quotas for the overview sample: modified first, then added, then deleted.
SAMPLE_QUOTAS = ((ChangeKind.EDIT, 2), (ChangeKind.ADD, 2), (ChangeKind.DELETE, 1))


def select_representative_changes(entries: Sequence[ChangeEntry], limit: int) -> List[ChangeEntry]:
    """
    Pick a sample of change entries covering the different change kinds.

    Up to two modified, two added and one deleted file are taken first; the
    sample is then topped up in listing order and capped at ``limit``.
    """
    selected: List[ChangeEntry] = []
    for kind, quota in SAMPLE_QUOTAS:
        selected.extend([e for e in entries if e.change_kind == kind][:quota])

    if len(selected) < limit:
        chosen = {id(e) for e in selected}
        remaining = [e for e in entries if id(e) not in chosen]
        selected.extend(remaining[:limit - len(selected)])

    return selected[:limit]


class PullRequestChangesService:
    """File changes of a pull request, with rendered diffs."""

    def __init__(
        self,
        git_client,
        resolver: RepositoryResolver,
        classifier: ChangeClassifier,
        diff_config: Optional[DiffConfig] = None,
    ):
        """
        Args:
            git_client: Git REST client
            resolver: Repository name resolver
            classifier: Per-file diff renderer
            diff_config: Batch and rendering settings
        """
        self.git_client = git_client
        self.resolver = resolver
        self.classifier = classifier
        self.diff_config = diff_config or DiffConfig()

    def get_latest_iteration_id(self, repository_id: str, pull_request_id: int) -> Optional[int]:
        """Return the ID of the newest iteration, or None when there is none."""
        iterations = self.git_client.get_pull_request_iterations(repository_id, pull_request_id)
        if not iterations:
            logger.warning(f"No iterations found for PR #{pull_request_id}")
            return None
        return max(iteration.get("id", 0) for iteration in iterations)

    def get_change_entries(
        self, repository_id: str, pull_request_id: int
    ) -> Tuple[Optional[int], List[ChangeEntry]]:
        """
        Return the latest iteration ID and its change entries.

        Raises:
            requests.RequestException: On API errors
        """
        iteration_id = self.get_latest_iteration_id(repository_id, pull_request_id)
        if iteration_id is None:
            return None, []
        entries = self.git_client.get_iteration_changes(repository_id, pull_request_id, iteration_id)
        return iteration_id, entries

    def find_change_entry(
        self, repository: str, pull_request_id: int, path: str
    ) -> Tuple[str, Optional[int], ChangeEntry]:
        """
        Find the change entry for a file.

        Returns:
            (repository ID, iteration ID, change entry)

        Raises:
            FileNotInPullRequestError: The file is not changed by the PR
        """
        repository_id = self.resolver.resolve(repository)
        iteration_id, entries = self.get_change_entries(repository_id, pull_request_id)

        for entry in entries:
            if entry.path and entry.matches_path(path):
                return repository_id, iteration_id, entry

        raise FileNotInPullRequestError(
            path, repository, pull_request_id, [e.path for e in entries if e.path]
        )

    def render_changes(self, repository_id: str, entries: Sequence[ChangeEntry]) -> List[FileChange]:
        """Render diffs for several entries concurrently, keeping their order."""
        if not entries:
            return []

        workers = max(1, min(self.diff_config.max_workers, len(entries)))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            classified = list(
                pool.map(lambda entry: self.classifier.classify(repository_id, entry), entries)
            )

        return [
            FileChange(entry=entry, diff_content=result.diff_content)
            for entry, result in zip(entries, classified)
        ]

    def get_file_changes(
        self, repository: str, pull_request_id: int, path: Optional[str] = None
    ) -> PullRequestChanges:
        """
        Get file changes with rendered diffs.

        With a path, only that file is rendered. Without one, a
        representative sample of at most ``max_files_per_batch`` files is
        rendered and the result reports how many of the total it shows.

        Args:
            repository: Repository name or ID
            pull_request_id: Pull request ID
            path: Optional file path (leading slash optional)

        Returns:
            PullRequestChanges

        Raises:
            RepositoryNotFoundError: Unknown repository name
            requests.RequestException: On API errors
        """
        repository_id = self.resolver.resolve(repository)
        _, entries = self.get_change_entries(repository_id, pull_request_id)

        if path:
            selected = [e for e in entries if e.path and e.matches_path(path)]
            if not selected:
                logger.warning(f"File '{path}' not found in changes of PR #{pull_request_id}")
            return PullRequestChanges(
                pull_request_id=pull_request_id,
                repository_id=repository_id,
                changes=self.render_changes(repository_id, selected),
                total_changes=len(selected),
            )

        selected = select_representative_changes(entries, self.diff_config.max_files_per_batch)
        if len(selected) < len(entries):
            logger.info(
                f"PR #{pull_request_id} has {len(entries)} changed files, "
                f"rendering {len(selected)}"
            )

        return PullRequestChanges(
            pull_request_id=pull_request_id,
            repository_id=repository_id,
            changes=self.render_changes(repository_id, selected),
            total_changes=len(entries),
        )

    def get_changes_count(self, repository: str, pull_request_id: int) -> ChangesCount:
        """Count changed files per kind."""
        repository_id = self.resolver.resolve(repository)
        _, entries = self.get_change_entries(repository_id, pull_request_id)

        return ChangesCount(
            total=len(entries),
            added=sum(1 for e in entries if e.change_kind == ChangeKind.ADD),
            modified=sum(1 for e in entries if e.change_kind == ChangeKind.EDIT),
            deleted=sum(1 for e in entries if e.change_kind == ChangeKind.DELETE),
        )

    def get_all_changes(
        self, repository: str, pull_request_id: int, skip: int = 0, top: int = 0
    ) -> Tuple[List[ChangeEntry], int]:
        """
        Page through change entries without rendering diffs.

        Returns:
            (entries of the page, total number of entries)
        """
        repository_id = self.resolver.resolve(repository)
        _, entries = self.get_change_entries(repository_id, pull_request_id)

        page = entries[skip:] if skip > 0 else list(entries)
        if top > 0:
            page = page[:top]
        return page, len(entries)

    def get_changed_files(self, repository_id: str, pull_request_id: int) -> List[str]:
        """List changed file paths; an API failure yields an empty list."""
        try:
            _, entries = self.get_change_entries(repository_id, pull_request_id)
        except requests.exceptions.RequestException as e:
            logger.error(f"Error getting changed files list for PR #{pull_request_id}: {e}")
            return []
        return [e.path for e in entries if e.path]
