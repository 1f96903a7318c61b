"""Main Azure DevOps client orchestrating the pull request tools."""

from typing import List, Optional, Tuple

from ..config.config import AzureDevOpsConfig, DiffConfig
from ..utils.logger import setup_logger
from .auth import AzureDevOpsAuth
from .blob_fetcher import BlobContentFetcher
from .changes import ChangeClassifier
from .comment_client import CommentClient
from .git_client import GitClient
from .models import ChangeEntry, ChangesCount, CommentThread, PullRequestChanges
from .pr_changes import PullRequestChangesService
from .repository_resolver import RepositoryResolver

logger = setup_logger(__name__)


class AzureDevOpsClient:
    """
    Main client for the pull request diff and comment tools.

    Wires authentication, the Git REST client, repository resolution, blob
    fetching, diff rendering and comment posting behind one interface.
    """

    def __init__(
        self,
        config: AzureDevOpsConfig,
        diff_config: Optional[DiffConfig] = None,
        git_client=None,
    ):
        """
        Initialize Azure DevOps client.

        Args:
            config: Azure DevOps configuration
            diff_config: Diff rendering settings
            git_client: Replacement Git client, mainly for tests
        """
        self.config = config
        self.diff_config = diff_config or DiffConfig()
        self.auth = AzureDevOpsAuth(config)
        self.git_client = git_client or GitClient(config, self.auth)

        self.resolver = RepositoryResolver(self.git_client, config.project)
        self.fetcher = BlobContentFetcher(self.git_client, stream_timeout=self.diff_config.stream_timeout)
        self.classifier = ChangeClassifier(self.fetcher, self.diff_config)
        self.changes = PullRequestChangesService(
            self.git_client, self.resolver, self.classifier, self.diff_config
        )
        self.comments = CommentClient(self.git_client, self.resolver, self.changes)

        logger.info(f"Initialized Azure DevOps client for {config.organization_url}/{config.project}")

    def test_connection(self) -> bool:
        """Test connection to Azure DevOps."""
        return self.auth.test_connection()

    def resolve_repository(self, repository: str) -> str:
        """Resolve a repository name or ID to its ID."""
        return self.resolver.resolve(repository)

    def get_pull_request_file_changes(
        self, repository: str, pull_request_id: int, path: Optional[str] = None
    ) -> PullRequestChanges:
        """Get file changes with rendered diffs, for one file or a sample."""
        return self.changes.get_file_changes(repository, pull_request_id, path)

    def get_pull_request_changes_count(self, repository: str, pull_request_id: int) -> ChangesCount:
        """Count changed files per kind."""
        return self.changes.get_changes_count(repository, pull_request_id)

    def get_all_pull_request_changes(
        self, repository: str, pull_request_id: int, skip: int = 0, top: int = 0
    ) -> Tuple[List[ChangeEntry], int]:
        """Page through change entries without diffs."""
        return self.changes.get_all_changes(repository, pull_request_id, skip, top)

    def get_pull_request_changed_files(self, repository: str, pull_request_id: int) -> List[str]:
        """List the paths changed by a pull request."""
        return self.changes.get_changed_files(self.resolver.resolve(repository), pull_request_id)

    def add_inline_comment(
        self,
        repository: str,
        pull_request_id: int,
        path: str,
        content: str,
        line: int,
        offset: int = 1,
    ) -> CommentThread:
        """Add a comment anchored to a line of a changed file."""
        return self.comments.add_inline_comment(repository, pull_request_id, path, content, line, offset)

    def add_file_comment(
        self, repository: str, pull_request_id: int, path: str, content: str
    ) -> CommentThread:
        """Add a comment attached to a file."""
        return self.comments.add_file_comment(repository, pull_request_id, path, content)

    def add_comment(self, repository: str, pull_request_id: int, content: str) -> CommentThread:
        """Add a general pull request comment."""
        return self.comments.add_comment(repository, pull_request_id, content)

    def close(self) -> None:
        """Close the client and release resources."""
        self.auth.close()
        logger.info("Closed Azure DevOps client")

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()


def create_client(config: AzureDevOpsConfig, diff_config: Optional[DiffConfig] = None) -> AzureDevOpsClient:
    """
    Helper function to create an Azure DevOps client.

    Args:
        config: Azure DevOps configuration
        diff_config: Diff rendering settings

    Returns:
        Configured AzureDevOpsClient
    """
    return AzureDevOpsClient(config, diff_config)
