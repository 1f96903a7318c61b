"""Exception types raised by the Azure DevOps layer."""

from typing import List, Optional

PLACEHOLDER_CONTENT = "[Content not available]"
PLACEHOLDER_DIFF = "[Diff not available]"


class AzureDevOpsError(Exception):
    """Base class for Azure DevOps failures."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RepositoryNotFoundError(AzureDevOpsError):
    """No repository with the requested name exists in the project."""

    def __init__(self, repository: str, project: str, available: List[str]):
        self.repository = repository
        self.project = project
        self.available = list(available)
        names = ", ".join(self.available) if self.available else "(none)"
        super().__init__(
            f"Repository '{repository}' not found in project '{project}'. "
            f"Available repositories: {names}",
            status_code=404,
        )


class RepositoryResolutionError(AzureDevOpsError):
    """Listing repositories failed while resolving a name."""


class BlobTimeoutError(AzureDevOpsError):
    """Reading a blob stream took longer than allowed."""

    def __init__(self, blob_id: str, timeout: float):
        self.blob_id = blob_id
        self.timeout = timeout
        super().__init__(f"Stream timeout after {timeout:g}s for objectId {blob_id}")


class ContentUnavailableError(AzureDevOpsError):
    """Blob content could not be fetched."""


class FileNotInPullRequestError(AzureDevOpsError):
    """The requested path is not part of the pull request changes."""

    def __init__(self, path: str, repository: str, pull_request_id: int, changed_files: List[str]):
        self.path = path
        self.changed_files = list(changed_files)

        if self.changed_files:
            file_list = "\n\nFiles changed in this PR:\n" + "\n".join(
                f"- {changed}" for changed in self.changed_files
            )
        else:
            file_list = "\n\nNo files found in this PR."

        super().__init__(
            f"File '{path}' is not part of the changes in this pull request.{file_list}\n\n"
            f"To find the correct files and line numbers, request the file changes with "
            f"repository '{repository}' and pull request {pull_request_id}. "
            f"Inline comments can only be added to files changed in the PR.",
            status_code=404,
        )


class InvalidAnchorError(AzureDevOpsError):
    """The remote API rejected the position of an inline comment."""

    def __init__(
        self,
        path: str,
        line: int,
        repository: str,
        pull_request_id: int,
        reason: str,
        status_code: Optional[int] = None,
    ):
        self.path = path
        self.line = line
        self.reason = reason
        super().__init__(
            f"Unable to add inline comment at line {line} in file '{path}'. This could be because:\n"
            f"  - the line number doesn't exist in the file\n"
            f"  - the position is outside the valid range\n"
            f"  - for added files, lines run from 1 to the total line count of the new file\n"
            f"  - for modified files, only [line N, right] numbers shown in the diff can be used\n"
            f"  - for deleted files, only original line numbers can be used\n\n"
            f"Request the file changes with repository '{repository}' and pull request "
            f"{pull_request_id} to see the diff for '{path}' with line "
            f"number markers for every valid position.\n\n"
            f"Original error: {reason}",
            status_code=status_code,
        )
