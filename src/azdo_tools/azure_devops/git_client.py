"""Git REST operations used by the diff and comment tools."""

from typing import Any, Dict, List, Optional

import requests

from ..config.config import AzureDevOpsConfig
from ..utils.logger import setup_logger
from .auth import AzureDevOpsAuth
from .models import ChangeEntry, GitRepository

logger = setup_logger(__name__)

CHANGES_PAGE_SIZE = 2000


class GitClient:
    """
    Narrow client over the Azure DevOps Git REST API.

    Only the calls the pull-request tools need are exposed: listing
    repositories, reading blobs, reading iteration changes and creating
    comment threads.
    """

    def __init__(self, config: AzureDevOpsConfig, auth: AzureDevOpsAuth):
        """
        Args:
            config: Azure DevOps configuration
            auth: Authentication handler
        """
        self.config = config
        self.auth = auth
        self.api_version = config.api_version

    def _project_url(self, project: Optional[str] = None) -> str:
        return f"{self.config.organization_url}/{project or self.config.project}/_apis/git"

    def _repository_url(self, repository_id: str, project: Optional[str] = None) -> str:
        return f"{self._project_url(project)}/repositories/{repository_id}"

    def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        query = {"api-version": self.api_version}
        if params:
            query.update(params)

        logger.debug(f"GET {url} {query}")
        response = self.auth.get_session().get(url, params=query, timeout=self.config.timeout)
        response.raise_for_status()
        return response.json()

    def list_repositories(self, project: Optional[str] = None) -> List[GitRepository]:
        """
        List the repositories of a project.

        Args:
            project: Project name or ID (defaults to the configured project)

        Raises:
            requests.RequestException: On API errors
        """
        url = f"{self._project_url(project)}/repositories"
        logger.info(f"Listing repositories in project '{project or self.config.project}'")

        try:
            data = self._get_json(url)
        except requests.exceptions.RequestException as e:
            logger.error(f"Error listing repositories: {e}")
            raise

        return [GitRepository.from_api(item) for item in data.get("value", [])]

    def get_blob_content(
        self, repository_id: str, blob_id: str, project: Optional[str] = None
    ) -> requests.Response:
        """
        Open a blob as a streaming octet response.

        The caller owns the returned response and must consume or close it.

        Raises:
            requests.RequestException: On API errors
        """
        url = f"{self._repository_url(repository_id, project)}/blobs/{blob_id}"
        params = {"api-version": self.api_version, "$format": "octetstream"}

        logger.debug(f"Fetching blob {blob_id} from repository {repository_id}")

        try:
            response = self.auth.get_session().get(
                url,
                params=params,
                headers={"Accept": "application/octet-stream"},
                timeout=self.config.timeout,
                stream=True,
            )
            if not response.ok:
                response.close()
            response.raise_for_status()
            return response
        except requests.exceptions.RequestException as e:
            logger.error(f"Error fetching blob {blob_id}: {e}")
            raise

    def get_pull_request_iterations(self, repository_id: str, pull_request_id: int) -> List[Dict[str, Any]]:
        """
        List the iterations (pushes) of a pull request.

        Raises:
            requests.RequestException: On API errors
        """
        url = f"{self._repository_url(repository_id)}/pullRequests/{pull_request_id}/iterations"

        try:
            data = self._get_json(url)
        except requests.exceptions.RequestException as e:
            logger.error(f"Error fetching iterations for PR #{pull_request_id}: {e}")
            raise

        return data.get("value", [])

    def get_iteration_changes(
        self, repository_id: str, pull_request_id: int, iteration_id: int
    ) -> List[ChangeEntry]:
        """
        List the changes of one pull request iteration, following paging.

        Raises:
            requests.RequestException: On API errors
        """
        url = (
            f"{self._repository_url(repository_id)}/pullRequests/{pull_request_id}"
            f"/iterations/{iteration_id}/changes"
        )
        logger.info(f"Fetching changes for PR #{pull_request_id}, iteration {iteration_id}")

        entries: List[ChangeEntry] = []
        skip = 0

        try:
            while True:
                data = self._get_json(url, {"$top": CHANGES_PAGE_SIZE, "$skip": skip})
                entries.extend(ChangeEntry.from_api(c) for c in data.get("changeEntries", []))

                next_skip = data.get("nextSkip") or 0
                if next_skip <= skip:
                    break
                skip = next_skip

        except requests.exceptions.RequestException as e:
            logger.error(f"Error fetching changes for PR #{pull_request_id}: {e}")
            raise

        logger.info(f"Found {len(entries)} file changes for PR #{pull_request_id}")
        return entries

    def create_comment_thread(
        self, repository_id: str, pull_request_id: int, thread: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Create a comment thread on a pull request.

        Raises:
            requests.RequestException: On API errors
        """
        url = (
            f"{self._repository_url(repository_id)}/pullRequests/{pull_request_id}/threads"
            f"?api-version={self.api_version}"
        )
        logger.debug(f"POST {url} payload: {thread}")

        try:
            response = self.auth.get_session().post(url, json=thread, timeout=self.config.timeout)
            response.raise_for_status()
            return response.json()

        except requests.exceptions.RequestException as e:
            logger.error(f"Error creating comment thread on PR #{pull_request_id}: {e}")
            if getattr(e, "response", None) is not None:
                logger.error(f"Response: {e.response.text}")
            raise
