"""Authenticated HTTP session for the Azure DevOps REST API."""

import base64
from typing import Any, Dict, Optional

import requests
import urllib3
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..config.config import AzureDevOpsConfig
from ..utils.logger import setup_logger

logger = setup_logger(__name__)

RETRY_STATUSES = (429, 500, 502, 503, 504)
# POST is excluded: a retried thread creation would post the comment twice.
RETRY_METHODS = ("HEAD", "GET", "OPTIONS")


class AzureDevOpsAuth:
    """Owns the PAT-authenticated session shared by the REST clients."""

    def __init__(self, config: AzureDevOpsConfig):
        """
        Args:
            config: Azure DevOps configuration
        """
        self.config = config
        self._session: Optional[requests.Session] = None

    def get_session(self) -> requests.Session:
        """Return the session, creating it on first use."""
        if self._session is None:
            self._session = self._create_session()
        return self._session

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        session.headers.update(self._create_auth_header())
        session.headers.update({"Accept": "application/json"})

        retry_strategy = Retry(
            total=3,
            backoff_factor=1,
            status_forcelist=list(RETRY_STATUSES),
            allowed_methods=list(RETRY_METHODS),
        )
        # Pool sized for the concurrent blob fetches of a batch render.
        adapter = HTTPAdapter(max_retries=retry_strategy, pool_connections=10, pool_maxsize=20)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        session.verify = self.config.verify_ssl
        if not self.config.verify_ssl:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
            logger.warning("SSL verification is disabled. This is not recommended for production.")

        logger.debug("Created new Azure DevOps session")
        return session

    def _create_auth_header(self) -> Dict[str, str]:
        """
        Build the Basic auth header from the PAT token.

        Raises:
            ValueError: If PAT token is not configured
        """
        if not self.config.pat_token:
            raise ValueError(
                "PAT token is required for authentication. "
                "Set it in config.yaml or AZDO_PERSONAL_ACCESS_TOKEN environment variable."
            )

        # Username is empty, the PAT is the password
        credentials = base64.b64encode(f":{self.config.pat_token}".encode()).decode()
        return {"Authorization": f"Basic {credentials}"}

    def close(self) -> None:
        """Close the session and release resources."""
        if self._session:
            self._session.close()
            self._session = None
            logger.debug("Closed Azure DevOps session")

    def test_connection(self) -> bool:
        """
        Check that the organization and project are reachable.

        Returns:
            True if connection is successful, False otherwise
        """
        url = (
            f"{self.config.organization_url}/_apis/projects/{self.config.project}"
            f"?api-version={self.config.api_version}"
        )
        try:
            logger.debug(f"Testing connection to {url}")
            response = self.get_session().get(url, timeout=self.config.timeout)
            response.raise_for_status()
            logger.info("Successfully connected to Azure DevOps")
            return True

        except requests.exceptions.SSLError as e:
            logger.error(f"SSL verification failed: {e}")
            logger.error("Consider setting verify_ssl: false in config for self-signed certificates")
            return False

        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to connect to Azure DevOps: {e}")
            return False

    def __enter__(self) -> "AzureDevOpsAuth":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
