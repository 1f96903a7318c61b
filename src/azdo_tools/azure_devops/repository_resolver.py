"""Repository name to ID resolution with caching."""

import re
from typing import Dict, Optional, Tuple

import requests

from ..utils.logger import setup_logger
from .errors import RepositoryNotFoundError, RepositoryResolutionError

logger = setup_logger(__name__)

# 8-4-4-4-12 hexadecimal, e.g. c5e7435f-113e-4328-9d8a-726f094bfa95
REPOSITORY_ID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)


def is_repository_id(value: str) -> bool:
    """Check whether a value has the shape of a repository ID (GUID)."""
    return isinstance(value, str) and bool(REPOSITORY_ID_PATTERN.match(value))


def repository_identifier_type(value: str) -> str:
    """Return "ID" for GUID-shaped identifiers and "Name" otherwise."""
    return "ID" if is_repository_id(value) else "Name"


class RepositoryResolver:
    """
    Resolves repository names to IDs.

    Results are cached per (project, name) for the lifetime of the resolver.
    Concurrent misses for the same key may each hit the API; the last write
    wins and every write stores the same ID.
    """

    def __init__(self, git_client, default_project: str):
        """
        Args:
            git_client: Object exposing ``list_repositories(project)``
            default_project: Project used when a call does not name one
        """
        self.git_client = git_client
        self.default_project = default_project
        self._cache: Dict[Tuple[str, str], str] = {}

    def resolve(self, identifier: str, project: Optional[str] = None) -> str:
        """
        Resolve a repository name or ID to the repository ID.

        Args:
            identifier: Repository name or ID
            project: Project scope (defaults to the configured project)

        Returns:
            Repository ID

        Raises:
            RepositoryNotFoundError: No repository has that name
            RepositoryResolutionError: Repositories could not be listed
        """
        if is_repository_id(identifier):
            return identifier

        scope = project or self.default_project
        key = (scope, identifier)
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug(f"Repository '{identifier}' resolved from cache")
            return cached

        try:
            repositories = self.git_client.list_repositories(scope)
        except requests.exceptions.RequestException as e:
            raise RepositoryResolutionError(
                f"Failed to resolve repository '{identifier}'. "
                f"Please verify the repository name exists and you have access to it."
            ) from e

        wanted = identifier.lower()
        for repository in repositories:
            if repository.name and repository.name.lower() == wanted:
                self._cache[key] = repository.id
                logger.info(f"Resolved repository '{identifier}' to {repository.id}")
                return repository.id

        raise RepositoryNotFoundError(
            identifier, scope, [r.name for r in repositories if r.name]
        )

    def clear(self) -> None:
        """Drop all cached resolutions."""
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)
