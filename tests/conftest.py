"""Pytest configuration and shared fixtures for all tests."""

from collections import Counter
from typing import Any, Dict, List, Optional

import pytest

from azdo_tools.azure_devops.models import ChangeEntry, ChangeKind, GitRepository
from azdo_tools.config.config import AzureDevOpsConfig, Config, DiffConfig

REPO_ID = "c5e7435f-113e-4328-9d8a-726f094bfa95"


# ===========================
# Fake remote API
# ===========================


class FakeGitClient:
    """In-memory stand-in for GitClient that counts calls."""

    def __init__(
        self,
        repositories: Optional[List[GitRepository]] = None,
        blobs: Optional[Dict[str, Any]] = None,
        changes: Optional[List[ChangeEntry]] = None,
        iterations: Optional[List[Dict[str, Any]]] = None,
    ):
        self.repositories = repositories or []
        self.blobs = blobs or {}
        self.changes = changes or []
        self.iterations = iterations if iterations is not None else [{"id": 1}]
        self.calls = Counter()
        self.requested_iterations: List[int] = []
        self.created_threads: List[Dict[str, Any]] = []
        self.list_error: Optional[Exception] = None
        self.changes_error: Optional[Exception] = None
        self.thread_error: Optional[Exception] = None

    def list_repositories(self, project=None):
        self.calls["list_repositories"] += 1
        if self.list_error:
            raise self.list_error
        return list(self.repositories)

    def get_blob_content(self, repository_id, blob_id, project=None):
        self.calls["get_blob_content"] += 1
        value = self.blobs[blob_id]
        if isinstance(value, Exception):
            raise value
        return value

    def get_pull_request_iterations(self, repository_id, pull_request_id):
        self.calls["get_pull_request_iterations"] += 1
        return list(self.iterations)

    def get_iteration_changes(self, repository_id, pull_request_id, iteration_id):
        self.calls["get_iteration_changes"] += 1
        self.requested_iterations.append(iteration_id)
        if self.changes_error:
            raise self.changes_error
        return list(self.changes)

    def create_comment_thread(self, repository_id, pull_request_id, thread):
        self.calls["create_comment_thread"] += 1
        if self.thread_error:
            raise self.thread_error
        self.created_threads.append(thread)
        return {
            "id": len(self.created_threads),
            "status": "active",
            "threadContext": thread.get("threadContext"),
            "comments": [
                {"id": 1, "content": c["content"], "author": {"displayName": "Reviewer"}}
                for c in thread["comments"]
            ],
        }


def make_entry(
    path: str,
    kind: ChangeKind,
    original_object_id: Optional[str] = None,
    object_id: Optional[str] = None,
    change_tracking_id: int = 1,
) -> ChangeEntry:
    """Build a change entry the way the API would describe it."""
    return ChangeEntry(
        path=path,
        change_kind=kind,
        change_tracking_id=change_tracking_id,
        original_object_id=original_object_id,
        object_id=object_id,
    )


# ===========================
# Configuration Fixtures
# ===========================


@pytest.fixture
def sample_azdo_config():
    """Sample Azure DevOps configuration for testing."""
    return AzureDevOpsConfig(
        organization_url="https://dev.azure.com/testorg",
        project="TestProject",
        pat_token="test-pat-token",
        verify_ssl=True,
        timeout=30,
    )


@pytest.fixture
def sample_config(sample_azdo_config):
    """Complete sample configuration for testing."""
    return Config(azure_devops=sample_azdo_config, diff=DiffConfig(), log_level="DEBUG")


# ===========================
# Model Fixtures
# ===========================


@pytest.fixture
def sample_repositories():
    """Repositories of the test project."""
    return [
        GitRepository(id=REPO_ID, name="Contoso.Web"),
        GitRepository(id="0f0e0d0c-0b0a-4909-8807-060504030201", name="Contoso.Worker"),
    ]


@pytest.fixture
def sample_changes():
    """One modified, one added and one deleted file."""
    return [
        make_entry("/src/app.py", ChangeKind.EDIT, "blob-app-old", "blob-app-new", 11),
        make_entry("/src/new.py", ChangeKind.ADD, None, "blob-new", 12),
        make_entry("/src/old.py", ChangeKind.DELETE, "blob-old", None, 13),
    ]


@pytest.fixture
def sample_blobs():
    """Blob contents keyed by object ID."""
    return {
        "blob-app-old": b"a\nb\nc\n",
        "blob-app-new": b"a\nx\nc\n",
        "blob-new": b"one\ntwo\nthree\n",
        "blob-old": "first\nsecond\n",
    }


@pytest.fixture
def fake_git_client(sample_repositories, sample_blobs, sample_changes):
    """Fake Git client serving the sample project."""
    return FakeGitClient(
        repositories=sample_repositories,
        blobs=sample_blobs,
        changes=sample_changes,
    )


# ===========================
# Environment Setup
# ===========================


@pytest.fixture(autouse=True)
def clean_env_vars(monkeypatch):
    """Clean environment variables before each test."""
    env_vars = [
        "AZDO_ORG_URL",
        "AZDO_PROJECT",
        "AZDO_PERSONAL_ACCESS_TOKEN",
        "AZDO_VERIFY_SSL",
        "AZDO_TIMEOUT",
        "AZDO_MAX_FILES_PER_BATCH",
        "LOG_LEVEL",
        "CONFIG_PATH",
    ]

    for var in env_vars:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def temp_config_file(tmp_path, sample_config):
    """Create a temporary config file for testing."""
    import yaml

    config_file = tmp_path / "test_config.yaml"
    config_dict = {
        "azure_devops": {
            "organization_url": sample_config.azure_devops.organization_url,
            "project": sample_config.azure_devops.project,
            "pat_token": sample_config.azure_devops.pat_token,
        },
        "diff": {"max_files_per_batch": 3},
        "log_level": sample_config.log_level,
    }

    with open(config_file, "w") as f:
        yaml.dump(config_dict, f)

    return str(config_file)


# ===========================
# Test Markers
# ===========================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")
