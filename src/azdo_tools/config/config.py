"""Configuration management for the Azure DevOps pull-request tools."""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml


@dataclass
class AzureDevOpsConfig:
    """Configuration for the Azure DevOps connection."""

    organization_url: str
    project: str
    pat_token: Optional[str] = None
    verify_ssl: bool = True
    timeout: int = 30
    api_version: str = "7.0"

    def __post_init__(self) -> None:
        """Load PAT token from environment if not provided."""
        if not self.pat_token:
            self.pat_token = os.environ.get("AZDO_PERSONAL_ACCESS_TOKEN")
        if self.organization_url:
            self.organization_url = self.organization_url.rstrip("/")


@dataclass
class DiffConfig:
    """Configuration for diff rendering and batch processing."""

    look_ahead: int = 5
    context_lines: int = 3
    max_files_per_batch: int = 5
    max_workers: int = 5
    stream_timeout: float = 30.0
    added_file_max_lines: int = 250
    deleted_file_max_lines: int = 100
    head_lines: int = 50
    tail_lines: int = 10


@dataclass
class Config:
    """Main configuration class."""

    azure_devops: AzureDevOpsConfig
    diff: DiffConfig = field(default_factory=DiffConfig)
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "Config":
        """Create Config instance from dictionary."""
        azdo_config = AzureDevOpsConfig(**config_dict.get("azure_devops", {}))
        diff_config = DiffConfig(**(config_dict.get("diff") or {}))

        return cls(
            azure_devops=azdo_config,
            diff=diff_config,
            log_level=config_dict.get("log_level", "INFO"),
        )

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if not self.azure_devops.organization_url:
            errors.append("Azure DevOps organization URL is required")

        if not self.azure_devops.project:
            errors.append("Azure DevOps project is required")

        if not self.azure_devops.pat_token:
            errors.append(
                "Azure DevOps PAT token is required "
                "(set in config or AZDO_PERSONAL_ACCESS_TOKEN env var)"
            )

        if self.diff.look_ahead < 1:
            errors.append("diff.look_ahead must be at least 1")

        if self.diff.context_lines < 0:
            errors.append("diff.context_lines cannot be negative")

        if self.diff.max_files_per_batch < 1:
            errors.append("diff.max_files_per_batch must be at least 1")

        if self.diff.stream_timeout <= 0:
            errors.append("diff.stream_timeout must be positive")

        if self.diff.head_lines + self.diff.tail_lines > min(
            self.diff.added_file_max_lines, self.diff.deleted_file_max_lines
        ):
            errors.append("diff.head_lines + diff.tail_lines must not exceed the truncation thresholds")

        return errors


def _validated(config: Config) -> Config:
    errors = config.validate()
    if errors:
        raise ValueError(
            "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        )
    return config


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to configuration file. If not provided, looks for
                    'config.yaml' in current directory or path from CONFIG_PATH env var.

    Returns:
        Config: Configuration instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If configuration is invalid
    """
    if not config_path:
        config_path = os.environ.get("CONFIG_PATH", "config.yaml")

    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        config_dict = yaml.safe_load(f) or {}

    return _validated(Config.from_dict(config_dict))


def load_config_from_env() -> Config:
    """
    Load configuration from environment variables only.

    Environment variables:
        AZDO_ORG_URL: Azure DevOps organization URL
        AZDO_PROJECT: Project name
        AZDO_PERSONAL_ACCESS_TOKEN: Personal Access Token
        AZDO_VERIFY_SSL: "true" or "false"
        AZDO_TIMEOUT: Request timeout in seconds
        AZDO_MAX_FILES_PER_BATCH: Files rendered per pull-request overview
        LOG_LEVEL: Logging level
    """
    config_dict = {
        "azure_devops": {
            "organization_url": os.environ.get("AZDO_ORG_URL", ""),
            "project": os.environ.get("AZDO_PROJECT", ""),
            "pat_token": os.environ.get("AZDO_PERSONAL_ACCESS_TOKEN"),
            "verify_ssl": os.environ.get("AZDO_VERIFY_SSL", "true").lower() == "true",
            "timeout": int(os.environ.get("AZDO_TIMEOUT", "30")),
        },
        "diff": {
            "max_files_per_batch": int(os.environ.get("AZDO_MAX_FILES_PER_BATCH", "5")),
        },
        "log_level": os.environ.get("LOG_LEVEL", "INFO"),
    }

    return _validated(Config.from_dict(config_dict))
