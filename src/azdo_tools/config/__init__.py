"""Configuration module for the Azure DevOps pull-request tools."""

from .config import AzureDevOpsConfig, Config, DiffConfig, load_config, load_config_from_env

__all__ = ["AzureDevOpsConfig", "Config", "DiffConfig", "load_config", "load_config_from_env"]
