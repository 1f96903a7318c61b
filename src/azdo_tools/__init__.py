"""Azure DevOps pull-request diff rendering and inline-comment tools."""

__version__ = "0.3.0"
