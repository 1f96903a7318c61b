#!/usr/bin/env python3
"""
Command line entry point for the pull request diff and comment tools.

Examples:
    azdo-pr-tools changes --repository Contoso.Api --pr-id 42
    azdo-pr-tools changes --repository Contoso.Api --pr-id 42 --path /src/app.py
    azdo-pr-tools comment --repository Contoso.Api --pr-id 42 --path /src/app.py \\
        --line 12 --text "Consider extracting this block."
"""

import argparse
import json
import os
import sys
from typing import List, Optional

from .azure_devops.client import AzureDevOpsClient
from .azure_devops.errors import AzureDevOpsError
from .config.config import Config, load_config, load_config_from_env
from .utils.logger import set_log_level, setup_logger

logger = setup_logger(__name__)


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Diff rendering and inline comments for Azure DevOps pull requests"
    )
    parser.add_argument("--config", type=str, help="Path to configuration file (YAML)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_target(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("--repository", required=True, help="Repository name or ID")
        sub.add_argument("--pr-id", type=int, required=True, help="Pull request ID")

    changes = subparsers.add_parser("changes", help="Show file changes with line-numbered diffs")
    add_target(changes)
    changes.add_argument("--path", help="Only this file")
    changes.add_argument("--json", action="store_true", help="Print JSON instead of diff text")

    count = subparsers.add_parser("count", help="Count changed files per change type")
    add_target(count)

    files = subparsers.add_parser("files", help="List changed file paths")
    add_target(files)
    files.add_argument("--skip", type=int, default=0, help="Entries to skip")
    files.add_argument("--top", type=int, default=0, help="Maximum entries (0 = all)")

    comment = subparsers.add_parser("comment", help="Add a pull request comment")
    add_target(comment)
    comment.add_argument("--text", required=True, help="Comment content")
    comment.add_argument("--path", help="File to comment on")
    comment.add_argument("--line", type=int, help="Line to anchor the comment to (needs --path)")
    comment.add_argument("--offset", type=int, default=1, help="Character offset within the line")

    return parser.parse_args(argv)


def load_configuration(config_path: Optional[str] = None) -> Config:
    """Load configuration from file when given and present, else from the environment."""
    if config_path and os.path.exists(config_path):
        logger.info(f"Loading config from file: {config_path}")
        return load_config(config_path)

    logger.info("Loading config from environment variables")
    return load_config_from_env()


def run_command(client: AzureDevOpsClient, args: argparse.Namespace) -> None:
    """Execute one sub-command and print its result."""
    if args.command == "changes":
        result = client.get_pull_request_file_changes(args.repository, args.pr_id, args.path)
        if args.json:
            print(json.dumps(result.to_dict(), indent=2))
            return
        for change in result.changes:
            print(f"=== {change.entry.path} ({change.entry.change_kind.value}) ===")
            print(change.diff_content)
            print()
        print(result.disclosure)

    elif args.command == "count":
        print(json.dumps(client.get_pull_request_changes_count(args.repository, args.pr_id).to_dict(), indent=2))

    elif args.command == "files":
        entries, total = client.get_all_pull_request_changes(args.repository, args.pr_id, args.skip, args.top)
        for entry in entries:
            print(f"{entry.change_kind.value:<8} {entry.path}")
        print(f"{len(entries)} of {total} changes")

    elif args.command == "comment":
        if args.line is not None:
            if not args.path:
                raise ValueError("--line requires --path")
            thread = client.add_inline_comment(
                args.repository, args.pr_id, args.path, args.text, args.line, args.offset
            )
        elif args.path:
            thread = client.add_file_comment(args.repository, args.pr_id, args.path, args.text)
        else:
            thread = client.add_comment(args.repository, args.pr_id, args.text)
        print(f"Created comment thread #{thread.id}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_arguments(argv)

    try:
        config = load_configuration(args.config)
        set_log_level(config.log_level)

        with AzureDevOpsClient(config.azure_devops, config.diff) as client:
            run_command(client, args)
        return 0

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130

    except (AzureDevOpsError, ValueError, FileNotFoundError) as e:
        logger.error(str(e))
        print(f"\nError: {e}", file=sys.stderr)
        return 1

    except Exception as e:
        logger.exception("Unexpected error")
        print(f"\nError: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
