"""
Argument parsing for the appsync-resolvers command line.

Each subcommand shares the same input, AWS and logging arguments.
"""

import argparse
from pathlib import Path


def add_input_arguments(parser: argparse.ArgumentParser, needs_state: bool) -> None:
    """Add declared config and state file arguments."""
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        required=True,
        help="YAML or JSON file declaring apiId, mappingTemplates and functions",
    )

    parser.add_argument(
        "-s",
        "--state",
        type=Path,
        required=needs_state,
        help="State file written by the previous deployment",
    )


def add_aws_arguments(parser: argparse.ArgumentParser) -> None:
    """Add AWS access arguments."""
    parser.add_argument("--region", help="AWS region (overrides settings)")

    parser.add_argument("--profile", help="Named AWS profile (overrides settings)")

    parser.add_argument("--endpoint-url", help="Custom AppSync endpoint URL")


def add_logging_arguments(parser: argparse.ArgumentParser) -> None:
    """Add logging and settings arguments."""
    parser.add_argument(
        "--settings", type=Path, help="Settings file (default: search known locations)"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Logging level (overrides settings)",
    )

    parser.add_argument(
        "--structured-logs", action="store_true", help="Emit JSON log lines"
    )

    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Print every reconciliation step"
    )


def _add_command(
    subparsers: "argparse._SubParsersAction[argparse.ArgumentParser]",
    name: str,
    help_text: str,
    needs_state: bool,
) -> None:
    command = subparsers.add_parser(name, help=help_text, description=help_text)
    add_input_arguments(command, needs_state)
    add_aws_arguments(command)
    add_logging_arguments(command)


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="appsync-resolvers",
        description="Reconcile AppSync resolvers with a declared configuration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s sync -c resolvers.yaml
  %(prog)s deploy -c resolvers.yaml -s .appsync/state.json --region eu-west-1
  %(prog)s remove -c resolvers.yaml -s .appsync/state.json
""",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_command(
        subparsers,
        "sync",
        "Create or update declared resolvers",
        needs_state=False,
    )
    _add_command(
        subparsers,
        "remove",
        "Delete resolvers recorded in state but no longer declared",
        needs_state=True,
    )
    _add_command(
        subparsers,
        "deploy",
        "Sync declared resolvers, remove obsolete ones and write the new state",
        needs_state=True,
    )

    return parser
