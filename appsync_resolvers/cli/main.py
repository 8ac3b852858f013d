#!/usr/bin/env python3
"""
Command-line interface for appsync_resolvers.

This module wires the settings loader, logging setup and AppSync client to
the reconciliation routines.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from ..client import AppSyncAPI, AppSyncClient
from ..config import ConfigLoader, GlobalConfig
from ..deployer import deploy_resolvers
from ..exceptions import ResolverSyncError
from ..logging import cleanup_logging, setup_logging
from ..models import ResolverConfig, ResolverState
from ..resolvers import create_or_update_resolvers, remove_obsolete_resolvers
from .parsers import create_parser

logger = logging.getLogger(__name__)


def load_settings(loader: ConfigLoader, args: argparse.Namespace) -> GlobalConfig:
    """Load settings and apply command line overrides."""
    settings = loader.load_settings(args.settings)

    aws_overrides = {
        key: value
        for key, value in (
            ("region", args.region),
            ("profile", args.profile),
            ("endpoint_url", args.endpoint_url),
        )
        if value
    }
    if aws_overrides:
        settings.aws = settings.aws.model_copy(update=aws_overrides)

    logging_overrides = {}
    if args.log_level:
        logging_overrides["level"] = args.log_level
    elif args.verbose:
        logging_overrides["level"] = "DEBUG"
    if args.structured_logs:
        logging_overrides["enable_structured"] = True
    if logging_overrides:
        settings.logging = settings.logging.model_validate(
            {**settings.logging.model_dump(), **logging_overrides}
        )

    return settings


def create_client(settings: GlobalConfig) -> AppSyncAPI:
    """Create the AppSync client for the configured account."""
    return AppSyncClient(settings.aws)


def print_resolvers(config: ResolverConfig, state: ResolverState) -> None:
    """Print one line per resolver with its reconciliation mode."""
    print(f"API {config.api_id}")
    for entry in state.mapping_templates:
        print(f"  {entry.get('mode', '-'):<7} {entry.get('type')}.{entry.get('field')}")


async def run_command(
    args: argparse.Namespace, client: AppSyncAPI, loader: ConfigLoader
) -> None:
    """Run the selected subcommand."""
    config = loader.load_resolver_config(args.config)
    log = logger.info if args.verbose else logger.debug

    if args.command == "sync":
        resolvers = await create_or_update_resolvers(client, config, log)
        print_resolvers(
            config,
            ResolverState(mapping_templates=[r.to_state() for r in resolvers]),
        )

    elif args.command == "remove":
        state = loader.load_state(args.state)
        removed = await remove_obsolete_resolvers(client, config, state, log)
        print(f"Removed {len(removed)} obsolete resolvers from API {config.api_id}")
        for key in removed:
            print(f"  {key.type}.{key.field}")

    elif args.command == "deploy":
        state = loader.load_state(args.state)
        new_state = await deploy_resolvers(client, config, state, log)
        loader.save_state(new_state, args.state)
        print_resolvers(config, new_state)
        print(f"State written to {args.state}")


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point; returns the process exit code."""
    parser = create_parser()
    args = parser.parse_args(argv)

    loader = ConfigLoader()
    try:
        settings = load_settings(loader, args)
        setup_logging(settings.logging)
        client = create_client(settings)
        asyncio.run(run_command(args, client, loader))
    except ResolverSyncError as e:
        logger.debug("Reconciliation failed", exc_info=True)
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    finally:
        cleanup_logging()

    return 0


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
