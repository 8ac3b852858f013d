#!/usr/bin/env python3
"""
Basic usage examples for the appsync_resolvers library.

Deploys the resolvers declared in resolvers.yaml next to this script and
keeps the resulting state in .appsync/state.json. Requires AWS credentials
with AppSync permissions and a real API id in resolvers.yaml.
"""

import asyncio
from pathlib import Path

from appsync_resolvers import AppSyncClient, create_or_update_resolvers, deploy_resolvers
from appsync_resolvers.config import AWSConfig, ConfigLoader, LoggingConfig, LogLevel
from appsync_resolvers.logging import setup_logging

HERE = Path(__file__).parent


async def example_sync_only(client: AppSyncClient, loader: ConfigLoader) -> None:
    """Example: create or update resolvers and print the computed modes."""
    print("=== Sync ===\n")

    config = loader.load_resolver_config(HERE / "resolvers.yaml")
    resolvers = await create_or_update_resolvers(client, config, print)

    for resolver in resolvers:
        print(f"{resolver.mode.value:<7} {resolver.type}.{resolver.field}")
    print()


async def example_deploy_with_state(client: AppSyncClient, loader: ConfigLoader) -> None:
    """Example: full deployment that also removes resolvers dropped since last run."""
    print("=== Deploy ===\n")

    state_file = HERE / ".appsync" / "state.json"
    config = loader.load_resolver_config(HERE / "resolvers.yaml")
    state = loader.load_state(state_file)

    new_state = await deploy_resolvers(client, config, state, print)
    loader.save_state(new_state, state_file)

    print(f"\n{len(new_state.mapping_templates)} resolvers recorded in {state_file}")


async def main() -> None:
    setup_logging(LoggingConfig(level=LogLevel.INFO))

    loader = ConfigLoader()
    client = AppSyncClient(AWSConfig(region="eu-west-1"))

    await example_sync_only(client, loader)
    await example_deploy_with_state(client, loader)


if __name__ == "__main__":
    asyncio.run(main())
