"""
Full resolver deployment: synchronize, prune, and produce the next state.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Optional

from .client import AppSyncAPI
from .models import ResolverConfig, ResolverState
from .resolvers import LogSink, create_or_update_resolvers, remove_obsolete_resolvers

logger = logging.getLogger(__name__)


async def deploy_resolvers(
    client: AppSyncAPI,
    config: ResolverConfig,
    state: Optional[ResolverState] = None,
    log: Optional[LogSink] = None,
) -> ResolverState:
    """
    Run one reconciliation pass and return the state to persist.

    Declared resolvers are created or updated first; resolvers recorded in
    ``state`` but no longer declared are deleted afterwards.

    Args:
        client: AppSync API client
        config: Declared resolver configuration
        state: State returned by the previous deployment
        log: Single-argument message sink

    Returns:
        New state listing every declared resolver with its mode
    """
    if state is None:
        state = ResolverState()

    resolvers = await create_or_update_resolvers(client, config, log)
    removed = await remove_obsolete_resolvers(client, config, state, log)

    counts = Counter(resolver.mode.value for resolver in resolvers)
    logger.info(
        "Deployed %d resolvers on API %s (%s), removed %d",
        len(resolvers),
        config.api_id,
        ", ".join(f"{mode}: {count}" for mode, count in counts.items()) or "none",
        len(removed),
    )

    return ResolverState(mapping_templates=[resolver.to_state() for resolver in resolvers])
