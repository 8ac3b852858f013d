"""
Token-based pagination for AppSync list operations.

AppSync list calls return a page of items plus an optional ``nextToken``;
the listing is complete once a page comes back without one.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Set

from .exceptions import PaginationError

logger = logging.getLogger(__name__)

PageFetcher = Callable[..., Awaitable[Mapping[str, Any]]]


async def list_all(
    operation: PageFetcher,
    items_key: str,
    token_key: str = "nextToken",
    **params: Any,
) -> List[Dict[str, Any]]:
    """
    Drain a paginated list operation.

    Args:
        operation: Coroutine function returning one page; called with
            ``params`` and ``next_token``
        items_key: Key of the item list in each page
        token_key: Key of the continuation token in each page
        **params: Arguments forwarded to every call

    Returns:
        Items of all pages, in page order

    Raises:
        PaginationError: If the service hands back a token it already sent
    """
    items: List[Dict[str, Any]] = []
    seen_tokens: Set[str] = set()
    next_token: Optional[str] = None
    pages = 0

    while True:
        page = await operation(**params, next_token=next_token)
        pages += 1
        items.extend(page.get(items_key) or [])

        next_token = page.get(token_key)
        if not next_token:
            break
        if next_token in seen_tokens:
            raise PaginationError(
                f"Pagination token repeated after {pages} pages of {items_key}",
                code="RepeatedToken",
                operation=getattr(operation, "__name__", None),
            )
        seen_tokens.add(next_token)

    logger.debug("Listed %d %s across %d pages", len(items), items_key, pages)
    return items
