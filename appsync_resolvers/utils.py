"""
Shared helpers for resolver reconciliation.

Duplicate detection, key-wise equality and template file resolution.
"""

from __future__ import annotations

from collections import Counter
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

import aiofiles
import aiofiles.os

from .exceptions import ConfigLoadError, DuplicateResolverError


def _get(item: Any, key: str) -> Any:
    """Read ``key`` from a mapping or an attribute of an object."""
    if isinstance(item, Mapping):
        return item.get(key)
    return getattr(item, key, None)


def equals_by_keys(keys: Sequence[str], left: Any, right: Any) -> bool:
    """
    Compare two objects on a fixed set of fields.

    Args:
        keys: Field names to compare
        left: First object (model or mapping)
        right: Second object (model or mapping)

    Returns:
        True if every named field is equal by value
    """
    return all(_get(left, key) == _get(right, key) for key in keys)


def check_for_duplicates(keys: Sequence[str], items: Iterable[Any]) -> None:
    """
    Ensure no two items share the same values for ``keys``.

    Raises:
        DuplicateResolverError: naming the first duplicated key combination
    """
    counts = Counter(tuple(_get(item, key) for key in keys) for item in items)
    for values, count in counts.items():
        if count > 1:
            described = ", ".join(f"{key}={value!r}" for key, value in zip(keys, values))
            raise DuplicateResolverError(
                f"Duplicate mapping template found ({described}): "
                f"each combination of {', '.join(keys)} must be unique",
                keys=dict(zip(keys, values)),
            )


async def read_if_file(
    value: Optional[str], base_dir: Optional[Union[str, Path]] = None
) -> Optional[str]:
    """
    Resolve a template value to its text.

    Args:
        value: Inline template text or a path to a template file
        base_dir: Directory relative paths are resolved against

    Returns:
        File contents if ``value`` names an existing file, otherwise ``value``
    """
    if value is None:
        return None

    path = Path(value)
    if base_dir is not None and not path.is_absolute():
        path = Path(base_dir) / path

    if await aiofiles.os.path.isfile(path):
        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                return await f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigLoadError(
                f"Failed to read template file {path}: {e}", path=str(path)
            ) from e

    return value
