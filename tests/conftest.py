"""
Shared test fixtures and configuration for the appsync_resolvers test suite.
"""

import asyncio
import tempfile
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional, Tuple

import pytest

from appsync_resolvers import ResolverConfig, ResolverNotFoundError


class InFlightGate:
    """
    Holds every caller until ``expected`` of them are waiting at the same time.

    Calls issued one after another never get there, so the first caller
    times out.
    """

    def __init__(self, expected: int, timeout: float = 1.0) -> None:
        self.expected = expected
        self.timeout = timeout
        self.peak = 0
        self._waiting = 0
        self._released: Optional[asyncio.Event] = None

    async def wait(self) -> None:
        if self._released is None:
            self._released = asyncio.Event()
        self._waiting += 1
        self.peak = max(self.peak, self._waiting)
        if self._waiting >= self.expected:
            self._released.set()
        try:
            await asyncio.wait_for(self._released.wait(), self.timeout)
        finally:
            self._waiting -= 1


class FakeAppSync:
    """
    In-memory AppSync API.

    Stores resolvers keyed by ``(typeName, fieldName)``, pages
    ``list_resolvers`` results and records every call in ``calls``.
    """

    def __init__(
        self,
        data_sources: Optional[Dict[str, str]] = None,
        resolvers: Optional[List[Dict[str, Any]]] = None,
        page_size: int = 2,
    ) -> None:
        self.data_sources = data_sources or {}
        self.resolvers: Dict[Tuple[str, str], Dict[str, Any]] = {
            (resolver["typeName"], resolver["fieldName"]): dict(resolver)
            for resolver in resolvers or []
        }
        self.page_size = page_size
        self.calls: List[Tuple[Any, ...]] = []
        self.gates: Dict[str, InFlightGate] = {}

    def calls_to(self, operation: str) -> List[Tuple[Any, ...]]:
        return [call for call in self.calls if call[0] == operation]

    async def _pass_gate(self, operation: str) -> None:
        gate = self.gates.get(operation)
        if gate is not None:
            await gate.wait()

    async def list_resolvers(
        self, api_id: str, type_name: str, next_token: Optional[str] = None
    ) -> Dict[str, Any]:
        self.calls.append(("list_resolvers", type_name, next_token))
        await self._pass_gate("list_resolvers")
        items = [
            resolver
            for (type_, _), resolver in sorted(self.resolvers.items())
            if type_ == type_name
        ]
        start = int(next_token or 0)
        end = start + self.page_size
        page: Dict[str, Any] = {"resolvers": [dict(item) for item in items[start:end]]}
        if end < len(items):
            page["nextToken"] = str(end)
        return page

    async def get_data_source(self, api_id: str, name: str) -> Dict[str, Any]:
        self.calls.append(("get_data_source", name))
        if name not in self.data_sources:
            raise ResolverNotFoundError(
                f"Data source {name} not found", code="NotFoundException"
            )
        return {"name": name, "type": self.data_sources[name]}

    async def create_resolver(self, params: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append(("create_resolver", params))
        await self._pass_gate("create_resolver")
        return self._store(params)

    async def update_resolver(self, params: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append(("update_resolver", params))
        await self._pass_gate("update_resolver")
        return self._store(params)

    async def delete_resolver(self, api_id: str, type_name: str, field_name: str) -> None:
        self.calls.append(("delete_resolver", type_name, field_name))
        await self._pass_gate("delete_resolver")
        if (type_name, field_name) not in self.resolvers:
            raise ResolverNotFoundError(
                f"No resolver found for {type_name}.{field_name}",
                code="NotFoundException",
            )
        del self.resolvers[(type_name, field_name)]

    def _store(self, params: Dict[str, Any]) -> Dict[str, Any]:
        stored = {key: value for key, value in params.items() if key != "apiId"}
        self.resolvers[(params["typeName"], params["fieldName"])] = stored
        return stored


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def fake_appsync() -> FakeAppSync:
    """AppSync API with one Lambda and one DynamoDB data source."""
    return FakeAppSync(data_sources={"LambdaDS": "AWS_LAMBDA", "TableDS": "AMAZON_DYNAMODB"})


@pytest.fixture
def make_config():
    """Build a ResolverConfig from camelCase mapping templates."""

    def _make_config(
        mapping_templates: List[Dict[str, Any]],
        functions: Optional[List[Dict[str, Any]]] = None,
        **kwargs: Any,
    ) -> ResolverConfig:
        return ResolverConfig.model_validate(
            {
                "apiId": "api-123",
                "mappingTemplates": mapping_templates,
                "functions": functions or [],
                **kwargs,
            }
        )

    return _make_config


@pytest.fixture
def messages() -> List[str]:
    """Collects messages passed to a reconciliation log sink."""
    return []


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test (fast, no external dependencies)"
    )
