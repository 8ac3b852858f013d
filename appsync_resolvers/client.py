"""
AppSync API client.

``AppSyncAPI`` is the interface the reconciliation routines depend on.
``AppSyncClient`` implements it on top of a boto3 ``appsync`` client, running
each blocking SDK call in a worker thread so independent calls can overlap.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .config.models import AWSConfig
from .exceptions import ErrorHandler

logger = logging.getLogger(__name__)


class AppSyncAPI(Protocol):
    """Remote operations needed to reconcile resolvers."""

    async def list_resolvers(
        self, api_id: str, type_name: str, next_token: Optional[str] = None
    ) -> Dict[str, Any]:
        """Return one page: ``{"resolvers": [...], "nextToken": ...}``."""
        ...

    async def get_data_source(self, api_id: str, name: str) -> Dict[str, Any]:
        """Return the data source description, including its ``type``."""
        ...

    async def create_resolver(self, params: Dict[str, Any]) -> Dict[str, Any]:
        ...

    async def update_resolver(self, params: Dict[str, Any]) -> Dict[str, Any]:
        ...

    async def delete_resolver(self, api_id: str, type_name: str, field_name: str) -> None:
        """Delete a resolver; raises ``ResolverNotFoundError`` if it is gone."""
        ...


class AppSyncClient:
    """
    boto3-backed implementation of ``AppSyncAPI``.

    Examples:
        ```python
        client = AppSyncClient(AWSConfig(region="eu-west-1"))
        resolvers = await create_or_update_resolvers(client, config)
        ```
    """

    def __init__(self, aws_config: Optional[AWSConfig] = None, client: Any = None) -> None:
        """
        Initialize the client.

        Args:
            aws_config: Region, profile and endpoint settings
            client: Pre-built boto3 ``appsync`` client (skips session creation)
        """
        self.aws_config = aws_config or AWSConfig()
        self._client = client

    def _get_client(self) -> Any:
        """Get or create the boto3 AppSync client."""
        if self._client is None:
            session_kwargs: Dict[str, Any] = {}
            if self.aws_config.profile:
                session_kwargs["profile_name"] = self.aws_config.profile
            if self.aws_config.region:
                session_kwargs["region_name"] = self.aws_config.region

            session = boto3.Session(**session_kwargs)

            client_kwargs: Dict[str, Any] = {}
            if self.aws_config.endpoint_url:
                client_kwargs["endpoint_url"] = self.aws_config.endpoint_url

            self._client = session.client("appsync", **client_kwargs)

        return self._client

    async def _call(self, operation: str, **kwargs: Any) -> Dict[str, Any]:
        """Run one SDK operation off the event loop, translating its errors."""
        logger.debug("AppSync %s(%s)", operation, ", ".join(sorted(kwargs)))
        try:
            method = getattr(self._get_client(), operation)
            return await asyncio.to_thread(method, **kwargs)
        except ClientError as e:
            raise ErrorHandler.handle_client_error(e, operation) from e
        except BotoCoreError as e:
            raise ErrorHandler.handle_botocore_error(e, operation) from e

    async def list_resolvers(
        self, api_id: str, type_name: str, next_token: Optional[str] = None
    ) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {"apiId": api_id, "typeName": type_name}
        if next_token:
            kwargs["nextToken"] = next_token
        return await self._call("list_resolvers", **kwargs)

    async def get_data_source(self, api_id: str, name: str) -> Dict[str, Any]:
        response = await self._call("get_data_source", apiId=api_id, name=name)
        return response.get("dataSource", {})

    async def create_resolver(self, params: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._call("create_resolver", **params)
        return response.get("resolver", {})

    async def update_resolver(self, params: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._call("update_resolver", **params)
        return response.get("resolver", {})

    async def delete_resolver(self, api_id: str, type_name: str, field_name: str) -> None:
        await self._call(
            "delete_resolver", apiId=api_id, typeName=type_name, fieldName=field_name
        )
