"""
Exception hierarchy for resolver reconciliation.

This module provides the custom exceptions raised while synchronizing AppSync
resolvers, plus utilities for translating AWS SDK errors into them.
"""

from __future__ import annotations

from typing import Any, Optional

from botocore.exceptions import BotoCoreError, ClientError


class ResolverSyncError(Exception):
    """
    Base exception for all resolver reconciliation errors.

    Attributes:
        message: Human-readable error message
        details: Additional error details as keyword arguments
    """

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details = kwargs


class ConfigurationError(ResolverSyncError):
    """
    Raised when the declared resolver configuration cannot be applied.

    Configuration errors are fatal: they abort the whole reconciliation pass.
    """

    pass


class DuplicateResolverError(ConfigurationError):
    """Raised when two mapping templates share the same identifying keys."""

    def __init__(self, message: str, keys: Optional[dict] = None) -> None:
        super().__init__(message)
        self.keys = keys or {}


class MissingFunctionError(ConfigurationError):
    """Raised when a pipeline resolver references an unknown function name."""

    def __init__(self, message: str, function_name: Optional[str] = None) -> None:
        super().__init__(message)
        self.function_name = function_name


class PipelineDataSourceError(ConfigurationError):
    """Raised when a pipeline resolver also declares a data source."""

    pass


class MissingDataSourceError(ConfigurationError):
    """Raised when a unit resolver has no data source."""

    pass


class ConfigLoadError(ConfigurationError):
    """Raised when a config or state document cannot be read or validated."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path


class RemoteAPIError(ResolverSyncError):
    """
    Raised when a call to the AppSync API fails.

    Attributes:
        code: AWS error code (e.g. ``ConcurrentModificationException``)
        operation: Name of the API operation that failed
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        operation: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.code = code
        self.operation = operation


class ResolverNotFoundError(RemoteAPIError):
    """Raised when the requested remote object does not exist."""

    pass


class PaginationError(RemoteAPIError):
    """Raised when a paginated listing does not terminate."""

    pass


class ErrorHandler:
    """
    Utility class for translating AWS SDK errors.

    Converts botocore exceptions into ``RemoteAPIError`` subclasses so callers
    only need to know about this package's exception tree.
    """

    NOT_FOUND_CODES = frozenset({"NotFoundException", "ResourceNotFoundException"})

    @staticmethod
    def handle_client_error(
        error: ClientError, operation: Optional[str] = None
    ) -> RemoteAPIError:
        """
        Convert a botocore ``ClientError`` to a ``RemoteAPIError`` subclass.

        Args:
            error: The original botocore exception
            operation: The API operation being performed

        Returns:
            Appropriate RemoteAPIError subclass
        """
        error_info = error.response.get("Error", {})
        code = error_info.get("Code")
        message = error_info.get("Message") or str(error)
        operation = operation or getattr(error, "operation_name", None)
        status_code = error.response.get("ResponseMetadata", {}).get("HTTPStatusCode")

        if code in ErrorHandler.NOT_FOUND_CODES:
            return ResolverNotFoundError(
                f"Not found: {message}",
                code=code,
                operation=operation,
                status_code=status_code,
            )

        return RemoteAPIError(
            f"AppSync {operation or 'request'} failed ({code}): {message}",
            code=code,
            operation=operation,
            status_code=status_code,
        )

    @staticmethod
    def handle_botocore_error(
        error: BotoCoreError, operation: Optional[str] = None
    ) -> RemoteAPIError:
        """
        Convert a botocore client-side failure to a ``RemoteAPIError``.

        These are raised before any response arrives, for example when no
        credentials are found, so there is no error code to inspect.
        """
        return RemoteAPIError(
            f"AppSync {operation or 'request'} failed: {error}",
            code=type(error).__name__,
            operation=operation,
        )

    @staticmethod
    def is_not_found(error: BaseException) -> bool:
        """Check whether an error means the remote object is already gone."""
        if isinstance(error, ResolverNotFoundError):
            return True
        if isinstance(error, ClientError):
            return error.response.get("Error", {}).get("Code") in ErrorHandler.NOT_FOUND_CODES
        return False
