"""
Desired-state reconciliation for AWS AppSync resolvers.

This package compares declared resolver mapping templates with the resolvers
deployed on an AppSync API and creates, updates or deletes remote resolvers
until the API matches the declaration.

Features:
- Async/await reconciliation with concurrent remote calls per stage
- Inline or file-based request/response mapping templates
- Default Lambda invoke/result templates for Lambda data sources
- Unit and pipeline resolvers, with function names mapped to function ids
- Removal of resolvers dropped from the declaration since the last run
"""

from .client import AppSyncAPI, AppSyncClient
from .deployer import deploy_resolvers
from .exceptions import (
    ConfigLoadError,
    ConfigurationError,
    DuplicateResolverError,
    ErrorHandler,
    MissingDataSourceError,
    MissingFunctionError,
    PaginationError,
    PipelineDataSourceError,
    RemoteAPIError,
    ResolverNotFoundError,
    ResolverSyncError,
)
from .models import (
    DeployedResolver,
    FunctionReference,
    MappingTemplate,
    PipelineConfig,
    ReconcileMode,
    Resolver,
    ResolverConfig,
    ResolverKey,
    ResolverKind,
    ResolverState,
)
from .resolvers import (
    LAMBDA_REQUEST_TEMPLATE,
    LAMBDA_RESPONSE_TEMPLATE,
    create_or_update_resolvers,
    remove_obsolete_resolvers,
)

__version__ = "0.1.0"

__all__ = [
    # Reconciliation
    "create_or_update_resolvers",
    "remove_obsolete_resolvers",
    "deploy_resolvers",
    "LAMBDA_REQUEST_TEMPLATE",
    "LAMBDA_RESPONSE_TEMPLATE",
    # Client
    "AppSyncAPI",
    "AppSyncClient",
    # Models
    "DeployedResolver",
    "FunctionReference",
    "MappingTemplate",
    "PipelineConfig",
    "ReconcileMode",
    "Resolver",
    "ResolverConfig",
    "ResolverKey",
    "ResolverKind",
    "ResolverState",
    # Exceptions
    "ResolverSyncError",
    "ConfigurationError",
    "ConfigLoadError",
    "DuplicateResolverError",
    "MissingFunctionError",
    "PipelineDataSourceError",
    "MissingDataSourceError",
    "RemoteAPIError",
    "ResolverNotFoundError",
    "PaginationError",
    "ErrorHandler",
]
