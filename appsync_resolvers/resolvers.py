"""
Resolver reconciliation.

``create_or_update_resolvers`` converges the deployed resolvers of an AppSync
API to the declared mapping templates; ``remove_obsolete_resolvers`` deletes
resolvers recorded in a previous run that are no longer declared.

Each pass runs in stages. Within a stage every remote call is issued
concurrently and the stage waits for all of them; the first failure aborts
the pass. Writes already made are not rolled back, and a re-run converges
because unchanged resolvers are classified ``ignore``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from .client import AppSyncAPI
from .exceptions import (
    ErrorHandler,
    MissingDataSourceError,
    MissingFunctionError,
    PipelineDataSourceError,
)
from .models import (
    DeployedResolver,
    MappingTemplate,
    ReconcileMode,
    Resolver,
    ResolverConfig,
    ResolverKey,
    ResolverState,
)
from .pagination import list_all
from .utils import check_for_duplicates, equals_by_keys, read_if_file

logger = logging.getLogger(__name__)

LogSink = Callable[[str], Any]

LAMBDA_DATA_SOURCE_TYPE = "AWS_LAMBDA"
LAMBDA_REQUEST_TEMPLATE = (
    '{"version": "2017-02-28", "operation": "Invoke", '
    '"payload": $util.toJson($context.arguments)}'
)
LAMBDA_RESPONSE_TEMPLATE = "$util.toJson($context.result)"

DUPLICATE_KEYS = ("data_source", "type", "field")
COMPARED_KEYS = (
    "data_source",
    "type",
    "field",
    "response_mapping_template",
    "request_mapping_template",
)


async def fetch_deployed_resolvers(
    client: AppSyncAPI, api_id: str, templates: List[MappingTemplate]
) -> List[DeployedResolver]:
    """List every deployed resolver on the types the templates touch."""
    type_names = list(dict.fromkeys(template.type for template in templates))
    pages = await asyncio.gather(
        *(
            list_all(client.list_resolvers, "resolvers", api_id=api_id, type_name=type_name)
            for type_name in type_names
        )
    )
    return [DeployedResolver.model_validate(item) for page in pages for item in page]


async def resolve_templates(
    client: AppSyncAPI, config: ResolverConfig, template: MappingTemplate
) -> Resolver:
    """
    Turn ``request``/``response`` into literal mapping template text.

    Missing templates on a Lambda data source fall back to the direct Lambda
    invoke/result templates; on any other data source they stay ``None``.
    """
    request_template = await read_if_file(template.request, config.base_dir)
    response_template = await read_if_file(template.response, config.base_dir)

    if (request_template is None or response_template is None) and template.data_source:
        data_source = await client.get_data_source(config.api_id, template.data_source)
        if data_source.get("type") == LAMBDA_DATA_SOURCE_TYPE:
            request_template = request_template or LAMBDA_REQUEST_TEMPLATE
            response_template = response_template or LAMBDA_RESPONSE_TEMPLATE

    return Resolver.from_template(
        template,
        request_mapping_template=request_template,
        response_mapping_template=response_template,
    )


def classify(resolver: Resolver, deployed: List[DeployedResolver]) -> ReconcileMode:
    """Decide whether a declared resolver must be created, updated or left alone."""
    match = next((item for item in deployed if item.key == resolver.key), None)
    if match is None:
        return ReconcileMode.CREATE
    if equals_by_keys(COMPARED_KEYS, match, resolver):
        return ReconcileMode.IGNORE
    return ReconcileMode.UPDATE


def resolve_function_ids(resolver: Resolver, config: ResolverConfig) -> List[str]:
    """Map the function names of a pipeline resolver to function ids."""
    function_ids: Dict[str, str] = {}
    for function in config.functions:
        if function.function_id:
            function_ids.setdefault(function.name, function.function_id)
    resolved = []
    for name in resolver.pipeline_functions or []:
        if name not in function_ids:
            raise MissingFunctionError(
                f'A function "{name}" must exist before referencing it from '
                f'pipeline resolver "{resolver.type}.{resolver.field}".',
                function_name=name,
            )
        resolved.append(function_ids[name])
    return resolved


def build_resolver_params(resolver: Resolver, config: ResolverConfig) -> Dict[str, Any]:
    """
    Build the create/update request for one resolver.

    Raises:
        PipelineDataSourceError: pipeline resolver that also names a data source
        MissingFunctionError: pipeline function name with no deployed function
        MissingDataSourceError: unit resolver without a data source
    """
    params: Dict[str, Any] = {
        "apiId": config.api_id,
        "typeName": resolver.type,
        "fieldName": resolver.field,
        "kind": resolver.kind.value,
        "requestMappingTemplate": resolver.request_mapping_template,
        "responseMappingTemplate": resolver.response_mapping_template,
    }

    if resolver.is_pipeline:
        if resolver.data_source is not None:
            raise PipelineDataSourceError(
                f'Please either remove "dataSource" or "kind: PIPELINE" from resolver '
                f'"{resolver.type}.{resolver.field}". A unit resolver is not converted '
                f'to a pipeline resolver while it still names a data source.'
            )
        if resolver.pipeline_functions is None:
            params["pipelineConfig"] = {}
        else:
            logger.debug(
                "Mapping function names to ids for pipeline resolver %s.%s",
                resolver.type,
                resolver.field,
            )
            params["pipelineConfig"] = {
                "functions": resolve_function_ids(resolver, config)
            }
    else:
        if resolver.data_source is None:
            raise MissingDataSourceError(
                f'"dataSource" must be specified for resolver '
                f'"{resolver.type}.{resolver.field}".'
            )
        params["dataSourceName"] = resolver.data_source

    return {key: value for key, value in params.items() if value is not None}


async def _apply(
    client: AppSyncAPI, resolver: Resolver, params: Dict[str, Any], log: LogSink
) -> None:
    if resolver.mode == ReconcileMode.CREATE:
        log(f"Creating resolver {resolver.field}/{resolver.type}")
        await client.create_resolver(params)
    elif resolver.mode == ReconcileMode.UPDATE:
        log(f"Updating resolver {resolver.field}/{resolver.type}")
        await client.update_resolver(params)


async def create_or_update_resolvers(
    client: AppSyncAPI, config: ResolverConfig, log: Optional[LogSink] = None
) -> List[Resolver]:
    """
    Converge deployed resolvers to the declared mapping templates.

    Args:
        client: AppSync API client
        config: Declared resolver configuration
        log: Single-argument message sink (defaults to this module's debug log)

    Returns:
        Every declared resolver with resolved templates and its computed mode

    Raises:
        ConfigurationError: On duplicate templates or an invalid resolver
            declaration; raised before any create or update is issued
        RemoteAPIError: If a remote call fails
    """
    log = log or logger.debug
    templates = config.mapping_templates

    check_for_duplicates(DUPLICATE_KEYS, templates)

    deployed = await fetch_deployed_resolvers(client, config.api_id, templates)

    resolvers = await asyncio.gather(
        *(resolve_templates(client, config, template) for template in templates)
    )

    resolvers = [
        resolver.model_copy(update={"mode": classify(resolver, deployed)})
        for resolver in resolvers
    ]

    changes: List[Tuple[Resolver, Dict[str, Any]]] = [
        (resolver, build_resolver_params(resolver, config))
        for resolver in resolvers
        if resolver.mode != ReconcileMode.IGNORE
    ]

    await asyncio.gather(*(_apply(client, resolver, params, log) for resolver, params in changes))

    return resolvers


async def _delete(client: AppSyncAPI, api_id: str, key: ResolverKey, log: LogSink) -> None:
    log(f"Removing resolver {key.field}/{key.type}")
    try:
        await client.delete_resolver(api_id, key.type, key.field)
    except Exception as e:
        if not ErrorHandler.is_not_found(e):
            raise
        log(f"Resolver {key.field}/{key.type} already removed")


async def remove_obsolete_resolvers(
    client: AppSyncAPI,
    config: ResolverConfig,
    state: ResolverState,
    log: Optional[LogSink] = None,
) -> List[ResolverKey]:
    """
    Delete resolvers recorded in ``state`` that ``config`` no longer declares.

    A resolver that is already gone counts as removed.

    Returns:
        Keys of the resolvers that were removed
    """
    log = log or logger.debug
    declared = {template.key for template in config.mapping_templates}
    obsolete = [key for key in dict.fromkeys(state.keys()) if key not in declared]

    await asyncio.gather(*(_delete(client, config.api_id, key, log) for key in obsolete))

    return obsolete
