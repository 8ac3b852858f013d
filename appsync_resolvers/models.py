"""
Data models for declared and deployed AppSync resolvers.

Declared documents use camelCase keys (``dataSource``, ``typeName``,
``pipelineConfig`` ...). The models accept every spelling the documents use
and expose a single snake_case attribute per concept, so declared and
deployed resolvers can be compared attribute by attribute.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class ResolverKind(str, Enum):
    """Resolver execution kinds supported by AppSync."""

    UNIT = "UNIT"
    PIPELINE = "PIPELINE"


class ReconcileMode(str, Enum):
    """Action computed for a declared resolver against deployed state."""

    CREATE = "create"
    UPDATE = "update"
    IGNORE = "ignore"


class ResolverKey(NamedTuple):
    """Identity of a resolver within an API."""

    type: str
    field: str


def _coerce_to_list(value: Any) -> Any:
    """Wrap a lone mapping in a list; map ``None`` to an empty list."""
    if value is None:
        return []
    if isinstance(value, dict):
        return [value]
    return value


class PipelineConfig(BaseModel):
    """Ordered function references of a pipeline resolver."""

    model_config = ConfigDict(extra="allow")

    functions: Optional[List[str]] = None


class MappingTemplate(BaseModel):
    """
    Declared resolver entry.

    Identified by ``(data_source, type, field)``. ``request`` and ``response``
    hold either inline template text or a path to a template file.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    data_source: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("data_source", "dataSource", "dataSourceName"),
        serialization_alias="dataSource",
    )
    type: str = Field(validation_alias=AliasChoices("type", "typeName"))
    field: str = Field(validation_alias=AliasChoices("field", "fieldName"))
    request: Optional[str] = None
    response: Optional[str] = None
    kind: ResolverKind = ResolverKind.UNIT
    pipeline_config: Optional[PipelineConfig] = Field(
        default=None,
        validation_alias=AliasChoices("pipeline_config", "pipelineConfig"),
        serialization_alias="pipelineConfig",
    )

    @property
    def key(self) -> ResolverKey:
        return ResolverKey(self.type, self.field)

    @property
    def is_pipeline(self) -> bool:
        return self.kind == ResolverKind.PIPELINE

    @property
    def pipeline_functions(self) -> Optional[List[str]]:
        """Function names of a pipeline resolver, ``None`` if none declared."""
        if self.pipeline_config is None:
            return None
        return self.pipeline_config.functions


class Resolver(MappingTemplate):
    """A declared resolver after template resolution and mode classification."""

    request_mapping_template: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("request_mapping_template", "requestMappingTemplate"),
        serialization_alias="requestMappingTemplate",
    )
    response_mapping_template: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("response_mapping_template", "responseMappingTemplate"),
        serialization_alias="responseMappingTemplate",
    )
    mode: Optional[ReconcileMode] = None

    @classmethod
    def from_template(cls, template: MappingTemplate, **updates: Any) -> "Resolver":
        """Build a resolver from a declared template plus computed fields."""
        data = template.model_dump()
        data.update(updates)
        return cls.model_validate(data)

    def to_state(self) -> Dict[str, Any]:
        """Render the camelCase document persisted between runs."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class DeployedResolver(BaseModel):
    """Resolver as returned by the AppSync ``ListResolvers`` API."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    type: str = Field(validation_alias=AliasChoices("type", "typeName"))
    field: str = Field(validation_alias=AliasChoices("field", "fieldName"))
    data_source: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("data_source", "dataSource", "dataSourceName"),
    )
    request_mapping_template: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("request_mapping_template", "requestMappingTemplate"),
    )
    response_mapping_template: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("response_mapping_template", "responseMappingTemplate"),
    )
    kind: Optional[ResolverKind] = None
    pipeline_config: Optional[Dict[str, Any]] = Field(
        default=None, validation_alias=AliasChoices("pipeline_config", "pipelineConfig")
    )
    resolver_arn: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("resolver_arn", "resolverArn")
    )

    @property
    def key(self) -> ResolverKey:
        return ResolverKey(self.type, self.field)


class FunctionReference(BaseModel):
    """Named AppSync function that pipeline resolvers can reference."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str
    function_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("function_id", "functionId")
    )


class ResolverConfig(BaseModel):
    """
    Declared desired state for the resolvers of one API.

    Attributes:
        api_id: AppSync API identifier
        mapping_templates: Declared resolver entries
        functions: Deployed functions available to pipeline resolvers
        base_dir: Directory relative template paths are resolved against
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    api_id: str = Field(validation_alias=AliasChoices("api_id", "apiId"))
    mapping_templates: List[MappingTemplate] = Field(
        default_factory=list,
        validation_alias=AliasChoices("mapping_templates", "mappingTemplates"),
    )
    functions: List[FunctionReference] = Field(default_factory=list)
    base_dir: Optional[Path] = None

    @field_validator("mapping_templates", "functions", mode="before")
    @classmethod
    def coerce_to_list(cls, value: Any) -> Any:
        """Accept a single entry where a list is expected."""
        return _coerce_to_list(value)


class ResolverState(BaseModel):
    """Resolvers recorded as deployed by a previous run."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    mapping_templates: List[Dict[str, Any]] = Field(
        default_factory=list,
        validation_alias=AliasChoices("mapping_templates", "mappingTemplates"),
    )

    @field_validator("mapping_templates", mode="before")
    @classmethod
    def coerce_to_list(cls, value: Any) -> Any:
        """Accept a single entry where a list is expected."""
        return _coerce_to_list(value)

    def keys(self) -> List[ResolverKey]:
        """Project each recorded resolver to its ``(type, field)`` key."""
        return [
            ResolverKey(entry.get("type"), entry.get("field"))
            for entry in self.mapping_templates
        ]

    def to_document(self) -> Dict[str, Any]:
        """Render the state document with camelCase keys."""
        return {"mappingTemplates": list(self.mapping_templates)}
