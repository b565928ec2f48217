"""Pydantic models for service definitions and parsed service descriptions."""

import copy
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .merge import deep_merge


REDACTED = "********"


class ParameterLocation(str, Enum):
    """Where a parameter value is placed in the outgoing request."""

    URI = "uri"
    QUERY = "query"
    HEADER = "header"
    JSON = "json"
    FORM_PARAM = "formParam"
    BODY = "body"


class Parameter(BaseModel):
    """Operation parameter schema model."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str = Field("", description="Parameter name")
    type: Optional[str] = Field(None, description="Parameter type (string, integer, array, ...)")
    required: bool = Field(False, description="Whether parameter is required")
    default: Optional[Any] = Field(None, description="Default value")
    description: str = Field("", description="Parameter description")
    location: Optional[ParameterLocation] = Field(None, description="Request location")
    sent_as: Optional[str] = Field(None, alias="sentAs", description="Wire name of the parameter")
    items: Optional["Parameter"] = Field(None, description="Item schema for array parameters")

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v: Any) -> Optional[str]:
        """Collapse union types such as ["string", "null"] to the first concrete type."""
        if isinstance(v, (list, tuple)):
            concrete = [item for item in v if item != "null"]
            return concrete[0] if concrete else None
        return v

    @property
    def item_type(self) -> Optional[str]:
        return self.items.type if self.items is not None else None

    @property
    def wire_name(self) -> str:
        return self.sent_as or self.name


class Operation(BaseModel):
    """A named remote operation declared by a service description."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str = Field("", description="Operation name")
    http_method: str = Field("GET", alias="httpMethod", description="HTTP method")
    uri: str = Field("", description="URI template relative to the base URL")
    summary: str = Field("", description="Short description of the operation")
    response_model: Optional[str] = Field(None, alias="responseModel")
    extends: Optional[str] = Field(None, description="Operation this one inherits from")
    parameters: Dict[str, Parameter] = Field(default_factory=dict)
    additional_parameters: Optional[Parameter] = Field(None, alias="additionalParameters")

    @field_validator("http_method")
    @classmethod
    def normalize_http_method(cls, v: str) -> str:
        return v.upper()

    @field_validator("additional_parameters", mode="before")
    @classmethod
    def normalize_additional_parameters(cls, v: Any) -> Any:
        if isinstance(v, bool):
            return None
        return v

    @model_validator(mode="after")
    def name_parameters(self) -> "Operation":
        for name, param in self.parameters.items():
            if not param.name:
                param.name = name
        return self

    def get_params(self) -> List[Parameter]:
        """Parameters in declaration order."""
        return list(self.parameters.values())

    def get_param(self, name: str) -> Optional[Parameter]:
        return self.parameters.get(name)

    def has_param(self, name: str) -> bool:
        return name in self.parameters


class ApiDescription(BaseModel):
    """Parsed service description file."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str = ""
    api_version: Optional[Union[str, int, float]] = Field(None, alias="apiVersion")
    description: str = ""
    base_url: str = Field("", alias="baseUrl")
    operations: Dict[str, Operation] = Field(default_factory=dict)
    models: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def resolve_extends(cls, data: Any) -> Any:
        """Merge every operation on top of the operation it extends."""
        if not isinstance(data, dict) or not isinstance(data.get("operations"), dict):
            return data

        raw_operations = data["operations"]
        resolved: Dict[str, Dict[str, Any]] = {}

        def resolve(name: str, chain: List[str]) -> Dict[str, Any]:
            if name in resolved:
                return resolved[name]
            if name not in raw_operations:
                raise ValueError(f'Operation "{chain[-1]}" extends unknown operation "{name}"')
            if name in chain:
                raise ValueError(f"Circular operation extends: {' -> '.join(chain + [name])}")

            operation = dict(raw_operations[name] or {})
            parent = operation.get("extends")
            if parent:
                operation = deep_merge(resolve(parent, chain + [name]), operation)
            resolved[name] = operation
            return operation

        for operation_name in raw_operations:
            resolve(operation_name, [])

        return {**data, "operations": resolved}

    @model_validator(mode="after")
    def name_operations(self) -> "ApiDescription":
        for name, operation in self.operations.items():
            operation.name = name
        return self

    def get_operation(self, name: str) -> Optional[Operation]:
        return self.operations.get(name)

    def has_operation(self, name: str) -> bool:
        return name in self.operations


class ServiceDescription(BaseModel):
    """A registered service API definition."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique service api identifier")
    title: str = Field(..., description="Human readable service api name")
    api_path: str = Field(..., description="Description path relative to the provider directory")
    source: str = Field(..., description="Absolute path of the description file")
    base_url: Optional[str] = Field(None, description="Service API base url")
    provider: str = Field(..., description="Provider contributing the service api")
    config: Dict[str, Any] = Field(default_factory=dict, description="HTTP client configuration")

    def redacted(self) -> "ServiceDescription":
        """Copy with credentials and header values masked, for display."""
        return self.model_copy(update={"config": redact_config(self.config)})


def _redact_headers(options: Dict[str, Any]) -> None:
    headers = options.get("headers")
    if isinstance(headers, dict):
        options["headers"] = {name: REDACTED for name in headers}


def redact_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """Mask ``auth`` and every header value of an HTTP client configuration.

    Header values set through ``command.params`` request options are
    masked as well. The given mapping is not modified.
    """
    redacted = copy.deepcopy(config)
    if redacted.get("auth") is not None:
        redacted["auth"] = REDACTED
    _redact_headers(redacted)

    command_params = redacted.get("command.params")
    if isinstance(command_params, dict):
        request_options = command_params.get("command.request_options")
        if isinstance(request_options, dict):
            _redact_headers(request_options)
    return redacted
