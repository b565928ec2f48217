"""Command dispatch: parameter validation, request serialization and execution."""

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Iterator, Mapping, Optional
from urllib.parse import quote

import httpx

from .errors import InvalidParameterError, RequestFailedError
from .models import Operation, Parameter, ParameterLocation

if TYPE_CHECKING:
    from .factory import HttpClientFactory

logger = logging.getLogger(__name__)

QUERY_METHODS = {"GET", "HEAD", "DELETE", "OPTIONS"}

_URI_VARIABLE = re.compile(r"\{\+?(\w+)\}")


@dataclass
class CommandResult:
    """Result of a successful command execution.

    Mapping style access (``result["id"]``, ``"id" in result``, iteration,
    ``len``) delegates to the decoded response body.
    """

    status_code: int
    data: Any = None
    headers: Dict[str, str] = field(default_factory=dict)

    def __getitem__(self, key: Any) -> Any:
        if self.data is None:
            raise KeyError(key)
        return self.data[key]

    def __contains__(self, key: Any) -> bool:
        return self.data is not None and key in self.data

    def __iter__(self) -> Iterator[Any]:
        if isinstance(self.data, (dict, list)):
            return iter(self.data)
        return iter(())

    def __len__(self) -> int:
        if isinstance(self.data, (dict, list)):
            return len(self.data)
        return 0

    def get(self, key: str, default: Any = None) -> Any:
        if isinstance(self.data, dict):
            return self.data.get(key, default)
        return default

    def to_dict(self) -> Dict[str, Any]:
        return {"status_code": self.status_code, "headers": self.headers, "data": self.data}


def _is_empty(value: Any) -> bool:
    return value is None or value == ""


def validate_parameters(operation: Operation, parameters: Mapping[str, Any]) -> Dict[str, Any]:
    """Apply declared defaults and check required parameters.

    Undeclared parameters are passed through untouched.

    Raises:
        InvalidParameterError: If a required parameter has no value
    """
    values = dict(parameters)

    for param in operation.get_params():
        value = values.get(param.name)
        if not _is_empty(value):
            continue
        if param.default is not None:
            values[param.name] = param.default
        elif param.required:
            raise InvalidParameterError(param.name, operation=operation.name)

    return values


def default_location(operation: Operation) -> ParameterLocation:
    """Location of parameters that do not declare one."""
    if operation.http_method in QUERY_METHODS:
        return ParameterLocation.QUERY
    return ParameterLocation.JSON


def _resolve_parameter(operation: Operation, name: str) -> tuple:
    param: Optional[Parameter] = operation.get_param(name)
    if param is not None:
        return param.wire_name, param.location or default_location(operation)

    additional = operation.additional_parameters
    if additional is not None and additional.location is not None:
        return name, additional.location
    return name, default_location(operation)


def expand_uri(template: str, variables: Mapping[str, Any]) -> str:
    """Expand ``{name}`` variables of a uri template with quoted values."""

    def replace(match: "re.Match[str]") -> str:
        value = variables.get(match.group(1))
        if value is None:
            return ""
        reserved = match.group(0).startswith("{+")
        return quote(str(value), safe="/" if reserved else "")

    return _URI_VARIABLE.sub(replace, template)


def build_request(
    http: httpx.Client,
    operation: Operation,
    values: Mapping[str, Any],
    request_options: Optional[Mapping[str, Any]] = None,
) -> httpx.Request:
    """Serialize a validated command into an ``httpx.Request``."""
    uri_values: Dict[str, Any] = {}
    query: Dict[str, Any] = {}
    headers: Dict[str, str] = {}
    json_body: Dict[str, Any] = {}
    form: Dict[str, Any] = {}
    content: Any = None

    for name, value in values.items():
        if value is None:
            continue
        wire_name, location = _resolve_parameter(operation, name)

        if location == ParameterLocation.URI:
            uri_values[wire_name] = value
        elif location == ParameterLocation.QUERY:
            query[wire_name] = value
        elif location == ParameterLocation.HEADER:
            headers[wire_name] = str(value)
        elif location == ParameterLocation.FORM_PARAM:
            form[wire_name] = value
        elif location == ParameterLocation.BODY:
            content = value
        else:
            json_body[wire_name] = value

    options = dict(request_options or {})
    headers = {**(options.get("headers") or {}), **headers}

    kwargs: Dict[str, Any] = {
        "params": query or None,
        "headers": headers or None,
    }
    if "timeout" in options:
        kwargs["timeout"] = options["timeout"]

    if content is not None:
        if isinstance(content, (dict, list)):
            kwargs["json"] = content
        else:
            kwargs["content"] = content
    elif json_body:
        kwargs["json"] = json_body
    elif form:
        kwargs["data"] = form

    url = expand_uri(operation.uri, uri_values)
    return http.build_request(operation.http_method, url, **kwargs)


def _decode(response: httpx.Response) -> Any:
    if not response.content:
        return None
    if "json" in response.headers.get("content-type", ""):
        try:
            return response.json()
        except ValueError:
            logger.warning(f"Invalid JSON response from {response.request.url}")
    return response.text


def send_request(http: httpx.Client, request: httpx.Request, http_errors: bool = True) -> CommandResult:
    """Send a request and wrap transport failures and error responses.

    Raises:
        RequestFailedError: On transport failure, or on a 4xx/5xx response
            when ``http_errors`` is enabled
    """
    try:
        response = http.send(request)
    except httpx.HTTPError as exc:
        logger.warning(f"{request.method} {request.url} failed: {exc}")
        raise RequestFailedError(f"{request.method} {request.url} failed: {exc}", cause=exc) from exc

    if http_errors and response.is_error:
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning(f"{request.method} {request.url} returned {response.status_code}")
            raise RequestFailedError(
                f"{request.method} {request.url} returned {response.status_code} {response.reason_phrase}",
                cause=exc,
                status_code=response.status_code,
                body=response.text,
            ) from exc

    return CommandResult(
        status_code=response.status_code,
        data=_decode(response),
        headers=dict(response.headers),
    )


def execute_command(
    http: httpx.Client,
    operation: Operation,
    parameters: Mapping[str, Any],
    http_errors: bool = True,
    request_options: Optional[Mapping[str, Any]] = None,
) -> CommandResult:
    """Validate, serialize and send one command."""
    values = validate_parameters(operation, parameters)
    request = build_request(http, operation, values, request_options)
    logger.debug(f"Executing {operation.name}: {request.method} {request.url}")
    return send_request(http, request, http_errors=http_errors)


class CommandDispatcher:
    """Executes named operations of registered service apis."""

    def __init__(self, factory: "HttpClientFactory"):
        self.factory = factory

    def execute(
        self,
        service_id: str,
        operation_name: str,
        parameters: Optional[Mapping[str, Any]] = None,
    ) -> CommandResult:
        """Execute ``operation_name`` of ``service_id``.

        Raises:
            UnknownServiceError: If the service api is not registered
            UnknownOperationError: If the operation is not declared
            InvalidParameterError: If a required parameter is missing
            RequestFailedError: If the request fails
        """
        client = self.factory.get(service_id)
        return client.call(operation_name, parameters or {})
