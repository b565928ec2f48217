"""Saved request endpoints."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response
from pydantic import ValidationError

from ..container import Container
from ..errors import InvalidParameterError, NotFoundError
from ..saved_requests import SavedRequest, SaveStatus, build_parameters
from .models import CommandResponse, SavedRequestInput, SavedRequestResponse
from .services import get_container

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_response(saved: SavedRequest, status: Optional[str] = None) -> SavedRequestResponse:
    return SavedRequestResponse(**saved.model_dump(), status=status)


def _load_or_404(container: Container, request_id: str) -> SavedRequest:
    saved = container.store.load(request_id)
    if saved is None:
        raise NotFoundError(f'Saved request "{request_id}" does not exist', {"request": request_id})
    return saved


@router.get("/requests", response_model=List[SavedRequestResponse])
def list_requests(
    service_api: Optional[str] = Query(None, description="Filter by service api"),
    container: Container = Depends(get_container),
) -> List[SavedRequestResponse]:
    """List saved requests."""
    return [_to_response(saved) for saved in container.store.load_multiple(service_api)]


@router.get("/requests/{request_id}", response_model=SavedRequestResponse)
def get_request(request_id: str, container: Container = Depends(get_container)) -> SavedRequestResponse:
    """Get a saved request."""
    return _to_response(_load_or_404(container, request_id))


@router.put("/requests/{request_id}", response_model=SavedRequestResponse)
def save_request(
    request_id: str,
    payload: SavedRequestInput,
    response: Response,
    container: Container = Depends(get_container),
) -> SavedRequestResponse:
    """Create or update a saved request.

    The service api and operation must exist; parameter values are
    converted using the declared parameter types.
    """
    operation = container.factory.get_operation(payload.service_api, payload.command_name)
    parameters = payload.parameters
    if payload.coerce:
        parameters = build_parameters(operation, parameters)

    try:
        saved = SavedRequest(
            id=request_id,
            label=payload.label,
            service_api=payload.service_api,
            command_name=payload.command_name,
            parameters=parameters,
        )
    except ValidationError as e:
        error = e.errors()[0]
        field = str(error["loc"][0]) if error["loc"] else "id"
        raise InvalidParameterError(field, f"Invalid saved request {field}: {error['msg']}")

    status = container.store.save(saved)
    response.status_code = 201 if status is SaveStatus.NEW else 200
    return _to_response(saved, status.value)


@router.delete("/requests/{request_id}", status_code=204)
def delete_request(request_id: str, container: Container = Depends(get_container)) -> Response:
    """Delete a saved request."""
    if not container.store.delete(request_id):
        raise NotFoundError(f'Saved request "{request_id}" does not exist', {"request": request_id})
    return Response(status_code=204)


@router.post("/requests/{request_id}/execute", response_model=CommandResponse)
def execute_request(request_id: str, container: Container = Depends(get_container)) -> CommandResponse:
    """Execute a saved request."""
    saved = _load_or_404(container, request_id)
    result = saved.execute()
    return CommandResponse(
        service_api=saved.service_api,
        operation=saved.command_name,
        status_code=result.status_code,
        data=result.data,
    )
