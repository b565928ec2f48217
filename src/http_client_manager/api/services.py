"""Service api discovery and operation execution endpoints."""

import logging
from typing import Dict, List

from fastapi import APIRouter, Depends, Request

from ..container import Container
from ..models import Operation, ServiceDescription
from .models import CommandResponse, ExecuteRequest, ServiceSummary

logger = logging.getLogger(__name__)

router = APIRouter()


def get_container(request: Request) -> Container:
    return request.app.state.container


@router.get("/services", response_model=List[ServiceSummary])
def list_services(container: Container = Depends(get_container)) -> List[ServiceSummary]:
    """List all registered service apis."""
    return [
        ServiceSummary(
            id=service.id, title=service.title, provider=service.provider, base_url=service.base_url
        )
        for service in container.registry.discover().values()
    ]


@router.get("/services/{service_api}", response_model=ServiceDescription)
def get_service(service_api: str, container: Container = Depends(get_container)) -> ServiceDescription:
    """Get a service api definition with credentials masked."""
    return container.registry.get(service_api).redacted()


@router.get("/services/{service_api}/operations", response_model=Dict[str, Operation])
def list_operations(
    service_api: str, container: Container = Depends(get_container)
) -> Dict[str, Operation]:
    """List the operations declared by a service api description."""
    return container.factory.get_operations(service_api)


@router.get("/services/{service_api}/operations/{operation}", response_model=Operation)
def get_operation(
    service_api: str, operation: str, container: Container = Depends(get_container)
) -> Operation:
    """Get one operation with its parameters."""
    return container.factory.get_operation(service_api, operation)


@router.post("/services/{service_api}/operations/{operation}", response_model=CommandResponse)
def execute_operation(
    service_api: str,
    operation: str,
    payload: ExecuteRequest,
    container: Container = Depends(get_container),
) -> CommandResponse:
    """Execute an operation with the given parameters."""
    result = container.dispatcher.execute(service_api, operation, payload.params)
    return CommandResponse(
        service_api=service_api,
        operation=operation,
        status_code=result.status_code,
        data=result.data,
    )
