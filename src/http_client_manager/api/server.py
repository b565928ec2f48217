"""FastAPI application setup and routing for the HTTP Client Manager API."""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import Settings, configure_logging
from ..container import Container, build_container
from ..errors import ErrorCategory, HttpClientManagerError, describe_error
from . import health, requests, services
from .models import ErrorResponse

logger = logging.getLogger(__name__)

STATUS_CODES = {
    ErrorCategory.NOT_FOUND: 404,
    ErrorCategory.VALIDATION_ERROR: 422,
    ErrorCategory.CONFIGURATION_ERROR: 500,
    ErrorCategory.REQUEST_ERROR: 502,
}


def create_app(settings: Optional[Settings] = None, container: Optional[Container] = None) -> FastAPI:
    """Create and configure FastAPI application."""
    if container is None:
        container = build_container(settings)
    settings = container.settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        container.close()

    app = FastAPI(
        title="HTTP Client Manager API",
        description="Registry and execution of declarative HTTP service apis",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.container = container

    @app.exception_handler(HttpClientManagerError)
    async def handle_manager_error(request: Request, exc: HttpClientManagerError) -> JSONResponse:
        status_code = STATUS_CODES.get(exc.category, 500)
        if status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc}")
        else:
            logger.info(f"{request.method} {request.url.path} rejected: {exc}")

        described = describe_error(exc)
        body = ErrorResponse(
            error_category=exc.category,
            error_code=f"{exc.category.value}.{type(exc).__name__}",
            user_message=str(exc),
            technical_details=described["technical_details"],
            suggested_actions=described["suggested_actions"],
        )
        return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))

    app.include_router(health.router, prefix="/v1", tags=["health"])
    app.include_router(services.router, prefix="/v1", tags=["services"])
    app.include_router(requests.router, prefix="/v1", tags=["requests"])

    if settings.enable_example_routes:
        from http_client_manager_example.routes import router as example_router

        app.include_router(example_router, tags=["example"])

    return app


def main():
    """Entry point for hcm-api command."""
    import uvicorn

    settings = Settings()
    configure_logging(settings.log_level)

    logger.info(f"Starting HTTP Client Manager API server on {settings.host}:{settings.port}")
    if settings.enable_overriding_service_definitions:
        logger.info("Service api definition overrides enabled")

    try:
        app = create_app(settings)
        uvicorn.run(
            app,
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level.lower(),
        )
    except KeyboardInterrupt:
        logger.info("Server shutdown requested")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Server startup failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
