"""FastAPI application."""

from contextlib import asynccontextmanager

import logfire
from dishka import AsyncContainer
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from portal.domain.error import (
    BusinessRuleViolationError,
    DomainError,
    ExpiryNotAllowedError,
    FlowNotFoundError,
    IdentityProviderError,
    IdentityProviderUnavailableError,
    InvalidStateTransitionError,
    NotFoundError,
    ValidationError,
)
from portal.interface.api.dependencies import ErrorResponse
from portal.interface.api.routes import admin, bulk, health, invites, policy
from portal.interface.error import AuthenticationError, ForbiddenError
from portal.util.di.container import create_container, setup_di
from portal.util.error import ConfigurationError
from portal.util.observability import instrument_fastapi


def error_status(exc: Exception) -> int:
    """HTTP status for an application error."""
    # Order matters: subclasses before their bases
    if isinstance(exc, AuthenticationError):
        return status.HTTP_401_UNAUTHORIZED
    if isinstance(exc, ForbiddenError):
        return status.HTTP_403_FORBIDDEN
    if isinstance(exc, (ConfigurationError, FlowNotFoundError)):
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    if isinstance(exc, (ExpiryNotAllowedError, ValidationError)):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, BusinessRuleViolationError):
        return status.HTTP_403_FORBIDDEN
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, InvalidStateTransitionError):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, IdentityProviderUnavailableError):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    if isinstance(exc, IdentityProviderError):
        return status.HTTP_502_BAD_GATEWAY
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def handle_application_error(request: Request, exc: Exception) -> JSONResponse:
    """Render domain, configuration and interface errors as an envelope."""
    status_code = error_status(exc)
    if status_code >= 500:
        logfire.error(
            "Request failed",
            path=request.url.path,
            error=str(exc),
            error_type=type(exc).__name__,
        )
    else:
        logfire.warn(
            "Request rejected",
            path=request.url.path,
            status_code=status_code,
            error=str(exc),
        )
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=str(exc)).model_dump(),
    )


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render malformed request bodies as a 400 envelope."""
    message = ", ".join(
        f"{'.'.join(str(part) for part in error['loc'][1:])}: {error['msg']}"
        for error in exc.errors()
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(error=message or "Invalid request data").model_dump(),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Waits for running bulk jobs, then releases connections
    await app.state.dishka_container.close()


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    """Create FastAPI application.

    Note: Logfire should be configured before calling this function.
    In production, start_app.py handles this.

    Args:
        container: DI container, the production container when omitted
    """
    app_instance = FastAPI(
        title="Invite Portal API",
        description="Self-service authentik invitations with group-based quotas",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Instrument FastAPI for automatic tracing of HTTP requests
    instrument_fastapi(app_instance)

    setup_di(app_instance, container or create_container())

    for error_type in (
        DomainError,
        ConfigurationError,
        AuthenticationError,
        ForbiddenError,
    ):
        app_instance.add_exception_handler(error_type, handle_application_error)
    app_instance.add_exception_handler(
        RequestValidationError, handle_request_validation_error
    )

    # Register routes
    app_instance.include_router(health.router)
    app_instance.include_router(policy.router)
    app_instance.include_router(invites.router)
    app_instance.include_router(bulk.router)
    app_instance.include_router(admin.router)

    return app_instance


# Create app instance for uvicorn
# Note: Logfire must be configured before this module is imported
# In production: start_app.py handles this
app = create_app()
