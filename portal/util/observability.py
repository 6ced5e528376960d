"""Observability configuration using Logfire.

Services emit structured events and spans directly:

    logfire.info("Invite logged", owner_sub=owner_sub, invite_id=invite_id)

    with logfire.span("bulk_invite.run", job_id=str(job_id)):
        ...
"""

import logfire
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine

from portal.config import Settings


def _should_send(settings: Settings) -> bool:
    # Explicit setting wins, otherwise send only when a token is present
    if settings.observability.send_to_logfire is not None:
        return settings.observability.send_to_logfire
    return bool(settings.observability.logfire_token)


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire for the portal process.

    Set ``OBSERVABILITY__LOGFIRE_TOKEN`` to ship telemetry to Logfire
    cloud; without it everything goes to the console only.
    """
    send_to_logfire = _should_send(settings)

    config_kwargs = {
        "service_name": "invite-portal",
        "service_version": settings.git_sha,
        "environment": settings.environment,
        "send_to_logfire": send_to_logfire,
        "console": logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    }
    if settings.observability.logfire_token:
        config_kwargs["token"] = settings.observability.logfire_token

    logfire.configure(**config_kwargs)

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        send_to_logfire=send_to_logfire,
        authentik_url=settings.authentik.api_url,
        email_configured=bool(settings.email.smtp_host),
    )


def _map_request_attributes(request, attributes):
    """Tag request spans with the path and the proxied caller."""
    result = {**attributes, "method": request.method, "path": request.url.path}

    # Set by the authentik proxy outpost; absent on unauthenticated probes
    username = request.headers.get("x-authentik-username")
    if username:
        result["caller"] = username

    if request.client:
        result["client_host"] = request.client.host

    return result


def instrument_fastapi(app: FastAPI) -> None:
    # Headers carry the caller's groups and email, keep them out of spans
    logfire.instrument_fastapi(
        app,
        capture_headers=False,
        request_attributes_mapper=_map_request_attributes,
    )
    logfire.info("FastAPI instrumented")


def instrument_sqlalchemy(engine: AsyncEngine) -> None:
    """Trace ledger and job queries."""
    logfire.instrument_sqlalchemy(engine=engine.sync_engine, enable_commenter=True)
    logfire.info("SQLAlchemy instrumented")


def instrument_httpx() -> None:
    """Trace calls to the authentik API."""
    logfire.instrument_httpx()
    logfire.info("httpx instrumented")
