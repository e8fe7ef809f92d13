"""Logfire setup for linkage.

Services log through logfire directly:

    import logfire

    with logfire.span("credential_linker.link", provider=provider):
        logfire.info("Credential linked", credential_id=str(credential.id))

Token fields of linked credentials are scrubbed from span attributes before
anything leaves the process.
"""

import logfire
from sqlalchemy.ext.asyncio import AsyncEngine

from linkage.config import Settings

SERVICE_NAME = "linkage"
SERVICE_VERSION = "0.1.0"

# Credential blob keys, per auth scheme
TOKEN_FIELD_PATTERNS = [
    "accessToken",
    "refreshToken",
    "tokenSecret",
    "openId",
]


def _send_to_logfire(settings: Settings) -> bool:
    """Explicit OBSERVABILITY__SEND_TO_LOGFIRE wins, else send iff a token is set."""
    observability = settings.observability
    if observability.send_to_logfire is not None:
        return observability.send_to_logfire
    return bool(observability.logfire_token)


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire once per process, before the container is built.

    Args:
        settings: Application settings
    """
    send = _send_to_logfire(settings)

    logfire.configure(
        service_name=SERVICE_NAME,
        service_version=SERVICE_VERSION,
        environment=settings.environment,
        send_to_logfire=send,
        token=settings.observability.logfire_token,
        scrubbing=logfire.ScrubbingOptions(extra_patterns=TOKEN_FIELD_PATTERNS),
        console=logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    )

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        send_to_logfire=send,
    )


def instrument_sqlalchemy(engine: AsyncEngine) -> None:
    """Trace every statement run on ``engine``.

    Async engines are instrumented through their sync core.
    """
    logfire.instrument_sqlalchemy(engine=engine.sync_engine, enable_commenter=True)
