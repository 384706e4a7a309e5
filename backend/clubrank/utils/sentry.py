import logging
import os

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration

logger = logging.getLogger(__name__)

SERVICE_NAME = "clubrank-api"


def _parse_sample_rate(env_var: str) -> float:
    """Read a sample rate in ``[0, 1]``; anything else disables sampling."""

    raw_value = (os.getenv(env_var) or "").strip()
    if not raw_value:
        return 0.0

    try:
        value = float(raw_value)
    except ValueError:
        logger.warning("%s is not a number (got %r); sampling disabled", env_var, raw_value)
        return 0.0

    if not 0.0 <= value <= 1.0:
        logger.warning("%s must be between 0 and 1 (got %s); sampling disabled", env_var, value)
        return 0.0

    return value


def init_sentry() -> bool:
    """Report errors to Sentry when ``SENTRY_DSN`` is set; return whether it is on."""

    dsn = (os.getenv("SENTRY_DSN") or "").strip()
    if not dsn:
        logger.info("SENTRY_DSN not provided; error reporting disabled")
        return False

    environment = (os.getenv("SENTRY_ENVIRONMENT") or "").strip() or None
    release = (os.getenv("SENTRY_RELEASE") or "").strip() or None
    sentry_sdk.init(
        dsn=dsn,
        integrations=[FastApiIntegration()],
        environment=environment,
        release=release,
        server_name=SERVICE_NAME,
        send_default_pii=False,
        traces_sample_rate=_parse_sample_rate("SENTRY_TRACES_SAMPLE_RATE"),
        profiles_sample_rate=_parse_sample_rate("SENTRY_PROFILES_SAMPLE_RATE"),
    )
    logger.info(
        "Sentry enabled for %s (environment=%s, release=%s)",
        SERVICE_NAME,
        environment or "-",
        release or "-",
    )
    return True
