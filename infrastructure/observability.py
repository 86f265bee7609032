"""
Centralized Observability Infrastructure.
Structured logging setup and Sentry SDK initialization, governed by
environment variables.
"""

import os
import logging
import re
from typing import Any, Dict, Optional

import sentry_sdk

log = logging.getLogger(__name__)

REDACTED = "[REDACTED]"

# Keys whose values never leave the process
SENSITIVE_KEYS = {"token", "password", "authorization", "auth_token", "cookie"}

BEARER_PATTERN = re.compile(r"(Bearer\s+)[A-Za-z0-9_\-\.=]+", re.IGNORECASE)
SENSITIVE_PATTERNS = [
    re.compile(r"(eyJ[A-Za-z0-9_\-]+\.[A-Za-z0-9_\-]+\.[A-Za-z0-9_\-]+)"),  # JWTs
    re.compile(r"([a-zA-Z0-9_\-]{40,})"),  # other long token-looking strings
]


def _mask_string(val: str) -> str:
    val = BEARER_PATTERN.sub(lambda m: m.group(1) + REDACTED, val)
    for pattern in SENSITIVE_PATTERNS:
        val = pattern.sub(REDACTED, val)
    return val


def scrub(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {
            k: REDACTED if isinstance(k, str) and k.lower() in SENSITIVE_KEYS else scrub(v)
            for k, v in obj.items()
        }
    if isinstance(obj, list):
        return [scrub(i) for i in obj]
    if isinstance(obj, str):
        return _mask_string(obj)
    return obj


def _scrub_sensitive_data(event: Dict[str, Any], hint: Dict[str, Any]) -> Dict[str, Any]:
    """Sentry before_send hook: strips tokens and passwords from the event."""
    for exc in event.get("exception", {}).get("values", []):
        for frame in exc.get("stacktrace", {}).get("frames", []):
            if "vars" in frame:
                frame["vars"] = scrub(frame["vars"])
    if "request" in event:
        event["request"] = scrub(event["request"])
    if "breadcrumbs" in event:
        event["breadcrumbs"] = scrub(event["breadcrumbs"])
    return event


def setup_observability() -> None:
    """
    Initializes system logging and Sentry (if DSN is present).
    Called once per server process.
    """
    log_level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    log_level = getattr(logging, log_level_str, logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    sentry_dsn = os.getenv("SENTRY_DSN")
    if sentry_dsn:
        sentry_env = os.getenv("SENTRY_ENV", "development")
        sentry_sdk.init(
            dsn=sentry_dsn,
            environment=sentry_env,
            traces_sample_rate=float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.0")),
            send_default_pii=False,
            before_send=_scrub_sensitive_data
        )
        log.info(f"Sentry SDK initialized (env: {sentry_env})")
    else:
        log.info("SENTRY_DSN not provided. Running without Sentry.")

    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)


def bind_identity(identity: Optional[Any]) -> None:
    """Attach the signed-in identity to Sentry events, or detach it."""
    if identity is None:
        sentry_sdk.set_user(None)
    else:
        sentry_sdk.set_user({"id": identity.id, "role": identity.role})
