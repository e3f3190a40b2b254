"""
Centralized Observability Infrastructure.
Provides logging setup and Sentry SDK initialization governed by
environment variables. Bearer tokens and admin credentials never leave
the process: they are masked both in Sentry events and in log records.
"""

import os
import logging
import re
from typing import Any, Dict

import sentry_sdk

log = logging.getLogger(__name__)

REDACTED = "[REDACTED]"

# Keys whose values are always masked, whatever they look like
SENSITIVE_KEYS = {"password", "credential", "access_token", "accesstoken", "token", "authorization", "secret"}

SENSITIVE_PATTERNS = [
    re.compile(r"(Bearer\s+)[A-Za-z0-9_\-\.=]+", re.IGNORECASE),
    re.compile(r"(eyJ)[A-Za-z0-9_\-]+\.[A-Za-z0-9_\-]+\.[A-Za-z0-9_\-]*"),  # JWT
]


def mask_string(val: str) -> str:
    for pattern in SENSITIVE_PATTERNS:
        val = pattern.sub(lambda m: m.group(1) + REDACTED if m.group(1).lower().startswith("bearer") else REDACTED, val)
    return val


def scrub(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {
            k: (REDACTED if str(k).lower() in SENSITIVE_KEYS and v else scrub(v))
            for k, v in obj.items()
        }
    if isinstance(obj, (list, tuple)):
        return [scrub(i) for i in obj]
    if isinstance(obj, str):
        return mask_string(obj)
    return obj


def _scrub_sensitive_data(event: Dict[str, Any], hint: Dict[str, Any]) -> Dict[str, Any]:
    """
    Sentry before_send hook. Scrubs tokens and passwords from stack frame
    locals, request data and breadcrumbs before the event is sent.
    """
    for exc in event.get("exception", {}).get("values", []) or []:
        for frame in (exc.get("stacktrace") or {}).get("frames", []) or []:
            if "vars" in frame:
                frame["vars"] = scrub(frame["vars"])

    if "request" in event:
        event["request"] = scrub(event["request"])

    breadcrumbs = event.get("breadcrumbs")
    if isinstance(breadcrumbs, dict) and "values" in breadcrumbs:
        breadcrumbs["values"] = scrub(breadcrumbs["values"])

    if "extra" in event:
        event["extra"] = scrub(event["extra"])

    return event


class RedactingFilter(logging.Filter):
    """Masks bearer tokens that slip into formatted log messages."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = mask_string(record.msg)
        if record.args:
            record.args = tuple(mask_string(a) if isinstance(a, str) else a for a in record.args)
        return True


def setup_observability() -> None:
    """
    Initializes global system logging and Sentry (if DSN is present).
    Should be called once at application startup.
    """

    log_level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    log_level = getattr(logging, log_level_str, logging.INFO)

    # [2026-02-27 15:00:00] INFO - module.name: The message
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, RedactingFilter) for f in handler.filters):
            handler.addFilter(RedactingFilter())

    sentry_dsn = os.getenv("SENTRY_DSN")
    if sentry_dsn:
        sentry_env = os.getenv("SENTRY_ENV", "development")
        sentry_sdk.init(
            dsn=sentry_dsn,
            environment=sentry_env,
            traces_sample_rate=float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "1.0")),
            send_default_pii=False,
            before_send=_scrub_sensitive_data
        )
        log.info(f"Sentry SDK initialized (env: {sentry_env})")
    else:
        log.info("SENTRY_DSN not provided. Running without Sentry.")

    # Quiet down noisy third-party loggers
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)
    logging.getLogger("streamlit").setLevel(logging.WARNING)


def tag_admin(identity: str) -> None:
    """Attach the signed-in admin to subsequent Sentry events."""
    if sentry_sdk.get_client().is_active():
        sentry_sdk.set_user({"id": identity})
