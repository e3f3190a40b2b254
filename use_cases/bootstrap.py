"""Startup orchestration for application bootstrap."""

from dataclasses import dataclass
from typing import Literal, Tuple

import logging
import sqlite3

import auth
from utils import session_manager

log = logging.getLogger(__name__)

StartupStatus = Literal["CONTINUE", "STOP"]


@dataclass(frozen=True)
class StartupResult:
    """Result contract for startup/bootstrap orchestration."""

    status: StartupStatus
    planned_steps: Tuple[str, ...]
    message: str = ""


def run_startup() -> StartupResult:
    """Prepare local storage and session-state defaults before the auth gate runs."""
    executed_steps = []

    try:
        auth.init_storage()
    except (RuntimeError, sqlite3.Error) as e:
        log.error(f"❌ Local storage init failed: {e}", exc_info=True)
        return StartupResult(status="STOP", planned_steps=tuple(executed_steps), message=str(e))
    executed_steps.append("init_storage")

    session_manager.init_session_state()
    executed_steps.append("init_session_state")

    return StartupResult(status="CONTINUE", planned_steps=tuple(executed_steps))
