"""Startup orchestration: session state setup and credential bootstrap."""

from dataclasses import dataclass
from typing import Literal, Tuple

from utils import session_manager

StartupStatus = Literal["CONTINUE", "STOP"]


@dataclass(frozen=True)
class StartupResult:
    """Result contract for startup/bootstrap orchestration."""

    status: StartupStatus
    planned_steps: Tuple[str, ...]


def run_startup() -> StartupResult:
    """Prepare session state and resolve persisted credentials once per session."""
    executed_steps = []

    session_manager.init_session_state()
    executed_steps.append("init_session_state")

    store = session_manager.get_store()
    if store.is_resolving:
        session_manager.bootstrap_session()
        executed_steps.append("bootstrap_session")

    return StartupResult(status="CONTINUE", planned_steps=tuple(executed_steps))
