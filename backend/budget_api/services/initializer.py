"""
Startup sequence: validate settings, prepare the data directory, connect to
the Actual server and load the budget.

Never exits the process. The caller inspects the returned InitResult.
"""

import enum
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from budget_api.config import Settings
from budget_api.errors import (
    BudgetApiError,
    BudgetLoadError,
    ConfigurationError,
    ServerConnectionError,
)
from budget_api.services.actual_backend import ActualBackend
from budget_api.services.budget_service import BudgetService

logger = logging.getLogger(__name__)


class InitState(str, enum.Enum):
    UNCONFIGURED = "unconfigured"
    VALIDATED = "validated"
    CONNECTED = "connected"
    BUDGET_LOADED = "budget_loaded"
    READY = "ready"
    FATAL = "fatal"


@dataclass
class InitResult:
    """Outcome of initialize(). `service` is set only when state is READY."""

    state: InitState
    service: Optional[BudgetService] = None
    error: Optional[BudgetApiError] = None
    failed_at: Optional[InitState] = None

    @property
    def ok(self) -> bool:
        return self.state == InitState.READY


def ensure_data_dir(path) -> Path:
    """Create the data directory and any missing parents."""
    data_dir = Path(path)
    if data_dir.is_dir():
        logger.info(f"Data directory already exists: {data_dir}")
    else:
        logger.info(f"Creating data directory: {data_dir}")
        data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def _log_settings(settings: Settings) -> None:
    logger.info(f"Using Actual server URL: {settings.actual_server_url}")
    logger.info(f"Using budget sync ID: {settings.actual_budget_sync_id}")
    logger.info(f"Server password: {'set' if settings.actual_server_password else 'not set'}")
    logger.info(f"Budget file password: {'set' if settings.actual_budget_password else 'not set'}")
    logger.info(f"Using data directory: {settings.data_dir}")
    logger.info(f"Wrapper will listen on {settings.wrapper_host}:{settings.wrapper_port}")


def initialize(
    settings: Settings,
    backend_factory: Callable[..., object] = ActualBackend,
) -> InitResult:
    """Run the startup sequence once and report where it ended."""
    state = InitState.UNCONFIGURED

    def fail(error: BudgetApiError) -> InitResult:
        logger.error(f"FATAL: {error.message}", extra={"state": state.value})
        return InitResult(state=InitState.FATAL, error=error, failed_at=state)

    missing = settings.missing_required()
    if missing:
        return fail(ConfigurationError(
            f"Required environment variable(s) not set: {', '.join(missing)}"
        ))
    _log_settings(settings)
    state = InitState.VALIDATED

    try:
        data_dir = ensure_data_dir(settings.data_dir)
    except OSError as e:
        return fail(ConfigurationError(f"Cannot create data directory {settings.data_dir}: {e}"))

    backend = backend_factory(
        server_url=settings.actual_server_url,
        password=settings.actual_server_password,
        data_dir=data_dir,
    )
    service = BudgetService(backend, timeout=settings.timeout)

    logger.info("Initializing Actual API connection...")
    try:
        service.run("connect")
    except Exception as e:
        logger.debug("Connection failure detail", exc_info=True)
        _discard(service)
        return fail(ServerConnectionError(f"Could not connect to {settings.actual_server_url}: {e}"))
    state = InitState.CONNECTED
    logger.info("Actual API initialized")

    logger.info(f"Loading budget {settings.actual_budget_sync_id}...")
    try:
        service.run("load_budget", settings.actual_budget_sync_id, settings.actual_budget_password)
    except Exception as e:
        logger.debug("Budget load failure detail", exc_info=True)
        _discard(service)
        if isinstance(e, BudgetLoadError):
            return fail(e)
        return fail(BudgetLoadError(f"Could not load budget {settings.actual_budget_sync_id}: {e}"))
    state = InitState.BUDGET_LOADED
    logger.info(f"Budget {settings.actual_budget_sync_id} loaded")

    state = InitState.READY
    return InitResult(state=state, service=service)


def _discard(service: BudgetService) -> None:
    """Release a half-initialized service; the original failure wins."""
    try:
        service.release()
    except BudgetApiError as e:
        logger.warning(f"Ignoring release failure after startup error: {e.message}")
