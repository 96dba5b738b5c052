"""
Budget service: the single connection handle shared by all request handlers.

All backend work, startup and shutdown included, runs on one worker thread
because the budget's SQLite session must not cross threads.
"""

import asyncio
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from datetime import date
from typing import Any, Optional

from budget_api.errors import DelegateError, DelegateTimeoutError, ShutdownError

logger = logging.getLogger(__name__)


class BudgetService:
    """Async facade over a synchronous budget backend."""

    def __init__(self, backend, timeout: Optional[float] = None):
        self.backend = backend
        self.timeout = timeout
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="budget-client")
        self._release_lock = threading.Lock()
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def run(self, name: str, *args) -> Any:
        """Call a backend method on the worker thread and wait for it."""
        return self._executor.submit(getattr(self.backend, name), *args).result()

    async def call(self, name: str, *args) -> Any:
        """Call a backend method, mapping every failure to DelegateError."""
        logger.info(f"Budget query {name}({', '.join(str(a) for a in args)})")
        loop = asyncio.get_running_loop()
        future = loop.run_in_executor(self._executor, getattr(self.backend, name), *args)
        try:
            return await asyncio.wait_for(future, timeout=self.timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"Budget query {name} timed out after {self.timeout}s")
            raise DelegateTimeoutError(f"Budget query '{name}' timed out", query=name) from e
        except Exception as e:
            logger.error(f"Budget query {name} failed: {e}", exc_info=True)
            raise DelegateError(f"Budget query '{name}' failed", query=name) from e

    # Queries

    async def list_budgets(self):
        return await self.call("list_budgets")

    async def list_budget_months(self):
        return await self.call("list_budget_months")

    async def get_budget_month(self, month: str):
        return await self.call("get_budget_month", month)

    async def list_accounts(self):
        return await self.call("list_accounts")

    async def get_account_balance(self, account_id: str, cutoff: Optional[date] = None) -> int:
        return await self.call("get_account_balance", account_id, cutoff)

    async def list_transactions(self, account_id: str, start_date: date, end_date: date):
        return await self.call("list_transactions", account_id, start_date, end_date)

    async def list_categories(self):
        return await self.call("list_categories")

    async def list_category_groups(self):
        return await self.call("list_category_groups")

    async def list_payees(self):
        return await self.call("list_payees")

    async def list_rules(self):
        return await self.call("list_rules")

    async def list_payee_rules(self, payee_id: str):
        return await self.call("list_payee_rules", payee_id)

    # Lifecycle

    def release(self) -> bool:
        """
        Close the backend and stop the worker thread.

        Only the first call does anything; it returns True. Later calls return
        False. Raises ShutdownError if the backend fails to close.

        The close runs on the worker thread, behind any query still holding it
        (one that already timed out keeps running). The wait for the close is
        bounded by the query timeout; when it expires the close is abandoned
        and ShutdownError is raised. With no timeout the wait is unbounded.
        """
        with self._release_lock:
            if self._released:
                return False
            self._released = True

        logger.info("Releasing budget connection")
        future = self._executor.submit(self.backend.close)
        try:
            future.result(timeout=self.timeout)
        except FutureTimeoutError as e:
            raise ShutdownError(
                f"Timed out after {self.timeout}s waiting to release budget connection"
            ) from e
        except Exception as e:
            raise ShutdownError(f"Failed to release budget connection: {e}") from e
        finally:
            self._executor.shutdown(wait=False, cancel_futures=True)
        logger.info("Budget connection released")
        return True
