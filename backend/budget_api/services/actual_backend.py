"""
Synchronous adapter over actualpy.

Reads the downloaded budget through the SQLAlchemy session actualpy opens
and returns JSON-ready values shaped like the Actual client API: amounts in
integer cents, dates as YYYY-MM-DD, deleted (tombstoned) rows left out.

Not thread safe. BudgetService runs every call on a single worker thread.
"""

import json
import logging
from contextlib import ExitStack
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

from sqlalchemy import func

from actual import Actual
from actual.database import (
    Accounts,
    Categories,
    CategoryGroups,
    Payees,
    Rules,
    Transactions,
    ZeroBudgets,
)

from budget_api.errors import BudgetLoadError

logger = logging.getLogger(__name__)

PAYEE_RULE_OPS = ("is", "oneOf")


def date_to_int(value: date) -> int:
    """Actual stores dates as YYYYMMDD integers."""
    return value.year * 10000 + value.month * 100 + value.day


def int_to_iso(value: Optional[int]) -> Optional[str]:
    if value is None:
        return None
    return f"{value // 10000:04d}-{value // 100 % 100:02d}-{value % 100:02d}"


def month_bounds(month: str):
    """First day of `month` (YYYY-MM) and first day of the following month."""
    year, m = map(int, month.split("-"))
    start = date(year, m, 1)
    if m == 12:
        end = date(year + 1, 1, 1)
    else:
        end = date(year, m + 1, 1)
    return start, end


def month_range(start: date, end: date) -> List[str]:
    """Every YYYY-MM from start's month to end's month, inclusive."""
    months = []
    year, m = start.year, start.month
    while (year, m) <= (end.year, end.month):
        months.append(f"{year:04d}-{m:02d}")
        m += 1
        if m > 12:
            year, m = year + 1, 1
    return months


def load_json_list(raw: Optional[str]) -> List[Any]:
    if not raw:
        return []
    return json.loads(raw)


def rule_references_payee(conditions: List[Dict[str, Any]], payee_id: str) -> bool:
    """True when a rule has a payee condition pointing at payee_id."""
    for cond in conditions:
        if cond.get("field") != "payee" or cond.get("op") not in PAYEE_RULE_OPS:
            continue
        value = cond.get("value")
        if cond["op"] == "is" and value == payee_id:
            return True
        if cond["op"] == "oneOf" and isinstance(value, list) and payee_id in value:
            return True
    return False


def alive(model):
    return func.coalesce(model.tombstone, 0) == 0


# Serializers

def serialize_account(row) -> Dict[str, Any]:
    return {
        "id": row.id,
        "name": row.name,
        "offbudget": bool(row.offbudget),
        "closed": bool(row.closed),
    }


def serialize_category(row) -> Dict[str, Any]:
    return {
        "id": row.id,
        "name": row.name,
        "is_income": bool(row.is_income),
        "hidden": bool(row.hidden),
        "group_id": row.cat_group,
    }


def serialize_category_group(row, categories: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "id": row.id,
        "name": row.name,
        "is_income": bool(row.is_income),
        "hidden": bool(row.hidden),
        "categories": categories,
    }


def serialize_payee(row) -> Dict[str, Any]:
    return {
        "id": row.id,
        "name": row.name,
        "category": row.category,
        "transfer_acct": row.transfer_acct,
    }


def serialize_rule(row) -> Dict[str, Any]:
    return {
        "id": row.id,
        "stage": row.stage,
        "conditionsOp": row.conditions_op or "and",
        "conditions": load_json_list(row.conditions),
        "actions": load_json_list(row.actions),
    }


def serialize_transaction(row) -> Dict[str, Any]:
    return {
        "id": row.id,
        "is_parent": bool(row.is_parent),
        "is_child": bool(row.is_child),
        "parent_id": row.parent_id,
        "account": row.acct,
        "category": row.category_id,
        "amount": row.amount or 0,
        "payee": row.payee_id,
        "notes": row.notes,
        "date": int_to_iso(row.date),
        "imported_id": row.financial_id,
        "imported_payee": row.imported_description,
        "transfer_id": row.transferred_id,
        "cleared": bool(row.cleared),
        "reconciled": bool(row.reconciled),
    }


def nest_subtransactions(rows) -> List[Dict[str, Any]]:
    """Top-level transactions with split children under `subtransactions`."""
    children: Dict[str, List[Dict[str, Any]]] = {}
    top = []
    for row in rows:
        txn = serialize_transaction(row)
        if txn["is_child"] and txn["parent_id"]:
            children.setdefault(txn["parent_id"], []).append(txn)
        else:
            top.append(txn)
    for txn in top:
        if txn["is_parent"]:
            txn["subtransactions"] = children.get(txn["id"], [])
    return top


class ActualBackend:
    """Budget queries against one Actual server and one budget file."""

    def __init__(
        self,
        server_url: str,
        password: Optional[str] = None,
        data_dir: Optional[Path] = None,
    ):
        self.server_url = server_url
        self.password = password
        self.data_dir = data_dir
        self._actual: Optional[Actual] = None
        self._stack = ExitStack()
        self._session = None
        self._file_id: Optional[str] = None

    @property
    def session(self):
        if self._session is None:
            raise RuntimeError("No budget loaded")
        return self._session

    def connect(self) -> None:
        """
        Open an authenticated connection to the server.

        actualpy only creates a budget session inside its context manager, so
        the context is entered here and left in close().
        """
        self._actual = self._stack.enter_context(Actual(
            base_url=self.server_url,
            password=self.password,
            data_dir=self.data_dir,
        ))

    def load_budget(self, sync_id: str, encryption_password: Optional[str] = None) -> None:
        """Download the budget identified by sync_id and open it."""
        if self._actual is None:
            raise RuntimeError("Not connected")

        files = self._actual.list_user_files().data
        remote = next(
            (
                f for f in files
                if not f.deleted and sync_id in (f.group_id, f.file_id, f.name)
            ),
            None,
        )
        if remote is None:
            raise BudgetLoadError(f"No budget with sync id {sync_id} on the server")

        logger.info(f"Downloading budget '{remote.name}' (file {remote.file_id})")
        self._actual.set_file(remote.file_id)
        self._actual.download_budget(encryption_password)
        self._session = self._actual.session
        self._file_id = remote.file_id

    def close(self) -> None:
        """Leave the actualpy context: closes the session, engine and HTTP client."""
        self._session = None
        self._stack.close()

    # Budgets

    def list_budgets(self) -> List[Dict[str, Any]]:
        files = self._actual.list_user_files().data
        return [
            {
                "name": f.name,
                "cloudFileId": f.file_id,
                "groupId": f.group_id,
                "encryptKeyId": f.encrypt_key_id,
                "state": "synced" if f.file_id == self._file_id else "remote",
            }
            for f in files
            if not f.deleted
        ]

    def list_budget_months(self) -> List[str]:
        first = self.session.query(func.min(Transactions.date)).filter(
            alive(Transactions)
        ).scalar()
        today = date.today()
        if first is None:
            return month_range(today, today)
        start = date(first // 10000, first // 100 % 100, 1)
        return month_range(min(start, today), today)

    def get_budget_month(self, month: str) -> Dict[str, Any]:
        s = self.session
        start, end = month_bounds(month)
        month_int = start.year * 100 + start.month

        budgeted = dict(
            s.query(ZeroBudgets.category_id, ZeroBudgets.amount)
            .filter(ZeroBudgets.month == month_int)
            .all()
        )
        on_budget = s.query(Accounts.id).filter(
            alive(Accounts), func.coalesce(Accounts.offbudget, 0) == 0
        )
        spent = dict(
            s.query(Transactions.category_id, func.sum(Transactions.amount))
            .filter(
                alive(Transactions),
                func.coalesce(Transactions.is_parent, 0) == 0,
                Transactions.category_id.isnot(None),
                Transactions.acct.in_(on_budget),
                Transactions.date >= date_to_int(start),
                Transactions.date < date_to_int(end),
            )
            .group_by(Transactions.category_id)
            .all()
        )

        categories_by_group: Dict[str, List[Dict[str, Any]]] = {}
        for cat in s.query(Categories).filter(alive(Categories)).order_by(Categories.sort_order).all():
            entry = serialize_category(cat)
            entry["budgeted"] = int(budgeted.get(cat.id) or 0)
            entry["spent"] = int(spent.get(cat.id) or 0)
            entry["balance"] = entry["budgeted"] + entry["spent"]
            categories_by_group.setdefault(cat.cat_group, []).append(entry)

        groups = []
        total_budgeted = total_spent = total_income = 0
        for group in s.query(CategoryGroups).filter(alive(CategoryGroups)).order_by(CategoryGroups.sort_order).all():
            cats = categories_by_group.get(group.id, [])
            entry = serialize_category_group(group, cats)
            entry["budgeted"] = sum(c["budgeted"] for c in cats)
            entry["spent"] = sum(c["spent"] for c in cats)
            entry["balance"] = sum(c["balance"] for c in cats)
            if group.is_income:
                total_income += entry["spent"]
            else:
                total_budgeted += entry["budgeted"]
                total_spent += entry["spent"]
            groups.append(entry)

        return {
            "month": month,
            "totalBudgeted": total_budgeted,
            "totalSpent": total_spent,
            "totalIncome": total_income,
            "categoryGroups": groups,
        }

    # Accounts

    def list_accounts(self) -> List[Dict[str, Any]]:
        rows = self.session.query(Accounts).filter(alive(Accounts)).order_by(Accounts.sort_order).all()
        return [serialize_account(r) for r in rows]

    def get_account_balance(self, account_id: str, cutoff: Optional[date] = None) -> int:
        query = self.session.query(func.coalesce(func.sum(Transactions.amount), 0)).filter(
            alive(Transactions),
            func.coalesce(Transactions.is_parent, 0) == 0,
            Transactions.acct == account_id,
        )
        if cutoff is not None:
            query = query.filter(Transactions.date <= date_to_int(cutoff))
        return int(query.scalar())

    def list_transactions(self, account_id: str, start_date: date, end_date: date) -> List[Dict[str, Any]]:
        rows = (
            self.session.query(Transactions)
            .filter(
                alive(Transactions),
                Transactions.acct == account_id,
                Transactions.date >= date_to_int(start_date),
                Transactions.date <= date_to_int(end_date),
            )
            .order_by(Transactions.date.desc(), Transactions.sort_order.desc())
            .all()
        )
        return nest_subtransactions(rows)

    # Categories

    def list_categories(self) -> List[Dict[str, Any]]:
        rows = self.session.query(Categories).filter(alive(Categories)).order_by(Categories.sort_order).all()
        return [serialize_category(r) for r in rows]

    def list_category_groups(self) -> List[Dict[str, Any]]:
        categories = self.list_categories()
        groups = self.session.query(CategoryGroups).filter(alive(CategoryGroups)).order_by(CategoryGroups.sort_order).all()
        return [
            serialize_category_group(g, [c for c in categories if c["group_id"] == g.id])
            for g in groups
        ]

    # Payees and rules

    def list_payees(self) -> List[Dict[str, Any]]:
        rows = self.session.query(Payees).filter(alive(Payees)).order_by(Payees.name).all()
        return [serialize_payee(r) for r in rows]

    def list_rules(self) -> List[Dict[str, Any]]:
        rows = self.session.query(Rules).filter(alive(Rules)).all()
        return [serialize_rule(r) for r in rows]

    def list_payee_rules(self, payee_id: str) -> List[Dict[str, Any]]:
        return [r for r in self.list_rules() if rule_references_payee(r["conditions"], payee_id)]
