"""
Account API endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from budget_api.dependencies import get_budget_service
from budget_api.schemas import AccountBalance, ErrorResponse
from budget_api.services.budget_service import BudgetService
from budget_api.validation import require_date_range, validate_cutoff

router = APIRouter(prefix="/accounts", tags=["accounts"])


@router.get("")
async def list_accounts(service: BudgetService = Depends(get_budget_service)):
    """List all accounts."""
    return await service.list_accounts()


@router.get(
    "/{account_id}/balance",
    response_model=AccountBalance,
    responses={400: {"model": ErrorResponse}},
)
async def get_account_balance(
    account_id: str,
    cutoff: Optional[str] = Query(None, description="YYYY-MM-DD, defaults to latest"),
    service: BudgetService = Depends(get_budget_service)
):
    """Account balance in cents as of the cutoff date."""
    cutoff_date = validate_cutoff(cutoff)
    balance = await service.get_account_balance(account_id, cutoff_date)
    return AccountBalance(account_id=account_id, balance=balance)


@router.get("/{account_id}/transactions", responses={400: {"model": ErrorResponse}})
async def list_account_transactions(
    account_id: str,
    start_date: Optional[str] = Query(None, alias="startDate", description="YYYY-MM-DD"),
    end_date: Optional[str] = Query(None, alias="endDate", description="YYYY-MM-DD"),
    service: BudgetService = Depends(get_budget_service)
):
    """Transactions for an account between startDate and endDate, inclusive."""
    start, end = require_date_range(start_date, end_date)
    return await service.list_transactions(account_id, start, end)
