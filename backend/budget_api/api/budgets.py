"""
Budget API endpoints.
"""

from fastapi import APIRouter, Depends

from budget_api.dependencies import get_budget_service
from budget_api.schemas import ErrorResponse
from budget_api.services.budget_service import BudgetService
from budget_api.validation import validate_month

router = APIRouter(prefix="/budgets", tags=["budgets"])


@router.get("/list")
async def list_budgets(service: BudgetService = Depends(get_budget_service)):
    """List budget files known to the server."""
    return await service.list_budgets()


@router.get("/months")
async def list_budget_months(service: BudgetService = Depends(get_budget_service)):
    """List every month that has budget data."""
    return await service.list_budget_months()


@router.get("/months/{month}", responses={400: {"model": ErrorResponse}})
async def get_budget_month(
    month: str,
    service: BudgetService = Depends(get_budget_service)
):
    """Budgeted, spent and balance amounts for one month (YYYY-MM)."""
    validate_month(month)
    return await service.get_budget_month(month)
