"""
Payee API endpoints.
"""

from fastapi import APIRouter, Depends

from budget_api.dependencies import get_budget_service
from budget_api.services.budget_service import BudgetService

router = APIRouter(prefix="/payees", tags=["payees"])


@router.get("")
async def list_payees(service: BudgetService = Depends(get_budget_service)):
    """List all payees."""
    return await service.list_payees()


@router.get("/{payee_id}/rules")
async def list_payee_rules(
    payee_id: str,
    service: BudgetService = Depends(get_budget_service)
):
    """List rules whose conditions match this payee."""
    return await service.list_payee_rules(payee_id)
