"""
Rule API endpoints.
"""

from fastapi import APIRouter, Depends

from budget_api.dependencies import get_budget_service
from budget_api.services.budget_service import BudgetService

router = APIRouter(prefix="/rules", tags=["rules"])


@router.get("")
async def list_rules(service: BudgetService = Depends(get_budget_service)):
    """List all rules."""
    return await service.list_rules()
