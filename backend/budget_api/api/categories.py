"""
Category API endpoints.
"""

from fastapi import APIRouter, Depends

from budget_api.dependencies import get_budget_service
from budget_api.services.budget_service import BudgetService

router = APIRouter(tags=["categories"])


@router.get("/categories")
async def list_categories(service: BudgetService = Depends(get_budget_service)):
    """List all categories."""
    return await service.list_categories()


@router.get("/category-groups")
async def list_category_groups(service: BudgetService = Depends(get_budget_service)):
    """List category groups with their categories."""
    return await service.list_category_groups()
