"""
FastAPI dependencies.
"""

from fastapi import Request

from budget_api.services.budget_service import BudgetService


def get_budget_service(request: Request) -> BudgetService:
    """
    Dependency for the budget service the app was built with.
    """
    return request.app.state.budget_service
