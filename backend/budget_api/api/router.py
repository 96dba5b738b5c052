"""
Main API router.
"""

from fastapi import APIRouter

from budget_api.api import status, budgets, accounts, categories, payees, rules
from budget_api.schemas import InternalErrorResponse

api_router = APIRouter(responses={500: {"model": InternalErrorResponse}})

api_router.include_router(status.router)
api_router.include_router(budgets.router)
api_router.include_router(accounts.router)
api_router.include_router(categories.router)
api_router.include_router(payees.router)
api_router.include_router(rules.router)
