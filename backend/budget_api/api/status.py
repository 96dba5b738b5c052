"""
Status endpoint.
"""

from fastapi import APIRouter

from budget_api.schemas import StatusResponse

router = APIRouter(tags=["status"])


@router.get("/status", response_model=StatusResponse)
async def get_status():
    """Readiness check. Never touches the budget."""
    return StatusResponse(status="ok", message="Actual API Wrapper is running")
