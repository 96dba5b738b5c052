from budget_api.schemas.status import StatusResponse
from budget_api.schemas.account import AccountBalance
from budget_api.schemas.error import ErrorResponse, InternalErrorResponse

__all__ = [
    "StatusResponse",
    "AccountBalance",
    "ErrorResponse",
    "InternalErrorResponse",
]
