"""
Account schemas.
"""

from pydantic import BaseModel, ConfigDict, Field


class AccountBalance(BaseModel):
    """Balance of one account, in integer cents."""
    model_config = ConfigDict(populate_by_name=True)

    account_id: str = Field(..., alias="accountId")
    balance: int
