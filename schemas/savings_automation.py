# schemas/savings_automation.py

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from schemas.common import Address, Uint256


class SavingsAutomationSet(BaseModel):
    """Input for writing one round-up rule slot. The slot is replaced wholesale."""

    savings_destination: Address = Field(..., description="Account that receives the rounding difference.")
    round_up_increment: Uint256 = Field(
        ...,
        description="Rounding unit in the asset's smallest denomination (1000000 = 1.00 at 6 decimals). 0 disables rounding.",
    )


class SavingsAutomationOut(BaseModel):
    owner_id: str
    automation_index: int
    savings_destination: str
    round_up_increment: Uint256
    enabled: bool
    is_active: bool = Field(..., description="enabled and round_up_increment > 0.")
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
