# schemas/transfer.py

from typing import Optional, Union, Literal

from pydantic import BaseModel, Field

from schemas.common import Address, Uint256


class ExecuteTransferIn(BaseModel):
    """An outgoing action: selector-prefixed execute(address,uint256,bytes) call data."""
    payload: str = Field(..., pattern=r"^0x([0-9a-fA-F]{2})*$", description="Hex-encoded outer call payload.")

    def payload_bytes(self) -> bytes:
        return bytes.fromhex(self.payload[2:])


class TransferResultOut(BaseModel):
    sender: str
    recipient: str
    asset: str
    amount: Uint256
    value: Uint256 = 0

    class Config:
        from_attributes = True


class SavingsTransferOut(BaseModel):
    asset: str
    destination: str
    transfer_amount: Uint256
    round_up_amount: Uint256
    savings_amount: Uint256

    class Config:
        from_attributes = True


class ExecutionResponse(BaseModel):
    savings: Optional[SavingsTransferOut] = Field(None, description="Round-up transfer dispatched before the payment, if any.")
    primary: TransferResultOut
    message: str


class DepositIn(BaseModel):
    owner_id: Address
    asset: Union[Address, Literal["native"]]
    amount: Uint256


class BalanceOut(BaseModel):
    owner_id: str
    asset: str
    balance: Uint256
