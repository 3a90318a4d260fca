# api/v1/ledger.py

from fastapi import APIRouter, HTTPException, Path, status

from api.dependencies import HostDependency
from schemas.transfer import BalanceOut, DepositIn
from services.errors import ArithmeticOverflow

router = APIRouter(
    prefix="/ledger",
    tags=["Reference Ledger"]
)


@router.post(
    "/deposits",
    response_model=BalanceOut,
    status_code=status.HTTP_201_CREATED,
    summary="Credit an account on the reference ledger"
)
def deposit(deposit_data: DepositIn, host: HostDependency):
    try:
        host.credit(deposit_data.owner_id, deposit_data.asset, deposit_data.amount)
    except ArithmeticOverflow as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Deposit rejected, no funds credited: {exc}"
        )
    return BalanceOut(
        owner_id=deposit_data.owner_id.lower(),
        asset=deposit_data.asset.lower(),
        balance=host.balance_of(deposit_data.owner_id, deposit_data.asset),
    )


@router.get(
    "/balances/{owner_id}/{asset}",
    response_model=BalanceOut,
    summary="Balance of one asset held by an account"
)
def get_balance(
    host: HostDependency,
    owner_id: str = Path(..., pattern=r"^0x[0-9a-fA-F]{40}$"),
    asset: str = Path(..., pattern=r"^(0x[0-9a-fA-F]{40}|native)$"),
):
    return BalanceOut(owner_id=owner_id.lower(), asset=asset.lower(), balance=host.balance_of(owner_id, asset))
