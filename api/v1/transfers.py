# api/v1/transfers.py

from fastapi import APIRouter, HTTPException, status

from api.dependencies import CallerDependency, DBDependency, HostDependency
from schemas.transfer import ExecuteTransferIn, ExecutionResponse, SavingsTransferOut, TransferResultOut
from services.errors import (
    ArithmeticOverflow,
    InsufficientFunds,
    MalformedPayload,
    ReentrantRoundUp,
    TransferDispatchError,
)
from services.transfer_pipeline import TransferPipeline

router = APIRouter(
    prefix="/transfers",
    tags=["Outgoing Transfers"]
)


@router.post(
    "/execute",
    response_model=ExecutionResponse,
    summary="Run an outgoing transfer through the round-up interceptor"
)
def execute_transfer(
    request: ExecuteTransferIn,
    db: DBDependency,
    host: HostDependency,
    caller: CallerDependency,
):
    """
    Executes the caller's outgoing action. When the caller's rule applies, the
    savings top-up is moved first; if either transfer fails, neither happens.
    """
    pipeline = TransferPipeline(db, host)
    try:
        result = pipeline.execute(caller, request.payload_bytes())
    except MalformedPayload as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Malformed payload: {exc}")
    except (ArithmeticOverflow, InsufficientFunds, ReentrantRoundUp, TransferDispatchError) as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Transfer aborted, no funds moved: {exc}"
        )

    savings = None
    message = "Payment executed. No round-up applied."
    if result.savings is not None:
        savings = SavingsTransferOut.model_validate(result.savings)
        message = f"Payment executed. {result.savings.savings_amount} rounded up into savings."

    return ExecutionResponse(
        savings=savings,
        primary=TransferResultOut.model_validate(result.primary),
        message=message,
    )
