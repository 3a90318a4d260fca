# services/transfer_pipeline.py

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from db.enums import TransferKind
from services.automation_registry import AutomationRegistry
from services.errors import MalformedPayload
from services.ledger_service import LedgerHost
from services.round_up_interceptor import RoundUpInterceptor, SavingsTransfer
from services.host_capabilities import RuleAction, TransferResult
from utils.abi_codec import EXECUTE_SELECTOR, decode_execute_call, normalize_address

logger = logging.getLogger(__name__)


class SavingsDispatcher:
    """Host view handed to the interceptor: its transfers are logged as round-ups."""

    def __init__(self, host: LedgerHost):
        self.host = host

    def authorize(self, identity: str, action: RuleAction) -> bool:
        return self.host.authorize(identity, action)

    def execute_as_owner(self, identity: str, target: str, value: int, payload: bytes) -> TransferResult:
        return self.host.execute_as_owner(identity, target, value, payload, kind=TransferKind.ROUND_UP)


@dataclass(frozen=True)
class PipelineResult:
    savings: Optional[SavingsTransfer]
    primary: TransferResult


class TransferPipeline:
    """
    Host execution pipeline for one outgoing action:

        1. round-up interceptor (may dispatch the savings transfer)
        2. primary transfer
        3. commit

    Everything runs in one session transaction. Any failure rolls back both
    transfers and their log rows; nothing is retried.
    """

    def __init__(self, db: Session, host: Optional[LedgerHost] = None):
        self.db = db
        self.host = host or LedgerHost(db)
        self.interceptor = RoundUpInterceptor(AutomationRegistry(db), SavingsDispatcher(self.host))

    def execute(self, caller: str, outer_payload: bytes) -> PipelineResult:
        caller = normalize_address(caller)
        try:
            savings = self.interceptor.before_transfer(caller, outer_payload)

            if outer_payload[:4] != EXECUTE_SELECTOR:
                raise MalformedPayload("outer payload is not an execute(address,uint256,bytes) call")
            outer = decode_execute_call(outer_payload)
            primary = self.host.execute_as_owner(caller, outer.target, outer.value, outer.data)

            self.db.commit()
        except Exception as exc:
            self.db.rollback()
            logger.warning("Outgoing action for %s rolled back: %s", caller, exc)
            raise

        return PipelineResult(savings=savings, primary=primary)
