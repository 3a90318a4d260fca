# services/round_up_interceptor.py

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Optional

from services.automation_registry import AutomationRegistry
from services.errors import MalformedPayload, ReentrantRoundUp
from services.host_capabilities import HostCapabilities, TransferResult
from services.round_up_logic.round_up_calculator import savings_for
from utils.abi_codec import decode_execute_call, decode_transfer_call, encode_transfer_call

logger = logging.getLogger(__name__)

# Only this rule slot is consulted, however many rules an owner has stored
ACTIVE_AUTOMATION_INDEX = 0


@dataclass(frozen=True)
class SavingsTransfer:
    """The secondary transfer the interceptor dispatched before the payment."""
    owner_id: str
    asset: str
    destination: str
    transfer_amount: int
    round_up_amount: int
    savings_amount: int
    result: TransferResult


class RoundUpInterceptor:
    """
    Runs immediately before an owner's outgoing action. When the owner's rule
    applies, it rounds the payment up to the rule's increment and has the host
    move the difference to the savings destination.

    Malformed payloads mean "no rule applies" and never block the payment.
    Overflow and dispatch failures propagate so the host aborts the whole action.
    """

    # Callers with an evaluate-and-dispatch cycle in flight, shared across instances
    _in_flight = set()
    _in_flight_lock = threading.Lock()

    def __init__(self, registry: AutomationRegistry, host: HostCapabilities):
        self.registry = registry
        self.host = host

    @classmethod
    @contextmanager
    def _guard(cls, caller: str):
        with cls._in_flight_lock:
            if caller in cls._in_flight:
                raise ReentrantRoundUp(f"round-up already in progress for {caller}")
            cls._in_flight.add(caller)
        try:
            yield
        finally:
            with cls._in_flight_lock:
                cls._in_flight.discard(caller)

    def before_transfer(self, caller: str, outer_payload: bytes) -> Optional[SavingsTransfer]:
        caller = caller.lower()
        with self._guard(caller):
            return self._evaluate(caller, outer_payload)

    def _evaluate(self, caller: str, outer_payload: bytes) -> Optional[SavingsTransfer]:
        # 1. Rule lookup; nothing is decoded for inactive rules
        rule = self.registry.get_rule(caller, ACTIVE_AUTOMATION_INDEX)
        if not rule.is_active:
            logger.debug("No active round-up rule for %s", caller)
            return None

        # 2-3. Outer "call this asset" instruction, then the inner transfer
        try:
            outer = decode_execute_call(outer_payload)
            inner = decode_transfer_call(outer.data)
        except MalformedPayload as exc:
            logger.debug("Round-up skipped for %s: %s", caller, exc)
            return None

        # 4. Overflow propagates as ArithmeticOverflow
        round_up_amount, savings_amount = savings_for(inner.amount, rule.round_up_increment)

        # 5. Already on an increment boundary
        if savings_amount == 0:
            return None

        # 6. Exactly one dispatch, no native value attached
        result = self.host.execute_as_owner(
            caller,
            outer.target,
            0,
            encode_transfer_call(rule.savings_destination, savings_amount),
        )
        logger.info(
            "Round-up for %s: %d -> %d, %d of %s saved to %s",
            caller, inner.amount, round_up_amount, savings_amount,
            outer.target, rule.savings_destination,
        )
        return SavingsTransfer(
            owner_id=caller,
            asset=outer.target,
            destination=rule.savings_destination,
            transfer_amount=inner.amount,
            round_up_amount=round_up_amount,
            savings_amount=savings_amount,
            result=result,
        )
