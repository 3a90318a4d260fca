# services/ledger_service.py

import logging

from sqlalchemy.orm import Session

from db.enums import TransferKind, TransferStatus, UINT256_MAX
from models.ledger import AssetBalance, TransferLog, NATIVE_ASSET
from services.errors import ArithmeticOverflow, InsufficientFunds, TransferDispatchError
from services.host_capabilities import RuleAction, TransferResult
from utils.abi_codec import decode_transfer_call, normalize_address

logger = logging.getLogger(__name__)


class LedgerHost:
    """
    In-process host: authorizes rule changes and executes asset transfers
    against balances kept in the same session as the rules. Nothing is
    committed here; the caller's session decides whether the work survives.
    """

    def __init__(self, db: Session):
        self.db = db

    # ----------------------------------------------------------------------
    # AUTHORIZATION
    # ----------------------------------------------------------------------
    def authorize(self, identity: str, action: RuleAction) -> bool:
        # An identity may only modify its own rule set
        allowed = identity.lower() == action.owner_id.lower()
        if not allowed:
            logger.warning(
                "Denied %s on rules of %s for caller %s",
                action.operation, action.owner_id, identity,
            )
        return allowed

    # ----------------------------------------------------------------------
    # BALANCES
    # ----------------------------------------------------------------------
    def _balance_row(self, owner_id: str, asset: str) -> AssetBalance:
        row = self.db.get(AssetBalance, (owner_id, asset))
        if row is None:
            row = AssetBalance(owner_id=owner_id, asset=asset, balance=0)
            self.db.add(row)
            self.db.flush()
        return row

    def balance_of(self, owner_id: str, asset: str) -> int:
        row = self.db.get(AssetBalance, (owner_id.lower(), asset.lower()))
        return row.balance if row is not None else 0

    def _add(self, row: AssetBalance, amount: int) -> None:
        if row.balance + amount > UINT256_MAX:
            raise ArithmeticOverflow(f"balance of {row.owner_id} in {row.asset} exceeds uint256")
        row.balance += amount

    def credit(self, owner_id: str, asset: str, amount: int) -> TransferLog:
        """Deposits funds from outside the ledger."""
        owner_id = normalize_address(owner_id)
        asset = asset.lower() if asset == NATIVE_ASSET else normalize_address(asset)
        self._add(self._balance_row(owner_id, asset), amount)
        log = TransferLog(
            sender=None, recipient=owner_id, asset=asset, amount=amount,
            kind=TransferKind.DEPOSIT, status=TransferStatus.COMPLETED,
        )
        self.db.add(log)
        self.db.flush()
        return log

    def _move(self, sender: str, recipient: str, asset: str, amount: int, kind: TransferKind) -> TransferLog:
        source = self._balance_row(sender, asset)
        if source.balance < amount:
            raise InsufficientFunds(sender, asset, source.balance, amount)
        source.balance -= amount
        self._add(self._balance_row(recipient, asset), amount)

        log = TransferLog(
            sender=sender, recipient=recipient, asset=asset, amount=amount,
            kind=kind, status=TransferStatus.COMPLETED,
        )
        self.db.add(log)
        self.db.flush()
        return log

    # ----------------------------------------------------------------------
    # EXECUTION ON BEHALF OF THE OWNER
    # ----------------------------------------------------------------------
    def execute_as_owner(
        self,
        identity: str,
        target: str,
        value: int,
        payload: bytes,
        kind: TransferKind = TransferKind.PRIMARY,
    ) -> TransferResult:
        """
        Calls asset `target` with a transfer(address,uint256) payload.
        Attached native value moves from the owner to `target` first.
        MalformedPayload and InsufficientFunds propagate unchanged.
        """
        try:
            owner = normalize_address(identity)
            asset = normalize_address(target)
        except ValueError as exc:
            raise TransferDispatchError(str(exc)) from exc
        call = decode_transfer_call(payload)

        if value:
            self._move(owner, asset, NATIVE_ASSET, value, kind)

        log = self._move(owner, call.recipient, asset, call.amount, kind)
        logger.info("Executed %d of %s from %s to %s", call.amount, asset, owner, call.recipient)
        return TransferResult(
            sender=owner,
            recipient=call.recipient,
            asset=asset,
            amount=call.amount,
            value=value,
            log_id=log.id,
        )
