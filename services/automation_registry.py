# services/automation_registry.py

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from db.enums import UINT256_MAX
from models.savings_automation import SavingsAutomation, MAX_AUTOMATION_INDEX
from utils.abi_codec import normalize_address

logger = logging.getLogger(__name__)


class AutomationRegistry:
    """
    Per-owner round-up rules, keyed by (owner_id, automation_index).
    Writes overwrite a slot wholesale; there is no delete. Callers must have
    been authorized by the host before reaching this class.
    """

    def __init__(self, db: Session):
        self.db = db

    def _load(self, owner_id: str, automation_index: int):
        # Slots outside the storable range can never have been written
        if not 0 <= automation_index <= MAX_AUTOMATION_INDEX:
            return None
        return self.db.get(SavingsAutomation, (owner_id, automation_index))

    def set_rule(self, owner_id: str, automation_index: int, destination: str, increment: int) -> None:
        owner_id = normalize_address(owner_id)
        destination = normalize_address(destination)
        if not 0 <= automation_index <= MAX_AUTOMATION_INDEX:
            raise ValueError(f"automation_index must be between 0 and {MAX_AUTOMATION_INDEX}")
        if not 0 <= increment <= UINT256_MAX:
            raise ValueError("round_up_increment must fit in uint256")

        rule = self._load(owner_id, automation_index)
        if rule is None:
            rule = SavingsAutomation(owner_id=owner_id, automation_index=automation_index)
            self.db.add(rule)

        # Full replacement, never a partial update
        rule.savings_destination = destination
        rule.round_up_increment = increment
        rule.enabled = True
        self.db.flush()

        logger.info(
            "Rule %s/%d set: destination=%s increment=%d",
            owner_id, automation_index, destination, increment,
        )

    def disable_rule(self, owner_id: str, automation_index: int) -> None:
        """Overwrites the slot with enabled=False, keeping destination and increment."""
        owner_id = normalize_address(owner_id)
        rule = self._load(owner_id, automation_index)
        if rule is None:
            # Nothing stored: the slot already reads as disabled
            return
        rule.enabled = False
        self.db.flush()
        logger.info("Rule %s/%d disabled", owner_id, automation_index)

    def get_rule(self, owner_id: str, automation_index: int) -> SavingsAutomation:
        """Stored rule, or a transient disabled zero record when the slot is empty."""
        owner_id = owner_id.lower()
        rule = self._load(owner_id, automation_index)
        if rule is None:
            return SavingsAutomation.empty(owner_id, automation_index)
        return rule

    def list_rules(self, owner_id: str) -> List[SavingsAutomation]:
        stmt = (
            select(SavingsAutomation)
            .where(SavingsAutomation.owner_id == owner_id.lower())
            .order_by(SavingsAutomation.automation_index)
        )
        return list(self.db.scalars(stmt).all())
