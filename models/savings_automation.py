# models/savings_automation.py

from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import BigInteger, DateTime, String

from db.base import Base
from db.enums import Uint256

ZERO_ADDRESS = "0x" + "00" * 20

# Slots are stored in a signed 64-bit column
MAX_AUTOMATION_INDEX = 2**63 - 1


class SavingsAutomation(Base):
    """
    One round-up rule. Keyed by (owner_id, automation_index): an owner may
    store many rules, each slot is overwritten wholesale and never deleted.
    """
    __tablename__ = "savings_automations"

    owner_id: Mapped[str] = mapped_column(String(42), primary_key=True)
    automation_index: Mapped[int] = mapped_column(BigInteger, primary_key=True)

    # --- Rule Definition ---

    # Account that receives the rounding difference
    savings_destination: Mapped[str] = mapped_column(String(42), default=ZERO_ADDRESS)

    # Rounding unit in the asset's smallest denomination (1_000_000 = 1.00 at 6 decimals)
    round_up_increment: Mapped[int] = mapped_column(Uint256, default=0)

    enabled: Mapped[bool] = mapped_column(default=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def is_active(self) -> bool:
        return bool(self.enabled) and (self.round_up_increment or 0) > 0

    @classmethod
    def empty(cls, owner_id: str, automation_index: int) -> "SavingsAutomation":
        """Transient zero record returned for slots that were never written."""
        return cls(
            owner_id=owner_id,
            automation_index=automation_index,
            savings_destination=ZERO_ADDRESS,
            round_up_increment=0,
            enabled=False,
        )
