# models/ledger.py

from typing import Optional
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, DateTime, String

from db.base import Base
from db.enums import TransferKind, TransferStatus, EnumString, Uint256

# Balance slot used for value attached to a call rather than an asset transfer
NATIVE_ASSET = "native"


class AssetBalance(Base):
    """Balance of one asset held by one account on the reference ledger."""
    __tablename__ = "asset_balances"

    owner_id: Mapped[str] = mapped_column(String(42), primary_key=True)
    asset: Mapped[str] = mapped_column(String(42), primary_key=True)
    balance: Mapped[int] = mapped_column(Uint256, default=0)


class TransferLog(Base):
    __tablename__ = "transfer_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    sender: Mapped[Optional[str]] = mapped_column(String(42), nullable=True)  # None for deposits
    recipient: Mapped[str] = mapped_column(String(42), index=True)
    asset: Mapped[str] = mapped_column(String(42))
    amount: Mapped[int] = mapped_column(Uint256)

    kind: Mapped[TransferKind] = mapped_column(EnumString(TransferKind, 20))
    status: Mapped[TransferStatus] = mapped_column(EnumString(TransferStatus, 20), default=TransferStatus.COMPLETED)
    executed_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
