# db/enums.py

import enum
from sqlalchemy import TypeDecorator, String

UINT256_MAX = 2**256 - 1


class TransferStatus(enum.Enum):
    # Failed transfers are rolled back with their session and leave no log row
    COMPLETED = "COMPLETED"

class TransferKind(enum.Enum):
    """Why a ledger movement happened."""
    PRIMARY = "PRIMARY"          # The payment the owner asked for
    ROUND_UP = "ROUND_UP"        # Savings top-up dispatched by the interceptor
    DEPOSIT = "DEPOSIT"          # Funds credited from outside the ledger

# Enums are stored as plain strings (portable across SQLite and Postgres)
class EnumString(TypeDecorator):
    """Ensures Enum values are stored as strings."""
    impl = String
    cache_ok = True

    def __init__(self, enum_type, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.enum_type = enum_type

    def process_bind_param(self, value, dialect):
        if value is not None:
            return value.value
        return value

    def process_result_value(self, value, dialect):
        if value is not None:
            return self.enum_type(value)
        return value


class Uint256(TypeDecorator):
    """
    Stores unsigned 256-bit integers as decimal strings.
    DECIMAL columns lose precision on SQLite, so the value travels as text.
    """
    impl = String(78)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        value = int(value)
        if value < 0 or value > UINT256_MAX:
            raise ValueError(f"value {value} outside the uint256 range")
        return str(value)

    def process_result_value(self, value, dialect):
        if value is not None:
            return int(value)
        return value
