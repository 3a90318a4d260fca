from typing import Tuple

from db.enums import UINT256_MAX
from services.errors import ArithmeticOverflow


def ceil_to_multiple(amount: int, increment: int) -> int:
    """
    Rounds `amount` up to the next multiple of `increment`.

    The rounding is: ((amount + increment - 1) // increment) * increment

    Args:
        amount: Transfer amount, 0 <= amount <= UINT256_MAX.
        increment: Rounding unit, must be positive.

    Returns:
        The smallest multiple of `increment` that is >= `amount`.

    Raises:
        ArithmeticOverflow: if amount + increment - 1 exceeds UINT256_MAX.
    """
    if increment <= 0:
        raise ValueError("increment must be positive")
    if amount < 0:
        raise ValueError("amount must be non-negative")

    padded = amount + increment - 1
    if padded > UINT256_MAX:
        raise ArithmeticOverflow(
            f"rounding {amount} up to a multiple of {increment} exceeds uint256"
        )
    return (padded // increment) * increment


def savings_for(amount: int, increment: int) -> Tuple[int, int]:
    """
    Returns (round_up_amount, savings_amount) for one transfer.
    A zero increment disables rounding: the amount is returned unchanged.
    """
    if increment == 0:
        return amount, 0

    round_up_amount = ceil_to_multiple(amount, increment)
    return round_up_amount, round_up_amount - amount

# --- Example Usage ---
# savings_for(2_345_678, 1_000_000)  # (3_000_000, 654_322)
# savings_for(1_000_000, 500_000)    # (1_000_000, 0)
