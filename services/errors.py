# services/errors.py


class RoundUpError(Exception):
    """Base class for every round-up autopilot failure."""


class MalformedPayload(RoundUpError):
    """A call payload is too short, mis-padded or otherwise undecodable."""


class ArithmeticOverflow(RoundUpError):
    """The round-up computation left the uint256 range. Never wrapped."""


class InsufficientFunds(RoundUpError):
    def __init__(self, owner: str, asset: str, balance: int, required: int):
        self.owner = owner
        self.asset = asset
        self.balance = balance
        self.required = required
        super().__init__(
            f"{owner} holds {balance} of {asset}, {required} required"
        )


class TransferDispatchError(RoundUpError):
    """The host could not execute a transfer on the owner's behalf."""


class ReentrantRoundUp(RoundUpError):
    """A nested round-up evaluation was attempted for a caller already in one."""


class UnauthorizedRuleChange(RoundUpError):
    """The host refused to let the caller modify the requested rule set."""
