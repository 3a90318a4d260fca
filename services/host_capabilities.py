# services/host_capabilities.py
"""
The two capabilities the autopilot consumes from its host execution framework.
The host owns authorization and fund movement; the autopilot only calls them.
"""

from dataclasses import dataclass
from typing import Optional, Protocol

from services.errors import UnauthorizedRuleChange


@dataclass(frozen=True)
class RuleAction:
    """A requested change to an owner's rule set (e.g. 'set_rule', 'disable_rule')."""
    owner_id: str
    operation: str
    automation_index: Optional[int] = None


@dataclass(frozen=True)
class TransferResult:
    sender: str
    recipient: str
    asset: str
    amount: int
    value: int = 0
    log_id: Optional[int] = None


class HostCapabilities(Protocol):
    def authorize(self, identity: str, action: RuleAction) -> bool:
        """Is `identity` allowed to perform `action`? Checked before the registry is touched."""
        ...

    def execute_as_owner(self, identity: str, target: str, value: int, payload: bytes) -> TransferResult:
        """Calls `target` with `payload` on behalf of `identity`. Raises on failure."""
        ...


def require_authorization(host: HostCapabilities, identity: str, action: RuleAction) -> None:
    """Raises UnauthorizedRuleChange unless the host allows `identity` to perform `action`."""
    if not host.authorize(identity, action):
        raise UnauthorizedRuleChange(
            f"{identity} may not {action.operation} on rules of {action.owner_id}"
        )
