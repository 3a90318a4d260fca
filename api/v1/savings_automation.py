# api/v1/savings_automation.py

from typing import List

from fastapi import APIRouter, HTTPException, Path, status

from api.dependencies import CallerDependency, DBDependency, HostDependency
from models.savings_automation import SavingsAutomation, MAX_AUTOMATION_INDEX
from schemas.savings_automation import SavingsAutomationSet, SavingsAutomationOut
from services.automation_registry import AutomationRegistry
from services.errors import UnauthorizedRuleChange
from services.host_capabilities import RuleAction, require_authorization

router = APIRouter(
    prefix="/automations",
    tags=["Round-Up Rules"]
)

OWNER_PATTERN = r"^0x[0-9a-fA-F]{40}$"


def _to_out(rule: SavingsAutomation) -> SavingsAutomationOut:
    return SavingsAutomationOut(
        owner_id=rule.owner_id,
        automation_index=rule.automation_index,
        savings_destination=rule.savings_destination,
        round_up_increment=rule.round_up_increment,
        enabled=rule.enabled,
        is_active=rule.is_active,
        updated_at=rule.updated_at,
    )


def _authorize(host, caller: str, owner_id: str, operation: str, automation_index: int) -> None:
    try:
        require_authorization(host, caller, RuleAction(owner_id.lower(), operation, automation_index))
    except UnauthorizedRuleChange as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc))


# --- SET Rule (wholesale overwrite, always enabled) ---
@router.put(
    "/{owner_id}/{automation_index}",
    response_model=SavingsAutomationOut,
    summary="Create or overwrite a round-up rule slot"
)
def set_savings_automation(
    rule_data: SavingsAutomationSet,
    db: DBDependency,
    host: HostDependency,
    caller: CallerDependency,
    owner_id: str = Path(..., pattern=OWNER_PATTERN),
    automation_index: int = Path(..., ge=0, le=MAX_AUTOMATION_INDEX),
):
    _authorize(host, caller, owner_id, "set_rule", automation_index)

    registry = AutomationRegistry(db)
    registry.set_rule(owner_id, automation_index, rule_data.savings_destination, rule_data.round_up_increment)
    return _to_out(registry.get_rule(owner_id, automation_index))


# --- DISABLE Rule (the only way to switch a slot off) ---
@router.post(
    "/{owner_id}/{automation_index}/disable",
    response_model=SavingsAutomationOut,
    summary="Disable a round-up rule slot without clearing it"
)
def disable_savings_automation(
    db: DBDependency,
    host: HostDependency,
    caller: CallerDependency,
    owner_id: str = Path(..., pattern=OWNER_PATTERN),
    automation_index: int = Path(..., ge=0, le=MAX_AUTOMATION_INDEX),
):
    _authorize(host, caller, owner_id, "disable_rule", automation_index)

    registry = AutomationRegistry(db)
    registry.disable_rule(owner_id, automation_index)
    return _to_out(registry.get_rule(owner_id, automation_index))


# --- READ Single Rule ---
@router.get(
    "/{owner_id}/{automation_index}",
    response_model=SavingsAutomationOut,
    summary="Get one rule slot (a disabled zero record when never written)"
)
def get_savings_automation(
    db: DBDependency,
    owner_id: str = Path(..., pattern=OWNER_PATTERN),
    automation_index: int = Path(..., ge=0, le=MAX_AUTOMATION_INDEX),
):
    return _to_out(AutomationRegistry(db).get_rule(owner_id, automation_index))


# --- READ All Rules ---
@router.get(
    "/{owner_id}",
    response_model=List[SavingsAutomationOut],
    summary="Get every stored rule slot of an owner"
)
def list_savings_automations(
    db: DBDependency,
    owner_id: str = Path(..., pattern=OWNER_PATTERN),
):
    return [_to_out(rule) for rule in AutomationRegistry(db).list_rules(owner_id)]
