# api/dependencies.py

import secrets
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from db.database import config, get_db
from services.ledger_service import LedgerHost
from utils.abi_codec import is_address

DBDependency = Annotated[Session, Depends(get_db)]


# --- CALLER IDENTITY ---
def get_caller_id(x_owner_id: str = Header(..., alias="X-Owner-Id")) -> str:
    """
    Identity of the account issuing the request.
    Signature checks happen in front of this service; here it is only shape-checked.
    """
    if not is_address(x_owner_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Owner-Id must be a 0x-prefixed 20-byte hex address."
        )
    return x_owner_id.lower()


CallerDependency = Annotated[str, Depends(get_caller_id)]


def get_ledger_host(db: DBDependency) -> LedgerHost:
    return LedgerHost(db)


HostDependency = Annotated[LedgerHost, Depends(get_ledger_host)]


# --------------------------------------------------------------------------
# API KEY VALIDATION
# --------------------------------------------------------------------------

@lru_cache()
def get_expected_api_key() -> str:
    """Retrieves ROUNDUP_API_KEY from the environment or .env file."""
    return config("ROUNDUP_API_KEY", default="")

def verify_api_key(x_api_key: str = Header(..., alias="X-API-Key")):
    """
    FastAPI Dependency to validate the API key sent in the X-API-Key header.
    """
    expected_key = get_expected_api_key()

    # Check 1: Server Configuration Error (500)
    if not expected_key:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server configuration error: ROUNDUP_API_KEY not set for secure validation."
        )

    # Check 2: Key Validation (401 Unauthorized)
    if not secrets.compare_digest(x_api_key, expected_key):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API Key provided for Round-Up Autopilot access"
        )

    return x_api_key
