# app.py (Round-Up Savings Autopilot)

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends

from api.dependencies import verify_api_key
from db.database import config, create_db_and_tables

LOG_LEVEL = config("LOG_LEVEL", default="INFO")

logger = logging.getLogger(__name__)


# --- Application Lifespan Context ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    # STARTUP: logging and schema
    logging.basicConfig(
        level=LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    create_db_and_tables()
    logger.info("Round-Up Autopilot started")

    yield

    # SHUTDOWN
    logger.info("Round-Up Autopilot shutting down")


from api.v1.savings_automation import router as v1_automation_router
from api.v1.transfers import router as v1_transfers_router
from api.v1.ledger import router as v1_ledger_router


app = FastAPI(
    title="Round-Up Savings Autopilot",
    description="Rounds outgoing payments up to a configured increment and moves the difference into savings.",
    version="1.0.0",
    lifespan=lifespan,
)


# Root Endpoint (basic health check)
@app.get("/", tags=["Health"])
def read_root():
    return {"message": "Round-Up Autopilot is running. Endpoints live under /api/v1/..."}

# -----------------------------------------------------------
# ROUTER REGISTRATION
# -----------------------------------------------------------

# Every API route requires the X-API-Key header; the health check does not
API_KEY_REQUIRED = [Depends(verify_api_key)]

app.include_router(v1_automation_router, prefix="/api/v1", dependencies=API_KEY_REQUIRED)
app.include_router(v1_transfers_router, prefix="/api/v1", dependencies=API_KEY_REQUIRED)
app.include_router(v1_ledger_router, prefix="/api/v1", dependencies=API_KEY_REQUIRED)
