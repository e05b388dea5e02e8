import logging

from fastapi import FastAPI

from listing_flow.api.v1.router import router as v1_router
from listing_flow.core.config import settings
from listing_flow.core.telemetry import setup_telemetry

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Listing Flow API", version="0.1.0")

setup_telemetry(app)
app.include_router(v1_router)
