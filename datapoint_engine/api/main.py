# ============================================================================
# api/main.py (slim bootstrap)
# ============================================================================
from contextlib import asynccontextmanager

from fastapi import FastAPI

from datapoint_engine.api import deps
from datapoint_engine.api.routes import datasets as datasets_routes
from datapoint_engine.api.routes import health as health_routes
from datapoint_engine.config import get_settings
from datapoint_engine.utils.logging_setup import setup_logging

setup_logging(get_settings().log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # create the datapoint store once at startup
    _ = deps.get_db_path()
    yield


app = FastAPI(title="Datapoint Engine API", lifespan=lifespan)

# routers
app.include_router(datasets_routes.router)
app.include_router(health_routes.router)
