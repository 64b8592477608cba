"""
This module defines the FastAPI application for the "pimbridge" contacts service.

The application is configured with the following:
- Routers for system routes and for saving, reading, finding and removing contacts.
- Initialization of the contact store during the application lifespan.
- Optional tracing setup if tracing is enabled in config.json.

Usage:
    uvicorn pimbridge.app:app
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

import pimbridge.config as config
from pimbridge.database import init_db
from pimbridge.method.delete import router as delete_router
from pimbridge.method.get import router as get_router
from pimbridge.method.post import router as post_router
from pimbridge.method.put import router as put_router
from shared.routes import router as routes_router, register_list_routes

from shared.log_config import get_logger
logger = get_logger(f"pimbridge.{__name__}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Initializing contact store via lifespan...")
    init_db()
    yield


app = FastAPI(lifespan=lifespan)

app.include_router(routes_router, tags=["system"])
app.include_router(post_router, tags=["contacts"])
app.include_router(get_router, tags=["contacts"])
app.include_router(put_router, tags=["contacts"])
app.include_router(delete_router, tags=["contacts"])

register_list_routes(app)

if config.TRACING_ENABLED:
    from shared.tracing import setup_tracing
    setup_tracing(app, service_name="pimbridge")
