"""
System routes shared by the service.

Routes:
    - `/ping`: A health check endpoint that also reports whether the contact store answers.
    - `/__list_routes__`: Lists all registered API routes in the application.
"""

from fastapi import APIRouter, Depends, FastAPI
from fastapi.routing import APIRoute
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pimbridge.database import get_db

from shared.log_config import get_logger
logger = get_logger(f"pimbridge.{__name__}")

router = APIRouter()


@router.get("/ping")
def ping(db: Session = Depends(get_db)):
    """
    Health check endpoint that returns the service status.

    Returns:
        Dict[str, str]: 'status' is "ok" and 'store' is "ok" or "unavailable".
    """
    try:
        db.execute(text("SELECT 1"))
        store = "ok"
    except SQLAlchemyError as e:
        logger.warning(f"Contact store did not answer ping: {e}")
        store = "unavailable"
    return {"status": "ok", "store": store}


def register_list_routes(app: FastAPI):
    """
    Register `/__list_routes__`, which lists every API route and its HTTP methods.
    """
    @app.get("/__list_routes__")
    def list_routes():
        return [
            {"path": route.path, "methods": sorted(route.methods)}
            for route in app.routes
            if isinstance(route, APIRoute)
        ]
