"""Liveness endpoint reporting principal-store reachability."""

from __future__ import annotations

from flask import Blueprint, current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from authgate.api.deps import success_response, timing
from authgate.core.extensions import db

bp = Blueprint("health", __name__)


def _database_status() -> str:
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        current_app.logger.exception("health.db_unreachable")
        return "fail"
    return "ok"


@bp.get("/health")
@timing
def healthcheck():
    """Always 200 while the process serves; ``db`` says whether SQL answers."""
    payload = {
        "status": "ok",
        "db": _database_status(),
        "version": current_app.config.get("APP_VERSION", "dev"),
    }
    return success_response(payload, "Server is running")
