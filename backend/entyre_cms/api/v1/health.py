from flask import current_app, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from entyre_cms.extensions import db
from . import v1_bp


@v1_bp.route('/health', methods=['GET'])
def health_check():
    try:
        db.session.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.error("Health check database probe failed: %s", exc)
        database = "unavailable"

    healthy = database == "ok"
    return jsonify({
        "status": "ok" if healthy else "degraded",
        "service": "entyre-cms",
        "database": database,
    }), 200 if healthy else 503
