import logging

from flask import Blueprint, current_app, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from runlab.models.db import db

logger = logging.getLogger(__name__)

bp = Blueprint('health', __name__)

@bp.route('/health/db')
def check_db():
    """Check database connection status"""
    try:
        db.session.execute(text('SELECT 1'))
        return jsonify({"status": "connected"}), 200
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        return jsonify({
            "status": "disconnected",
            "error": str(e),
            "message": "Cannot connect to database"
        }), 503

@bp.route('/health/runtime')
def check_runtime():
    """Check that the execution runtime answers"""
    client = current_app.extensions['piston_client']

    if client.health_check():
        return jsonify({
            "status": "running",
            "url": client.base_url
        }), 200

    return jsonify({
        "status": "unreachable",
        "url": client.base_url,
        "message": "Cannot reach the execution runtime"
    }), 503
