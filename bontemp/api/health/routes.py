# bontemp/api/health/routes.py
from flask import Blueprint, jsonify

health_bp = Blueprint('health_bp', __name__)


@health_bp.route('/health', methods=['GET'])
def health():
    """Liveness probe."""
    return jsonify({"status": "ok"}), 200
