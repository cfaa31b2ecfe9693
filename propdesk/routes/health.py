from flask import Blueprint, current_app, jsonify

health_bp = Blueprint("health", __name__)


@health_bp.route("/api/health", methods=["GET"])
def health():
    return jsonify({"ok": True, "store": current_app.config.get("STORE_BACKEND")}), 200
