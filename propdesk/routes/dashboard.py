# propdesk/routes/dashboard.py
from flask import Blueprint, jsonify, request

from ..security.rbac import ADMIN, require_role
from ..services import dashboard_service

dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api/dashboard")


def _limit(default):
    return request.args.get("limit", default=default, type=int) or default


@dashboard_bp.get("/stats")
@require_role(ADMIN)
def stats():
    return jsonify(dashboard_service().stats()), 200


@dashboard_bp.get("/top-properties")
@require_role(ADMIN)
def top_properties():
    return jsonify(properties=dashboard_service().top_properties(limit=_limit(5))), 200


@dashboard_bp.get("/top-providers")
@require_role(ADMIN)
def top_providers():
    return jsonify(providers=dashboard_service().top_providers(limit=_limit(5))), 200


@dashboard_bp.get("/activity")
@require_role(ADMIN)
def activity():
    return jsonify(activity=dashboard_service().recent_activity(limit=_limit(4))), 200
