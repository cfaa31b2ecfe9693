# propdesk/security/rbac.py
from functools import wraps

from flask import jsonify
from flask_jwt_extended import get_jwt, jwt_required

ADMIN = "admin"
SERVICE_PROVIDER = "service_provider"

LANDING_ROUTES = {
    ADMIN: "/dashboard/home",
    SERVICE_PROVIDER: "/dashboard/service-providers",
}


def landing_route(role: str) -> str:
    """Where a freshly signed-in user is sent, by role."""
    return LANDING_ROUTES.get(role, "/")


def require_role(*allowed_roles):
    """Decorator to require specific roles"""
    def decorator(f):
        @wraps(f)
        @jwt_required()
        def decorated_function(*args, **kwargs):
            claims = get_jwt()
            if claims.get("role") not in allowed_roles:
                return jsonify(error="forbidden", message="Insufficient permissions"), 403
            return f(*args, **kwargs)
        return decorated_function
    return decorator


def current_role():
    return get_jwt().get("role")


def current_provider_id():
    return get_jwt().get("provider_id")
