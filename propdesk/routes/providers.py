# propdesk/routes/providers.py
from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt_identity

from ..security.rbac import ADMIN, SERVICE_PROVIDER, current_provider_id, current_role, require_role
from ..services import provider_service

providers_bp = Blueprint("service_providers", __name__, url_prefix="/api/service-providers")


@providers_bp.get("")
@require_role(ADMIN)
def list_providers():
    providers = provider_service().list_providers(
        status=request.args.get("status"),
        service=request.args.get("service"),
        category=request.args.get("category"),
        min_rating=request.args.get("min_rating", type=float),
        search=request.args.get("q") or request.args.get("search"),
    )
    return jsonify(providers=[p.serialize() for p in providers], count=len(providers)), 200


@providers_bp.get("/stats")
@require_role(ADMIN)
def provider_stats():
    return jsonify(provider_service().stats()), 200


@providers_bp.get("/<provider_id>")
@require_role(ADMIN, SERVICE_PROVIDER)
def get_provider(provider_id):
    if current_role() != ADMIN and current_provider_id() != provider_id:
        return jsonify(error="forbidden", message="Insufficient permissions"), 403
    return jsonify(provider=provider_service().get(provider_id).serialize()), 200


@providers_bp.post("")
@require_role(ADMIN)
def create_provider():
    data = request.get_json(silent=True) or {}
    provider = provider_service().create(data, created_by=get_jwt_identity())
    return jsonify(provider=provider.serialize()), 201


@providers_bp.put("/<provider_id>")
@require_role(ADMIN, SERVICE_PROVIDER)
def update_provider(provider_id):
    if current_role() != ADMIN and current_provider_id() != provider_id:
        return jsonify(error="forbidden", message="Insufficient permissions"), 403
    data = request.get_json(silent=True) or {}
    if current_role() != ADMIN:
        # Providers cannot change their own vetting fields
        for key in ("status", "rating", "compliance_status", "property_ids"):
            data.pop(key, None)
    return jsonify(provider=provider_service().update(provider_id, data).serialize()), 200


@providers_bp.delete("/<provider_id>")
@require_role(ADMIN)
def delete_provider(provider_id):
    provider_service().delete(provider_id)
    return jsonify(message="Service provider deleted"), 200
