# propdesk/routes/properties.py
from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt_identity

from ..security.rbac import ADMIN, SERVICE_PROVIDER, require_role
from ..services import property_service

properties_bp = Blueprint("properties", __name__, url_prefix="/api/properties")


@properties_bp.get("")
@require_role(ADMIN, SERVICE_PROVIDER)
def list_properties():
    properties = property_service().list_properties(
        status=request.args.get("status"),
        property_type=request.args.get("type") or request.args.get("property_type"),
        search=request.args.get("q") or request.args.get("search"),
        limit=request.args.get("limit", type=int),
    )
    return jsonify(properties=[p.serialize() for p in properties], count=len(properties)), 200


@properties_bp.get("/stats")
@require_role(ADMIN)
def property_stats():
    return jsonify(property_service().stats()), 200


@properties_bp.get("/<property_id>")
@require_role(ADMIN, SERVICE_PROVIDER)
def get_property(property_id):
    return jsonify(property=property_service().get(property_id).serialize()), 200


@properties_bp.post("")
@require_role(ADMIN)
def create_property():
    data = request.get_json(silent=True) or {}
    prop = property_service().create(data, created_by=get_jwt_identity())
    return jsonify(property=prop.serialize()), 201


@properties_bp.put("/<property_id>")
@require_role(ADMIN)
def update_property(property_id):
    data = request.get_json(silent=True) or {}
    return jsonify(property=property_service().update(property_id, data).serialize()), 200


@properties_bp.delete("/<property_id>")
@require_role(ADMIN)
def delete_property(property_id):
    property_service().delete(property_id)
    return jsonify(message="Property deleted"), 200
