# propdesk/routes/auth.py
from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import get_jwt, get_jwt_identity, jwt_required

from ..errors import ProfileMissingError
from ..services import auth_service, signup_service, user_service

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/login")
def login():
    data = request.get_json(silent=True) or {}
    result = auth_service().login(data.get("email", ""), data.get("password", ""))
    return jsonify(result), 200


@auth_bp.post("/signup")
def signup():
    data = request.get_json(silent=True) or {}
    result = signup_service().signup(data)
    return jsonify(result), 201


@auth_bp.post("/logout")
@jwt_required()
def logout():
    uid = get_jwt_identity()
    auth_service().logout(uid, get_jwt().get("jti"))
    current_app.logger.info("Logged out %s", uid)
    return jsonify(message="Logged out"), 200


@auth_bp.get("/me")
@jwt_required()
def me():
    profile = user_service().get_profile(get_jwt_identity())
    if profile is None:
        raise ProfileMissingError("User profile not found. Please contact support.")
    return jsonify(user=profile.serialize()), 200
