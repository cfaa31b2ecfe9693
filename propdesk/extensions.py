from flask import jsonify
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
migrate = Migrate()
jwt = JWTManager()
cors = CORS()

# jti values of access tokens revoked through /api/auth/logout
revoked_tokens: set[str] = set()


@jwt.token_in_blocklist_loader
def _token_revoked(jwt_header, jwt_payload) -> bool:
    return jwt_payload.get("jti") in revoked_tokens


@jwt.unauthorized_loader
def _missing_token(reason):
    return jsonify(error="unauthorized", message="Authentication required"), 401


@jwt.invalid_token_loader
def _invalid_token(reason):
    return jsonify(error="invalid_token", message=reason), 401


@jwt.expired_token_loader
def _expired_token(jwt_header, jwt_payload):
    return jsonify(error="token_expired", message="Session expired. Please log in again"), 401


@jwt.revoked_token_loader
def _revoked_token(jwt_header, jwt_payload):
    return jsonify(error="token_revoked", message="Session ended. Please log in again"), 401
