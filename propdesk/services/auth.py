import logging

from flask_jwt_extended import create_access_token

from ..errors import ProfileMissingError, ValidationError
from ..extensions import revoked_tokens
from ..identity.base import normalize_email
from ..security.rbac import landing_route
from .users import UserService

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, store, identity):
        self.store = store
        self.identity = identity
        self.users = UserService(store)

    def login(self, email, password) -> dict:
        email = normalize_email(email)
        if not email or not password:
            raise ValidationError("Email and password are required")

        account = self.identity.sign_in(email, password)
        profile = self.users.get_profile(account.uid)
        if profile is None:
            logger.error("Account %s authenticated without a profile", account.uid)
            self.identity.sign_out(account.uid)
            raise ProfileMissingError("User profile not found. Please contact support.")

        self.users.update_last_login(profile.id)
        token = create_access_token(
            identity=profile.id,
            additional_claims={
                "role": profile.role,
                "email": profile.email,
                "provider_id": profile.provider_id,
            },
        )
        logger.info("Login ok for %s (%s)", profile.id, profile.role)
        return {
            "access_token": token,
            "user": profile.serialize(),
            "redirect": landing_route(profile.role),
        }

    def logout(self, uid, jti) -> None:
        if jti:
            revoked_tokens.add(jti)
        self.identity.sign_out(uid)
