import logging

from ..errors import NotFoundError, ValidationError
from ..models import UserProfile
from ..models.base import utcnow
from ..models.user import ROLES
from ..store import USERS

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, store):
        self.store = store

    def get_profile(self, uid):
        return self.store.get(USERS, uid)

    def create_profile(self, uid, email, first_name=None, last_name=None, phone=None,
                       role="service_provider", status="pending"):
        if role not in ROLES:
            raise ValidationError(f"Unknown role: {role}")
        profile = UserProfile(
            id=uid,
            email=email,
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            role=role,
            status=status,
            profile_completed=False,
        )
        self.store.add(USERS, profile)
        logger.info("Created %s profile %s", role, uid)
        return profile

    def delete_profile(self, uid) -> bool:
        return self.store.delete(USERS, uid)

    def update_last_login(self, uid):
        return self.store.update(USERS, uid, last_login=utcnow())

    def link_service_provider(self, uid, provider_id):
        profile = self.store.update(USERS, uid, provider_id=provider_id, profile_completed=True)
        if profile is None:
            raise NotFoundError("User profile not found")
        return profile
