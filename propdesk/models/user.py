from ..extensions import db
from .base import iso, new_id, utcnow

ROLES = ("admin", "service_provider")
USER_STATUSES = ("pending", "active", "inactive")


class UserProfile(db.Model):
    __tablename__ = "users"

    # Same value as the identity-provider uid
    id = db.Column(db.String(64), primary_key=True, default=new_id)

    # Basic Information
    email = db.Column(db.String(255), nullable=False, index=True)
    first_name = db.Column(db.String(100), nullable=True)
    last_name = db.Column(db.String(100), nullable=True)
    phone = db.Column(db.String(32), nullable=True)

    role = db.Column(db.String(32), nullable=False, default="service_provider")
    status = db.Column(db.String(20), nullable=False, default="pending")
    profile_completed = db.Column(db.Boolean, nullable=False, default=False)

    # Service provider specific fields
    provider_id = db.Column(db.String(64), nullable=True, index=True)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)
    last_login = db.Column(db.DateTime, nullable=True)

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p) or self.email

    def __repr__(self):
        return f'<UserProfile {self.id}: {self.email} ({self.role})>'

    def serialize(self):
        return {
            "id": self.id,
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "full_name": self.full_name,
            "phone": self.phone,
            "role": self.role,
            "status": self.status,
            "profile_completed": bool(self.profile_completed),
            "provider_id": self.provider_id,
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
            "last_login": iso(self.last_login),
        }


class AuthAccount(db.Model):
    """Credential record owned by the SQL identity provider."""

    __tablename__ = "auth_accounts"

    uid = db.Column(db.String(64), primary_key=True, default=new_id)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    disabled = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    last_sign_in = db.Column(db.DateTime, nullable=True)

    def __repr__(self):
        return f'<AuthAccount {self.uid}: {self.email}>'
