from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash

from ..errors import AuthError, AuthErrorCode
from ..models.base import new_id
from .base import AuthUser, IdentityProvider, check_credentials_shape, normalize_email


class InMemoryIdentityProvider(IdentityProvider):
    """Process-local accounts; used by tests and the memory store backend."""

    def __init__(self):
        self._accounts: dict[str, dict] = {}
        self.signed_out: list[str] = []

    def _by_email(self, email: str):
        return next((a for a in self._accounts.values() if a["email"] == email), None)

    def sign_in(self, email: str, password: str) -> AuthUser:
        account = self._by_email(normalize_email(email))
        if account is None:
            raise AuthError(AuthErrorCode.USER_NOT_FOUND)
        if not check_password_hash(account["password_hash"], password or ""):
            raise AuthError(AuthErrorCode.WRONG_PASSWORD)
        return AuthUser(uid=account["uid"], email=account["email"])

    def sign_up(self, email: str, password: str) -> AuthUser:
        email = normalize_email(email)
        check_credentials_shape(email, password)
        if self._by_email(email) is not None:
            raise AuthError(AuthErrorCode.EMAIL_ALREADY_IN_USE)
        uid = new_id()
        self._accounts[uid] = {
            "uid": uid,
            "email": email,
            "password_hash": generate_password_hash(password),
        }
        return AuthUser(uid=uid, email=email)

    def sign_out(self, uid: str) -> None:
        self.signed_out.append(uid)

    def delete_account(self, uid: str) -> None:
        if self._accounts.pop(uid, None) is None:
            raise AuthError(AuthErrorCode.USER_NOT_FOUND)

    def get_user(self, uid: str) -> AuthUser | None:
        account = self._accounts.get(uid)
        return AuthUser(uid=account["uid"], email=account["email"]) if account else None

    def set_password(self, uid: str, password: str) -> None:
        account = self._accounts.get(uid)
        if account is None:
            raise AuthError(AuthErrorCode.USER_NOT_FOUND)
        check_credentials_shape(account["email"], password)
        account["password_hash"] = generate_password_hash(password)

    def find_by_email(self, email: str) -> AuthUser | None:
        account = self._by_email(normalize_email(email))
        return AuthUser(uid=account["uid"], email=account["email"]) if account else None
