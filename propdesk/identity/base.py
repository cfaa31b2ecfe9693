from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass

from ..errors import AuthError, AuthErrorCode

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6


@dataclass(frozen=True)
class AuthUser:
    uid: str
    email: str


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def check_credentials_shape(email: str, password: str) -> None:
    """Provider-side checks shared by every implementation."""
    if not EMAIL_RE.match(email or ""):
        raise AuthError(AuthErrorCode.INVALID_EMAIL)
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise AuthError(AuthErrorCode.WEAK_PASSWORD)


class IdentityProvider(ABC):
    """
    Email/password identity provider.

    Every failure is raised as AuthError with a code from AuthErrorCode;
    callers never see backend-specific exceptions.
    """

    @abstractmethod
    def sign_in(self, email: str, password: str) -> AuthUser: ...

    @abstractmethod
    def sign_up(self, email: str, password: str) -> AuthUser: ...

    @abstractmethod
    def sign_out(self, uid: str) -> None: ...

    @abstractmethod
    def delete_account(self, uid: str) -> None: ...

    @abstractmethod
    def get_user(self, uid: str) -> AuthUser | None: ...

    @abstractmethod
    def find_by_email(self, email: str) -> AuthUser | None: ...

    @abstractmethod
    def set_password(self, uid: str, password: str) -> None: ...
