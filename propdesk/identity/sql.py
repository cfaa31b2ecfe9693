from __future__ import annotations

import logging
from functools import wraps

from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from werkzeug.security import check_password_hash, generate_password_hash

from ..errors import AuthError, AuthErrorCode
from ..extensions import db
from ..models import AuthAccount
from ..models.base import utcnow
from .base import AuthUser, IdentityProvider, check_credentials_shape, normalize_email

logger = logging.getLogger(__name__)


def _mapped(fn):
    """Translate database failures into the auth error taxonomy."""
    @wraps(fn)
    def wrapper(self, *args, **kwargs):
        try:
            return fn(self, *args, **kwargs)
        except AuthError:
            raise
        except IntegrityError:
            self.session.rollback()
            raise AuthError(AuthErrorCode.EMAIL_ALREADY_IN_USE)
        except OperationalError:
            self.session.rollback()
            logger.exception("Identity backend unreachable in %s", fn.__name__)
            raise AuthError(AuthErrorCode.NETWORK_REQUEST_FAILED)
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("Identity backend error in %s", fn.__name__)
            raise AuthError(AuthErrorCode.UNKNOWN)
    return wrapper


class SqlIdentityProvider(IdentityProvider):
    """Credentials in the auth_accounts table, hashed with Werkzeug."""

    def __init__(self, session=None):
        self._session = session

    @property
    def session(self):
        return self._session if self._session is not None else db.session

    def _by_email(self, email: str):
        return self.session.execute(
            db.select(AuthAccount).filter_by(email=email)
        ).scalar_one_or_none()

    @_mapped
    def sign_in(self, email: str, password: str) -> AuthUser:
        email = normalize_email(email)
        account = self._by_email(email)
        if account is None or account.disabled:
            raise AuthError(AuthErrorCode.USER_NOT_FOUND)
        if not check_password_hash(account.password_hash, password or ""):
            raise AuthError(AuthErrorCode.WRONG_PASSWORD)
        account.last_sign_in = utcnow()
        self.session.commit()
        return AuthUser(uid=account.uid, email=account.email)

    @_mapped
    def sign_up(self, email: str, password: str) -> AuthUser:
        email = normalize_email(email)
        check_credentials_shape(email, password)
        if self._by_email(email) is not None:
            raise AuthError(AuthErrorCode.EMAIL_ALREADY_IN_USE)
        account = AuthAccount(email=email, password_hash=generate_password_hash(password))
        self.session.add(account)
        self.session.commit()
        logger.info("Created auth account %s", account.uid)
        return AuthUser(uid=account.uid, email=account.email)

    def sign_out(self, uid: str) -> None:
        # Tokens are stateless; revocation happens on the JWT blocklist
        logger.info("Signed out %s", uid)

    @_mapped
    def delete_account(self, uid: str) -> None:
        account = self.session.get(AuthAccount, uid)
        if account is None:
            raise AuthError(AuthErrorCode.USER_NOT_FOUND)
        self.session.delete(account)
        self.session.commit()
        logger.info("Deleted auth account %s", uid)

    @_mapped
    def get_user(self, uid: str) -> AuthUser | None:
        account = self.session.get(AuthAccount, uid)
        return AuthUser(uid=account.uid, email=account.email) if account else None

    @_mapped
    def set_password(self, uid: str, password: str) -> None:
        account = self.session.get(AuthAccount, uid)
        if account is None:
            raise AuthError(AuthErrorCode.USER_NOT_FOUND)
        check_credentials_shape(account.email, password)
        account.password_hash = generate_password_hash(password)
        self.session.commit()

    @_mapped
    def find_by_email(self, email: str) -> AuthUser | None:
        account = self._by_email(normalize_email(email))
        return AuthUser(uid=account.uid, email=account.email) if account else None
