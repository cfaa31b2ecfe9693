from .base import AuthUser, IdentityProvider
from .memory import InMemoryIdentityProvider
from .sql import SqlIdentityProvider

__all__ = ["AuthUser", "IdentityProvider", "InMemoryIdentityProvider", "SqlIdentityProvider"]
