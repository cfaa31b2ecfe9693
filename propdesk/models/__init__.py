from ..extensions import db

from .user import UserProfile, AuthAccount
from .property import Property
from .service_provider import ServiceProvider
from .invoice import Invoice

__all__ = ["db", "UserProfile", "AuthAccount", "Property", "ServiceProvider", "Invoice"]
