"""Service objects bound to the store and identity provider of the current app."""
from flask import current_app

from .auth import AuthService
from .dashboard import DashboardService
from .invoices import InvoiceService
from .properties import PropertyService
from .providers import ProviderService
from .reports import ReportService
from .signup import SignupService
from .users import UserService


def _ext():
    return current_app.extensions["propdesk"]


def get_store():
    return _ext()["store"]


def get_identity():
    return _ext()["identity"]


def auth_service():
    return AuthService(get_store(), get_identity())


def signup_service():
    return SignupService(get_store(), get_identity())


def user_service():
    return UserService(get_store())


def property_service():
    return PropertyService(get_store())


def provider_service():
    return ProviderService(get_store())


def invoice_service():
    return InvoiceService(get_store(), current_app.config.get("CURRENCY", "USD"))


def report_service():
    return ReportService(get_store(), _ext()["expense_model"], current_app.config.get("CURRENCY", "USD"))


def dashboard_service():
    return DashboardService(get_store(), _ext()["expense_model"])
