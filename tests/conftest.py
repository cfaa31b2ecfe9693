"""
Shared fixtures: app built with TestingConfig (in-memory store and identity
provider), the test client, and record factories.
"""
from datetime import date
from decimal import Decimal

import pytest
from flask_jwt_extended import create_access_token

from propdesk import create_app
from propdesk.config import TestingConfig
from propdesk.extensions import revoked_tokens
from propdesk.models import Invoice, Property, ServiceProvider, UserProfile
from propdesk.store import INVOICES, PROPERTIES, SERVICE_PROVIDERS, USERS


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        yield app
    revoked_tokens.clear()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def store(app):
    return app.extensions["propdesk"]["store"]


@pytest.fixture
def identity(app):
    return app.extensions["propdesk"]["identity"]


@pytest.fixture
def auth_headers(store):
    """Build Authorization headers for a fresh profile with the given role."""
    def _headers(role="admin", provider_id=None):
        profile = store.add(USERS, UserProfile(
            email=f"{role}@example.com", role=role, status="active", provider_id=provider_id,
        ))
        token = create_access_token(
            identity=profile.id,
            additional_claims={"role": role, "email": profile.email, "provider_id": provider_id},
        )
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture
def admin_headers(auth_headers):
    return auth_headers("admin")


@pytest.fixture
def make_property(store):
    def _make(property_id=None, name="Harbor View", status="active", property_type="residential", **kwargs):
        prop = Property(
            id=property_id,
            name=name,
            address=kwargs.pop("address", "1 Harbor Way"),
            status=status,
            property_type=property_type,
            **kwargs,
        )
        return store.add(PROPERTIES, prop)
    return _make


@pytest.fixture
def make_provider(store):
    def _make(provider_id=None, name="Acme Plumbing", status="active", service="Plumbing", **kwargs):
        provider = ServiceProvider(id=provider_id, name=name, status=status, service=service, **kwargs)
        return store.add(SERVICE_PROVIDERS, provider)
    return _make


@pytest.fixture
def make_invoice(store):
    def _make(total, status="paid", issue_date=date(2024, 1, 15), property_id="p1", provider_id="v1", **kwargs):
        invoice = Invoice(
            total=Decimal(str(total)),
            subtotal=Decimal(str(total)),
            status=status,
            issue_date=issue_date,
            property_id=property_id,
            provider_id=provider_id,
            **kwargs,
        )
        return store.add(INVOICES, invoice)
    return _make


SIGNUP = {
    "first_name": "Thandi",
    "last_name": "Mokoena",
    "email": "thandi@fixit.example",
    "phone": "+27821234567",
    "business_name": "FixIt Handyman",
    "service": "Maintenance",
    "city": "Cape Town",
    "state": "Western Cape",
    "password": "s3cret!",
    "confirm_password": "s3cret!",
}


@pytest.fixture
def signup_payload():
    return dict(SIGNUP)
