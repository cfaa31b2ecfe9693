from datetime import date

import pytest

from propdesk.errors import AuthError, AuthErrorCode, SignupError, StoreError, ValidationError
from propdesk.seeding import ensure_admin, seed_sample_data
from propdesk.services.saga import Saga, SagaFailed
from propdesk.services.signup import SignupService
from propdesk.store import INVOICES, PROPERTIES, SERVICE_PROVIDERS, USERS


# -----------------------------
# Saga runner
# -----------------------------
def test_saga_runs_steps_in_order():
    calls = []
    saga = Saga("demo")
    saga.step("a", lambda r: calls.append("a") or 1)
    saga.step("b", lambda r: calls.append("b") or r["a"] + 1)
    assert saga.run() == {"a": 1, "b": 2}
    assert calls == ["a", "b"]


def test_saga_compensates_in_reverse():
    undone = []

    def boom(results):
        raise RuntimeError("nope")

    saga = Saga("demo")
    saga.step("a", lambda r: "A", undone.append)
    saga.step("b", lambda r: "B", undone.append)
    saga.step("c", boom, undone.append)
    with pytest.raises(SagaFailed) as exc:
        saga.run()
    assert exc.value.step == "c"
    assert isinstance(exc.value.cause, RuntimeError)
    assert undone == ["B", "A"]


def test_failed_compensation_does_not_mask_cause():
    def bad_undo(result):
        raise RuntimeError("undo failed")

    def boom(results):
        raise ValueError("step failed")

    saga = Saga("demo").step("a", lambda r: 1, bad_undo).step("b", boom)
    with pytest.raises(SagaFailed) as exc:
        saga.run()
    assert isinstance(exc.value.cause, ValueError)
    assert exc.value.failed_compensations == ["a"]


# -----------------------------
# Signup
# -----------------------------
def test_signup_creates_linked_records(store, identity, signup_payload):
    result = SignupService(store, identity).signup(signup_payload)

    user, provider = result["user"], result["provider"]
    assert user["role"] == "service_provider"
    assert user["status"] == "pending"
    assert user["provider_id"] == provider["id"]
    assert user["profile_completed"] is True
    assert provider["status"] == "pending"
    assert provider["service_categories"] == ["Maintenance"]
    assert provider["service_areas"] == ["Cape Town", "Western Cape"]
    assert provider["business_address"]["country"] == "South Africa"
    assert provider["availability"]["saturday"]["available"] is False
    assert identity.find_by_email("THANDI@fixit.example").uid == user["id"]


def test_signup_validation_runs_before_side_effects(store, identity, signup_payload):
    signup_payload["confirm_password"] = "different"
    with pytest.raises(ValidationError):
        SignupService(store, identity).signup(signup_payload)
    assert identity.find_by_email(signup_payload["email"]) is None


def test_signup_duplicate_email_is_auth_error(store, identity, signup_payload):
    service = SignupService(store, identity)
    service.signup(signup_payload)
    with pytest.raises(AuthError) as exc:
        service.signup(signup_payload)
    assert exc.value.code is AuthErrorCode.EMAIL_ALREADY_IN_USE
    assert len(store.list(USERS)) == 1


def test_signup_rolls_back_when_provider_write_fails(store, identity, signup_payload, monkeypatch):
    original_add = store.add

    def failing_add(collection, record):
        if collection == SERVICE_PROVIDERS:
            raise StoreError("Document store unavailable (add)")
        return original_add(collection, record)

    monkeypatch.setattr(store, "add", failing_add)
    with pytest.raises(SignupError) as exc:
        SignupService(store, identity).signup(signup_payload)

    assert exc.value.step == "create_provider"
    assert exc.value.message == "Failed to create service provider profile"
    assert exc.value.status_code == 503
    assert identity.find_by_email(signup_payload["email"]) is None
    assert store.list(USERS) == []
    assert store.list(SERVICE_PROVIDERS) == []


def test_signup_rolls_back_when_link_fails(store, identity, signup_payload, monkeypatch):
    service = SignupService(store, identity)

    def failing_link(uid, provider_id):
        raise RuntimeError("write lost")

    monkeypatch.setattr(service.users, "link_service_provider", failing_link)
    with pytest.raises(SignupError) as exc:
        service.signup(signup_payload)

    assert exc.value.step == "link_provider"
    assert exc.value.status_code == 500
    assert identity.find_by_email(signup_payload["email"]) is None
    assert store.list(USERS) == []
    assert store.list(SERVICE_PROVIDERS) == []


# -----------------------------
# Seeding
# -----------------------------
def test_ensure_admin_creates_then_resets(store, identity):
    account = ensure_admin(store, identity, "boss@example.com", "first-pass")
    assert store.get(USERS, account.uid).role == "admin"

    again = ensure_admin(store, identity, "boss@example.com", "second-pass")
    assert again.uid == account.uid
    assert identity.sign_in("boss@example.com", "second-pass").uid == account.uid
    assert len(store.list(USERS)) == 1


def test_seed_sample_data_is_idempotent(store):
    first = seed_sample_data(store, today=date(2024, 6, 15))
    assert first == {"properties": 3, "providers": 3, "invoices": 6}
    assert seed_sample_data(store, today=date(2024, 6, 15)) == {"properties": 0, "providers": 0, "invoices": 0}

    invoice = store.list(INVOICES, invoice_number="INV-SAMPLE-001")[0]
    assert float(invoice.total) == 1375.0
    assert invoice.issue_date == date(2024, 5, 16)
    assert store.get(PROPERTIES, "prop_knysna_mall").name == "Knysna Mall"
