"""
Service-provider signup.

Signup writes to two systems (the identity provider and the document store)
in four steps. They run as a saga so a failure part-way leaves nothing
behind: no credential without a profile, no profile without a provider.
"""
import logging

from ..errors import AuthError, PropDeskError, SignupError
from ..identity.base import normalize_email
from ..models import ServiceProvider
from ..models.base import utcnow
from ..models.service_provider import default_availability
from ..store import SERVICE_PROVIDERS
from .saga import Saga, SagaFailed
from .users import UserService
from .validation import ensure_valid, validate_signup

logger = logging.getLogger(__name__)

DEFAULT_COUNTRY = "South Africa"

STEP_MESSAGES = {
    "create_credential": "Failed to create account",
    "create_profile": "Failed to create user profile",
    "create_provider": "Failed to create service provider profile",
    "link_provider": "Failed to link service provider to user profile",
}


def build_provider(uid: str, data: dict) -> ServiceProvider:
    first, last = data["first_name"].strip(), data["last_name"].strip()
    service = data["service"].strip()
    city, state = data["city"].strip(), data["state"].strip()
    return ServiceProvider(
        name=f"{first} {last}",
        business_name=data["business_name"].strip(),
        email=normalize_email(data["email"]),
        phone=data["phone"].strip(),
        service=service,
        service_categories=[service],
        service_areas=[city, state],
        availability=default_availability(),
        status="pending",
        rating=0,
        property_ids=[],
        business_address={
            "street": "",
            "city": city,
            "state": state,
            "zip_code": "",
            "country": data.get("country") or DEFAULT_COUNTRY,
        },
        compliance_status={
            "background_check": False,
            "drug_test": False,
            "safety_training": False,
            "last_updated": utcnow().isoformat(),
        },
        tags=[],
        notes="Account created via signup form",
        created_by=uid,
    )


class SignupService:
    def __init__(self, store, identity):
        self.store = store
        self.identity = identity
        self.users = UserService(store)

    def build_saga(self, data: dict) -> Saga:
        email = normalize_email(data["email"])
        saga = Saga("signup")
        saga.step(
            "create_credential",
            lambda r: self.identity.sign_up(email, data["password"]),
            lambda account: self.identity.delete_account(account.uid),
        )
        saga.step(
            "create_profile",
            lambda r: self.users.create_profile(
                r["create_credential"].uid,
                email,
                first_name=data["first_name"].strip(),
                last_name=data["last_name"].strip(),
                phone=data["phone"].strip(),
                role="service_provider",
                status="pending",
            ),
            lambda profile: self.users.delete_profile(profile.id),
        )
        saga.step(
            "create_provider",
            lambda r: self.store.add(SERVICE_PROVIDERS, build_provider(r["create_credential"].uid, data)),
            lambda provider: self.store.delete(SERVICE_PROVIDERS, provider.id),
        )
        saga.step(
            "link_provider",
            lambda r: self.users.link_service_provider(
                r["create_credential"].uid, r["create_provider"].id
            ),
        )
        return saga

    def signup(self, data: dict) -> dict:
        ensure_valid(validate_signup(data))
        try:
            results = self.build_saga(data).run()
        except SagaFailed as e:
            if isinstance(e.cause, AuthError):
                raise e.cause
            status = e.cause.status_code if isinstance(e.cause, PropDeskError) else None
            if e.failed_compensations:
                logger.error("Signup left partial state; compensations failed: %s", e.failed_compensations)
            raise SignupError(STEP_MESSAGES.get(e.step, "Signup failed"), step=e.step, status_code=status) from e
        profile = results["link_provider"]
        provider = results["create_provider"]
        logger.info("Signup complete for %s (provider %s)", profile.id, provider.id)
        return {
            "message": "Account created successfully! You can now log in.",
            "user": profile.serialize(),
            "provider": provider.serialize(),
        }
