"""Admin bootstrap and sample data for local environments."""
import logging
from datetime import date, timedelta

from .models import Invoice, Property, ServiceProvider, UserProfile
from .models.service_provider import default_availability
from .store import INVOICES, PROPERTIES, SERVICE_PROVIDERS, USERS

logger = logging.getLogger(__name__)

SAMPLE_PROPERTIES = [
    {
        "id": "prop_flour_market",
        "name": "The Flour Market",
        "address": "123 Main Street, Downtown, CA 90210",
        "property_type": "commercial",
        "description": "Historic retail building in downtown area with excellent foot traffic",
        "financial_info": {"purchase_price": 2500000, "current_value": 3200000, "monthly_rent": 25000,
                           "property_tax": 18000, "insurance": 12000},
        "details": {"amenities": ["Parking", "Security", "HVAC", "Loading Dock"], "square_footage": 15000},
    },
    {
        "id": "prop_knysna_mall",
        "name": "Knysna Mall",
        "address": "45 Waterfront Drive, Knysna, WC 6571",
        "property_type": "commercial",
        "description": "Regional shopping centre with covered parking",
        "financial_info": {"purchase_price": 5400000, "current_value": 6100000, "monthly_rent": 48000,
                           "property_tax": 32000, "insurance": 21000},
        "details": {"amenities": ["Parking", "Food Court", "Security"], "square_footage": 42000},
    },
    {
        "id": "prop_riverside_lofts",
        "name": "Riverside Lofts",
        "address": "9 River Road, Midtown, CA 90012",
        "property_type": "residential",
        "description": "Converted warehouse apartments",
        "financial_info": {"purchase_price": 1800000, "current_value": 2100000, "monthly_rent": 16500,
                           "property_tax": 9000, "insurance": 6000},
        "details": {"amenities": ["Gym", "Bike Storage"], "units": 24},
    },
]

SAMPLE_PROVIDERS = [
    {
        "id": "prov_cleanpro_services",
        "name": "CleanPro Services",
        "business_name": "CleanPro Services LLC",
        "email": "info@cleanpro.com",
        "phone": "+15550101",
        "service": "Cleaning Services",
        "service_categories": ["General Cleaning", "Window Cleaning", "Deep Cleaning"],
        "service_areas": ["Downtown", "Midtown"],
        "rating": 4.8,
        "property_ids": ["prop_flour_market", "prop_riverside_lofts"],
    },
    {
        "id": "prov_parking_plus",
        "name": "Parking Plus",
        "business_name": "Parking Plus Management",
        "email": "ops@parkingplus.com",
        "phone": "+15550102",
        "service": "Parking Management",
        "service_categories": ["Parking", "Security"],
        "service_areas": ["Knysna"],
        "rating": 4.5,
        "property_ids": ["prop_knysna_mall"],
    },
    {
        "id": "prov_fibernet_solutions",
        "name": "FiberNet Solutions",
        "business_name": "FiberNet Solutions Inc",
        "email": "support@fibernet.com",
        "phone": "+15550103",
        "service": "Internet Services",
        "service_categories": ["Networking", "Fiber Installation"],
        "service_areas": ["Downtown", "Knysna"],
        "rating": 4.2,
        "property_ids": ["prop_flour_market", "prop_knysna_mall"],
    },
]

# (number, property, provider, description, days ago issued, status, line items, tax)
SAMPLE_INVOICES = [
    ("INV-SAMPLE-001", "prop_knysna_mall", "prov_parking_plus", "Monthly parking maintenance and security",
     30, "paid", [("Parking lot cleaning", 1, 500), ("Security monitoring", 30, 25)], 125),
    ("INV-SAMPLE-002", "prop_flour_market", "prov_cleanpro_services", "Deep cleaning and sanitization",
     25, "paid", [("Deep cleaning", 1, 1800), ("Window cleaning", 12, 40)], 228),
    ("INV-SAMPLE-003", "prop_flour_market", "prov_fibernet_solutions", "Fiber upgrade",
     18, "sent", [("Fiber installation", 1, 3200), ("Router", 2, 180)], 356),
    ("INV-SAMPLE-004", "prop_riverside_lofts", "prov_cleanpro_services", "Common area cleaning",
     60, "overdue", [("Common area cleaning", 4, 350)], 140),
    ("INV-SAMPLE-005", "prop_knysna_mall", "prov_fibernet_solutions", "Network maintenance",
     95, "paid", [("Network maintenance", 1, 950)], 95),
    ("INV-SAMPLE-006", "prop_riverside_lofts", "prov_cleanpro_services", "Move-out cleaning",
     5, "draft", [("Move-out cleaning", 2, 420)], 84),
]


def ensure_admin(store, identity, email, password, first_name="Admin", last_name=None):
    """Create the admin credential and profile, or reset an existing one."""
    account = identity.find_by_email(email)
    created = account is None
    if created:
        account = identity.sign_up(email, password)
    else:
        identity.set_password(account.uid, password)

    profile = store.get(USERS, account.uid)
    if profile is None:
        store.add(USERS, UserProfile(
            id=account.uid, email=account.email, first_name=first_name, last_name=last_name,
            role="admin", status="active", profile_completed=True,
        ))
    else:
        store.update(USERS, account.uid, role="admin", status="active")
    logger.info("Admin %s %s", account.email, "created" if created else "updated")
    return account


def seed_sample_data(store, today=None) -> dict:
    """Insert the sample catalog; records that already exist are left alone."""
    today = today or date.today()
    counts = {"properties": 0, "providers": 0, "invoices": 0}

    for data in SAMPLE_PROPERTIES:
        if store.get(PROPERTIES, data["id"]) is None:
            store.add(PROPERTIES, Property(status="active", created_by="system", **data))
            counts["properties"] += 1

    for data in SAMPLE_PROVIDERS:
        if store.get(SERVICE_PROVIDERS, data["id"]) is None:
            store.add(SERVICE_PROVIDERS, ServiceProvider(
                status="active", availability=default_availability(), created_by="system", **data
            ))
            counts["providers"] += 1

    for number, property_id, provider_id, description, days_ago, status, items, tax in SAMPLE_INVOICES:
        if store.list(INVOICES, invoice_number=number):
            continue
        issued = today - timedelta(days=days_ago)
        invoice = Invoice(
            invoice_number=number,
            property_id=property_id,
            provider_id=provider_id,
            description=description,
            issue_date=issued,
            due_date=issued + timedelta(days=30),
            paid_date=issued + timedelta(days=10) if status == "paid" else None,
            status=status,
            line_items=[{"description": d, "quantity": q, "unit_price": p} for d, q, p in items],
            tax=tax,
            currency="USD",
        ).recalculate()
        store.add(INVOICES, invoice)
        counts["invoices"] += 1

    logger.info("Seeded %s", counts)
    return counts
