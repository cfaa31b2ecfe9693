from ..extensions import db
from .base import iso, new_id, utcnow

PROVIDER_STATUSES = ("active", "inactive", "pending", "suspended")

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def default_availability():
    """Weekdays 09:00-17:00, weekends off."""
    return {
        day: {"start": "09:00", "end": "17:00", "available": day not in ("saturday", "sunday")}
        for day in WEEKDAYS
    }


class ServiceProvider(db.Model):
    __tablename__ = 'service_providers'

    id = db.Column(db.String(64), primary_key=True, default=new_id)
    name = db.Column(db.String(255), nullable=False)
    business_name = db.Column(db.String(255), nullable=True)
    email = db.Column(db.String(255), nullable=True, index=True)
    phone = db.Column(db.String(32), nullable=True)

    # Service details
    service = db.Column(db.String(100), nullable=False)
    service_categories = db.Column(db.JSON, nullable=True)
    service_areas = db.Column(db.JSON, nullable=True)
    availability = db.Column(db.JSON, nullable=True)

    status = db.Column(db.String(20), default='pending', index=True)  # active, inactive, pending, suspended
    rating = db.Column(db.Float, default=0)

    # Weak references to properties where they operate
    property_ids = db.Column(db.JSON, nullable=True)

    business_address = db.Column(db.JSON, nullable=True)
    compliance_status = db.Column(db.JSON, nullable=True)
    tags = db.Column(db.JSON, nullable=True)
    notes = db.Column(db.Text, nullable=True)

    created_by = db.Column(db.String(64), nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)
    last_active = db.Column(db.DateTime, default=utcnow)

    def __repr__(self):
        return f'<ServiceProvider {self.id}: {self.display_name}>'

    @property
    def display_name(self) -> str:
        return self.business_name or self.name

    def serialize(self):
        return {
            'id': self.id,
            'name': self.name,
            'business_name': self.business_name,
            'email': self.email,
            'phone': self.phone,
            'service': self.service,
            'service_categories': self.service_categories or [],
            'service_areas': self.service_areas or [],
            'availability': self.availability or {},
            'status': self.status,
            'rating': float(self.rating or 0),
            'property_ids': self.property_ids or [],
            'business_address': self.business_address or {},
            'compliance_status': self.compliance_status or {},
            'tags': self.tags or [],
            'notes': self.notes,
            'created_by': self.created_by,
            'created_at': iso(self.created_at),
            'updated_at': iso(self.updated_at),
            'last_active': iso(self.last_active),
        }
