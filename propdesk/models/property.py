from ..extensions import db
from .base import iso, new_id, utcnow

PROPERTY_STATUSES = ("active", "inactive", "maintenance")


class Property(db.Model):
    __tablename__ = 'properties'

    id = db.Column(db.String(64), primary_key=True, default=new_id)
    name = db.Column(db.String(255), nullable=False)
    address = db.Column(db.String(512), nullable=False)
    property_type = db.Column(db.String(50), default='residential')  # residential, commercial, mixed
    description = db.Column(db.Text, nullable=True)

    # purchase_price, current_value, monthly_rent, property_tax, insurance
    financial_info = db.Column(db.JSON, nullable=True)
    # amenities, contact info, square footage, year built, ...
    details = db.Column("metadata", db.JSON, nullable=True)

    # Status and metadata
    status = db.Column(db.String(20), default='active')  # active, inactive, maintenance
    created_by = db.Column(db.String(64), nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f'<Property {self.id}: {self.name}>'

    @property
    def monthly_rent(self) -> float:
        return float((self.financial_info or {}).get("monthly_rent") or 0)

    def serialize(self):
        return {
            'id': self.id,
            'name': self.name,
            'address': self.address,
            'property_type': self.property_type,
            'description': self.description,
            'financial_info': self.financial_info or {},
            'metadata': self.details or {},
            'status': self.status,
            'created_by': self.created_by,
            'created_at': iso(self.created_at),
            'updated_at': iso(self.updated_at),
        }
