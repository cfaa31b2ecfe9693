# propdesk/routes/invoices.py
from flask import Blueprint, jsonify, request

from ..reporting.periods import parse_date_bound
from ..security.rbac import ADMIN, SERVICE_PROVIDER, current_provider_id, current_role, require_role
from ..services import invoice_service

invoices_bp = Blueprint("invoices", __name__, url_prefix="/api/invoices")


def _arg(*names):
    for name in names:
        value = request.args.get(name)
        if value:
            return value
    return None


def _forbidden():
    return jsonify(error="forbidden", message="Insufficient permissions"), 403


@invoices_bp.get("")
@require_role(ADMIN, SERVICE_PROVIDER)
def list_invoices():
    provider_id = _arg("providerId", "provider_id")
    if current_role() != ADMIN:
        provider_id = current_provider_id()
        if not provider_id:
            return jsonify(invoices=[], count=0), 200
    invoices = invoice_service().list_invoices(
        property_id=_arg("propertyId", "property_id"),
        provider_id=provider_id,
        status=_arg("status"),
        date_from=parse_date_bound(_arg("from")),
        date_to=parse_date_bound(_arg("to"), end=True),
    )
    return jsonify(invoices=[inv.serialize() for inv in invoices], count=len(invoices)), 200


@invoices_bp.get("/stats")
@require_role(ADMIN)
def invoice_stats():
    return jsonify(invoice_service().stats()), 200


@invoices_bp.get("/<invoice_id>")
@require_role(ADMIN, SERVICE_PROVIDER)
def invoice_detail(invoice_id):
    detail = invoice_service().detail(invoice_id)
    if current_role() != ADMIN and detail["provider_id"] != current_provider_id():
        return _forbidden()
    return jsonify(invoice=detail), 200


@invoices_bp.post("")
@require_role(ADMIN, SERVICE_PROVIDER)
def create_invoice():
    data = request.get_json(silent=True) or {}
    if current_role() != ADMIN:
        data["provider_id"] = current_provider_id()
        data["status"] = data.get("status") if data.get("status") in ("draft", "sent") else "draft"
    invoice = invoice_service().create(data)
    return jsonify(invoice=invoice.serialize()), 201


@invoices_bp.patch("/<invoice_id>/status")
@require_role(ADMIN)
def update_status(invoice_id):
    data = request.get_json(silent=True) or {}
    invoice = invoice_service().set_status(invoice_id, data.get("status"), data.get("paid_date"))
    return jsonify(invoice=invoice.serialize()), 200


@invoices_bp.delete("/<invoice_id>")
@require_role(ADMIN)
def delete_invoice(invoice_id):
    invoice_service().delete(invoice_id)
    return jsonify(message="Invoice deleted"), 200
