# propdesk/routes/reports.py
from flask import Blueprint, Response, jsonify, request

from ..reporting.periods import ReportRange
from ..security.rbac import ADMIN, require_role
from ..services import report_service

reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


def _arg(*names):
    for name in names:
        value = request.args.get(name)
        if value:
            return value
    return None


def _report_range() -> ReportRange:
    return ReportRange.resolve(_arg("g", "granularity"), _arg("from"), _arg("to"))


def _filters() -> dict:
    return {
        "property_id": _arg("propertyId", "property_id"),
        "provider_id": _arg("providerId", "provider_id"),
        "status": _arg("status"),
    }


def _csv(filename: str, content: str) -> Response:
    return Response(
        content,
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@reports_bp.get("/financial")
@require_role(ADMIN)
def financial_report():
    return jsonify(report_service().financial_report(_report_range(), **_filters())), 200


@reports_bp.get("/financial/providers")
@require_role(ADMIN)
def provider_report():
    filters = _filters()
    report = report_service().provider_report(
        _report_range(), property_id=filters["property_id"], status=filters["status"]
    )
    return jsonify(report), 200


@reports_bp.get("/financial/export.csv")
@require_role(ADMIN)
def export_financial():
    filename, content = report_service().export_financial_csv(_report_range(), **_filters())
    return _csv(filename, content)


@reports_bp.get("/all/export.csv")
@require_role(ADMIN)
def export_all_reports():
    filename, content = report_service().export_all_reports_csv(_report_range())
    return _csv(filename, content)


@reports_bp.get("/integrity")
@require_role(ADMIN)
def data_integrity():
    return jsonify(report_service().data_integrity()), 200
