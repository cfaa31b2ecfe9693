from .auth import auth_bp
from .dashboard import dashboard_bp
from .health import health_bp
from .invoices import invoices_bp
from .properties import properties_bp
from .providers import providers_bp
from .reports import reports_bp

BLUEPRINTS = (auth_bp, dashboard_bp, properties_bp, providers_bp, invoices_bp, reports_bp, health_bp)


def register_blueprints(app):
    for bp in BLUEPRINTS:
        app.register_blueprint(bp)
