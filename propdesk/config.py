import os
from datetime import timedelta


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default


class Config:
    # Secret key for sessions / JWT
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret")

    # Database connection (sqlite fallback for local runs)
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", "sqlite:///propdesk.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # JWT Configuration
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", SECRET_KEY)
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=int(os.environ.get("JWT_ACCESS_TOKEN_HOURS", 8)))

    # Flask Configuration
    FLASK_ENV = os.environ.get("FLASK_ENV", "production")
    FLASK_DEBUG = os.environ.get("FLASK_DEBUG", "False").lower() == "true"
    JSON_SORT_KEYS = False
    API_PREFIX = "/api"

    # Comma-separated, added to the localhost defaults
    CORS_ALLOWED_ORIGINS = os.environ.get("CORS_ALLOWED_ORIGINS", "")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Collaborators: "sql" uses the Flask-SQLAlchemy session, "memory" keeps
    # everything in process (tests, demos)
    STORE_BACKEND = os.environ.get("STORE_BACKEND", "sql")
    # db.create_all() at startup; turn off when the schema is managed by migrations
    AUTO_CREATE_TABLES = os.environ.get("AUTO_CREATE_TABLES", "true").lower() == "true"

    # Reporting
    # fixed: expenses = revenue * EXPENSE_RATIO
    # breakdown: provider costs + operational costs ratios
    EXPENSE_MODEL = os.environ.get("EXPENSE_MODEL", "fixed")
    EXPENSE_RATIO = _env_float("EXPENSE_RATIO", 0.30)
    EXPENSE_BREAKDOWN = {
        "service_provider_costs": _env_float("EXPENSE_PROVIDER_RATIO", 0.15),
        "operational_costs": _env_float("EXPENSE_OPERATIONAL_RATIO", 0.10),
    }
    CURRENCY = os.environ.get("CURRENCY", "USD")


class DevelopmentConfig(Config):
    FLASK_ENV = "development"
    FLASK_DEBUG = True
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "DEBUG")


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    JWT_SECRET_KEY = "test-jwt-secret-with-enough-length-0123456789"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    STORE_BACKEND = "memory"
    EXPENSE_MODEL = "fixed"
    EXPENSE_RATIO = 0.30
    LOG_LEVEL = "WARNING"


class ProductionConfig(Config):
    SECRET_KEY = os.environ.get("SECRET_KEY")

    @classmethod
    def validate(cls):
        if not cls.SECRET_KEY:
            raise ValueError("SECRET_KEY environment variable must be set")
        if not os.environ.get("DATABASE_URL"):
            raise ValueError("DATABASE_URL environment variable must be set")
