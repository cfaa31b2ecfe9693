from .rbac import ADMIN, SERVICE_PROVIDER, landing_route, require_role

__all__ = ["ADMIN", "SERVICE_PROVIDER", "landing_route", "require_role"]
