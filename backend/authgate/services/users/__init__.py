from .service import UserAdminService

__all__ = ["UserAdminService"]
