"""User endpoints: own profile and the ADMIN-only principal listing."""

from __future__ import annotations

from flask import Blueprint

from authgate.api.deps import (
    current_principal,
    require_auth,
    require_roles,
    success_response,
    timing,
)
from authgate.core.security import get_components
from authgate.models.user import Role
from authgate.schemas import UserSchema

bp = Blueprint("users", __name__, url_prefix="/users")

user_schema = UserSchema()
user_list_schema = UserSchema(many=True)


@bp.get("/profile")
@require_auth
@timing
def profile():
    """Return the authenticated principal's profile."""

    user = get_components().auth_service.me(current_principal())
    return success_response({"user": user_schema.dump(user)}, "Profile retrieved successfully")


@bp.get("/admin/users")
@require_auth
@require_roles(Role.ADMIN)
@timing
def list_users():
    """Return every principal (ADMIN only)."""

    users = get_components().user_admin.list_users()
    return success_response(
        {"users": user_list_schema.dump(users), "count": len(users)},
        "Users retrieved successfully",
    )


@bp.delete("/admin/users/<string:user_id>")
@require_auth
@require_roles(Role.ADMIN)
@timing
def delete_user(user_id: str):
    """Delete a principal (ADMIN only). Admins cannot delete themselves."""

    get_components().user_admin.delete_user(actor_id=current_principal().user_id, user_id=user_id)
    return success_response(None, "User deleted successfully")
