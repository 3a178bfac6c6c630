"""User resource schemas."""

from __future__ import annotations

from marshmallow import Schema, fields

from authgate.models.user import Role


class UserSchema(Schema):
    """Public representation of a principal. Never includes the password hash."""

    user_id = fields.String(data_key="userId", required=True)
    email = fields.Email(required=True)
    first_name = fields.String(data_key="firstName")
    last_name = fields.String(data_key="lastName")
    role = fields.Enum(Role, by_value=True)
    is_active = fields.Boolean(data_key="isActive")
    created_at = fields.Integer(data_key="createdAt")
    updated_at = fields.Integer(data_key="updatedAt")
    last_login = fields.Integer(data_key="lastLogin", allow_none=True)
