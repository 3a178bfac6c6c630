"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from authgate.models.user import Role


class RegisterSchema(Schema):
    """Input payload for account registration."""

    email = fields.Email(
        required=True,
        validate=validate.Length(max=254),
        error_messages={
            "required": "Email is required",
            "invalid": "Please provide a valid email address",
        },
    )
    password = fields.String(
        required=True,
        validate=validate.Length(min=8, error="Password must be at least 8 characters long"),
        error_messages={"required": "Password is required"},
    )
    first_name = fields.String(
        data_key="firstName",
        required=True,
        validate=validate.Length(min=2, max=50, error="First name must be 2-50 characters"),
        error_messages={"required": "First name is required"},
    )
    last_name = fields.String(
        data_key="lastName",
        required=True,
        validate=validate.Length(min=2, max=50, error="Last name must be 2-50 characters"),
        error_messages={"required": "Last name is required"},
    )
    role = fields.Enum(Role, by_value=True, load_default=Role.USER)


class LoginSchema(Schema):
    """Input payload for authenticating a user under a claimed role."""

    email = fields.Email(
        required=True,
        error_messages={
            "required": "Email is required",
            "invalid": "Please provide a valid email address",
        },
    )
    password = fields.String(required=True, error_messages={"required": "Password is required"})
    role = fields.Enum(
        Role,
        by_value=True,
        required=True,
        error_messages={"required": "Role is required"},
    )
