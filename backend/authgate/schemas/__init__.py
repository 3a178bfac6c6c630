"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import LoginSchema, RegisterSchema
from .user import UserSchema

__all__ = [
    "LoginSchema",
    "RegisterSchema",
    "UserSchema",
]
