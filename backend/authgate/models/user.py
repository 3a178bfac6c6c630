"""Principal model: the durable identity behind every session."""

from __future__ import annotations

from enum import Enum
from typing import Any

from sqlalchemy import BigInteger, Boolean, Index, String, UniqueConstraint
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, validates
from werkzeug.security import check_password_hash, generate_password_hash

from authgate.core.extensions import db

from .base import ReprMixin, TimestampMixin, new_uuid


class Role(str, Enum):
    """Closed set of roles a principal can hold."""

    ADMIN = "ADMIN"
    USER = "USER"


class User(ReprMixin, TimestampMixin, db.Model):
    """
    Authentication identity (principal).

    Fields
    ------
    user_id : str
        Opaque unique key (uuid4).
    email : str
        Login email. Stored normalized (lowercase, trimmed); unique.
    password_hash : str
        Hashed password (write-only setter via ``password``).
    first_name, last_name : str
        Display names captured at registration.
    role : Role
        ``ADMIN`` or ``USER``.
    is_active : bool
        Deactivated principals cannot log in or refresh.
    last_login : int | None
        Epoch-ms of the last successful login.
    created_at, updated_at : int
        Epoch-ms timestamps (from mixin).
    """

    __tablename__ = "users"
    __repr_key__ = "user_id"

    # Columns
    user_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    email: Mapped[str] = mapped_column(String(254), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    last_name: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    role: Mapped[Role] = mapped_column(
        SAEnum(Role, name="user_role", native_enum=False, length=10),
        nullable=False,
        default=Role.USER,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    last_login: Mapped[int | None] = mapped_column(BigInteger, nullable=True)

    # Constraints & indexes
    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        Index("ix_users_email", "email"),
    )

    # -------------------- Password API --------------------
    @property
    def password(self) -> Any:  # pragma: no cover - explicit write-only contract
        """
        Disallow reading passwords.

        :raises AttributeError: Always, to ensure password is write-only.
        """
        raise AttributeError("Password is write-only.")

    @password.setter
    def password(self, raw: str) -> None:
        """
        Hash and set the password.

        :param raw: Plain text password to hash.
        :type raw: str
        """
        if not isinstance(raw, str) or not raw:
            raise ValueError("Password must be a non-empty string.")
        self.password_hash = generate_password_hash(raw)

    def verify_password(self, raw: str) -> bool:
        """
        Verify a password against the stored hash in constant time.

        :param raw: Plain text password candidate.
        :type raw: str
        :returns: ``True`` if it matches; otherwise ``False``.
        :rtype: bool
        """
        if not self.password_hash:
            return False
        return bool(check_password_hash(self.password_hash, raw))

    # -------------------- Validators --------------------
    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """
        Normalize and validate email.

        :raises ValueError: If email is missing or malformed.
        """
        if not value or not isinstance(value, str):
            raise ValueError("Email is required.")
        v = value.strip().lower()
        # Minimal sanity check; full validation happens at API layer.
        if "@" not in v or "." not in v.split("@")[-1]:
            raise ValueError("Email format looks invalid.")
        return v

    @validates("role")
    def _coerce_role(self, key: str, value: Role | str) -> Role:
        """Accept ``Role`` members or their string values."""
        return value if isinstance(value, Role) else Role(str(value).upper())
