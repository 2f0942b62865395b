"""Customer model definition for the customer directory."""

from __future__ import annotations

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from customer_directory.core.extensions import db

from .base import ReprMixin, TimestampMixin, UUIDPKMixin

USERNAME_MAX_LENGTH = 20
EMAIL_MAX_LENGTH = 254
NAME_MAX_LENGTH = 100


class Customer(UUIDPKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Registered customer and authentication identity.

    Values are stored exactly as received; trimming and format checks happen
    before the repository is reached. ``password_hash`` only ever holds a
    one-way hash and is never serialized.

    Fields
    ------
    username : str
        Login handle. Unique, case-sensitive.
    email : str
        Contact email. Unique, compared verbatim.
    password_hash : str
        Salted hash produced by the password hasher.
    first_name : str
        Given name.
    last_name : str
        Family name.
    created_at : datetime
        Creation timestamp (from mixin).
    updated_at : datetime
        Update timestamp (from mixin).
    """

    __tablename__ = "customers"

    # Columns
    username: Mapped[str] = mapped_column(String(USERNAME_MAX_LENGTH), nullable=False)
    email: Mapped[str] = mapped_column(String(EMAIL_MAX_LENGTH), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    last_name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)

    # Constraints
    __table_args__ = (
        UniqueConstraint("username", name="uq_customers_username"),
        UniqueConstraint("email", name="uq_customers_email"),
    )
