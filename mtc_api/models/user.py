"""User model."""

from datetime import datetime

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import IdMixin, utcnow


class User(IdMixin, SQLModel, table=True):
    __tablename__ = "users"
    __table_args__ = (
        # At most one admin row; the first signup claims it.
        sa.Index(
            "ux_users_single_admin",
            "is_admin",
            unique=True,
            sqlite_where=sa.text("is_admin = 1"),
            postgresql_where=sa.text("is_admin"),
        ),
    )

    email: str = Field(nullable=False, unique=True, index=True)
    password_hash: str = Field(nullable=False)  # bcrypt
    name: str = Field(nullable=False)
    location: str = Field(nullable=False)
    skills: list[str] = Field(default_factory=list, sa_type=sa.JSON, nullable=False)
    is_admin: bool = Field(default=False, nullable=False)
    joined_at: datetime = Field(
        default_factory=utcnow,
        nullable=False,
        sa_column_kwargs={"server_default": sa.func.now()},
        sa_type=sa.DateTime(timezone=True),
    )
