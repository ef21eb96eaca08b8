"""User-Project membership (join table)."""

from datetime import datetime

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import utcnow


class Membership(SQLModel, table=True):
    __tablename__ = "user_projects"

    user_id: str = Field(foreign_key="users.id", primary_key=True)
    project_id: str = Field(foreign_key="projects.id", primary_key=True)
    joined_at: datetime = Field(
        default_factory=utcnow,
        nullable=False,
        sa_column_kwargs={"server_default": sa.func.now()},
        sa_type=sa.DateTime(timezone=True),
    )
