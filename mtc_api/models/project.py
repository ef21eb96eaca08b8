"""Project model."""

from typing import Optional

from sqlmodel import Field, SQLModel

from .base import CreatedAtMixin, IdMixin


class Project(IdMixin, CreatedAtMixin, SQLModel, table=True):
    __tablename__ = "projects"

    name: str = Field(nullable=False)
    description: str = Field(nullable=False)
    type: str = Field(nullable=False)  # free text: ai/ml | mobile | web-dev ...
    difficulty: str = Field(nullable=False)
    location: str = Field(nullable=False)
    status: str = Field(default="pending", nullable=False, index=True)  # pending | approved | rejected
    created_by: Optional[str] = Field(default=None, foreign_key="users.id")
