from datetime import datetime
from typing import Optional

from pydantic import Field

from .common import CamelModel, ProjectStatus


class ProjectCreate(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    type: str = Field(min_length=1, max_length=100)
    difficulty: str = Field(min_length=1, max_length=100)
    location: str = Field(min_length=1, max_length=200)


class ProjectRead(CamelModel):
    id: str
    name: str
    description: str
    type: str
    difficulty: str
    location: str
    status: ProjectStatus
    created_by: Optional[str] = None
    created_at: datetime


class ProjectCreatedResponse(CamelModel):
    message: str
    project_id: str
