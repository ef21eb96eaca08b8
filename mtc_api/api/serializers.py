"""Model → wire payload helpers shared by the routers."""

from __future__ import annotations

from mtc_api.models.project import Project
from mtc_api.models.user import User


def user_payload(user: User) -> dict:
    """User fields safe to return. The password hash is never included."""
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "location": user.location,
        "skills": list(user.skills or []),
        "is_admin": bool(user.is_admin),
        "joined_at": user.joined_at,
    }


def profile_payload(user: User, project_ids: list[str]) -> dict:
    return {**user_payload(user), "projects": project_ids}


def project_payload(project: Project) -> dict:
    return {
        "id": project.id,
        "name": project.name,
        "description": project.description,
        "type": project.type,
        "difficulty": project.difficulty,
        "location": project.location,
        "status": project.status,
        "created_by": project.created_by,
        "created_at": project.created_at,
    }
