"""
Admin endpoints: project review queue and user listing.

Every route here requires the admin claim on the caller's token.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from mtc_api.api.serializers import project_payload, user_payload
from mtc_api.core.auth import require_admin
from mtc_api.schemas.common import MessageResponse
from mtc_api.schemas.projects import ProjectRead
from mtc_api.schemas.users import UserRead
from mtc_api.services.projects import ProjectRegistry, get_project_registry
from mtc_api.services.users import CredentialStore, get_credential_store

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/projects/pending", response_model=List[ProjectRead])
async def list_pending_projects(registry: ProjectRegistry = Depends(get_project_registry)):
    return [project_payload(p) for p in await registry.list_pending()]


@router.put("/projects/{project_id}/approve", response_model=MessageResponse)
async def approve_project(
    project_id: str,
    registry: ProjectRegistry = Depends(get_project_registry),
):
    await registry.approve(project_id)
    return {"message": "Project approved successfully"}


@router.put("/projects/{project_id}/reject", response_model=MessageResponse)
async def reject_project(
    project_id: str,
    registry: ProjectRegistry = Depends(get_project_registry),
):
    await registry.reject(project_id)
    return {"message": "Project rejected successfully"}


@router.get("/users", response_model=List[UserRead])
async def list_users(store: CredentialStore = Depends(get_credential_store)):
    """All users, skills expanded, password hash omitted."""
    return [user_payload(u) for u in await store.list_users()]
