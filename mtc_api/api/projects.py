"""
Project endpoints: public catalog, submission, join/leave.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from mtc_api.api.serializers import project_payload
from mtc_api.core.auth import AuthenticatedUser, get_authenticated_user
from mtc_api.schemas.common import MessageResponse
from mtc_api.schemas.projects import ProjectCreate, ProjectCreatedResponse, ProjectRead
from mtc_api.services.memberships import MembershipLedger, get_membership_ledger
from mtc_api.services.projects import ProjectRegistry, get_project_registry

router = APIRouter()


@router.get("", response_model=List[ProjectRead])
async def list_projects(registry: ProjectRegistry = Depends(get_project_registry)):
    """List approved projects. No authentication required."""
    return [project_payload(p) for p in await registry.list_approved()]


@router.post("", response_model=ProjectCreatedResponse, status_code=201)
async def create_project(
    body: ProjectCreate,
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    registry: ProjectRegistry = Depends(get_project_registry),
):
    """Submit a project. It stays pending until an admin reviews it."""
    project = await registry.submit(
        creator_id=auth.user_id,
        name=body.name,
        description=body.description,
        type=body.type,
        difficulty=body.difficulty,
        location=body.location,
    )
    return {"message": "Project submitted for approval", "project_id": project.id}


@router.post("/{project_id}/join", response_model=MessageResponse)
async def join_project(
    project_id: str,
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    ledger: MembershipLedger = Depends(get_membership_ledger),
):
    await ledger.join(auth.user_id, project_id)
    return {"message": "Successfully joined project"}


@router.delete("/{project_id}/leave", response_model=MessageResponse)
async def leave_project(
    project_id: str,
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    ledger: MembershipLedger = Depends(get_membership_ledger),
):
    await ledger.leave(auth.user_id, project_id)
    return {"message": "Successfully left project"}
