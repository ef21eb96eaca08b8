"""
Self-service user endpoints: skills and password.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from mtc_api.core.auth import AuthenticatedUser, get_authenticated_user
from mtc_api.schemas.common import MessageResponse
from mtc_api.schemas.users import PasswordUpdateRequest, SkillsUpdateRequest
from mtc_api.services.users import CredentialStore, get_credential_store

router = APIRouter()


@router.put("/skills", response_model=MessageResponse)
async def update_skills(
    body: SkillsUpdateRequest,
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    store: CredentialStore = Depends(get_credential_store),
):
    await store.update_skills(auth.user_id, body.skills)
    return {"message": "Skills updated successfully"}


@router.put("/password", response_model=MessageResponse)
async def update_password(
    body: PasswordUpdateRequest,
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    store: CredentialStore = Depends(get_credential_store),
):
    await store.update_password(auth.user_id, body.new_password)
    return {"message": "Password updated successfully"}
