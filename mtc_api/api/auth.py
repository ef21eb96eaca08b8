"""
Authentication endpoints.

- Email/Password signup & login, both returning a bearer JWT
- Profile of the calling user
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends

from mtc_api.api.serializers import profile_payload
from mtc_api.core.auth import (
    AuthenticatedUser,
    SessionIssuer,
    get_authenticated_user,
    get_session_issuer,
)
from mtc_api.core.errors import InvalidCredentialsError
from mtc_api.schemas.users import AuthResponse, LoginRequest, SignupRequest, UserProfile
from mtc_api.services.memberships import MembershipLedger, get_membership_ledger
from mtc_api.services.users import CredentialStore, get_credential_store

log = structlog.get_logger()
router = APIRouter()


@router.post("/signup", response_model=AuthResponse, status_code=201)
async def signup(
    body: SignupRequest,
    store: CredentialStore = Depends(get_credential_store),
    issuer: SessionIssuer = Depends(get_session_issuer),
):
    """Register a new user. The very first user becomes the admin."""
    user = await store.create_user(
        email=body.email,
        password=body.password,
        name=body.name,
        location=body.location,
        skills=body.skills,
    )
    token = issuer.issue(user.id, user.email, user.is_admin)
    return {
        "message": "User created successfully",
        "token": token,
        "user": profile_payload(user, []),
    }


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    store: CredentialStore = Depends(get_credential_store),
    ledger: MembershipLedger = Depends(get_membership_ledger),
    issuer: SessionIssuer = Depends(get_session_issuer),
):
    """Authenticate with email/password and receive a bearer token."""
    user = await store.authenticate(body.email, body.password)
    if not user:
        raise InvalidCredentialsError()

    project_ids = await ledger.list_project_ids_for_user(user.id)
    token = issuer.issue(user.id, user.email, user.is_admin)

    log.info("auth.login_success", user_id=user.id)
    return {
        "message": "Login successful",
        "token": token,
        "user": profile_payload(user, project_ids),
    }


@router.get("/profile", response_model=UserProfile)
async def profile(
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    store: CredentialStore = Depends(get_credential_store),
    ledger: MembershipLedger = Depends(get_membership_ledger),
):
    """Current user's profile with the ids of joined projects."""
    user = await store.get(auth.user_id)
    project_ids = await ledger.list_project_ids_for_user(user.id)
    return profile_payload(user, project_ids)
