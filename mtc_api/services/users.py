"""
Credential store: user records, password hashes, and the first-admin rule.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

import sqlalchemy as sa
import structlog
from fastapi import Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from mtc_api.core.auth import Clock, hash_password, verify_password
from mtc_api.core.context import AppContext, get_context
from mtc_api.core.database import get_session
from mtc_api.core.errors import DuplicateEmailError, UserNotFoundError
from mtc_api.models.base import new_id
from mtc_api.models.user import User

log = structlog.get_logger()


@lru_cache(maxsize=None)
def _dummy_hash(rounds: int) -> str:
    """Hash checked for unknown emails so both login failures cost one bcrypt run."""
    return hash_password("mtc-unknown-user", rounds=rounds)


def _no_users_yet() -> sa.ColumnElement[bool]:
    """SQL expression that is true only while the users table is empty."""
    return sa.select(sa.func.count()).select_from(User.__table__).scalar_subquery() == 0


class CredentialStore:
    def __init__(self, session: AsyncSession, clock: Clock, *, bcrypt_rounds: int = 12):
        self.session = session
        self.clock = clock
        self.bcrypt_rounds = bcrypt_rounds

    async def find_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def find_by_id(self, user_id: str) -> Optional[User]:
        return await self.session.get(User, user_id)

    async def get(self, user_id: str) -> User:
        user = await self.find_by_id(user_id)
        if not user:
            raise UserNotFoundError()
        return user

    async def list_users(self) -> list[User]:
        result = await self.session.execute(select(User).order_by(User.joined_at, User.id))
        return list(result.scalars().all())

    async def _insert(self, values: dict, is_admin) -> None:
        stmt = sa.insert(User.__table__).values(**values, is_admin=is_admin)
        await self.session.execute(stmt)
        await self.session.commit()

    async def create_user(
        self,
        email: str,
        password: str,
        name: str,
        location: str,
        skills: list[str],
    ) -> User:
        """Create a user. The first user ever created becomes the admin.

        The admin flag is computed inside the INSERT itself, so two signups
        racing on an empty table cannot both observe zero users. The
        single-admin unique index turns any remaining race into an
        IntegrityError; the loser is inserted again as a regular user.
        """
        if await self.find_by_email(email):
            raise DuplicateEmailError()

        user_id = new_id()
        values = {
            "id": user_id,
            "email": email,
            "password_hash": hash_password(password, rounds=self.bcrypt_rounds),
            "name": name,
            "location": location,
            "skills": list(skills),
            "joined_at": self.clock(),
        }

        try:
            await self._insert(values, _no_users_yet())
        except IntegrityError:
            await self.session.rollback()
            if await self.find_by_email(email):
                raise DuplicateEmailError()
            log.info("user.admin_race_lost", email=email)
            try:
                await self._insert(values, False)
            except IntegrityError:
                await self.session.rollback()
                raise DuplicateEmailError()

        user = await self.get(user_id)
        log.info("user.registered", user_id=user.id, email=email, is_admin=user.is_admin)
        return user

    async def authenticate(self, email: str, password: str) -> Optional[User]:
        """Return the user when the credentials match, otherwise None."""
        user = await self.find_by_email(email)
        if not user:
            verify_password(password, _dummy_hash(self.bcrypt_rounds))
            log.warning("auth.login_failure", email=email, reason="unknown_email")
            return None
        if not verify_password(password, user.password_hash):
            log.warning("auth.login_failure", email=email, reason="bad_password")
            return None
        return user

    async def update_skills(self, user_id: str, skills: list[str]) -> User:
        user = await self.get(user_id)
        user.skills = list(skills)
        self.session.add(user)
        await self.session.commit()
        log.info("user.skills_updated", user_id=user_id, count=len(skills))
        return user

    async def update_password(self, user_id: str, password: str) -> None:
        user = await self.get(user_id)
        user.password_hash = hash_password(password, rounds=self.bcrypt_rounds)
        self.session.add(user)
        await self.session.commit()
        log.info("user.password_updated", user_id=user_id)


def get_credential_store(
    session: AsyncSession = Depends(get_session),
    ctx: AppContext = Depends(get_context),
) -> CredentialStore:
    return CredentialStore(session, ctx.clock, bcrypt_rounds=ctx.settings.bcrypt_rounds)
