"""
Membership ledger: which users joined which projects.

join and leave are idempotent. Joining does not look at the project's
review status; a pending or rejected project can be joined by id.
"""

from __future__ import annotations

import structlog
from fastapi import Depends
from sqlalchemy import delete
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from mtc_api.core.auth import Clock
from mtc_api.core.context import AppContext, get_context
from mtc_api.core.database import get_session
from mtc_api.core.errors import ProjectNotFoundError, UserNotFoundError
from mtc_api.models.membership import Membership
from mtc_api.models.project import Project
from mtc_api.models.user import User

log = structlog.get_logger()

_INSERT_BY_DIALECT = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


class MembershipLedger:
    def __init__(self, session: AsyncSession, clock: Clock):
        self.session = session
        self.clock = clock

    def _dialect_name(self) -> str:
        return self.session.bind.dialect.name

    async def join(self, user_id: str, project_id: str) -> bool:
        """Add the membership. Returns False when it already existed."""
        if await self.session.get(Project, project_id) is None:
            raise ProjectNotFoundError()
        if await self.session.get(User, user_id) is None:
            raise UserNotFoundError()

        values = {"user_id": user_id, "project_id": project_id, "joined_at": self.clock()}
        insert = _INSERT_BY_DIALECT.get(self._dialect_name())
        if insert is not None:
            stmt = insert(Membership.__table__).values(**values).on_conflict_do_nothing(
                index_elements=["user_id", "project_id"]
            )
            result = await self.session.execute(stmt)
            await self.session.commit()
            created = result.rowcount == 1
        else:
            try:
                self.session.add(Membership(**values))
                await self.session.commit()
                created = True
            except IntegrityError:
                await self.session.rollback()
                created = False

        log.info("project.joined", user_id=user_id, project_id=project_id, created=created)
        return created

    async def leave(self, user_id: str, project_id: str) -> bool:
        """Remove the membership. Returns False when there was none."""
        result = await self.session.execute(
            delete(Membership).where(
                Membership.user_id == user_id,
                Membership.project_id == project_id,
            )
        )
        await self.session.commit()
        removed = result.rowcount > 0
        log.info("project.left", user_id=user_id, project_id=project_id, removed=removed)
        return removed

    async def list_project_ids_for_user(self, user_id: str) -> list[str]:
        result = await self.session.execute(
            select(Membership.project_id)
            .where(Membership.user_id == user_id)
            .order_by(Membership.joined_at, Membership.project_id)
        )
        return list(result.scalars().all())


def get_membership_ledger(
    session: AsyncSession = Depends(get_session),
    ctx: AppContext = Depends(get_context),
) -> MembershipLedger:
    return MembershipLedger(session, ctx.clock)
