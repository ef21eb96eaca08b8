"""
Project registry: submissions, the approval workflow, and the seed catalog.

Status values: pending → approved | rejected. Admin reviews are plain writes:
an approved project can be rejected later and vice versa, and re-approving
is a no-op in effect. Nothing moves a project back to pending.
"""

from __future__ import annotations

import structlog
from fastapi import Depends
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from mtc_api.core.auth import Clock
from mtc_api.core.context import AppContext, get_context
from mtc_api.core.database import get_session
from mtc_api.core.errors import ProjectNotFoundError
from mtc_api.models.project import Project
from mtc_api.schemas.common import REVIEW_TARGETS, ProjectStatus

log = structlog.get_logger()

SEED_PROJECTS: list[dict] = [
    {
        "id": "mtc-ai-study",
        "name": "MTC AI Study Group",
        "description": "Weekly study sessions on machine learning fundamentals and building AI applications.",
        "type": "ai/ml",
        "difficulty": "intermediate",
        "location": "Seattle",
    },
    {
        "id": "islamic-app-dev",
        "name": "Islamic Mobile App Development",
        "description": "Building mobile apps for the Muslim community - prayer times, Quran, community features.",
        "type": "mobile",
        "difficulty": "beginner",
        "location": "Remote",
    },
    {
        "id": "mtc-web-platform",
        "name": "MTC Web Platform",
        "description": "Developing the main MTC website and member portal using Next.js and React.",
        "type": "web-dev",
        "difficulty": "intermediate",
        "location": "Seattle",
    },
]


class ProjectRegistry:
    def __init__(self, session: AsyncSession, clock: Clock):
        self.session = session
        self.clock = clock

    async def _list_by_status(self, status: ProjectStatus) -> list[Project]:
        result = await self.session.execute(
            select(Project)
            .where(Project.status == status.value)
            .order_by(Project.created_at, Project.id)
        )
        return list(result.scalars().all())

    async def list_approved(self) -> list[Project]:
        return await self._list_by_status(ProjectStatus.APPROVED)

    async def list_pending(self) -> list[Project]:
        return await self._list_by_status(ProjectStatus.PENDING)

    async def get(self, project_id: str) -> Project:
        project = await self.session.get(Project, project_id)
        if not project:
            raise ProjectNotFoundError()
        return project

    async def submit(
        self,
        creator_id: str,
        name: str,
        description: str,
        type: str,
        difficulty: str,
        location: str,
    ) -> Project:
        """Create a project awaiting review, whatever the submitter's role."""
        project = Project(
            name=name,
            description=description,
            type=type,
            difficulty=difficulty,
            location=location,
            status=ProjectStatus.PENDING.value,
            created_by=creator_id,
            created_at=self.clock(),
        )
        self.session.add(project)
        await self.session.commit()
        await self.session.refresh(project)
        log.info("project.submitted", project_id=project.id, created_by=creator_id)
        return project

    async def review(self, project_id: str, target: ProjectStatus) -> Project:
        """Write an admin review decision onto an existing project."""
        if target not in REVIEW_TARGETS:
            raise ValueError(f"Cannot move a project to {target.value}")

        project = await self.get(project_id)
        old_status = project.status
        project.status = target.value
        self.session.add(project)
        await self.session.commit()
        await self.session.refresh(project)

        log.info(
            f"project.{target.value}",
            project_id=project_id,
            from_status=old_status,
            to_status=target.value,
        )
        return project

    async def approve(self, project_id: str) -> Project:
        return await self.review(project_id, ProjectStatus.APPROVED)

    async def reject(self, project_id: str) -> Project:
        return await self.review(project_id, ProjectStatus.REJECTED)

    async def seed_catalog(self) -> int:
        """Insert the built-in approved projects when the catalog is empty."""
        result = await self.session.execute(select(func.count()).select_from(Project))
        if result.scalar_one() > 0:
            return 0

        now = self.clock()
        for data in SEED_PROJECTS:
            self.session.add(
                Project(
                    **data,
                    status=ProjectStatus.APPROVED.value,
                    created_by=None,
                    created_at=now,
                )
            )
        await self.session.commit()
        log.info("project.catalog_seeded", count=len(SEED_PROJECTS))
        return len(SEED_PROJECTS)


def get_project_registry(
    session: AsyncSession = Depends(get_session),
    ctx: AppContext = Depends(get_context),
) -> ProjectRegistry:
    return ProjectRegistry(session, ctx.clock)
