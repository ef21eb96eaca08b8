"""
Application context: the explicitly constructed collaborators shared by
every request (store handle, session issuer, clock, settings).
"""

from __future__ import annotations

from datetime import timedelta
from typing import Optional

from fastapi import Request

from mtc_api.core.auth import Clock, SessionIssuer, system_clock
from mtc_api.core.config import Settings
from mtc_api.core.database import Database


class AppContext:
    def __init__(
        self,
        settings: Settings,
        database: Database,
        issuer: SessionIssuer,
        clock: Clock = system_clock,
    ):
        self.settings = settings
        self.database = database
        self.issuer = issuer
        self.clock = clock

    @classmethod
    def from_settings(cls, settings: Settings, *, clock: Optional[Clock] = None) -> "AppContext":
        clock = clock or system_clock
        database = Database(settings.database_url, echo=settings.debug)
        issuer = SessionIssuer(
            settings.secret_key,
            algorithm=settings.jwt_algorithm,
            ttl=timedelta(days=settings.jwt_expire_days),
            clock=clock,
        )
        return cls(settings=settings, database=database, issuer=issuer, clock=clock)


def get_context(request: Request) -> AppContext:
    return request.app.state.context
