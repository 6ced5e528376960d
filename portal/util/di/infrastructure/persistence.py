"""Persistence infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from portal.config import Settings
from portal.domain.repository import BulkJobRepository, InviteLogRepository
from portal.persistence.database import create_engine, create_session_factory
from portal.persistence.repository import (
    PostgresBulkJobRepository,
    PostgresInviteLogRepository,
)
from portal.util.di.base import ProviderBase
from portal.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """Persistence component base."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """Production persistence provider using PostgreSQL.

    Repositories are APP-scoped and open a short session per operation.
    """

    __is_mock__ = False

    scope = Scope.APP

    @provide(scope=Scope.APP)
    async def get_engine(self, settings: Settings) -> AsyncIterator[AsyncEngine]:
        """Provide database engine, disposed with the container."""
        engine = create_engine(settings)
        # Instrument SQLAlchemy for observability
        instrument_sqlalchemy(engine)
        yield engine
        await engine.dispose()

    @provide(scope=Scope.APP)
    def get_session_factory(
        self, engine: AsyncEngine
    ) -> async_sessionmaker[AsyncSession]:
        """Provide session factory."""
        return create_session_factory(engine)

    @provide(scope=Scope.APP)
    def get_invite_log_repository(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> InviteLogRepository:
        """Provide invite ledger repository."""
        return PostgresInviteLogRepository(session_factory)

    @provide(scope=Scope.APP)
    def get_bulk_job_repository(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> BulkJobRepository:
        """Provide bulk job repository."""
        return PostgresBulkJobRepository(session_factory)
