"""Repositório de Examples sobre SQLAlchemy (PostgreSQL, MySQL, SQLite).

As chamadas do driver são bloqueantes e rodam em `asyncio.to_thread`.
Exceções do SQLAlchemy são traduzidas por tipo (nunca por mensagem):

- IntegrityError                                   -> ExampleAlreadyExistsError
- sqlalchemy.exc.TimeoutError (pool esgotado)      -> RepositoryTimeoutError
- OperationalError / InterfaceError / Disconnection -> RepositoryConnectionError

Demais falhas propagam como estão.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager, contextmanager
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any, TypeVar

from sqlalchemy import case, create_engine, func, select
from sqlalchemy.exc import (
    DisconnectionError,
    IntegrityError,
    InterfaceError,
    OperationalError,
)
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.domain.example import Example, next_timestamp
from app.infra.stores.sql_models import Base, ExampleRecord
from app.protocols.example_repository import (
    ExampleAlreadyExistsError,
    ExampleNotFoundError,
    ExampleRepositoryProtocol,
)
from utils.errors import RepositoryConnectionError, RepositoryTimeoutError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable, Iterator

    from sqlalchemy.engine import Engine

    from config.settings import DatabaseSettings

logger = logging.getLogger(__name__)

T = TypeVar("T")

AGE_BUCKETS = ("under_18", "18_29", "30_49", "50_64", "65_plus")


@dataclass(frozen=True, slots=True)
class RepositoryStats:
    """Estatísticas agregadas do repositório."""

    total_count: int
    average_age: float
    age_distribution: dict[str, int] = field(default_factory=dict)
    recent_activity: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_count": self.total_count,
            "average_age": self.average_age,
            "age_distribution": dict(self.age_distribution),
            "recent_activity": self.recent_activity,
        }


def create_db_engine(settings: DatabaseSettings) -> Engine:
    """Cria engine conforme DatabaseSettings.

    SQLite em memória usa StaticPool para compartilhar a mesma conexão
    entre as threads do `asyncio.to_thread`.
    """
    url = settings.url
    if url.startswith("sqlite"):
        kwargs: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url in ("sqlite://", "sqlite:///"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=settings.echo, **kwargs)

    return create_engine(
        url,
        echo=settings.echo,
        pool_pre_ping=True,
        pool_size=settings.pool_size,
        max_overflow=settings.max_overflow,
        pool_timeout=settings.pool_timeout_seconds,
    )


def _to_domain(record: ExampleRecord) -> Example:
    return Example.restore(
        record.id,
        record.name,
        record.email,
        record.age,
        record.created_at,
        record.updated_at,
    )


def _as_utc(value: datetime) -> datetime:
    # SQLite devolve datetimes naive
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def _translate(exc: Exception, *, operation: str) -> Exception:
    """Converte exceção do SQLAlchemy em erro de repositório."""
    if isinstance(exc, PoolTimeoutError):
        return RepositoryTimeoutError(f"{operation}: connection pool timeout")
    if isinstance(exc, OperationalError | InterfaceError | DisconnectionError):
        return RepositoryConnectionError(f"{operation}: {type(exc).__name__}")
    return exc


class SqlExampleRepository(ExampleRepositoryProtocol):
    """Repositório de Examples persistido via SQLAlchemy ORM.

    Args:
        session_factory: sessionmaker ligado ao engine.
        engine: Engine usado por migrate()/close() (opcional).
        bound_session: Sessão de uma transação aberta por `transaction()`;
            quando presente, operações fazem flush sem commit.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        *,
        engine: Engine | None = None,
        bound_session: Session | None = None,
    ) -> None:
        self._factory = session_factory
        self._engine = engine
        self._bound_session = bound_session

    @classmethod
    def from_settings(cls, settings: DatabaseSettings) -> SqlExampleRepository:
        """Cria repositório (engine + sessionmaker) a partir das settings."""
        engine = create_db_engine(settings)
        factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
        return cls(factory, engine=engine)

    # ──────────────────────────────────────────────────────────────
    # Infra
    # ──────────────────────────────────────────────────────────────

    @contextmanager
    def _session_scope(self) -> Iterator[Session]:
        if self._bound_session is not None:
            yield self._bound_session
            self._bound_session.flush()
            return

        session = self._factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    async def _run(self, operation: str, fn: Callable[[], T]) -> T:
        try:
            return await asyncio.to_thread(fn)
        except (ExampleNotFoundError, ExampleAlreadyExistsError):
            raise
        except IntegrityError as exc:
            raise ExampleAlreadyExistsError("id_or_email", "") from exc
        except (PoolTimeoutError, OperationalError, InterfaceError, DisconnectionError) as exc:
            translated = _translate(exc, operation=operation)
            logger.warning(
                "sql_repository_error",
                extra={
                    "operation": operation,
                    "error_type": type(exc).__name__,
                    "mapped_to": type(translated).__name__,
                },
            )
            raise translated from exc

    async def migrate(self) -> None:
        """Cria schema (idempotente)."""
        if self._engine is None:
            msg = "migrate() requer engine"
            raise RuntimeError(msg)
        engine = self._engine
        await self._run("migrate", lambda: Base.metadata.create_all(engine))
        logger.info("sql_schema_migrated", extra={"table": ExampleRecord.__tablename__})

    async def ping(self) -> None:
        """Verifica conectividade (SELECT 1)."""

        def _ping() -> None:
            with self._factory() as session:
                session.execute(select(1))

        await self._run("ping", _ping)

    async def close(self) -> None:
        """Libera pool de conexões."""
        if self._engine is not None:
            await asyncio.to_thread(self._engine.dispose)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[SqlExampleRepository]:
        """Abre transação e entrega repositório ligado a ela.

        Commit ao sair sem erro; rollback se qualquer exceção escapar.

        Uso:
            async with repo.transaction() as tx:
                await tx.create(a)
                await tx.create(b)
        """
        session = self._factory()
        tx_repo = SqlExampleRepository(self._factory, engine=self._engine, bound_session=session)
        try:
            yield tx_repo
            await self._run("commit", session.commit)
        except BaseException:
            await asyncio.to_thread(session.rollback)
            raise
        finally:
            await asyncio.to_thread(session.close)

    # ──────────────────────────────────────────────────────────────
    # Implementação sync
    # ──────────────────────────────────────────────────────────────

    def _create_sync(self, example: Example) -> None:
        with self._session_scope() as session:
            if session.get(ExampleRecord, example.id) is not None:
                raise ExampleAlreadyExistsError("id", example.id)
            if self._find_by_email(session, example.email) is not None:
                raise ExampleAlreadyExistsError("email", example.email)
            session.add(
                ExampleRecord(
                    id=example.id,
                    name=example.name,
                    email=example.email,
                    age=example.age,
                    created_at=example.created_at,
                    updated_at=example.updated_at,
                )
            )

    def _get_by_id_sync(self, example_id: str) -> Example:
        with self._session_scope() as session:
            record = session.get(ExampleRecord, example_id)
            if record is None:
                raise ExampleNotFoundError(example_id)
            return _to_domain(record)

    def _get_by_email_sync(self, email: str) -> Example:
        with self._session_scope() as session:
            record = self._find_by_email(session, email)
            if record is None:
                raise ExampleNotFoundError(email)
            return _to_domain(record)

    def _update_sync(self, example: Example) -> Example:
        with self._session_scope() as session:
            record = session.get(ExampleRecord, example.id)
            if record is None:
                raise ExampleNotFoundError(example.id)
            owner = self._find_by_email(session, example.email)
            if owner is not None and owner.id != example.id:
                raise ExampleAlreadyExistsError("email", example.email)

            stored_updated_at = _as_utc(record.updated_at)
            record.name = example.name
            record.email = example.email
            record.age = example.age
            record.updated_at = next_timestamp(max(stored_updated_at, example.updated_at))
            session.flush()
            return _to_domain(record)

    def _delete_sync(self, example_id: str) -> None:
        with self._session_scope() as session:
            record = session.get(ExampleRecord, example_id)
            if record is None:
                raise ExampleNotFoundError(example_id)
            session.delete(record)

    def _list_sync(self, limit: int, offset: int) -> list[Example]:
        stmt = (
            select(ExampleRecord)
            .order_by(ExampleRecord.created_at.desc(), ExampleRecord.id.desc())
            .limit(limit)
            .offset(offset)
        )
        with self._session_scope() as session:
            return [_to_domain(record) for record in session.scalars(stmt)]

    def _count_sync(self) -> int:
        with self._session_scope() as session:
            return int(session.scalar(select(func.count()).select_from(ExampleRecord)) or 0)

    def _list_by_age_sync(
        self, min_age: int, max_age: int, limit: int, offset: int
    ) -> list[Example]:
        stmt = (
            select(ExampleRecord)
            .where(ExampleRecord.age >= min_age, ExampleRecord.age <= max_age)
            .order_by(ExampleRecord.created_at.desc(), ExampleRecord.id.desc())
            .limit(limit)
            .offset(offset)
        )
        with self._session_scope() as session:
            return [_to_domain(record) for record in session.scalars(stmt)]

    def _search_sync(self, query: str, limit: int, offset: int) -> list[Example]:
        stmt = (
            select(ExampleRecord)
            .where(func.lower(ExampleRecord.name).contains(query.lower(), autoescape=True))
            .order_by(ExampleRecord.created_at.desc(), ExampleRecord.id.desc())
            .limit(limit)
            .offset(offset)
        )
        with self._session_scope() as session:
            return [_to_domain(record) for record in session.scalars(stmt)]

    def _get_stats_sync(self) -> RepositoryStats:
        age = ExampleRecord.age
        bucket = case(
            (age < 18, "under_18"),
            (age < 30, "18_29"),
            (age < 50, "30_49"),
            (age < 65, "50_64"),
            else_="65_plus",
        ).label("age_range")
        since = datetime.now(UTC) - timedelta(hours=24)

        with self._session_scope() as session:
            total = session.scalar(select(func.count()).select_from(ExampleRecord)) or 0
            average = session.scalar(select(func.avg(age)))
            rows = session.execute(
                select(bucket, func.count()).select_from(ExampleRecord).group_by(bucket)
            ).all()
            recent = session.scalar(
                select(func.count())
                .select_from(ExampleRecord)
                .where(ExampleRecord.created_at > since)
            ) or 0

        distribution = dict.fromkeys(AGE_BUCKETS, 0)
        distribution.update({str(name): int(count) for name, count in rows})
        return RepositoryStats(
            total_count=int(total),
            average_age=float(average) if average is not None else 0.0,
            age_distribution=distribution,
            recent_activity=int(recent),
        )

    @staticmethod
    def _find_by_email(session: Session, email: str) -> ExampleRecord | None:
        return session.scalars(
            select(ExampleRecord).where(ExampleRecord.email == email)
        ).first()

    # ──────────────────────────────────────────────────────────────
    # Async API (ExampleRepositoryProtocol + extras)
    # ──────────────────────────────────────────────────────────────

    async def create(self, example: Example) -> None:
        await self._run("create", lambda: self._create_sync(example))

    async def get_by_id(self, example_id: str) -> Example:
        return await self._run("get_by_id", lambda: self._get_by_id_sync(example_id))

    async def get_by_email(self, email: str) -> Example:
        return await self._run("get_by_email", lambda: self._get_by_email_sync(email))

    async def update(self, example: Example) -> Example:
        return await self._run("update", lambda: self._update_sync(example))

    async def delete(self, example_id: str) -> None:
        await self._run("delete", lambda: self._delete_sync(example_id))

    async def list(self, limit: int, offset: int) -> list[Example]:
        return await self._run("list", lambda: self._list_sync(limit, offset))

    async def count(self) -> int:
        return await self._run("count", self._count_sync)

    async def list_by_age(
        self, min_age: int, max_age: int, limit: int, offset: int
    ) -> list[Example]:
        """Lista registros com idade em [min_age, max_age]."""
        return await self._run(
            "list_by_age", lambda: self._list_by_age_sync(min_age, max_age, limit, offset)
        )

    async def search(self, query: str, limit: int, offset: int) -> list[Example]:
        """Busca parcial case-insensitive por nome."""
        return await self._run("search", lambda: self._search_sync(query, limit, offset))

    async def get_stats(self) -> RepositoryStats:
        """Total, idade média, distribuição por faixa e criados nas últimas 24h."""
        return await self._run("get_stats", self._get_stats_sync)
