"""Implementações de repositório de Examples.

- MemoryExampleRepository: dev/test
- SqlExampleRepository: PostgreSQL/MySQL/SQLite via SQLAlchemy
"""

from app.infra.stores.memory_example_repository import MemoryExampleRepository
from app.infra.stores.sqlalchemy_example_repository import (
    RepositoryStats,
    SqlExampleRepository,
    create_db_engine,
)

__all__ = [
    "MemoryExampleRepository",
    "RepositoryStats",
    "SqlExampleRepository",
    "create_db_engine",
]
