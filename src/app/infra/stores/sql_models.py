"""Modelos ORM (SQLAlchemy) do repositório de Examples."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base declarativa compartilhada."""


class ExampleRecord(Base):
    """Linha da tabela `examples`."""

    __tablename__ = "examples"
    __table_args__ = (
        UniqueConstraint("email", name="uq_examples_email"),
        Index("ix_examples_name", "name"),
        Index("ix_examples_created_at", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    age: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return f"<ExampleRecord id={self.id}>"
