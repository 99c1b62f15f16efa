"""Farm model."""

from __future__ import annotations

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.backend.src.models.base import Base


class Farm(Base):
    """A tenant farm; every report row is scoped to one of these."""

    __tablename__ = "farms"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    farm_name: Mapped[str | None] = mapped_column(String(255), nullable=True)


__all__ = ["Farm"]
