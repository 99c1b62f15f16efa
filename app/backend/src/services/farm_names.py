"""Farm display-name lookup with a process-lifetime cache."""

from __future__ import annotations

from typing import Any, Callable

import structlog
from sqlalchemy.orm import Session

from app.backend.src.models.farm import Farm

LOGGER = structlog.get_logger(__name__)


def _fallback_name(farm_id: Any) -> str:
    return f"Farm {farm_id}"


class FarmNameCache:
    """Map farm ids to display names backed by the ``farms`` table.

    The cache is shared by every request. Populating it is a plain
    check-then-set; two concurrent lookups for the same farm write the same
    value, so no lock is taken.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory
        self._names: dict[str, str] = {}

    def get(self, farm_id: Any) -> str:
        key = str(farm_id)
        cached = self._names.get(key)
        if cached is not None:
            return cached

        found: str | None = None
        try:
            with self._session_factory() as session:
                farm = session.get(Farm, int(farm_id))
                if farm is not None:
                    found = farm.farm_name or None
                else:
                    LOGGER.warning("farm_name_not_found", farm_id=key)
        except (ValueError, TypeError):
            LOGGER.warning("farm_name_not_found", farm_id=key)
        except Exception as exc:
            LOGGER.error("farm_name_lookup_failed", farm_id=key, error=str(exc))
            return _fallback_name(farm_id)

        name = found or _fallback_name(farm_id)
        self._names[key] = name
        return name

    def enhance(self, rows: list[dict[str, Any]], farm_id: Any) -> list[dict[str, Any]]:
        """Return copies of ``rows`` carrying ``farm_name``."""

        if not rows:
            return rows
        name = self.get(farm_id)
        return [{**row, "farm_name": name} for row in rows]

    def clear(self) -> None:
        self._names.clear()

    def __len__(self) -> int:
        return len(self._names)


__all__ = ["FarmNameCache"]
