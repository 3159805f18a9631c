"""Storage interface shared by the local and remote strategies."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from fiscabot.schemas.denuncia import Denuncia


class ReportStore(ABC):
    """Append-only complaint store."""

    backend: str = "abstract"

    @abstractmethod
    async def append(self, record: Denuncia) -> str:
        """Persist ``record`` and return its id. Raises ``PersistenceFailure``."""

    @abstractmethod
    async def get_by_id(self, report_id: str) -> Optional[Denuncia]:
        """Return the stored record or ``None``."""

    @abstractmethod
    async def healthcheck(self) -> None:
        """Raise ``PersistenceFailure`` when the store cannot be used."""
