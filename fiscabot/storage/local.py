"""JSON array file store."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from fiscabot.core.errors import PersistenceFailure
from fiscabot.schemas.denuncia import Denuncia
from fiscabot.storage.base import ReportStore

logger = logging.getLogger(__name__)


class JsonFileStore(ReportStore):
    """
    Keeps every complaint in a single JSON array file.

    Each append reads the whole array, adds the record and rewrites the file
    through a temporary file plus ``os.replace``, so readers never see a
    half-written array. Appends are serialized by an ``asyncio.Lock``; this
    protects a single process only.
    """

    backend = "local"

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = asyncio.Lock()

    def ensure(self) -> None:
        """Create the directory and an empty array file when missing."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if not self.path.exists():
                self.path.write_text("[]", encoding="utf-8")
        except OSError as exc:
            raise PersistenceFailure(
                "Erro ao preparar o arquivo de denúncias", details=str(exc)
            ) from exc

    def _read(self) -> List[Dict[str, Any]]:
        self.ensure()
        try:
            raw = self.path.read_text(encoding="utf-8")
            rows = json.loads(raw) if raw.strip() else []
        except (OSError, json.JSONDecodeError) as exc:
            raise PersistenceFailure(
                "Erro ao ler o arquivo de denúncias", details=str(exc)
            ) from exc
        if not isinstance(rows, list):
            raise PersistenceFailure(
                "Arquivo de denúncias corrompido",
                details=f"{self.path} does not contain a JSON array",
            )
        return rows

    def _write(self, rows: List[Dict[str, Any]]) -> None:
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(rows, handle, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise PersistenceFailure(
                "Erro ao gravar o arquivo de denúncias", details=str(exc)
            ) from exc

    def _append(self, row: Dict[str, Any]) -> None:
        rows = self._read()
        if any(existing.get("id") == row["id"] for existing in rows):
            raise PersistenceFailure(
                "Identificador de denúncia duplicado", details=row["id"]
            )
        rows.append(row)
        self._write(rows)

    def _find(self, report_id: str) -> Optional[Dict[str, Any]]:
        for row in self._read():
            if isinstance(row, dict) and row.get("id") == report_id:
                return row
        return None

    async def append(self, record: Denuncia) -> str:
        row = record.to_local_row()
        async with self._lock:
            await run_in_threadpool(self._append, row)
        logger.info(
            "report_stored",
            extra={"report_id": record.id, "backend": self.backend},
        )
        return record.id

    async def get_by_id(self, report_id: str) -> Optional[Denuncia]:
        row = await run_in_threadpool(self._find, report_id)
        if row is None:
            return None
        try:
            return Denuncia.model_validate(row)
        except ValidationError as exc:
            raise PersistenceFailure(
                "Registro de denúncia inválido", details=str(exc)
            ) from exc

    async def healthcheck(self) -> None:
        await run_in_threadpool(self._read)
