"""Supabase (PostgREST) table store."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

import httpx
from postgrest.exceptions import APIError
from pydantic import TypeAdapter, ValidationError
from starlette.concurrency import run_in_threadpool
from supabase import Client, create_client

from fiscabot.core.errors import PersistenceFailure
from fiscabot.schemas.denuncia import Denuncia
from fiscabot.storage.base import ReportStore

logger = logging.getLogger(__name__)

_timestamp = TypeAdapter(datetime)


def _failure(message: str, exc: Exception) -> PersistenceFailure:
    if isinstance(exc, APIError):
        return PersistenceFailure(
            message,
            details=exc.details or exc.message,
            hint=exc.hint,
            code=exc.code,
        )
    return PersistenceFailure(message, details=str(exc))


class SupabaseStore(ReportStore):
    """
    Inserts one row per complaint into a Supabase table.

    The table is expected to default ``created_at`` to ``now()``; the value
    is read back from the inserted row. Local-only columns (contact, vehicle
    count, plates, forwarding consent) are not sent.
    """

    backend = "supabase"

    def __init__(self, client: Client, table: str = "denuncias"):
        self.client = client
        self.table = table

    @classmethod
    def from_settings(cls, settings) -> "SupabaseStore":
        client = create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
        return cls(client, table=settings.SUPABASE_TABLE)

    def _insert(self, row: dict) -> Any:
        return self.client.table(self.table).insert(row).execute()

    def _select(self, report_id: str) -> Any:
        return (
            self.client.table(self.table)
            .select("*")
            .eq("id", report_id)
            .limit(1)
            .execute()
        )

    async def append(self, record: Denuncia) -> str:
        try:
            response = await run_in_threadpool(self._insert, record.to_remote_row())
        except (APIError, httpx.HTTPError) as exc:
            logger.error(
                "report_insert_failed",
                extra={"report_id": record.id, "error": str(exc)},
            )
            raise _failure("Erro ao salvar a denúncia", exc) from exc

        if not response.data:
            raise PersistenceFailure(
                "Erro ao salvar a denúncia", details="insert returned no rows"
            )
        stored = response.data[0]
        if stored.get("created_at"):
            try:
                record.created_at = _timestamp.validate_python(stored["created_at"])
            except ValidationError:
                logger.warning(
                    "report_created_at_unreadable",
                    extra={"report_id": record.id, "created_at": stored["created_at"]},
                )
        logger.info(
            "report_stored",
            extra={"report_id": record.id, "backend": self.backend},
        )
        return str(stored.get("id", record.id))

    async def get_by_id(self, report_id: str) -> Optional[Denuncia]:
        try:
            response = await run_in_threadpool(self._select, report_id)
        except APIError as exc:
            # 22P02: the id is not a valid uuid for the column type.
            if exc.code == "22P02":
                return None
            raise _failure("Erro ao consultar a denúncia", exc) from exc
        except httpx.HTTPError as exc:
            raise _failure("Erro ao consultar a denúncia", exc) from exc

        if not response.data:
            return None
        try:
            return Denuncia.model_validate(response.data[0])
        except ValidationError as exc:
            raise PersistenceFailure(
                "Registro de denúncia inválido", details=str(exc)
            ) from exc

    async def healthcheck(self) -> None:
        try:
            await run_in_threadpool(
                lambda: self.client.table(self.table).select("id").limit(1).execute()
            )
        except (APIError, httpx.HTTPError) as exc:
            raise _failure("Banco de dados indisponível", exc) from exc
