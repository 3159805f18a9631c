"""
Complaint record schema.

One ``Denuncia`` is created per accepted submission and never modified
afterwards. Both storage strategies persist its JSON form.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

# Columns kept only by the local JSON store.
LOCAL_ONLY_FIELDS = frozenset(
    {"contato", "numero_veiculos", "placas", "consentimento_encaminhar"}
)


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Denuncia(BaseModel):
    """A citizen complaint as persisted by the storage layer."""

    id: str = Field(default_factory=_new_id)
    created_at: Optional[datetime] = Field(default_factory=_utcnow)

    tipo: str
    local: str
    bairro: Optional[str] = None
    referencia: Optional[str] = None
    nome_local: Optional[str] = None
    endereco: Optional[str] = None

    data_evento: date
    dia_semana: Optional[str] = None
    hora_inicio: str = Field(..., description="HH:MM:SS")
    hora_fim: str = Field(..., description="HH:MM:SS")
    observacoes: Optional[str] = None

    fotos: List[str] = Field(default_factory=list)

    contato: Optional[str] = None
    numero_veiculos: Optional[str] = None
    placas: List[str] = Field(default_factory=list)
    consentimento_encaminhar: bool = False

    def to_local_row(self) -> Dict[str, Any]:
        """Full JSON representation for the local array file."""
        return self.model_dump(mode="json")

    def to_remote_row(self) -> Dict[str, Any]:
        """Row for the remote table; the table fills ``created_at`` itself."""
        return self.model_dump(
            mode="json", exclude=set(LOCAL_ONLY_FIELDS) | {"created_at"}
        )


class SubmissionResponse(BaseModel):
    ok: bool = True
    id: str
    message: str = "Denúncia registrada com sucesso"
    viewUrl: str
    qrDataUrl: Optional[str] = None
