"""
Error taxonomy shared by the validation, storage and rendering layers.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional


class FiscabotError(Exception):
    """Base class for errors reported back to the HTTP caller."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_payload(self) -> Dict[str, Any]:
        return {"ok": False, "error": self.message}


class ValidationFailure(FiscabotError):
    """A submission was rejected before anything was stored."""

    status_code = 400


class MissingField(ValidationFailure):
    def __init__(self, fields: Iterable[str]):
        self.fields = list(fields)
        super().__init__(
            "Campo(s) obrigatório(s) ausente(s): " + ", ".join(self.fields)
        )


class InvalidDate(ValidationFailure):
    def __init__(self, value: Any):
        self.value = value
        super().__init__(
            f"Data inválida em data_evento: {value!r} (use o formato DD/MM/AAAA)"
        )


class InvalidTime(ValidationFailure):
    def __init__(self, field: str, value: Any):
        self.field = field
        self.value = value
        super().__init__(
            f"Horário inválido em {field}: {value!r} (use HH:MM ou HH:MM:SS)"
        )


class TooManyPhotos(ValidationFailure):
    def __init__(self, count: int, limit: int):
        self.count = count
        self.limit = limit
        super().__init__(f"Máximo de {limit} fotos por denúncia ({count} enviadas)")


class PhotoTooLarge(ValidationFailure):
    def __init__(self, filename: str, limit: int):
        self.filename = filename
        self.limit = limit
        super().__init__(
            f"Foto muito grande: {filename} (máximo de {limit / (1024 * 1024):g} MB)"
        )


class InvalidPayload(ValidationFailure):
    """The request body could not be read as form data or JSON."""


class NotFound(FiscabotError):
    status_code = 404

    def __init__(self, report_id: str):
        self.report_id = report_id
        super().__init__("Denúncia não encontrada")


class PersistenceFailure(FiscabotError):
    """Reading or writing the complaint store failed."""

    def __init__(
        self,
        message: str = "Erro ao salvar a denúncia",
        *,
        details: Optional[str] = None,
        hint: Optional[str] = None,
        code: Optional[str] = None,
    ):
        super().__init__(message)
        self.details = details
        self.hint = hint
        self.code = code

    def diagnostics(self) -> Dict[str, Optional[str]]:
        return {"details": self.details, "hint": self.hint, "code": self.code}


class RenderFailure(FiscabotError):
    """QR code or HTML generation failed."""


__all__ = [
    "FiscabotError",
    "ValidationFailure",
    "MissingField",
    "InvalidDate",
    "InvalidTime",
    "TooManyPhotos",
    "PhotoTooLarge",
    "InvalidPayload",
    "NotFound",
    "PersistenceFailure",
    "RenderFailure",
]
