"""
Validation and normalization of raw complaint submissions.

Everything here is pure: the functions take the raw field mapping posted by a
client (form or JSON) and return normalized values, or report which rule the
input broke. Nothing is read from or written to storage.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Union

from fiscabot.core.errors import (
    InvalidDate,
    InvalidTime,
    MissingField,
    ValidationFailure,
)

REQUIRED_FIELDS = ("tipo", "local", "data_evento", "hora_inicio", "hora_fim")

OPTIONAL_TEXT_FIELDS = (
    "bairro",
    "referencia",
    "nome_local",
    "endereco",
    "dia_semana",
    "observacoes",
    "contato",
    "numero_veiculos",
)

# Accepted input names per stored field, first match wins.
FIELD_ALIASES: Dict[str, tuple] = {
    "tipo": ("tipo", "type"),
    "data_evento": ("data_evento", "data"),
    "observacoes": ("observacoes", "descricao"),
    "numero_veiculos": ("num_veiculos", "numero_veiculos"),
    "consentimento_encaminhar": ("consent_forward", "consentimento_encaminhar"),
}

_DATE_RE = re.compile(r"([0-9]{2})/([0-9]{2})/([0-9]{4})")
_TIME_RE = re.compile(r"([01][0-9]|2[0-3]):([0-5][0-9])(?::([0-5][0-9]))?")


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return not value
    return False


def _pick(fields: Mapping[str, Any], name: str) -> Any:
    for key in FIELD_ALIASES.get(name, (name,)):
        value = fields.get(key)
        if not _is_blank(value):
            return value
    return None


def _text(value: Any) -> Optional[str]:
    if _is_blank(value):
        return None
    return value if isinstance(value, str) else str(value)


def normalize_date(value: Any) -> str:
    """
    Convert a ``DD/MM/YYYY`` date into ``YYYY-MM-DD``.

    The day/month/year triple has to name a real calendar day, so
    ``31/02/2024`` or ``01/13/2024`` raise ``InvalidDate``.
    """
    if not isinstance(value, str):
        raise InvalidDate(value)
    match = _DATE_RE.fullmatch(value.strip())
    if match is None:
        raise InvalidDate(value)

    day, month, year = (int(group) for group in match.groups())
    try:
        parsed = date(year, month, day)
    except ValueError as exc:
        raise InvalidDate(value) from exc
    if (parsed.day, parsed.month, parsed.year) != (day, month, year):
        raise InvalidDate(value)

    return f"{year:04d}-{month:02d}-{day:02d}"


def format_date_br(value: Union[str, date]) -> str:
    """Render a stored ISO date back as ``DD/MM/YYYY``."""
    parsed = date.fromisoformat(value) if isinstance(value, str) else value
    return f"{parsed.day:02d}/{parsed.month:02d}/{parsed.year:04d}"


def normalize_time(value: Any, field: str = "hora") -> str:
    """Accept ``HH:MM`` or ``HH:MM:SS`` and return ``HH:MM:SS``."""
    if not isinstance(value, str):
        raise InvalidTime(field, value)
    match = _TIME_RE.fullmatch(value.strip())
    if match is None:
        raise InvalidTime(field, value)
    hours, minutes, seconds = match.groups()
    return f"{hours}:{minutes}:{seconds or '00'}"


def parse_plates(value: Any) -> List[str]:
    """Split a comma-separated plate list (or take a JSON list) into plates."""
    if _is_blank(value):
        return []
    items = value if isinstance(value, (list, tuple)) else str(value).split(",")
    plates = []
    for item in items:
        plate = str(item).strip()
        if plate:
            plates.append(plate)
    return plates


def parse_consent(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return isinstance(value, str) and value.strip().lower() == "true"


@dataclass(frozen=True)
class ValidationResult:
    """Either the normalized fields or the reason they were rejected."""

    data: Optional[Dict[str, Any]] = None
    error: Optional[ValidationFailure] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Dict[str, Any]:
        if self.error is not None:
            raise self.error
        return dict(self.data or {})


def _normalize(fields: Mapping[str, Any]) -> Dict[str, Any]:
    missing = [name for name in REQUIRED_FIELDS if _pick(fields, name) is None]
    if missing:
        raise MissingField(missing)

    data: Dict[str, Any] = {
        "tipo": _text(_pick(fields, "tipo")),
        "local": _text(_pick(fields, "local")),
        "data_evento": normalize_date(_pick(fields, "data_evento")),
        "hora_inicio": normalize_time(_pick(fields, "hora_inicio"), "hora_inicio"),
        "hora_fim": normalize_time(_pick(fields, "hora_fim"), "hora_fim"),
    }
    for name in OPTIONAL_TEXT_FIELDS:
        data[name] = _text(_pick(fields, name))
    data["placas"] = parse_plates(fields.get("placas"))
    data["consentimento_encaminhar"] = parse_consent(
        _pick(fields, "consentimento_encaminhar")
    )
    return data


def validate_submission(fields: Mapping[str, Any]) -> ValidationResult:
    """
    Validate and normalize a raw submission.

    Required fields are checked first (all missing names are reported
    together), then the event date, then both times.
    """
    try:
        return ValidationResult(data=_normalize(fields))
    except ValidationFailure as exc:
        return ValidationResult(error=exc)


__all__ = [
    "REQUIRED_FIELDS",
    "ValidationResult",
    "format_date_br",
    "normalize_date",
    "normalize_time",
    "parse_consent",
    "parse_plates",
    "validate_submission",
]
