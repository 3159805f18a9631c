"""
Complaint submission pipeline: validate, store photos, persist.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Sequence, Tuple

from starlette.datastructures import UploadFile
from starlette.formparsers import MultiPartException
from starlette.requests import Request

from fiscabot.core.errors import (
    InvalidPayload,
    NotFound,
    PersistenceFailure,
    ValidationFailure,
)
from fiscabot.core.metrics import record_submission
from fiscabot.schemas.denuncia import Denuncia
from fiscabot.services.uploads import PhotoStorage
from fiscabot.services.validation import validate_submission
from fiscabot.storage.base import ReportStore

logger = logging.getLogger(__name__)

PHOTO_FIELD = "fotos"


async def read_submission(request: Request) -> Tuple[Dict[str, Any], List[UploadFile]]:
    """
    Extract the raw fields and photo parts from a form or JSON request body.

    Repeated ``placas`` form fields are joined so they parse like the
    comma-separated form.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise InvalidPayload("Corpo JSON inválido") from exc
        if not isinstance(body, dict):
            raise InvalidPayload("Corpo JSON deve ser um objeto")
        return body, []

    try:
        form = await request.form()
    except MultiPartException as exc:
        raise InvalidPayload("Formulário inválido") from exc

    fields: Dict[str, Any] = {}
    files: List[UploadFile] = []
    for key, value in form.multi_items():
        if isinstance(value, UploadFile):
            if key == PHOTO_FIELD:
                files.append(value)
            continue
        if key == "placas" and key in fields:
            fields[key] = f"{fields[key]},{value}"
        else:
            fields[key] = value
    return fields, files


async def submit_report(
    fields: Dict[str, Any],
    files: Sequence[UploadFile],
    store: ReportStore,
    photos: PhotoStorage,
) -> Denuncia:
    """
    Run one submission through validation, photo storage and persistence.

    Nothing is written when validation fails; photos saved for a submission
    whose persistence fails are removed again.
    """
    try:
        data = validate_submission(fields).unwrap()
        saved = await photos.save(files)
    except ValidationFailure as exc:
        record_submission("rejected")
        logger.info("report_rejected", extra={"reason": exc.message})
        raise
    except PersistenceFailure:
        record_submission("failed")
        raise

    record = Denuncia(**data, fotos=saved)
    try:
        await store.append(record)
    except PersistenceFailure as exc:
        photos.discard(saved)
        record_submission("failed")
        logger.error(
            "report_persistence_failed",
            extra={"report_id": record.id, "backend": store.backend, **exc.diagnostics()},
        )
        raise

    record_submission("accepted", photos=len(saved))
    logger.info(
        "report_submitted",
        extra={"report_id": record.id, "photos": len(saved), "backend": store.backend},
    )
    return record


async def load_report(store: ReportStore, report_id: str) -> Denuncia:
    """Fetch a stored complaint or raise ``NotFound``."""
    record = await store.get_by_id(report_id)
    if record is None:
        raise NotFound(report_id)
    return record
