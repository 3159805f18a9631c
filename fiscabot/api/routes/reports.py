"""
Complaint submission and viewer endpoints.
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from fiscabot.api.deps import (
    PhotoStorage,
    ReportStore,
    get_photo_storage,
    get_store,
    public_base_url,
)
from fiscabot.core.errors import NotFound, PersistenceFailure, RenderFailure
from fiscabot.schemas.denuncia import SubmissionResponse
from fiscabot.services.qr import qr_data_url
from fiscabot.services.reports import load_report, read_submission, submit_report
from fiscabot.services.viewer import render_not_found, render_report_page, report_url

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/api/report", response_model=SubmissionResponse)
@router.post("/denuncia", response_model=SubmissionResponse)
async def create_report(
    request: Request,
    store: ReportStore = Depends(get_store),
    photos: PhotoStorage = Depends(get_photo_storage),
):
    """
    Register a complaint.

    Accepts multipart/urlencoded forms (with up to six ``fotos`` parts) or a
    JSON object. Answers with the new id, the public viewer URL and a QR code
    pointing at it.
    """
    fields, files = await read_submission(request)
    record = await submit_report(fields, files, store, photos)

    view_url = report_url(public_base_url(request), record.id)
    try:
        qr = qr_data_url(view_url)
    except RenderFailure:
        logger.warning("report_qr_failed", extra={"report_id": record.id})
        qr = None

    return SubmissionResponse(id=record.id, viewUrl=view_url, qrDataUrl=qr)


@router.get("/report/{report_id}", response_class=HTMLResponse)
async def view_report(
    report_id: str,
    request: Request,
    store: ReportStore = Depends(get_store),
):
    """Printable HTML page for one complaint."""
    try:
        record = await load_report(store, report_id)
    except NotFound:
        return HTMLResponse(render_not_found(), status_code=404)
    except PersistenceFailure as exc:
        logger.error("report_lookup_failed", extra={"report_id": report_id, **exc.diagnostics()})
        return HTMLResponse("Erro ao carregar a denúncia", status_code=500)

    try:
        qr = qr_data_url(report_url(public_base_url(request), record.id))
    except RenderFailure:
        logger.exception("report_view_render_failed", extra={"report_id": report_id})
        return HTMLResponse("Erro gerando visualização", status_code=500)

    return HTMLResponse(render_report_page(record, qr))
