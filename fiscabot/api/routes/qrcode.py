"""Generic QR code endpoint."""

import logging
from typing import Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import HTMLResponse

from fiscabot.api.deps import public_base_url
from fiscabot.core.errors import RenderFailure
from fiscabot.services.qr import qr_data_url
from fiscabot.services.viewer import render_qr_page

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/qrcode", response_class=HTMLResponse)
async def qrcode_page(request: Request, url: Optional[str] = Query(None)):
    """QR code for ``url``, or for the site root when omitted."""
    target = url or public_base_url(request)
    try:
        qr = qr_data_url(target)
    except RenderFailure:
        logger.exception("qrcode_render_failed", extra={"target": target})
        return HTMLResponse("Erro gerando QR", status_code=500)
    return HTMLResponse(render_qr_page(qr, target))
