"""QR code rendering as embeddable data URLs."""

from __future__ import annotations

import base64
import io

import qrcode
from qrcode.exceptions import DataOverflowError
from qrcode.image.pil import PilImage

from fiscabot.core.errors import RenderFailure


def qr_data_url(content: str) -> str:
    """Return ``content`` encoded as a PNG QR code in a ``data:`` URL."""
    if not content:
        raise RenderFailure("Nada para codificar no QR Code")

    try:
        qr = qrcode.QRCode(
            version=None,
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=4,
            border=4,
            image_factory=PilImage,
        )
        qr.add_data(content)
        qr.make(fit=True)
        image = qr.make_image(fill_color="black", back_color="white")
        buffer = io.BytesIO()
        image.save(buffer)
    except (DataOverflowError, ValueError, OSError) as exc:
        raise RenderFailure("Erro gerando QR") from exc

    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:image/png;base64,{encoded}"
