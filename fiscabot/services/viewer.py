"""HTML rendering for the complaint viewer and QR pages."""

from __future__ import annotations

from html import escape
from typing import Any, Optional

from fiscabot.schemas.denuncia import Denuncia
from fiscabot.services.validation import format_date_br

NOT_INFORMED = "não informado"


def report_url(base_url: str, report_id: str) -> str:
    """Canonical public URL of a complaint viewer page."""
    return f"{base_url.rstrip('/')}/report/{report_id}"


def _text(value: Any, default: str = "") -> str:
    if value is None or value == "":
        return escape(default)
    return escape(str(value))


def _row(label: str, value: Any, default: str = NOT_INFORMED) -> str:
    return f"<p><b>{escape(label)}:</b> {_text(value, default)}</p>"


def _photos(record: Denuncia) -> str:
    if not record.fotos:
        return f" {escape(NOT_INFORMED)}"
    return "".join(
        f'<div style="margin:8px;"><img src="{escape(path, quote=True)}" '
        f'style="max-width:300px; border:1px solid #ccc"></div>'
        for path in record.fotos
    )


def render_report_page(record: Denuncia, qr: str) -> str:
    """Printable page with every field of ``record`` plus its QR code."""
    created = record.created_at.isoformat() if record.created_at else None
    consent = "sim" if record.consentimento_encaminhar else "não"
    return f"""<!DOCTYPE html>
<html>
  <head><meta charset="utf-8"><title>Fiscabot - Denúncia {_text(record.id)}</title></head>
  <body style="font-family:Arial;padding:20px">
    <h2>Denúncia: {_text(record.tipo)}</h2>
    <p><b>ID:</b> {_text(record.id)}</p>
    {_row("Criada em", created)}
    {_row("Local", record.local)}
    {_row("Nome do local", record.nome_local)}
    {_row("Endereço", record.endereco)}
    {_row("Bairro", record.bairro)}
    {_row("Ponto de referência", record.referencia)}
    <p><b>Data:</b> {_text(format_date_br(record.data_evento))} &nbsp; <b>Dia da semana:</b> {_text(record.dia_semana, NOT_INFORMED)}</p>
    <p><b>Início:</b> {_text(record.hora_inicio)} &nbsp; <b>Fim:</b> {_text(record.hora_fim)}</p>
    {_row("Observações", record.observacoes)}
    {_row("Número de veículos (aprox)", record.numero_veiculos)}
    {_row("Placas (se houver)", ", ".join(record.placas))}
    {_row("Contato fornecido", record.contato)}
    {_row("Autoriza encaminhamento", consent)}
    <div><b>Fotos (se houver):</b>{_photos(record)}</div>
    <div style="margin-top:20px">
      <h4>QR Code para este relatório</h4>
      <img src="{escape(qr, quote=True)}" alt="QR Code"/>
    </div>
    <div style="margin-top:20px">
      <button onclick="window.print()">Imprimir / Salvar PDF</button>
    </div>
  </body>
</html>
"""


def render_not_found() -> str:
    return "<h3>Denúncia não encontrada</h3>"


def render_qr_page(qr: str, target: Optional[str] = None) -> str:
    caption = f"<p>{_text(target)}</p>" if target else ""
    return f'<h3>Escaneie o QR</h3><img src="{escape(qr, quote=True)}" />{caption}'
