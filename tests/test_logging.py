"""Tests for structured logging of complaint submissions."""

import io
import json
import logging

import pytest
from starlette.datastructures import UploadFile

from fiscabot.core.config import settings
from fiscabot.core.errors import InvalidTime, PersistenceFailure
from fiscabot.core.logging import RequestContextFilter, request_id_ctx, setup_logging
from fiscabot.services.reports import submit_report
from fiscabot.storage.local import JsonFileStore

REPORTS_LOGGER = "fiscabot.services.reports"


def _events(caplog, name: str):
    return [r for r in caplog.records if r.name == REPORTS_LOGGER and r.getMessage() == name]


@pytest.mark.asyncio
async def test_rejected_submission_logs_reason(caplog, report_store, photo_storage, valid_fields):
    caplog.set_level(logging.INFO, logger=REPORTS_LOGGER)

    with pytest.raises(InvalidTime):
        await submit_report(dict(valid_fields, hora_inicio="25:00"), [], report_store, photo_storage)

    (event,) = _events(caplog, "report_rejected")
    assert "hora_inicio" in event.reason
    assert "'25:00'" in event.reason
    assert not _events(caplog, "report_submitted")


@pytest.mark.asyncio
async def test_persistence_failure_logs_backend_diagnostics(caplog, tmp_path, photo_storage, valid_fields):
    class FailingStore(JsonFileStore):
        async def append(self, record):
            raise PersistenceFailure(details="disk full", hint="free space", code="ENOSPC")

    caplog.set_level(logging.INFO, logger=REPORTS_LOGGER)
    photo = UploadFile(file=io.BytesIO(b"img"), filename="a.jpg")

    with pytest.raises(PersistenceFailure):
        await submit_report(valid_fields, [photo], FailingStore(tmp_path / "r.json"), photo_storage)

    (event,) = _events(caplog, "report_persistence_failed")
    assert event.levelno == logging.ERROR
    assert event.backend == "local"
    assert event.details == "disk full"
    assert event.hint == "free space"
    assert event.code == "ENOSPC"
    assert event.report_id


@pytest.mark.asyncio
async def test_accepted_submission_logs_id_and_photo_count(caplog, report_store, photo_storage, valid_fields):
    caplog.set_level(logging.INFO, logger=REPORTS_LOGGER)
    photos = [UploadFile(file=io.BytesIO(b"x"), filename=f"{i}.jpg") for i in range(2)]

    record = await submit_report(valid_fields, photos, report_store, photo_storage)

    (event,) = _events(caplog, "report_submitted")
    assert event.report_id == record.id
    assert event.photos == 2
    assert event.backend == "local"


def test_json_line_carries_service_and_request_id():
    root_logger = logging.getLogger()
    original_handlers = root_logger.handlers[:]
    original_level = root_logger.level

    token = request_id_ctx.set("req-denuncia-1")
    try:
        setup_logging()
        handler = root_logger.handlers[0]
        assert any(isinstance(f, RequestContextFilter) for f in handler.filters)

        record = logging.LogRecord(
            name=REPORTS_LOGGER,
            level=logging.INFO,
            pathname=__file__,
            lineno=1,
            msg="report_submitted",
            args=(),
            exc_info=None,
        )
        record.report_id = "abc"
        for filter_ in handler.filters:
            filter_.filter(record)
        line = json.loads(handler.format(record))

        assert line["event"] == "report_submitted"
        assert line["level"] == "INFO"
        assert line["service"] == "fiscabot"
        assert line["environment"] == settings.ENVIRONMENT
        assert line["request_id"] == "req-denuncia-1"
        assert line["report_id"] == "abc"
        assert "timestamp" in line
    finally:
        request_id_ctx.reset(token)
        root_logger.handlers = original_handlers
        root_logger.setLevel(original_level)
