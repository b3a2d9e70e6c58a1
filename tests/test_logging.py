from __future__ import annotations

import io
import logging
from collections.abc import Iterator

import pytest
from uvicorn.logging import AccessFormatter

from logmask.core.config import MaskConfig
from logmask.core.logging import UVICORN_LOGGERS, MaskingLogFilter, attach_masking_filter
from logmask.core.pattern_cache import PatternCache
from logmask.services.masking import MaskingService


def _record(msg: str, args: tuple[object, ...], name: str = "test") -> logging.LogRecord:
    return logging.LogRecord(name, logging.INFO, __file__, 1, msg, args, None)


def _service() -> MaskingService:
    config = MaskConfig.from_mapping(
        {
            "string": {
                "auth": {r"abc\d+": "REDACTED", r"token=\w+": "token=***"},
                "password": {"password=\\S+": "password=***"},
            }
        }
    )
    return MaskingService(config, PatternCache())


@pytest.fixture
def access_stream() -> Iterator[io.StringIO]:
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        AccessFormatter('%(client_addr)s - "%(request_line)s" %(status_code)s', use_colors=False)
    )
    access_logger = logging.getLogger("uvicorn.access")
    previous_level, previous_propagate = access_logger.level, access_logger.propagate
    access_logger.addHandler(handler)
    access_logger.setLevel(logging.INFO)
    access_logger.propagate = False
    yield stream
    access_logger.removeHandler(handler)
    access_logger.setLevel(previous_level)
    access_logger.propagate = previous_propagate


def _detach(masking_filter: logging.Filter) -> None:
    for handler in logging.getLogger().handlers:
        handler.removeFilter(masking_filter)
    for name in UVICORN_LOGGERS:
        logging.getLogger(name).removeFilter(masking_filter)


def test_masking_filter_masks_rendered_message() -> None:
    record = _record("login token=%s password=%s", ("abc123", "hunter2"))

    assert MaskingLogFilter(_service(), ["auth", "password"]).filter(record) is True
    assert record.getMessage() == "login token=REDACTED password=***"
    assert record.args == ()


def test_masking_filter_keeps_argument_shape_when_args_hold_the_secret() -> None:
    args = ("1.2.3.4:5000", "GET", "/mask/keys?token=abc123", "1.1", 200)
    record = _record('%s - "%s %s HTTP/%s" %d', args)

    MaskingLogFilter(_service(), ["auth"]).filter(record)

    assert record.args == ("1.2.3.4:5000", "GET", "/mask/keys?token=***", "1.1", 200)
    assert record.msg == '%s - "%s %s HTTP/%s" %d'


def test_masking_filter_leaves_clean_record_untouched() -> None:
    record = _record("user %s logged in", ("alice",))

    assert MaskingLogFilter(_service(), ["auth"]).filter(record) is True
    assert record.msg == "user %s logged in"
    assert record.args == ("alice",)


def test_masking_filter_passes_broken_format_through() -> None:
    record = _record("token=%s %s", ("abc123",))

    assert MaskingLogFilter(_service(), ["auth"]).filter(record) is True
    assert record.msg == "token=%s %s"


def test_masking_filter_skips_records_from_the_masking_service() -> None:
    service = MaskingService(MaskConfig(string={"bad": {"(unclosed": "x"}}), PatternCache())
    record = _record("Invalid string mask pattern for key %r", ("bad",), "logmask.services.masking")

    assert MaskingLogFilter(service, ["bad"]).filter(record) is True
    assert record.getMessage() == "Invalid string mask pattern for key 'bad'"


def test_attached_filter_masks_uvicorn_access_log(access_stream: io.StringIO) -> None:
    masking_filter = MaskingLogFilter(_service(), ["auth"])
    attach_masking_filter(masking_filter)
    try:
        logging.getLogger("uvicorn.access").info(
            '%s - "%s %s HTTP/%s" %d',
            "1.2.3.4:5000",
            "GET",
            "/mask/keys?token=abc123",
            "1.1",
            200,
        )
    finally:
        _detach(masking_filter)

    output = access_stream.getvalue()
    assert "GET /mask/keys?token=*** HTTP/1.1" in output
    assert "abc123" not in output
    for name in UVICORN_LOGGERS:
        assert masking_filter not in logging.getLogger(name).filters
