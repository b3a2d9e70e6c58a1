from __future__ import annotations

import logging
from collections.abc import Iterable

from logmask.services.masking import MaskingService

# uvicorn gives these loggers their own handlers and stops propagation
UVICORN_LOGGERS = ("uvicorn.access", "uvicorn.error")

# records emitted while masking describe rules, never values
_MASKING_LOGGERS = frozenset({"logmask.services.masking", "logmask.core.masking"})


class MaskingLogFilter(logging.Filter):
    """Run every log message through the ``string`` rules of the given keys.

    String arguments are masked in place first so formatters that unpack
    ``record.args`` (uvicorn's access formatter) keep working. A secret that
    only shows up once the message is rendered collapses the record into the
    masked text.
    """

    def __init__(self, service: MaskingService, keys: Iterable[str]) -> None:
        super().__init__()
        self._service = service
        self._keys = tuple(keys)

    def filter(self, record: logging.LogRecord) -> bool:
        if not self._keys or record.name in _MASKING_LOGGERS:
            return True
        if isinstance(record.args, tuple):
            record.args = tuple(
                self._mask(arg) if isinstance(arg, str) else arg for arg in record.args
            )
        try:
            message = record.getMessage()
        except (TypeError, ValueError):
            # the handler reports the broken format call when it emits
            return True
        masked = self._mask(message)
        if masked != message:
            record.msg = masked
            record.args = ()
        return True

    def _mask(self, text: str) -> str:
        for key in self._keys:
            text = self._service.mask_string(text, key)
        return text


def attach_masking_filter(masking_filter: logging.Filter) -> None:
    for handler in logging.getLogger().handlers:
        handler.addFilter(masking_filter)
    for name in UVICORN_LOGGERS:
        logging.getLogger(name).addFilter(masking_filter)


def configure_logging(level: str, masking_filter: logging.Filter | None = None) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    if masking_filter is not None:
        attach_masking_filter(masking_filter)
