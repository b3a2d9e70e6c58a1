from __future__ import annotations

import logging

from logmask.core.pattern_cache import PatternCache

MASK_REPLACEMENT_CHAR = "*"

logger = logging.getLogger(__name__)


def full_mask(value: str, mask_char: str = MASK_REPLACEMENT_CHAR) -> str:
    return mask_char * len(value)


def mask_groups(
    value: str,
    mask_char: str,
    pattern_text: str | None,
    cache: PatternCache,
) -> str:
    """Mask every capturing group of ``pattern_text`` when it matches all of ``value``.

    Only group contents are replaced, one ``mask_char`` per character, so the
    result keeps the input length. A pattern that does not match the whole
    value leaves it untouched. An empty pattern or any failure while compiling
    or matching masks the entire value.
    """
    if not value:
        return value
    if not pattern_text:
        return full_mask(value, mask_char)
    try:
        match = cache.get_or_compile(pattern_text).fullmatch(value)
    except Exception:  # noqa: BLE001
        logger.error("Masking regex failed, masking entire value", exc_info=True)
        return full_mask(value, mask_char)
    if match is None:
        return value

    masked = list(value)
    for group in range(1, match.re.groups + 1):
        start, end = match.span(group)
        if start < 0:
            continue
        masked[start:end] = mask_char * (end - start)
    return "".join(masked)
