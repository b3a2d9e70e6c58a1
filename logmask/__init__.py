"""Mask sensitive values in strings and JSON payloads before they are logged.

Rules come from the process-wide mask configuration (``MASK_CONFIG_JSON`` or
``MASK_CONFIG_PATH``), loaded once on first use.

Usage:
    from logmask import mask_json, mask_regex, mask_string

    mask_string("token=abc123", "auth")
    mask_regex("4111-2222-3333-4444", "card", "pan")
    mask_json('{"user":{"ssn":"123-45-6789"}}', "userRecord")
"""

from logmask.core.dependencies import get_masking_service


def mask_string(value: str, key: str) -> str:
    return get_masking_service().mask_string(value, key)


def mask_regex(value: str, key: str, name: str) -> str:
    return get_masking_service().mask_regex(value, key, name)


def mask_json(value: str, key: str) -> str:
    return get_masking_service().mask_json(value, key)


__all__ = [
    "mask_json",
    "mask_regex",
    "mask_string",
]
