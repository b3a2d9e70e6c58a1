from __future__ import annotations

import json
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

from jsonpath_ng.exceptions import JsonPathLexerError, JsonPathParserError
from jsonpath_ng.ext import parse as parse_jsonpath

MASK_TYPE_STRING = "string"
MASK_TYPE_REGEX = "regex"
MASK_TYPE_JSON = "json"
MASK_TYPES = (MASK_TYPE_STRING, MASK_TYPE_REGEX, MASK_TYPE_JSON)

RuleSection = Mapping[str, Mapping[str, str]]

_EMPTY_SECTION: RuleSection = MappingProxyType({})


def _get_int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_list_env(name: str) -> list[str]:
    value = os.getenv(name, "")
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    port: int
    log_level: str
    mask_config_json: str
    mask_config_path: str
    log_mask_keys: list[str]


def load_settings() -> Settings:
    return Settings(
        port=_get_int_env("PORT", 8000),
        log_level=os.getenv("LOG_LEVEL", "info"),
        mask_config_json=os.getenv("MASK_CONFIG_JSON", ""),
        mask_config_path=os.getenv("MASK_CONFIG_PATH", ""),
        log_mask_keys=_get_list_env("LOG_MASK_KEYS"),
    )


@dataclass(frozen=True)
class MaskConfig:
    """Read-only snapshot of the ``string``, ``regex`` and ``json`` rule sections."""

    string: RuleSection = field(default_factory=lambda: _EMPTY_SECTION)
    regex: RuleSection = field(default_factory=lambda: _EMPTY_SECTION)
    json: RuleSection = field(default_factory=lambda: _EMPTY_SECTION)

    @classmethod
    def empty(cls) -> MaskConfig:
        return cls()

    @classmethod
    def from_mapping(cls, raw: Any, source: str = "mask") -> MaskConfig:
        if not isinstance(raw, dict):
            raise ValueError(f"{source} must be a JSON object")
        unknown = sorted(set(raw) - set(MASK_TYPES))
        if unknown:
            raise ValueError(f"{source} has unknown sections: {', '.join(unknown)}")
        sections = {
            mask_type: _parse_section(raw.get(mask_type), f"{source}.{mask_type}")
            for mask_type in MASK_TYPES
        }
        _validate_string_rules(sections[MASK_TYPE_STRING], f"{source}.{MASK_TYPE_STRING}")
        _validate_regex_rules(sections[MASK_TYPE_REGEX], f"{source}.{MASK_TYPE_REGEX}")
        _validate_json_rules(sections[MASK_TYPE_JSON], f"{source}.{MASK_TYPE_JSON}")
        return cls(**sections)

    def section(self, mask_type: str) -> RuleSection:
        if mask_type not in MASK_TYPES:
            raise ValueError(f"unknown mask type: {mask_type}")
        return getattr(self, mask_type)


def _parse_section(value: Any, location: str) -> RuleSection:
    if value is None:
        return _EMPTY_SECTION
    if not isinstance(value, dict):
        raise ValueError(f"{location} must be a JSON object")
    section: dict[str, Mapping[str, str]] = {}
    for key, rules in value.items():
        if not isinstance(rules, dict):
            raise ValueError(f"{location}.{key} must be a JSON object")
        for rule_key, rule_value in rules.items():
            if not isinstance(rule_value, str):
                raise ValueError(f"{location}.{key}[{rule_key!r}] must be a string")
        section[key] = MappingProxyType(dict(rules))
    return MappingProxyType(section)


def _validate_regex(pattern: str, location: str) -> None:
    try:
        re.compile(pattern)
    except re.error as exc:
        raise ValueError(f"{location} is not a valid regex: {exc}") from exc


def _validate_string_rules(section: RuleSection, location: str) -> None:
    for key, rules in section.items():
        for pattern in rules:
            _validate_regex(pattern, f"{location}.{key}[{pattern!r}]")


def _validate_regex_rules(section: RuleSection, location: str) -> None:
    for key, rules in section.items():
        for name, pattern in rules.items():
            if pattern:
                _validate_regex(pattern, f"{location}.{key}.{name}")


def _validate_json_rules(section: RuleSection, location: str) -> None:
    for key, rules in section.items():
        for path, pattern in rules.items():
            try:
                parse_jsonpath(path)
            except (JsonPathLexerError, JsonPathParserError) as exc:
                raise ValueError(f"{location}.{key}[{path!r}] is not a valid JSON path") from exc
            if pattern:
                _validate_regex(pattern, f"{location}.{key}[{path!r}]")


def load_mask_config(settings: Settings) -> MaskConfig:
    if settings.mask_config_json:
        return _load_mask_config_text(settings.mask_config_json, "MASK_CONFIG_JSON")
    if settings.mask_config_path:
        path = Path(settings.mask_config_path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ValueError(f"MASK_CONFIG_PATH could not be read: {path}") from exc
        return _load_mask_config_text(text, "MASK_CONFIG_PATH")
    return MaskConfig.empty()


def _load_mask_config_text(text: str, source: str) -> MaskConfig:
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"{source} must be valid JSON") from exc
    return MaskConfig.from_mapping(raw, source=source)
