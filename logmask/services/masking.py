from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable
from functools import lru_cache
from typing import Any

from jsonpath_ng.exceptions import JsonPathLexerError, JsonPathParserError
from jsonpath_ng.ext import parse as parse_jsonpath
from jsonpath_ng.jsonpath import DatumInContext, JSONPath, Slice

from logmask.core.config import MaskConfig
from logmask.core.masking import MASK_REPLACEMENT_CHAR, full_mask, mask_groups
from logmask.core.pattern_cache import InvalidPatternError, PatternCache


class MaskingService:
    def __init__(self, config: MaskConfig, pattern_cache: PatternCache) -> None:
        self._logger = logging.getLogger(__name__)
        self._config = config
        self._pattern_cache = pattern_cache

    def mask_string(self, value: str, key: str) -> str:
        """Apply the ``string`` rules for ``key`` in order, each feeding the next."""
        rules = self._config.string.get(key)
        if rules is None:
            return value
        output = value
        for pattern_text, replacement in rules.items():
            try:
                pattern = self._pattern_cache.get_or_compile(pattern_text)
            except InvalidPatternError:
                self._logger.error("Invalid string mask pattern for key %r, masking entire value", key)
                return full_mask(value)
            output = pattern.sub(_literal(replacement), output)
        return output

    def mask_regex(self, value: str, key: str, name: str) -> str:
        rules = self._config.regex.get(key)
        if rules is None:
            return value
        pattern_text = rules.get(name)
        if not pattern_text:
            return value
        return mask_groups(value, MASK_REPLACEMENT_CHAR, pattern_text, self._pattern_cache)

    def mask_json(self, value: str, key: str) -> str:
        """Mask the values selected by each JSON path rule for ``key``.

        All rules run against one parsed document and only ever replace
        values, so array indices resolved by later rules stay valid.
        """
        rules = self._config.json.get(key)
        if rules is None:
            self._logger.warning("mask config doesn't contain the json key %r", key)
            return value
        try:
            document = json.loads(value)
        except json.JSONDecodeError:
            self._logger.error("Input for json key %r is not valid JSON, masking entire value", key)
            return full_mask(value)
        for path, pattern_text in rules.items():
            document = self._apply_rule(document, path, pattern_text)
        return json.dumps(document, ensure_ascii=False, separators=(",", ":"))

    def _apply_rule(self, document: Any, path: str, pattern_text: str) -> Any:
        try:
            expression = _compile_path(path)
        except (JsonPathLexerError, JsonPathParserError):
            self._logger.error("JsonPath %s is not a valid expression", path)
            return document
        matches = expression.find(document)
        if not matches:
            self._logger.warning("JsonPath %s could not be found.", path)
            return document
        for match in matches:
            # a list value expands one level into its elements
            targets = Slice().find(match) if isinstance(match.value, list) else [match]
            for target in targets:
                document = self._mask_match(document, target, path, pattern_text)
        return document

    def _mask_match(
        self,
        document: Any,
        match: DatumInContext,
        path: str,
        pattern_text: str,
    ) -> Any:
        value = match.value
        if isinstance(value, bool) or not isinstance(value, (str, int)):
            self._logger.error("The value specified by path %s cannot be masked", path)
            return document
        masked = mask_groups(str(value), MASK_REPLACEMENT_CHAR, pattern_text, self._pattern_cache)
        if match.context is None:
            return masked
        match.path.update(match.context.value, masked)
        return document

    def configured_keys(self) -> dict[str, list[str]]:
        return {
            "string": list(self._config.string),
            "regex": list(self._config.regex),
            "json": list(self._config.json),
        }


@lru_cache(maxsize=256)
def _compile_path(path: str) -> JSONPath:
    return parse_jsonpath(path)


def _literal(replacement: str) -> Callable[[re.Match[str]], str]:
    return lambda _match: replacement
