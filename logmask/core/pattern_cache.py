from __future__ import annotations

import re
from re import Pattern


class InvalidPatternError(ValueError):
    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"invalid masking regex: {pattern!r} ({reason})")
        self.pattern = pattern


class PatternCache:
    """Compiled regex lookup shared by every masking call in the process.

    Reads and inserts are single dict operations, so concurrent callers never
    see a torn entry. Two threads compiling the same text at once both store an
    equivalent pattern and the last write wins.
    """

    def __init__(self) -> None:
        self._patterns: dict[str, Pattern[str]] = {}

    def get_or_compile(self, pattern_text: str) -> Pattern[str]:
        pattern = self._patterns.get(pattern_text)
        if pattern is not None:
            return pattern
        try:
            pattern = re.compile(pattern_text)
        except re.error as exc:
            raise InvalidPatternError(pattern_text, str(exc)) from exc
        self._patterns[pattern_text] = pattern
        return pattern

    def __contains__(self, pattern_text: object) -> bool:
        return pattern_text in self._patterns

    def __len__(self) -> int:
        return len(self._patterns)
