"""Filter value classification for library queries.

A raw filter string is either compared literally or, when it carries one of
the reserved prefixes from :mod:`dashlib.config`, interpreted as a glob or a
regular expression. Pattern syntax is not checked here; a malformed regular
expression is reported when the filter is matched.
"""

from __future__ import annotations

import fnmatch
import re
from dataclasses import dataclass
from typing import Union

from dashlib.config import GLOB_PREFIX, REGEXP_PREFIX
from dashlib.storage.errors import InvalidPattern


@dataclass(frozen=True)
class Literal:
    """Plain string equality."""

    value: str

    def matches(self, candidate: str) -> bool:
        return candidate == self.value


@dataclass(frozen=True)
class Glob:
    """Shell-glob pattern, matched case-sensitively."""

    pattern: str

    def matches(self, candidate: str) -> bool:
        return fnmatch.fnmatchcase(candidate, self.pattern)


@dataclass(frozen=True)
class Regexp:
    """Regular expression, searched anywhere in the candidate."""

    pattern: str

    def matches(self, candidate: str) -> bool:
        try:
            compiled = re.compile(self.pattern)
        except re.error as exc:
            raise InvalidPattern(
                f"Invalid regular expression '{self.pattern}': {exc}"
            ) from exc
        return compiled.search(candidate) is not None


FilterValue = Union[Literal, Glob, Regexp]


def apply_modifier(raw: str) -> FilterValue:
    """Classify ``raw`` as a literal, glob or regexp filter value."""
    if raw.startswith(GLOB_PREFIX):
        return Glob(raw[len(GLOB_PREFIX):])
    if raw.startswith(REGEXP_PREFIX):
        return Regexp(raw[len(REGEXP_PREFIX):])
    return Literal(raw)
