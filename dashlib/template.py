"""
Dashlib Repository
Introductory remarks: This module is part of the Dashlib codebase.

Placeholder substitution for graph titles and series coordinates.
"""

from __future__ import annotations

import re
from typing import Any, Mapping

PLACEHOLDER_REGEX = re.compile(r"\{\{\s*\.?([^{}\s]+)\s*\}\}")


class UnresolvedAttribute(ValueError):
    """Raised when a placeholder references an unknown attribute."""

    def __init__(self, attribute: str) -> None:
        super().__init__(f"Unresolved template attribute '{attribute}'")
        self.attribute = attribute


def expand(text: str, attrs: Mapping[str, Any]) -> str:
    """
    Substitute ``{{ key }}`` placeholders in ``text`` with values of ``attrs``.

    Substitution is a single pass: values containing placeholder syntax are
    inserted verbatim. The first missing attribute aborts the whole expansion.

    :param text: String possibly containing placeholders.
    :param attrs: Attribute values to substitute.
    :returns: The expanded string.
    :raises UnresolvedAttribute: If a placeholder has no matching attribute.
    """

    if "{{" not in text:
        return text

    def _replace(match: re.Match[str]) -> str:
        key = match.group(1)
        if key not in attrs:
            raise UnresolvedAttribute(key)
        return str(attrs[key])

    return PLACEHOLDER_REGEX.sub(_replace, text)
