"""Attribute maps used for template expansion."""

from __future__ import annotations

from typing import Any, Mapping, Optional


class AttributeMap(dict):
    """Ordered key/value mapping supporting merge with override control."""

    def merge(self, src: Optional[Mapping[str, Any]], overwrite: bool) -> None:
        """
        Copy every entry of ``src`` into this map.

        Existing keys are only replaced when ``overwrite`` is true.
        """
        if not src:
            return
        for key, value in src.items():
            if not overwrite and key in self:
                continue
            self[key] = value

    def copy(self) -> "AttributeMap":
        return AttributeMap(self)


def merge(
    dst: AttributeMap,
    src: Optional[Mapping[str, Any]],
    overwrite: bool,
) -> None:
    """Merge ``src`` into ``dst`` in place."""
    dst.merge(src, overwrite)


def as_attribute_map(value: Optional[Mapping[str, Any]]) -> AttributeMap:
    if isinstance(value, AttributeMap):
        return value
    return AttributeMap(value or {})
