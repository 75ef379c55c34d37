"""
Dashlib Repository
Introductory remarks: This module is part of the Dashlib codebase.

Series and series group models, plus their persisted text representation.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Iterable, List, Union

from .attributes import AttributeMap, as_attribute_map


class EncodingError(ValueError):
    """Raised when series groups cannot be serialized."""


class DecodingError(ValueError):
    """Raised when a serialized series groups blob is malformed."""


class Operator(IntEnum):
    """Aggregation applied across the series of a group."""

    NONE = 0
    AVERAGE = 1
    SUM = 2


class Consolidate(IntEnum):
    """Consolidation policy applied when downsampling points."""

    NONE = 0
    AVERAGE = 1
    FIRST = 2
    LAST = 3
    MAX = 4
    MIN = 5
    SUM = 6


def _string_field(payload: dict[str, Any], key: str) -> str:
    value = payload.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise DecodingError(
            f"Field '{key}' must be a string, got {type(value).__name__}"
        )
    return value


def _enum_field(payload: dict[str, Any], key: str, enum: Any) -> Any:
    value = payload.get(key)
    if value is None:
        return enum(0)
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodingError(
            f"Field '{key}' must be an integer, got {type(value).__name__}"
        )
    try:
        return enum(value)
    except ValueError as exc:
        raise DecodingError(f"Unknown {key} value {value}") from exc


def _options_field(payload: dict[str, Any]) -> AttributeMap:
    value = payload.get("options")
    if value is None:
        return AttributeMap()
    if not isinstance(value, dict):
        raise DecodingError("Field 'options' must be a JSON object")
    return AttributeMap(value)


def _payload_object(payload: Any) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise DecodingError(
            f"Expected a JSON object, got {type(payload).__name__}"
        )
    return payload


@dataclass
class Series:
    """Reference to a single time series."""

    name: str = ""
    origin: str = ""
    source: str = ""
    metric: str = ""
    options: AttributeMap = field(default_factory=AttributeMap)

    def __post_init__(self) -> None:
        self.options = as_attribute_map(self.options)

    def is_valid(self) -> bool:
        """Return True when origin, source and metric are all set."""
        return bool(self.origin and self.source and self.metric)

    def __str__(self) -> str:
        return (
            f"{{Name: {json.dumps(self.name)}, "
            f"Origin: {json.dumps(self.origin)}, "
            f"Source: {json.dumps(self.source)}, "
            f"Metric: {json.dumps(self.metric)}}}"
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "name": self.name,
            "origin": self.origin,
            "source": self.source,
            "metric": self.metric,
        }
        if self.options:
            payload["options"] = dict(self.options)
        return payload

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "Series":
        payload = _payload_object(payload)
        return cls(
            name=_string_field(payload, "name"),
            origin=_string_field(payload, "origin"),
            source=_string_field(payload, "source"),
            metric=_string_field(payload, "metric"),
            options=_options_field(payload),
        )


@dataclass
class SeriesGroup:
    """Ordered list of series sharing an aggregation operator."""

    name: str = ""
    operator: Operator = Operator.NONE
    consolidate: Consolidate = Consolidate.NONE
    series: List[Series] = field(default_factory=list)
    options: AttributeMap = field(default_factory=AttributeMap)

    def __post_init__(self) -> None:
        self.operator = Operator(self.operator)
        self.consolidate = Consolidate(self.consolidate)
        if self.series is None:
            self.series = []
        self.options = as_attribute_map(self.options)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "name": self.name,
            "operator": int(self.operator),
            "consolidate": int(self.consolidate),
            "series": [entry.to_payload() for entry in self.series],
        }
        if self.options:
            payload["options"] = dict(self.options)
        return payload

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "SeriesGroup":
        payload = _payload_object(payload)
        series = payload.get("series")
        if series is None:
            series = []
        if not isinstance(series, list):
            raise DecodingError("Field 'series' must be a JSON array")
        return cls(
            name=_string_field(payload, "name"),
            operator=_enum_field(payload, "operator", Operator),
            consolidate=_enum_field(payload, "consolidate", Consolidate),
            series=[Series.from_payload(entry) for entry in series],
            options=_options_field(payload),
        )


class SeriesGroups(List[SeriesGroup]):
    """List of series groups stored as a single JSON text blob."""

    def __init__(self, groups: Iterable[SeriesGroup] = ()) -> None:
        super().__init__(groups)

    def to_payload(self) -> list[dict[str, Any]]:
        return [group.to_payload() for group in self]

    def encode(self) -> str:
        """
        Serialize the groups for storage.

        :returns: JSON text.
        :raises EncodingError: If an option value is not representable.
        """

        try:
            return json.dumps(self.to_payload())
        except (TypeError, ValueError) as exc:
            raise EncodingError(
                f"Failed to encode series groups: {exc}"
            ) from exc

    @classmethod
    def decode(cls, data: Union[str, bytes, bytearray]) -> "SeriesGroups":
        """
        Rebuild groups from a blob produced by :meth:`encode`.

        :param data: JSON text or UTF-8 bytes.
        :returns: Decoded series groups.
        :raises DecodingError: If the blob is malformed.
        """

        try:
            if isinstance(data, (bytes, bytearray)):
                data = data.decode("utf-8")
            payload = json.loads(data)
            if not isinstance(payload, list):
                raise ValueError("expected a JSON array")
            return cls(SeriesGroup.from_payload(item) for item in payload)
        except (TypeError, ValueError, AttributeError) as exc:
            raise DecodingError(
                f"Failed to decode series groups: {exc}"
            ) from exc
