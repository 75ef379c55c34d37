"""Record filtering shared by the graph repositories."""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional

from dashlib.pattern import FilterValue, apply_modifier

from .base import FILTER_FIELDS, LOOKUP_FIELDS
from .errors import StoreError, ValidationError

# Graph attribute name -> persisted record column.
_COLUMNS = {"id": "id", "name": "name", "alias": "alias", "link_id": "link"}


def lookup_column(field: str) -> str:
    """
    Map a lookup field onto its persisted column.

    :param field: One of ``id``, ``name`` or ``alias``.
    :returns: Record column name.
    :raises StoreError: If the field cannot be used for lookups.
    """

    if field not in LOOKUP_FIELDS:
        raise StoreError(f"Field '{field}' cannot be used for graph lookups")
    return _COLUMNS[field]


def compile_filters(
    filters: Optional[Mapping[str, str]],
) -> dict[str, FilterValue]:
    """Validate filter fields and classify their raw values."""
    compiled: dict[str, FilterValue] = {}
    for field, raw in (filters or {}).items():
        if field not in FILTER_FIELDS:
            raise ValidationError(f"Unsupported graph filter '{field}'")
        compiled[_COLUMNS[field]] = apply_modifier(raw)
    return compiled


def record_matches(
    record: Mapping[str, Any],
    filters: Mapping[str, FilterValue],
) -> bool:
    """Return True when every compiled filter matches its column."""
    for column, matcher in filters.items():
        value = record.get(column)
        if value is None or not matcher.matches(str(value)):
            return False
    return True


def select_records(
    records: Iterable[Mapping[str, Any]],
    filters: Optional[Mapping[str, str]],
    *,
    offset: int = 0,
    limit: int = 50,
) -> List[Mapping[str, Any]]:
    """Filter, order by (name, id) and paginate persisted records."""
    if limit < 0 or offset < 0:
        raise ValidationError("offset and limit must be non-negative")
    compiled = compile_filters(filters)
    matched = [
        record for record in records if record_matches(record, compiled)
    ]
    matched.sort(key=lambda r: (r.get("name") or "", r.get("id") or ""))
    slice_end = offset + limit if limit else None
    return matched[offset:slice_end]


def ensure_unique(
    record: Mapping[str, Any],
    existing: Iterable[Mapping[str, Any]],
) -> None:
    """Reject a record whose name or alias is taken by another graph."""
    for other in existing:
        if other.get("id") == record.get("id"):
            continue
        if other.get("name") == record.get("name"):
            raise ValidationError(
                f"Graph name '{record.get('name')}' is already in use"
            )
        alias = record.get("alias")
        if alias and other.get("alias") == alias:
            raise ValidationError(f"Graph alias '{alias}' is already in use")
