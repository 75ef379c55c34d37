"""In-memory graph repository for development and tests."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from dashlib.models.graph import Graph, graph_from_record, graph_to_record

from .base import GraphRepository
from .errors import GraphNotFound, ValidationError
from .query import ensure_unique, lookup_column, select_records


class InMemoryGraphRepository(GraphRepository):
    """Dictionary-backed graph store keeping persisted records."""

    def __init__(self) -> None:
        self._records: Dict[str, Dict[str, Any]] = {}

    def get(self, field: str, value: str) -> Graph:
        column = lookup_column(field)
        if column == "id":
            record = self._records.get(value)
        else:
            record = next(
                (r for r in self._records.values() if r.get(column) == value),
                None,
            )
        if record is None:
            raise GraphNotFound(f"Graph with {field} '{value}' does not exist")
        return graph_from_record(record, store=self)

    def save(self, graph: Graph, *, overwrite: bool = False) -> Graph:
        candidate = graph.prepare_save()
        if candidate.id in self._records and not overwrite:
            raise ValidationError(f"Graph '{candidate.id}' already exists")
        record = graph_to_record(candidate)
        ensure_unique(record, self._records.values())
        self._records[candidate.id] = record
        graph.mark_saved(candidate, self)
        return graph

    def delete(self, graph_id: str) -> None:
        try:
            del self._records[graph_id]
        except KeyError as exc:
            raise GraphNotFound(
                f"Graph with id '{graph_id}' does not exist"
            ) from exc

    def list(
        self,
        filters: Optional[Mapping[str, str]] = None,
        *,
        offset: int = 0,
        limit: int = 50,
    ) -> List[Graph]:
        records = select_records(
            self._records.values(), filters, offset=offset, limit=limit
        )
        return [graph_from_record(record, store=self) for record in records]
