"""Abstract repository interface for library graphs."""

from __future__ import annotations

from typing import TYPE_CHECKING, Mapping, Optional, Protocol, Sequence

if TYPE_CHECKING:
    from dashlib.models.graph import Graph

LOOKUP_FIELDS = ("id", "name", "alias")
"""Unique graph fields accepted by ``GraphRepository.get``."""

FILTER_FIELDS = ("id", "name", "alias", "link_id")
"""Graph fields accepted as ``GraphRepository.list`` filters."""


class GraphRepository(Protocol):
    """Persistence contract for library graphs."""

    def get(self, field: str, value: str) -> "Graph":
        """
        Return a fresh graph bound to this repository.

        Raise GraphNotFound when no graph has ``field`` equal to ``value``.
        """

    def save(self, graph: "Graph", *, overwrite: bool = False) -> "Graph":
        """Run the graph save hook and persist it."""

    def delete(self, graph_id: str) -> None:
        """Remove a graph or raise GraphNotFound."""

    def list(
        self,
        filters: Optional[Mapping[str, str]] = None,
        *,
        offset: int = 0,
        limit: int = 50,
    ) -> Sequence["Graph"]:
        """
        List graphs matching every filter.

        Filter values may carry the glob or regexp modifier prefixes.
        """
