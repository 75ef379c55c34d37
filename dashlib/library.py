"""
Dashlib Repository
Introductory remarks: This module is part of the Dashlib codebase.

Library service exposing graph lookup, expansion and search.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

from dashlib.config import DEFAULT_LIST_LIMIT
from dashlib.logging_config import configure_logging
from dashlib.models.graph import Graph
from dashlib.storage.base import GraphRepository
from dashlib.storage.errors import GraphNotFound
from dashlib.storage.graph_store import build_graph_repository_from_env

_LOGGER = logging.getLogger(__name__)


class GraphLibrary:
    """Entry point used by the dashboard front-end to load graphs."""

    def __init__(self, repository: GraphRepository) -> None:
        self._repository = repository

    @classmethod
    def from_env(cls) -> "GraphLibrary":
        """Build a library backed by the repository configured in the env."""
        configure_logging()
        return cls(build_graph_repository_from_env())

    @property
    def repository(self) -> GraphRepository:
        """Repository the library reads from and writes to."""
        return self._repository

    def get_graph(self, identifier: str) -> Graph:
        """
        Load a graph by id, falling back to its alias.

        :param identifier: Graph id or alias.
        :returns: A fresh, unexpanded graph.
        :raises GraphNotFound: If neither lookup matches.
        """

        try:
            return self._repository.get("id", identifier)
        except GraphNotFound:
            _LOGGER.debug("No graph with id %s, trying alias", identifier)
            return self._repository.get("alias", identifier)

    def expand_graph(
        self,
        identifier: str,
        attrs: Optional[Mapping[str, Any]] = None,
    ) -> Graph:
        """
        Load a graph and materialize it against ``attrs``.

        :param identifier: Graph id or alias.
        :param attrs: Attributes overriding the stored ones.
        :returns: The expanded graph.
        """

        graph = self.get_graph(identifier)
        link_id = graph.link_id
        graph.expand(attrs)
        _LOGGER.info(
            "Expanded graph id=%s link=%s groups=%d",
            graph.id,
            link_id,
            len(graph.groups),
        )
        return graph

    def search(
        self,
        filters: Optional[Mapping[str, str]] = None,
        *,
        offset: int = 0,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> List[Graph]:
        """
        List graphs matching ``filters``.

        :param filters: Field to raw filter value; ``glob:`` and ``regexp:``
            prefixes select the matching mode.
        :param offset: Number of matches to skip.
        :param limit: Maximum number of graphs, 0 for all.
        :returns: Graphs ordered by name then id.
        """

        return list(
            self._repository.list(filters, offset=offset, limit=limit)
        )

    def instances_of(self, template_id: str) -> List[Graph]:
        """Return graphs linked to the given template."""
        return self.search({"link_id": template_id}, limit=0)

    def save_graph(self, graph: Graph, *, overwrite: bool = False) -> Graph:
        """
        Persist ``graph`` through the repository.

        :raises ValidationError: If the graph is rejected.
        """

        saved = self._repository.save(graph, overwrite=overwrite)
        _LOGGER.info("Saved graph id=%s name=%s", saved.id, saved.name)
        return saved

    def delete_graph(self, graph_id: str) -> None:
        """Delete a graph by id; raises GraphNotFound when missing."""
        self._repository.delete(graph_id)
        _LOGGER.info("Deleted graph id=%s", graph_id)
