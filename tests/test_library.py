from __future__ import annotations

from typing import Callable

import pytest

from dashlib import library as library_module
from dashlib.library import GraphLibrary
from dashlib.models import Graph
from dashlib.storage.errors import GraphNotFound
from dashlib.storage.memory import InMemoryGraphRepository
from dashlib.template import UnresolvedAttribute


@pytest.fixture
def library(repository: InMemoryGraphRepository) -> GraphLibrary:
    return GraphLibrary(repository)


def test_get_graph_by_id_or_alias(library: GraphLibrary) -> None:
    graph = library.save_graph(Graph(name="cpu", alias="cpu-alias"))

    assert library.get_graph(graph.id).name == "cpu"
    assert library.get_graph("cpu-alias").id == graph.id
    with pytest.raises(GraphNotFound):
        library.get_graph("unknown")


def test_expand_graph_end_to_end(
    library: GraphLibrary,
    make_template: Callable[..., Graph],
) -> None:
    template = library.save_graph(make_template())
    instance = library.save_graph(
        Graph(
            name="cpu-prod",
            alias="cpu-prod",
            link_id=template.id,
            attributes={"env": "prod"},
        )
    )

    graph = library.expand_graph("cpu-prod")

    assert graph.id == instance.id
    assert graph.expanded
    assert graph.options["title"] == "prod load"
    assert graph.groups[0].series[0].origin == "prod"


def test_expand_graph_reports_missing_attribute(
    library: GraphLibrary,
) -> None:
    graph = library.save_graph(Graph(name="g", options={"title": "{{host}}"}))
    with pytest.raises(UnresolvedAttribute, match="host"):
        library.expand_graph(graph.id)


def test_search_and_instances_of(
    library: GraphLibrary,
    make_template: Callable[..., Graph],
) -> None:
    template = library.save_graph(make_template())
    for env in ("prod", "dev"):
        library.save_graph(
            Graph(
                name=f"cpu-{env}",
                link_id=template.id,
                attributes={"env": env},
            )
        )
    library.save_graph(Graph(name="mem-prod"))

    assert [g.name for g in library.search({"name": "glob:*-prod"})] == [
        "cpu-prod",
        "mem-prod",
    ]
    assert [g.name for g in library.instances_of(template.id)] == [
        "cpu-dev",
        "cpu-prod",
    ]


def test_delete_graph(library: GraphLibrary) -> None:
    graph = library.save_graph(Graph(name="cpu"))
    library.delete_graph(graph.id)
    with pytest.raises(GraphNotFound):
        library.get_graph(graph.id)


def test_from_env_configures_logging_and_repository(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    calls: list[str] = []
    monkeypatch.setattr(
        library_module, "configure_logging", lambda: calls.append("logging")
    )

    built = GraphLibrary.from_env()

    assert calls == ["logging"]
    assert isinstance(built.repository, InMemoryGraphRepository)
