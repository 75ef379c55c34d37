"""
Dashlib Repository
Introductory remarks: This module is part of the Dashlib codebase.

Shared fixtures for the test suite.
"""

from __future__ import annotations

from typing import Callable

import pytest

from dashlib.models import Graph, Series, SeriesGroup
from dashlib.storage.memory import InMemoryGraphRepository
from dashlib.utils import env


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """
    _isolated_env: Keep developer .env files and DASHLIB_* settings out.
    :param monkeypatch:
    :returns:
    """

    monkeypatch.setattr(env, "_ENV_LOADED", True)
    for name in (
        "DASHLIB_GRAPH_TABLE",
        "DASHLIB_GRAPH_DIR",
        "DASHLIB_AWS_REGION",
        "LOG_LEVEL",
        "LOG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def repository() -> InMemoryGraphRepository:
    return InMemoryGraphRepository()


@pytest.fixture
def make_template() -> Callable[..., Graph]:
    """
    make_template: Factory for template graphs using an 'env' placeholder.
    :param:
    :returns:
    """

    def _build(name: str = "cpu-template") -> Graph:
        return Graph(
            name=name,
            template=True,
            options={"title": "{{env}} load", "yaxis": "percent"},
            attributes={"env": "staging", "region": "eu"},
            groups=[
                SeriesGroup(
                    name="cpu",
                    series=[
                        Series(
                            name="{{region}} usage",
                            origin="{{env}}",
                            source="cpu",
                            metric="usage",
                        )
                    ],
                )
            ],
        )

    return _build
