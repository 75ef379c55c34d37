"""Domain model package exports."""

from .attributes import AttributeMap, merge
from .graph import (ExpansionState, Graph, ResolutionState, graph_from_record,
                    graph_to_record, validate_alias, validate_name)
from .series import (Consolidate, DecodingError, EncodingError, Operator,
                     Series, SeriesGroup, SeriesGroups)

__all__ = [
    "AttributeMap",
    "Consolidate",
    "DecodingError",
    "EncodingError",
    "ExpansionState",
    "Graph",
    "Operator",
    "ResolutionState",
    "Series",
    "SeriesGroup",
    "SeriesGroups",
    "graph_from_record",
    "graph_to_record",
    "merge",
    "validate_alias",
    "validate_name",
]
