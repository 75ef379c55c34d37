"""
Dashlib Repository
Introductory remarks: This module is part of the Dashlib codebase.

Library graph items and their template resolution/expansion.

A graph is either a direct definition or an instance linked to a template
graph. ``resolve`` fetches the linked template from the repository the graph
was loaded from; ``expand`` turns an instance into a standalone graph made of
the template's definition overlaid with the instance identity, attributes and
options, then substitutes ``{{ key }}`` placeholders in the title and in every
series coordinate. Both steps latch: once done, calling them again is a no-op.

Templates of templates are not followed: only the direct link is applied.
"""

from __future__ import annotations

import copy
import json
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Any, Mapping, Optional

from dashlib.config import ID_PATTERN, NAME_PATTERN
from dashlib.storage.errors import (InvalidAlias, InvalidIdentifier,
                                    InvalidName, UnresolvableItem)
from dashlib.template import expand as expand_template

from .attributes import AttributeMap, as_attribute_map
from .series import DecodingError, SeriesGroups

if TYPE_CHECKING:
    from dashlib.storage.base import GraphRepository

_LOGGER = logging.getLogger(__name__)


class ResolutionState(str, Enum):
    """Whether the graph link has been looked up."""

    UNRESOLVED = "unresolved"
    RESOLVED = "resolved"


class ExpansionState(str, Enum):
    """Whether template substitution has been applied."""

    UNEXPANDED = "unexpanded"
    EXPANDED = "expanded"


def validate_name(name: str) -> str:
    """Ensure graph names match the naming rule."""
    if not name or not NAME_PATTERN.match(name):
        raise InvalidName(
            f"Graph name '{name}' is invalid. Expected pattern "
            f"{NAME_PATTERN.pattern}"
        )
    return name


def validate_graph_id(graph_id: str) -> str:
    """Ensure graph ids match the identifier rule."""
    if not graph_id or not ID_PATTERN.match(graph_id):
        raise InvalidIdentifier(
            f"Graph id '{graph_id}' is invalid. Expected pattern "
            f"{ID_PATTERN.pattern}"
        )
    return graph_id


def validate_alias(alias: str) -> str:
    """Ensure non-empty aliases match the naming rule."""
    if alias and not NAME_PATTERN.match(alias):
        raise InvalidAlias(
            f"Graph alias '{alias}' is invalid. Expected pattern "
            f"{NAME_PATTERN.pattern}"
        )
    return alias


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Fields replaced wholesale when an instance takes over its template.
_DEFINITION_FIELDS = (
    "name",
    "description",
    "created",
    "modified",
    "groups",
    "link_id",
    "link",
    "attributes",
    "alias",
    "options",
    "template",
)


# Fields the save hook may assign or normalize.
_SAVE_HOOK_FIELDS = (
    "id",
    "link_id",
    "alias",
    "description",
    "created",
    "modified",
)


@dataclass
class Graph:
    """Library graph item."""

    id: str = ""
    name: str = ""
    description: Optional[str] = None
    created: Optional[datetime] = None
    modified: Optional[datetime] = None
    groups: SeriesGroups = field(default_factory=SeriesGroups)
    link_id: Optional[str] = None
    link: Optional["Graph"] = field(default=None, repr=False, compare=False)
    attributes: AttributeMap = field(default_factory=AttributeMap)
    alias: Optional[str] = None
    options: AttributeMap = field(default_factory=AttributeMap)
    template: bool = False
    store: Optional["GraphRepository"] = field(
        default=None, repr=False, compare=False
    )
    resolution: ResolutionState = field(
        default=ResolutionState.UNRESOLVED, init=False, compare=False
    )
    expansion: ExpansionState = field(
        default=ExpansionState.UNEXPANDED, init=False, compare=False
    )

    def __post_init__(self) -> None:
        if not isinstance(self.groups, SeriesGroups):
            self.groups = SeriesGroups(self.groups or [])
        self.attributes = as_attribute_map(self.attributes)
        self.options = as_attribute_map(self.options)

    @property
    def resolved(self) -> bool:
        return self.resolution is ResolutionState.RESOLVED

    @property
    def expanded(self) -> bool:
        return self.expansion is ExpansionState.EXPANDED

    @property
    def detached(self) -> bool:
        return self.store is None

    def before_save(self) -> None:
        """
        Validate and normalize the graph before it reaches storage.

        :raises InvalidName: If the name fails the naming rule.
        :raises InvalidIdentifier: If a preset id fails the identifier rule.
        :raises InvalidAlias: If a non-empty alias fails the naming rule.
        """

        validate_name(self.name)
        if self.id:
            validate_graph_id(self.id)
        if self.alias is not None:
            validate_alias(self.alias)

        if self.link_id == "":
            self.link_id = None
        if self.alias == "":
            self.alias = None
        if self.description == "":
            self.description = None

        now = _utcnow()
        if not self.id:
            self.id = str(uuid.uuid4())
        if self.created is None:
            self.created = now
        self.modified = now

    def prepare_save(self) -> "Graph":
        """
        Return a validated, normalized copy ready to persist.

        The graph itself is left untouched until :meth:`mark_saved`.
        """

        candidate = self.copy()
        candidate.before_save()
        return candidate

    def mark_saved(
        self,
        candidate: "Graph",
        store: "GraphRepository",
    ) -> None:
        """Adopt the fields set by the save hook and bind to ``store``."""
        for name in _SAVE_HOOK_FIELDS:
            setattr(self, name, getattr(candidate, name))
        self.store = store

    def resolve(self) -> None:
        """
        Fetch the linked template graph, if any.

        :raises UnresolvableItem: If the graph is not bound to a repository.
        """

        if self.resolved:
            return
        if self.store is None:
            raise UnresolvableItem(
                f"Graph '{self.id}' is detached and cannot resolve its link"
            )

        if self.link_id:
            _LOGGER.debug("Resolving graph %s link %s", self.id, self.link_id)
            self.link = self.store.get("id", self.link_id)

        self.resolution = ResolutionState.RESOLVED

    def expand(self, attrs: Optional[Mapping[str, Any]] = None) -> None:
        """
        Apply the linked template and substitute placeholders.

        Caller attributes override the graph's own. On failure the graph is
        left partially substituted and not marked as expanded.

        :param attrs: Extra attributes merged over the graph attributes.
        :raises UnresolvedAttribute: If a placeholder cannot be substituted.
        """

        if self.expanded:
            return

        self.attributes.merge(attrs, True)

        if self.store is not None and self.link_id:
            self.resolve()
            self._take_over(self._instantiate(self.link))

        title = self.options.get("title")
        if isinstance(title, str):
            self.options["title"] = expand_template(title, self.attributes)

        for group in self.groups:
            for series in group.series:
                series.name = expand_template(series.name, self.attributes)
                series.origin = expand_template(
                    series.origin, self.attributes
                )
                series.source = expand_template(
                    series.source, self.attributes
                )
                series.metric = expand_template(
                    series.metric, self.attributes
                )

        self.expansion = ExpansionState.EXPANDED
        _LOGGER.debug("Expanded graph %s", self.id)

    def _instantiate(self, template: Optional["Graph"]) -> "Graph":
        if template is None:
            raise UnresolvableItem(
                f"Graph '{self.id}' link '{self.link_id}' did not resolve"
            )
        instance = template.copy()
        instance.id = self.id
        instance.attributes.merge(self.attributes, True)
        instance.options.merge(self.options, True)
        instance.template = False
        return instance

    def _take_over(self, other: "Graph") -> None:
        for name in _DEFINITION_FIELDS:
            setattr(self, name, getattr(other, name))
        self.resolution = other.resolution

    def copy(self) -> "Graph":
        """Return an unexpanded copy sharing no mutable state but the link."""
        clone = Graph(
            id=self.id,
            name=self.name,
            description=self.description,
            created=self.created,
            modified=self.modified,
            groups=copy.deepcopy(self.groups),
            link_id=self.link_id,
            link=self.link,
            attributes=copy.deepcopy(self.attributes),
            alias=self.alias,
            options=copy.deepcopy(self.options),
            template=self.template,
            store=self.store,
        )
        clone.resolution = self.resolution
        return clone

    def to_payload(self) -> dict[str, Any]:
        """Return the API-facing representation of the graph."""
        payload: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "created": _format_time(self.created),
            "modified": _format_time(self.modified),
            "template": self.template,
        }
        if self.groups:
            payload["groups"] = self.groups.to_payload()
        if self.link_id:
            payload["link"] = self.link_id
        if self.attributes:
            payload["attributes"] = dict(self.attributes)
        if self.alias:
            payload["alias"] = self.alias
        if self.options:
            payload["options"] = dict(self.options)
        return payload


def _format_time(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _parse_time(value: Any) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except (TypeError, ValueError) as exc:
        raise DecodingError(f"Invalid timestamp '{value}'") from exc


def _decode_map(value: Any) -> AttributeMap:
    if not value:
        return AttributeMap()
    if isinstance(value, Mapping):
        return AttributeMap(value)
    try:
        decoded = json.loads(value)
    except (TypeError, ValueError) as exc:
        raise DecodingError(f"Invalid attribute map: {exc}") from exc
    if not isinstance(decoded, dict):
        raise DecodingError("Attribute map must be a JSON object")
    return AttributeMap(decoded)


def graph_to_record(graph: Graph) -> dict[str, Any]:
    """
    Flatten a graph into its persisted column layout.

    Groups, attributes and options are stored as JSON text blobs.
    """

    return {
        "id": graph.id,
        "name": graph.name,
        "description": graph.description,
        "created": _format_time(graph.created),
        "modified": _format_time(graph.modified),
        "groups": graph.groups.encode(),
        "link": graph.link_id,
        "attributes": json.dumps(dict(graph.attributes)),
        "alias": graph.alias,
        "options": json.dumps(dict(graph.options)),
        "template": bool(graph.template),
    }


def graph_from_record(
    record: Mapping[str, Any],
    *,
    store: Optional["GraphRepository"] = None,
) -> Graph:
    """Rebuild a fresh, unresolved graph from a persisted record."""
    groups = record.get("groups")
    return Graph(
        id=record.get("id") or "",
        name=record.get("name") or "",
        description=record.get("description"),
        created=_parse_time(record.get("created")),
        modified=_parse_time(record.get("modified")),
        groups=SeriesGroups.decode(groups) if groups else SeriesGroups(),
        link_id=record.get("link"),
        attributes=_decode_map(record.get("attributes")),
        alias=record.get("alias"),
        options=_decode_map(record.get("options")),
        template=bool(record.get("template", False)),
        store=store,
    )
