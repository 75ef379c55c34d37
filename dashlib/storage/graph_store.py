"""
Dashlib Repository
Introductory remarks: This module is part of the Dashlib codebase.

Persistent graph repositories (local JSON files and DynamoDB).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional

from dashlib.config import DEFAULT_GRAPH_DIR, ID_PATTERN
from dashlib.models.graph import (Graph, graph_from_record, graph_to_record,
                                  validate_graph_id)
from dashlib.utils.env import aws_region, graph_store_dir, graph_table_name

from .base import GraphRepository
from .errors import (GraphNotFound, StoreError, StoreUnavailableError,
                     ValidationError)
from .memory import InMemoryGraphRepository
from .query import ensure_unique, lookup_column, select_records

_LOGGER = logging.getLogger(__name__)

_TRANSIENT_CODES = {
    "ProvisionedThroughputExceededException",
    "RequestLimitExceeded",
    "ThrottlingException",
    "Throttling",
    "RequestTimeout",
    "RequestTimeoutException",
    "ServiceUnavailable",
    "InternalServerError",
    "InternalError",
    "503",
}

_TRANSIENT_EXCEPTIONS = {
    "EndpointConnectionError",
    "ConnectTimeoutError",
    "ReadTimeoutError",
    "ConnectionClosedError",
}


def _error_code(exc: Exception) -> Optional[str]:
    response = getattr(exc, "response", None)
    if not isinstance(response, dict):
        return None
    error = response.get("Error")
    if not isinstance(error, dict):
        return None
    code = error.get("Code")
    return code if isinstance(code, str) and code else None


def _looks_like_transient_cloud_failure(exc: Exception) -> bool:
    code = _error_code(exc)
    if code in _TRANSIENT_CODES:
        return True
    return exc.__class__.__name__ in _TRANSIENT_EXCEPTIONS


def _translate_failure(action: str, exc: Exception) -> StoreError:
    if _looks_like_transient_cloud_failure(exc):
        _LOGGER.warning("Graph store unavailable while %s: %s", action, exc)
        return StoreUnavailableError(
            f"Graph store temporarily unavailable: {exc}"
        )
    _LOGGER.warning("Graph store failure while %s: %s", action, exc)
    return StoreError(f"Failed {action}: {exc}")


class LocalGraphRepository(GraphRepository):
    """File-based graph store (one JSON record per graph)."""

    def __init__(self, base_dir: Path = Path(DEFAULT_GRAPH_DIR)) -> None:
        self._base_dir = Path(base_dir)
        self._base_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, graph_id: str) -> Path:
        validate_graph_id(graph_id)
        return self._base_dir / f"{graph_id}.json"

    def _existing_path(self, graph_id: str) -> Optional[Path]:
        if not graph_id or not ID_PATTERN.match(graph_id):
            return None
        path = self._path(graph_id)
        return path if path.exists() else None

    def _read(self, path: Path) -> Dict[str, Any]:
        try:
            with path.open(encoding="utf-8") as handle:
                return json.load(handle)
        except (OSError, ValueError) as exc:
            raise _translate_failure(f"reading {path.name}", exc) from exc

    def _records(self) -> Iterator[Dict[str, Any]]:
        for path in sorted(self._base_dir.glob("*.json")):
            yield self._read(path)

    def get(self, field: str, value: str) -> Graph:
        """
        Load a graph by one of its lookup fields.

        :param field: ``id``, ``name`` or ``alias``.
        :param value: Value to match exactly.
        :returns: A fresh graph bound to this repository.
        :raises GraphNotFound: If no record matches.
        :raises StoreError: If a record file cannot be read.
        """

        column = lookup_column(field)
        record: Optional[Dict[str, Any]] = None
        if column == "id":
            path = self._existing_path(value)
            if path is not None:
                record = self._read(path)
        else:
            record = next(
                (r for r in self._records() if r.get(column) == value),
                None,
            )
        if record is None:
            raise GraphNotFound(f"Graph with {field} '{value}' does not exist")
        return graph_from_record(record, store=self)

    def save(self, graph: Graph, *, overwrite: bool = False) -> Graph:
        """
        Validate and write ``graph`` to its record file.

        The graph only picks up its id and timestamps once the write
        succeeded.

        :param graph: Graph to persist.
        :param overwrite: Replace an existing record with the same id.
        :returns: The saved graph, now bound to this repository.
        :raises ValidationError: On a bad field, a taken id, name or alias.
        :raises StoreError: If the record cannot be written.
        """

        candidate = graph.prepare_save()
        path = self._path(candidate.id)
        if path.exists() and not overwrite:
            raise ValidationError(f"Graph '{candidate.id}' already exists")
        record = graph_to_record(candidate)
        ensure_unique(record, self._records())
        try:
            with path.open("w", encoding="utf-8") as handle:
                json.dump(record, handle)
        except OSError as exc:
            raise _translate_failure(f"writing {path.name}", exc) from exc
        graph.mark_saved(candidate, self)
        return graph

    def delete(self, graph_id: str) -> None:
        """
        Remove the record file of ``graph_id``.

        :raises GraphNotFound: If no such graph exists.
        :raises StoreError: If the file cannot be removed.
        """

        path = self._existing_path(graph_id)
        if path is None:
            raise GraphNotFound(f"Graph with id '{graph_id}' does not exist")
        try:
            path.unlink()
        except OSError as exc:
            raise _translate_failure(f"deleting {path.name}", exc) from exc

    def list(
        self,
        filters: Optional[Mapping[str, str]] = None,
        *,
        offset: int = 0,
        limit: int = 50,
    ) -> List[Graph]:
        """List graphs matching ``filters``, ordered by name then id."""
        records = select_records(
            self._records(), filters, offset=offset, limit=limit
        )
        return [graph_from_record(record, store=self) for record in records]


class DynamoDBGraphRepository(GraphRepository):
    """DynamoDB-backed graph store keyed by graph id."""

    def __init__(
        self,
        table_name: str,
        *,
        resource: Any | None = None,
    ) -> None:
        if not table_name:
            raise ValueError("table_name must be provided")
        if resource is None:
            import boto3  # type: ignore[import-untyped]

            region = aws_region()
            kwargs: dict[str, Any] = {}
            if region:
                kwargs["region_name"] = region
            resource = boto3.resource("dynamodb", **kwargs)
        self._table = resource.Table(table_name)

    def _scan(self) -> Iterator[Dict[str, Any]]:
        """Yield every table item, following scan pagination."""
        params: dict[str, Any] = {}
        while True:
            try:
                response = self._table.scan(**params)
            except Exception as exc:  # noqa: BLE001 - botocore error types
                raise _translate_failure("scanning graphs", exc) from exc
            for item in response.get("Items", []):
                yield item
            start_key = response.get("LastEvaluatedKey")
            if not start_key:
                return
            params["ExclusiveStartKey"] = start_key

    def get(self, field: str, value: str) -> Graph:
        """
        Load a graph by id with ``get_item``, or by name or alias via scan.

        :raises GraphNotFound: If no item matches.
        :raises StoreError: On a backend failure.
        """

        column = lookup_column(field)
        item: Optional[Dict[str, Any]]
        if column == "id":
            try:
                response = self._table.get_item(Key={"id": value})
            except Exception as exc:  # noqa: BLE001 - botocore error types
                raise _translate_failure(f"loading graph {value}", exc) from exc
            item = response.get("Item")
        else:
            item = next(
                (i for i in self._scan() if i.get(column) == value),
                None,
            )
        if item is None:
            raise GraphNotFound(f"Graph with {field} '{value}' does not exist")
        return graph_from_record(item, store=self)

    def save(self, graph: Graph, *, overwrite: bool = False) -> Graph:
        """
        Put ``graph`` into the table, conditional on a new id.

        :param overwrite: Skip the ``attribute_not_exists(id)`` condition.
        :raises ValidationError: On a bad field, a taken id, name or alias.
        :raises StoreError: On a backend failure.
        """

        candidate = graph.prepare_save()
        record = graph_to_record(candidate)
        ensure_unique(record, self._scan())
        item = {key: value for key, value in record.items() if value is not None}
        params: dict[str, Any] = {"Item": item}
        if not overwrite:
            params["ConditionExpression"] = "attribute_not_exists(id)"
        try:
            self._table.put_item(**params)
        except Exception as exc:  # noqa: BLE001 - botocore error types
            if _error_code(exc) == "ConditionalCheckFailedException":
                raise ValidationError(
                    f"Graph '{candidate.id}' already exists"
                ) from exc
            raise _translate_failure(
                f"saving graph {candidate.id}", exc
            ) from exc
        graph.mark_saved(candidate, self)
        return graph

    def delete(self, graph_id: str) -> None:
        """Delete the item keyed by ``graph_id``; raises GraphNotFound."""
        try:
            self._table.delete_item(
                Key={"id": graph_id},
                ConditionExpression="attribute_exists(id)",
            )
        except Exception as exc:  # noqa: BLE001 - botocore error types
            if _error_code(exc) == "ConditionalCheckFailedException":
                raise GraphNotFound(
                    f"Graph with id '{graph_id}' does not exist"
                ) from exc
            raise _translate_failure(f"deleting graph {graph_id}", exc) from exc

    def list(
        self,
        filters: Optional[Mapping[str, str]] = None,
        *,
        offset: int = 0,
        limit: int = 50,
    ) -> List[Graph]:
        """List graphs matching ``filters`` from a full table scan."""
        records = select_records(
            self._scan(), filters, offset=offset, limit=limit
        )
        return [graph_from_record(record, store=self) for record in records]


def build_graph_repository_from_env() -> GraphRepository:
    """Pick a graph repository from DASHLIB_GRAPH_TABLE / DASHLIB_GRAPH_DIR."""
    table_name = graph_table_name()
    if table_name:
        return DynamoDBGraphRepository(table_name)
    base_dir = graph_store_dir()
    if base_dir is not None:
        return LocalGraphRepository(base_dir)
    return InMemoryGraphRepository()
