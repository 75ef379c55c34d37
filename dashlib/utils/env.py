from __future__ import annotations

"""Helpers for loading environment configuration."""

import logging
import os
from pathlib import Path
from typing import Optional, Tuple, Union

_ENV_LOADED = False

_LOGGER = logging.getLogger(__name__)


def load_dotenv(dotenv_path: Union[str, Path] = ".env") -> None:
    """Load environment variables from a simple ``.env`` file if present."""
    global _ENV_LOADED
    if _ENV_LOADED:
        return

    path = Path(dotenv_path)
    if path.exists():
        for line in path.read_text().splitlines():
            parsed = _parse_line(line)
            if parsed:
                key, value = parsed
                os.environ.setdefault(key, value)
        _LOGGER.debug("Loaded environment overrides from %s", path)

    _ENV_LOADED = True


def _parse_line(line: str) -> Optional[Tuple[str, str]]:
    stripped = line.strip()
    if not stripped or stripped.startswith("#"):
        return None

    if "=" not in stripped:
        return None

    key, value = stripped.split("=", 1)
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        value = value[1:-1]
    return (key.strip(), value)


def graph_table_name() -> Optional[str]:
    """DynamoDB table holding library graphs, when configured."""

    load_dotenv()
    value = os.environ.get("DASHLIB_GRAPH_TABLE", "").strip()
    return value or None


def graph_store_dir() -> Optional[Path]:
    """Directory used by the file-based graph store, when configured."""

    load_dotenv()
    value = os.environ.get("DASHLIB_GRAPH_DIR", "").strip()
    return Path(value) if value else None


def aws_region() -> Optional[str]:
    load_dotenv()
    return (
        os.environ.get("DASHLIB_AWS_REGION")
        or os.environ.get("AWS_REGION")
        or os.environ.get("AWS_DEFAULT_REGION")
    )
