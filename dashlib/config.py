"""
Dashlib Repository
Introductory remarks: This module is part of the Dashlib codebase.

Central configuration constants for the graph library.
"""

from __future__ import annotations

import re

# Filter modifiers ----------------------------------------------------------

GLOB_PREFIX = "glob:"
"""Prefix marking a filter value as a shell-glob pattern."""

REGEXP_PREFIX = "regexp:"
"""Prefix marking a filter value as a regular expression."""

# Item naming ---------------------------------------------------------------

NAME_PATTERN = re.compile(r"^[a-zA-Z0-9](?:[a-zA-Z0-9\-_\.]*[a-zA-Z0-9])?$")
"""Rule shared by graph names and aliases."""

ID_PATTERN = re.compile(r"^[a-zA-Z0-9\-]+$")
"""Rule for graph identifiers; UUID4 strings satisfy it."""

# Storage defaults ----------------------------------------------------------

DEFAULT_GRAPH_DIR = "/tmp/dashlib-graphs"
"""Directory used by the file-based graph store when none is configured."""

DEFAULT_LIST_LIMIT = 50
"""Page size applied to repository listings."""
