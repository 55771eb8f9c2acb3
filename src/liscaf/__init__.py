"""Scaffold new projects from template repositories.

The package splits names into tokens, derives every naming-convention variant
of a template's base name, rewrites file contents and paths with the matching
variants of a new name, and either places the result as a fresh repository or
merges it into an existing directory.
"""

from __future__ import annotations

from .config import ScaffoldConfig
from .errors import ConfigurationError, ExternalToolError, ManifestError, ScaffoldError
from .events import EntryStatus, EventTag, MemorySink, ScaffoldEvent, StreamSink, TraversalReport
from .merge import merge_into
from .naming import MappingPair, generate_mappings, tokenize
from .rename import rename_paths
from .rewrite import apply_mappings, rewrite_contents
from .scaffold import ScaffoldResult, Scaffolder

__all__ = [
    "ConfigurationError",
    "EntryStatus",
    "EventTag",
    "ExternalToolError",
    "ManifestError",
    "MappingPair",
    "MemorySink",
    "ScaffoldConfig",
    "ScaffoldError",
    "ScaffoldEvent",
    "ScaffoldResult",
    "Scaffolder",
    "StreamSink",
    "TraversalReport",
    "apply_mappings",
    "generate_mappings",
    "merge_into",
    "rename_paths",
    "rewrite_contents",
    "tokenize",
]

__version__ = "0.1.0"
