"""Rename files and directories whose names contain a mapped variant."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from .events import EntryStatus, EventEmitter, EventSink, EventTag, TraversalReport
from .files import walk_tree
from .naming import MappingPair
from .rewrite import Strategy, apply_mappings

__all__ = ["free_path", "rename_paths"]

LOGGER = logging.getLogger(__name__)


def free_path(candidate: Path) -> Path:
    """Return ``candidate`` or, if taken, the first free ``<name>_<n>`` sibling."""

    if not candidate.exists():
        return candidate
    index = 1
    while True:
        alternative = candidate.with_name(f"{candidate.name}_{index}")
        if not alternative.exists():
            return alternative
        index += 1


def rename_paths(
    root: str | Path,
    mappings: Sequence[MappingPair],
    *,
    dry_run: bool = False,
    strategy: Strategy = "sequential",
    sink: EventSink | None = None,
) -> TraversalReport:
    """Rename every entry below ``root`` whose file name contains a mapped variant.

    Only the final path component is rewritten. Entries are processed deepest
    first so that renaming a directory never invalidates a collected child path.
    ``root`` itself is never renamed.
    """

    root = Path(root)
    emitter = EventEmitter("rename", sink)
    report = TraversalReport(operation="rename", dry_run=dry_run)
    emitter.info("Renaming files and directories where needed...")

    entries = sorted(walk_tree(root), key=lambda path: len(path.parts), reverse=True)

    for path in entries:
        name = path.name
        new_name = apply_mappings(name, mappings, strategy)
        if new_name == name:
            continue

        target = free_path(path.with_name(new_name))
        if target.name != new_name:
            LOGGER.debug("%s is taken, using %s", path.with_name(new_name), target)

        if dry_run:
            emitter.emit(EventTag.DRY_RENAME, f"{path} -> {target}", path=path, target=str(target))
            report.record(path, EntryStatus.PLANNED, "rename", target=target)
            continue

        try:
            path.rename(target)
        except OSError as exc:
            emitter.warn(f"Failed to rename {path} -> {target}: {exc}", path=path)
            report.record(path, EntryStatus.FAILED, "rename", target=target, detail=str(exc))
            continue

        emitter.emit(EventTag.RENAME, f"{path} -> {target}", path=path, target=str(target))
        report.record(path, EntryStatus.APPLIED, "rename", target=target)

    return report
