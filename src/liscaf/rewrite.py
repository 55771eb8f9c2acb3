"""Literal replacement of name variants inside file contents."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Literal, Sequence

from .events import EntryStatus, EventEmitter, EventSink, EventTag, TraversalReport
from .files import decode_text, walk_tree
from .naming import MappingPair

__all__ = ["STRATEGIES", "Strategy", "apply_mappings", "rewrite_contents"]

LOGGER = logging.getLogger(__name__)

Strategy = Literal["sequential", "single-pass"]
STRATEGIES: tuple[str, ...] = ("sequential", "single-pass")


def _apply_sequential(text: str, mappings: Sequence[MappingPair]) -> str:
    for pair in mappings:
        if pair.original in text:
            text = text.replace(pair.original, pair.replacement)
    return text


def _apply_single_pass(text: str, mappings: Sequence[MappingPair]) -> str:
    lookup: dict[str, str] = {}
    for pair in mappings:
        lookup.setdefault(pair.original, pair.replacement)
    if not lookup:
        return text
    # Longest alternatives first so the regex engine prefers the longest match.
    alternatives = sorted(lookup, key=lambda value: (-len(value), value))
    pattern = re.compile("|".join(re.escape(value) for value in alternatives))
    return pattern.sub(lambda match: lookup[match.group(0)], text)


def apply_mappings(text: str, mappings: Sequence[MappingPair], strategy: Strategy = "sequential") -> str:
    """Replace every mapped original in ``text``.

    ``"sequential"`` applies each pair in order with a literal, left-to-right
    replacement, so output of an earlier pair can be matched by a later one.
    ``"single-pass"`` scans the original text once for all originals, taking
    the longest match at each position, and never re-matches replaced text.
    """

    if strategy == "sequential":
        return _apply_sequential(text, mappings)
    if strategy == "single-pass":
        return _apply_single_pass(text, mappings)
    raise ValueError(f"unknown replacement strategy '{strategy}'")


def rewrite_contents(
    root: str | Path,
    mappings: Sequence[MappingPair],
    *,
    dry_run: bool = False,
    strategy: Strategy = "sequential",
    sink: EventSink | None = None,
) -> TraversalReport:
    """Rewrite the contents of every text file below ``root``.

    Binary files (containing a NUL byte) and files that are not valid UTF-8 are
    skipped. Files are only written when their content changes. Read and write
    failures are reported and do not stop the traversal.
    """

    root = Path(root)
    emitter = EventEmitter("rewrite", sink)
    report = TraversalReport(operation="rewrite", dry_run=dry_run)
    emitter.info("Replacing content inside files...")

    for path in walk_tree(root):
        if path.is_symlink() or not path.is_file():
            continue

        try:
            data = path.read_bytes()
        except OSError as exc:
            emitter.warn(f"Failed to read file {path}: {exc}", path=path)
            report.record(path, EntryStatus.FAILED, "replace", detail=str(exc))
            continue

        text = decode_text(data)
        if text is None:
            LOGGER.debug("skipping non-text file %s", path)
            report.record(path, EntryStatus.SKIPPED, "replace", detail="binary or undecodable content")
            continue

        updated = apply_mappings(text, mappings, strategy)
        if updated == text:
            report.record(path, EntryStatus.UNCHANGED, "replace")
            continue

        if dry_run:
            emitter.emit(EventTag.DRY_REPL, f"Would update file: {path}", path=path)
            report.record(path, EntryStatus.PLANNED, "replace")
            continue

        try:
            path.write_bytes(updated.encode("utf-8"))
        except OSError as exc:
            emitter.warn(f"Failed to write file {path}: {exc}", path=path)
            report.record(path, EntryStatus.FAILED, "replace", detail=str(exc))
            continue

        emitter.emit(EventTag.REPL, f"Updated file: {path}", path=path)
        report.record(path, EntryStatus.APPLIED, "replace")

    return report
