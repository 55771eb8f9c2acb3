"""Merge a scaffold tree into an existing destination directory."""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from .errors import ConfigurationError
from .events import EntryStatus, EventEmitter, EventSink, EventTag, TraversalReport
from .files import decode_text, walk_tree

__all__ = [
    "CONFLICT_SUFFIX",
    "EXISTING_LABEL",
    "INCOMING_SUFFIX",
    "TEMPLATE_LABEL",
    "merge_into",
    "render_conflict",
    "sidecar_path",
]

LOGGER = logging.getLogger(__name__)

EXISTING_LABEL = "EXISTING"
TEMPLATE_LABEL = "TEMPLATE"
INCOMING_SUFFIX = ".liscaf-incoming"
CONFLICT_SUFFIX = ".liscaf-conflict"


def render_conflict(existing: str, incoming: str) -> str:
    """Embed both versions of a file between labelled conflict markers."""

    def _terminated(text: str) -> str:
        return text if not text or text.endswith("\n") else text + "\n"

    return (
        f"<<<<<<< {EXISTING_LABEL}\n"
        f"{_terminated(existing)}"
        "=======\n"
        f"{_terminated(incoming)}"
        f">>>>>>> {TEMPLATE_LABEL}\n"
    )


def sidecar_path(path: Path, suffix: str) -> Path:
    """Return the first free ``<name><suffix>``, ``<name><suffix>1``, ... path."""

    candidate = path.with_name(path.name + suffix)
    index = 1
    while candidate.exists():
        candidate = path.with_name(f"{path.name}{suffix}{index}")
        index += 1
    return candidate


def _conflict_note(destination: Path, incoming: Path) -> str:
    return (
        f"liscaf could not merge {destination.name}: the existing file and the template differ\n"
        "and at least one of them is not text.\n"
        "\n"
        f"Existing file (kept):   {destination}\n"
        f"Template file (saved):  {incoming}\n"
        "\n"
        "Resolve the conflict by hand, then delete the sidecar files.\n"
    )


def merge_into(
    source: str | Path,
    destination: str | Path,
    *,
    dry_run: bool = False,
    sink: EventSink | None = None,
) -> TraversalReport:
    """Merge every entry of ``source`` into the existing ``destination``.

    Missing files are copied, identical files are left alone, diverging text
    files are replaced with a conflict-marked merge of both versions, and
    diverging binary files are kept while the incoming version is written to
    ``<name>.liscaf-incoming`` next to a ``<name>.liscaf-conflict`` note.
    """

    source = Path(source)
    destination = Path(destination)
    if not destination.is_dir():
        raise ConfigurationError(f"merge destination {destination} does not exist or is not a directory")

    emitter = EventEmitter("merge", sink)
    report = TraversalReport(operation="merge", dry_run=dry_run)
    emitter.info(f"Merging scaffold into {destination}")

    for entry in walk_tree(source):
        target = destination / entry.relative_to(source)

        if entry.is_symlink():
            try:
                _merge_link(entry, target, dry_run=dry_run, emitter=emitter, report=report)
            except OSError as exc:
                emitter.warn(f"Failed to merge {entry} -> {target}: {exc}", path=target)
                report.record(entry, EntryStatus.FAILED, "link", target=target, detail=str(exc))
            continue

        if entry.is_dir():
            if not dry_run:
                try:
                    target.mkdir(parents=True, exist_ok=True)
                except OSError as exc:
                    emitter.warn(f"Failed to create directory {target}: {exc}", path=target)
                    report.record(entry, EntryStatus.FAILED, "mkdir", target=target, detail=str(exc))
            continue

        try:
            _merge_file(entry, target, dry_run=dry_run, emitter=emitter, report=report)
        except OSError as exc:
            emitter.warn(f"Failed to merge {entry} -> {target}: {exc}", path=target)
            report.record(entry, EntryStatus.FAILED, "merge", target=target, detail=str(exc))

    return report


def _merge_link(
    entry: Path,
    target: Path,
    *,
    dry_run: bool,
    emitter: EventEmitter,
    report: TraversalReport,
) -> None:
    # Links are copied as links; walk_tree never descends into linked directories.
    if target.is_symlink() and os.readlink(target) == os.readlink(entry):
        report.record(entry, EntryStatus.UNCHANGED, "identical", target=target)
        return

    if target.exists() or target.is_symlink():
        emitter.warn(f"Skipping link {entry}: {target} already exists", path=target)
        report.record(entry, EntryStatus.SKIPPED, "link", target=target, detail="destination exists")
        return

    if dry_run:
        emitter.emit(EventTag.DRY_ADD, f"Would add {target}", path=target)
        report.record(entry, EntryStatus.PLANNED, "add", target=target)
        return
    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(entry, target, follow_symlinks=False)
    emitter.emit(EventTag.ADD, f"Added {target}", path=target)
    report.record(entry, EntryStatus.APPLIED, "add", target=target)


def _merge_file(
    entry: Path,
    target: Path,
    *,
    dry_run: bool,
    emitter: EventEmitter,
    report: TraversalReport,
) -> None:
    if not target.exists():
        if dry_run:
            emitter.emit(EventTag.DRY_ADD, f"Would add {target}", path=target)
            report.record(entry, EntryStatus.PLANNED, "add", target=target)
            return
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(entry, target)
        emitter.emit(EventTag.ADD, f"Added {target}", path=target)
        report.record(entry, EntryStatus.APPLIED, "add", target=target)
        return

    incoming = entry.read_bytes()
    existing = target.read_bytes()
    if incoming == existing:
        report.record(entry, EntryStatus.UNCHANGED, "identical", target=target)
        return

    existing_text = decode_text(existing)
    incoming_text = decode_text(incoming)
    if existing_text is not None and incoming_text is not None:
        if dry_run:
            emitter.emit(EventTag.DRY_MERGE, f"Would merge {target}", path=target)
            report.record(entry, EntryStatus.PLANNED, "merge", target=target)
            return
        target.write_bytes(render_conflict(existing_text, incoming_text).encode("utf-8"))
        emitter.emit(EventTag.MERGE, f"Wrote conflict markers into {target}", path=target)
        report.record(entry, EntryStatus.APPLIED, "merge", target=target)
        return

    if dry_run:
        emitter.emit(EventTag.DRY_BIN_CONFLICT, f"Would flag binary conflict for {target}", path=target)
        report.record(entry, EntryStatus.PLANNED, "binary-conflict", target=target)
        return

    incoming_path = sidecar_path(target, INCOMING_SUFFIX)
    incoming_path.write_bytes(incoming)
    note_path = sidecar_path(target, CONFLICT_SUFFIX)
    note_path.write_text(_conflict_note(target, incoming_path), encoding="utf-8")
    LOGGER.debug("binary conflict sidecars %s, %s", incoming_path, note_path)
    emitter.emit(
        EventTag.BIN_CONFLICT,
        f"{target} kept; template version saved to {incoming_path} (see {note_path})",
        path=target,
        incoming=str(incoming_path),
        note=str(note_path),
    )
    report.record(entry, EntryStatus.APPLIED, "binary-conflict", target=target)
