"""Run a complete scaffold: clone, rewrite, rename, then place or merge."""

from __future__ import annotations

import logging
import shutil
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from .config import ScaffoldConfig
from .errors import ScaffoldError
from .events import EventEmitter, EventSink, NullSink, TraversalReport
from .files import VCS_DIRECTORIES
from .merge import merge_into
from .naming import MappingPair, generate_mappings, tokenize
from .rename import rename_paths
from .rewrite import Strategy, rewrite_contents
from .vcs import Cloner, GitCloner, GitRepoInitializer, RepoInitializer

__all__ = ["ScaffoldResult", "Scaffolder"]

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class ScaffoldResult:
    """Outcome of :meth:`Scaffolder.run`."""

    mappings: list[MappingPair]
    workspace: Path
    destination: Path | None = None
    initialized: bool = False
    reports: list[TraversalReport] = field(default_factory=list)

    def report(self, operation: str) -> TraversalReport | None:
        for report in self.reports:
            if report.operation == operation:
                return report
        return None


class Scaffolder:
    """Turn a template repository into a new project.

    The run is strictly sequential: clone into a temporary directory, derive
    the variant mappings, rewrite contents, rename paths, then either move the
    tree into place with a fresh repository or merge it into an existing
    directory.
    """

    def __init__(
        self,
        cloner: Cloner | None = None,
        initializer: RepoInitializer | None = None,
        sink: EventSink | None = None,
    ) -> None:
        self.cloner = cloner or GitCloner()
        self.initializer = initializer or GitRepoInitializer()
        self.sink = sink
        self._emitter = EventEmitter("scaffold", sink)

    def mappings_for(self, config: ScaffoldConfig) -> list[MappingPair]:
        template_tokens = tokenize(config.template_base)
        new_tokens = tokenize(config.new_name)
        self._emitter.info(f"Template tokens: {template_tokens}")
        self._emitter.info(f"New tokens: {new_tokens}")
        mappings = generate_mappings(template_tokens, new_tokens)
        self._emitter.info(f"Generated {len(mappings)} variant mappings")
        for pair in mappings:
            self._emitter.info(f"  {pair.original} -> {pair.replacement}")
        return mappings

    def run(self, config: ScaffoldConfig) -> ScaffoldResult:
        emit = self._emitter
        LOGGER.debug("scaffold config %s", dict(config.summary()))
        emit.info(f"Starting scaffolding for '{config.new_name}'")
        emit.info(f"Repo URL: {config.repo_url}")

        workspace = Path(tempfile.mkdtemp(prefix="liscaf-"))
        emit.info(f"Cloning into temporary dir: {workspace}")
        try:
            self.cloner.clone(config.repo_url, workspace)
        except Exception:
            shutil.rmtree(workspace, ignore_errors=True)
            raise
        self._unlink_repository(workspace)

        mappings = self.mappings_for(config)
        result = ScaffoldResult(mappings=mappings, workspace=workspace)
        result.reports.append(
            rewrite_contents(
                workspace, mappings, dry_run=config.dry_run, strategy=config.strategy, sink=self.sink
            )
        )
        result.reports.append(
            rename_paths(workspace, mappings, dry_run=config.dry_run, strategy=config.strategy, sink=self.sink)
        )

        if config.merge_into is not None:
            if config.dry_run:
                merge_report = self._preview_merge(workspace, config.merge_into, mappings, config.strategy)
            else:
                merge_report = merge_into(workspace, config.merge_into, sink=self.sink)
            result.reports.append(merge_report)
            result.destination = config.merge_into

        if config.dry_run:
            emit.info("Dry run: skipping git init, commit, and moving files.")
            emit.info(f"Temporary directory with changes: {workspace}")
            emit.info("Scaffolding dry-run finished")
            return result

        if config.merge_into is not None:
            shutil.rmtree(workspace, ignore_errors=True)
            emit.info(f"Merged scaffold into {config.merge_into}")
        else:
            result.initialized = self._initialize(workspace)
            destination = config.destination()
            try:
                shutil.move(str(workspace), str(destination))
            except OSError as exc:
                shutil.rmtree(workspace, ignore_errors=True)
                raise ScaffoldError(f"failed to move scaffold into {destination}: {exc}") from exc
            result.destination = destination
            emit.info(f"Wrote scaffold into {destination}")

        emit.info("Scaffolding finished")
        return result

    def _preview_merge(
        self, workspace: Path, destination: Path, mappings: list[MappingPair], strategy: Strategy
    ) -> TraversalReport:
        """Dry-run the merge against a rewritten, renamed copy of ``workspace``."""

        preview = Path(tempfile.mkdtemp(prefix="liscaf-preview-"))
        try:
            shutil.copytree(workspace, preview, symlinks=True, dirs_exist_ok=True)
            quiet = NullSink()
            rewrite_contents(preview, mappings, strategy=strategy, sink=quiet)
            rename_paths(preview, mappings, strategy=strategy, sink=quiet)
            return merge_into(preview, destination, dry_run=True, sink=self.sink)
        finally:
            shutil.rmtree(preview, ignore_errors=True)

    def _unlink_repository(self, workspace: Path) -> None:
        found = False
        for name in sorted(VCS_DIRECTORIES):
            metadata = workspace / name
            if not metadata.exists():
                continue
            found = True
            self._emitter.info(f"Removing {name} to unlink original repository")
            try:
                shutil.rmtree(metadata)
            except OSError as exc:
                self._emitter.warn(f"failed to remove {metadata}: {exc}", path=metadata)
        if not found:
            self._emitter.warn("no repository metadata found after clone")

    def _initialize(self, workspace: Path) -> bool:
        self._emitter.info("Initializing new git repository")
        if self.initializer.initialize(workspace):
            self._emitter.info("Created initial commit")
            return True
        self._emitter.warn("git init/commit did not complete; the scaffold is left without history")
        return False
