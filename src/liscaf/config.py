"""Validated configuration for a single scaffolding run."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from .errors import ConfigurationError
from .manifest import normalize_repo_url
from .rename import free_path
from .rewrite import STRATEGIES, Strategy

DEFAULT_TEMPLATE_BASE = "acme-app"


@dataclass(slots=True)
class ScaffoldConfig:
    """Everything a :class:`~liscaf.scaffold.Scaffolder` needs for one run.

    Attributes
    ----------
    new_name:
        The new project name. Its tokens replace the template base name.
    repo_url:
        Normalised URL of the template repository.
    template_base:
        The name used throughout the template, ``acme-app`` unless overridden.
    dry_run:
        Report planned changes without writing files or initialising git.
    merge_into:
        Existing directory to merge the scaffold into. When ``None`` the
        scaffold becomes a new directory under :attr:`workdir`.
    workdir:
        Parent directory of the new project.
    strategy:
        Replacement strategy, ``"sequential"`` or ``"single-pass"``.
    """

    new_name: str
    repo_url: str
    template_base: str = DEFAULT_TEMPLATE_BASE
    dry_run: bool = False
    merge_into: Path | None = None
    workdir: Path = Path(".")
    strategy: Strategy = "sequential"

    @classmethod
    def from_values(
        cls,
        new_name: str,
        repo_url: str,
        *,
        template_base: str = DEFAULT_TEMPLATE_BASE,
        dry_run: bool = False,
        merge_into: str | Path | None = None,
        workdir: str | Path | None = None,
        strategy: str = "sequential",
    ) -> "ScaffoldConfig":
        """Validate raw values and build a :class:`ScaffoldConfig`.

        Raises :class:`ConfigurationError` for an empty project name, an
        unsupported repository URL, an unknown strategy or a merge destination
        that is not an existing directory.
        """

        name = new_name.strip()
        if not name:
            raise ConfigurationError("new project name must not be empty")

        url = normalize_repo_url(repo_url)

        if strategy not in STRATEGIES:
            raise ConfigurationError(f"unknown replacement strategy '{strategy}'")

        merge_path: Path | None = None
        if merge_into is not None:
            merge_path = Path(merge_into).expanduser().resolve()
            if not merge_path.is_dir():
                raise ConfigurationError(
                    f"merge destination {merge_path} does not exist or is not a directory"
                )

        parent = Path(workdir).expanduser().resolve() if workdir is not None else Path.cwd()

        return cls(
            new_name=name,
            repo_url=url,
            template_base=template_base.strip(),
            dry_run=dry_run,
            merge_into=merge_path,
            workdir=parent,
            strategy=strategy,  # type: ignore[arg-type]
        )

    def destination(self) -> Path:
        """Where a non-merge run places the scaffold.

        ``<workdir>/<new_name>``, or ``<workdir>/<new_name>_from_template`` when
        that directory already exists (suffixed ``_1``, ``_2``, ... if that is
        taken too).
        """

        preferred = self.workdir / self.new_name
        if preferred.exists():
            return free_path(self.workdir / f"{self.new_name}_from_template")
        return preferred

    def summary(self) -> Mapping[str, str]:
        return {
            "new_name": self.new_name,
            "repo_url": self.repo_url,
            "template_base": self.template_base,
            "dry_run": str(self.dry_run),
            "merge_into": str(self.merge_into) if self.merge_into else "",
            "strategy": self.strategy,
        }
