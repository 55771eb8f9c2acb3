"""Version-control collaborators: cloning templates and initialising repositories."""

from __future__ import annotations

import logging
import shutil
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Sequence

from .errors import ExternalToolError

__all__ = [
    "COMMIT_MESSAGE",
    "Cloner",
    "GitCloner",
    "GitRepoInitializer",
    "LocalCloner",
    "RepoInitializer",
]

LOGGER = logging.getLogger(__name__)

COMMIT_MESSAGE = "Initial commit from template (liscaf)"


class Cloner(ABC):
    """Materialise a template repository's working tree."""

    @abstractmethod
    def clone(self, url: str, destination: Path) -> None:
        """Populate the empty directory ``destination`` from ``url``."""


class RepoInitializer(ABC):
    """Turn a finished scaffold into a fresh repository."""

    @abstractmethod
    def initialize(self, directory: Path) -> bool:
        """Initialise ``directory`` and create the first commit.

        Returns ``False`` when initialisation did not fully succeed.
        """


def _run_git(args: Sequence[str], *, git: str, cwd: Path | None = None) -> subprocess.CompletedProcess[str]:
    try:
        return subprocess.run(
            [git, *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
    except FileNotFoundError as exc:
        raise ExternalToolError(f"Failed to run {git}: {exc}") from exc


class GitCloner(Cloner):
    """Shallow-clone repositories with the ``git`` binary."""

    def __init__(self, git: str = "git", depth: int | None = 1) -> None:
        self.git = git
        self.depth = depth

    def clone(self, url: str, destination: Path) -> None:
        args = ["clone"]
        if self.depth is not None:
            args += ["--depth", str(self.depth)]
        args += [url, str(destination)]
        result = _run_git(args, git=self.git)
        if result.returncode != 0:
            LOGGER.debug("git clone stderr: %s", result.stderr)
            raise ExternalToolError(
                f"git clone failed with code: {result.returncode}: {result.stderr.strip()}",
                returncode=result.returncode,
            )
        LOGGER.info("git clone succeeded")


class GitRepoInitializer(RepoInitializer):
    """Run ``git init``, ``git add .`` and an initial commit."""

    def __init__(self, git: str = "git", message: str = COMMIT_MESSAGE) -> None:
        self.git = git
        self.message = message

    def initialize(self, directory: Path) -> bool:
        try:
            init = _run_git(["init"], git=self.git, cwd=directory)
        except ExternalToolError as exc:
            LOGGER.warning("could not run git init (git not available?): %s", exc)
            return False
        if init.returncode != 0:
            LOGGER.warning("git init failed: %s", init.stderr.strip())
            return False

        for args in (["add", "."], ["commit", "-m", self.message]):
            result = _run_git(args, git=self.git, cwd=directory)
            if result.returncode != 0:
                LOGGER.warning("git %s failed: %s", args[0], result.stderr.strip())
                return False
        return True


class LocalCloner(Cloner):
    """Copy a template from a local directory instead of cloning it.

    ``url`` may be a plain path or a ``file://`` URL. When ``source`` is given it
    overrides the url entirely.
    """

    def __init__(self, source: str | Path | None = None) -> None:
        self.source = Path(source) if source is not None else None

    def clone(self, url: str, destination: Path) -> None:
        source = self.source or Path(url.removeprefix("file://"))
        if not source.is_dir():
            raise ExternalToolError(f"template directory {source} does not exist")
        shutil.copytree(source, destination, dirs_exist_ok=True)
