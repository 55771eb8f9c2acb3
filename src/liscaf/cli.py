"""Command line interface for liscaf."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from .config import DEFAULT_TEMPLATE_BASE, ScaffoldConfig
from .errors import ConfigurationError, ScaffoldError
from .events import StreamSink
from .manifest import ManifestEntry, find_entry, load_manifest
from .rewrite import STRATEGIES
from .scaffold import Scaffolder
from .vcs import Cloner, GitCloner, GitRepoInitializer, RepoInitializer

LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="liscaf",
        description="Scaffold a new project from a template repository",
    )
    parser.add_argument("new_name", help="New project name (used to replace template tokens)")
    parser.add_argument(
        "repo_url",
        nargs="?",
        default="",
        help="Template repository URL, e.g. https://github.com/owner/repo",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show planned changes but don't write files or initialize git",
    )
    parser.add_argument(
        "-y",
        "--yes",
        action="store_true",
        help="Assume yes to all prompts (non-interactive)",
    )
    parser.add_argument(
        "--template-base",
        default=DEFAULT_TEMPLATE_BASE,
        help="Name used throughout the template (default: %(default)s)",
    )
    parser.add_argument(
        "--into",
        type=Path,
        metavar="DIR",
        help="Merge the scaffold into this existing directory",
    )
    parser.add_argument(
        "-d",
        "--directory",
        type=Path,
        help="Parent directory for the new project (default: current directory)",
    )
    parser.add_argument(
        "--manifest",
        metavar="SOURCE",
        help="URL or path of a manifest listing template repositories",
    )
    parser.add_argument("--template", metavar="LABEL", help="Manifest entry to use")
    parser.add_argument(
        "--strategy",
        choices=STRATEGIES,
        default="sequential",
        help="How name variants are replaced (default: %(default)s)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def _confirm(question: str, default: bool = True) -> bool:
    hint = "Y/n" if default else "y/N"
    answer = input(f"{question} ({hint}) ").strip().lower()
    if not answer:
        return default
    return answer in {"y", "yes"}


def _ask(question: str, placeholder: str = "") -> str:
    hint = f" [{placeholder}]" if placeholder else ""
    return input(f"{question}{hint} ").strip()


def _choose(entries: Sequence[ManifestEntry]) -> ManifestEntry:
    print("Available templates:")
    for index, entry in enumerate(entries, start=1):
        print(f"  {index}. {entry.label} ({entry.url})")
    while True:
        answer = _ask(f"Choose a template [1-{len(entries)}]:")
        if answer.isdigit() and 1 <= int(answer) <= len(entries):
            return entries[int(answer) - 1]
        print(f"Invalid choice, please enter a number between 1 and {len(entries)}")


def _repo_from_manifest(args: argparse.Namespace) -> str:
    entries = load_manifest(args.manifest)
    if not entries:
        raise ConfigurationError(f"manifest {args.manifest} lists no templates")
    if args.template:
        return find_entry(entries, args.template).url
    if args.yes:
        raise ConfigurationError("--template must be given with --manifest when running non-interactively")
    return _choose(entries).url


def _resolve_values(args: argparse.Namespace) -> tuple[str, str, str] | None:
    new_name = args.new_name
    if not args.yes and not _confirm(f"Use new project name '{new_name}'?"):
        new_name = _ask("Enter new project name:", "my-cool-app")

    repo_url = args.repo_url
    if not repo_url and args.manifest:
        repo_url = _repo_from_manifest(args)
    if not repo_url:
        if args.yes:
            raise ConfigurationError("repo URL must be provided when running non-interactively")
        repo_url = _ask("Enter repository URL:", "https://github.com/owner/repo")
    elif not args.yes and not _confirm(f"Use repo URL '{repo_url}'?"):
        repo_url = _ask("Enter repository URL:", "https://github.com/owner/repo")

    template_base = args.template_base
    if not args.yes and not _confirm(f"Replace occurrences of '{template_base}'?"):
        template_base = _ask(f"Enter template base name to replace (e.g. {DEFAULT_TEMPLATE_BASE}):")

    if not args.yes and not _confirm(
        f"Proceed to scaffold '{new_name}'\nfrom '{repo_url}' replacing '{template_base}'?"
    ):
        return None
    return new_name, repo_url, template_base


def _make_cloner() -> Cloner:
    return GitCloner()


def _make_initializer() -> RepoInitializer:
    return GitRepoInitializer()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        values = _resolve_values(args)
        if values is None:
            print("Aborted by user.")
            return 0
        new_name, repo_url, template_base = values

        config = ScaffoldConfig.from_values(
            new_name,
            repo_url,
            template_base=template_base,
            dry_run=args.dry_run,
            merge_into=args.into,
            workdir=args.directory,
            strategy=args.strategy,
        )
        scaffolder = Scaffolder(_make_cloner(), _make_initializer(), sink=StreamSink(sys.stdout))
        scaffolder.run(config)
    except ScaffoldError as exc:
        LOGGER.debug("scaffold failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except (EOFError, KeyboardInterrupt):
        print("\nAborted.", file=sys.stderr)
        return 130
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
