"""Template manifests and repository URL normalisation."""

from __future__ import annotations

import re
import urllib.error
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable

from .errors import ConfigurationError, ManifestError

__all__ = [
    "ManifestEntry",
    "find_entry",
    "load_manifest",
    "normalize_repo_url",
    "parse_manifest",
]


_PASSTHROUGH_SCHEMES = ("http://", "https://", "ssh://")
_SCP_LIKE = re.compile(r"^[\w.+-]+@[\w.-]+:.+$")
_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")


@dataclass(frozen=True, slots=True)
class ManifestEntry:
    """A labelled template repository listed in a manifest."""

    label: str
    url: str


def normalize_repo_url(value: str) -> str:
    """Return ``value`` as a clonable URL.

    ``http(s)://``, ``ssh://`` and scp-like ``user@host:path`` URLs are returned
    unchanged; bare ``owner/repo`` style strings gain an ``https://`` prefix.
    Any other scheme raises :class:`ConfigurationError`.
    """

    url = value.strip()
    if not url:
        raise ConfigurationError("repository URL must not be empty")
    if url.startswith(_PASSTHROUGH_SCHEMES) or _SCP_LIKE.match(url):
        return url
    if _SCHEME.match(url):
        scheme = url.split("://", 1)[0]
        raise ConfigurationError(f"unsupported repository URL scheme '{scheme}': {url}")
    return f"https://{url}"


def _parse_line(line: str) -> ManifestEntry:
    for separator in ("|", "="):
        label, found, url = line.partition(separator)
        # A bare url may carry '=' in its query string.
        if found and "://" not in label:
            label, url = label.strip(), url.strip()
            return ManifestEntry(label=label or url, url=url)
    return ManifestEntry(label=line, url=line)


def parse_manifest(text: str | Iterable[str]) -> list[ManifestEntry]:
    """Parse manifest lines into entries.

    Blank lines and lines starting with ``#`` are ignored. Other lines are
    ``label|url``, ``label=url`` or a bare url, which doubles as its label.
    """

    lines = text.splitlines() if isinstance(text, str) else text
    entries: list[ManifestEntry] = []
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        entry = _parse_line(line)
        if entry.url:
            entries.append(entry)
    return entries


def load_manifest(
    source: str | Path,
    *,
    opener: Callable[[urllib.request.Request], Any] | None = None,
    timeout: float = 30.0,
) -> list[ManifestEntry]:
    """Read a manifest from an ``http(s)`` URL or a local file."""

    location = str(source)
    if location.startswith(("http://", "https://")):
        request = urllib.request.Request(location, headers={"Accept": "text/plain"})
        opener_func = opener if opener is not None else urllib.request.urlopen
        try:
            with opener_func(request, timeout=timeout) as response:
                text = response.read().decode("utf-8")
        except (urllib.error.URLError, UnicodeDecodeError, OSError) as exc:
            raise ManifestError(f"failed to fetch manifest {location}: {exc}") from exc
    else:
        try:
            text = Path(location).expanduser().read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ManifestError(f"failed to read manifest {location}: {exc}") from exc
    return parse_manifest(text)


def find_entry(entries: Iterable[ManifestEntry], label: str) -> ManifestEntry:
    """Return the entry labelled ``label`` or raise :class:`ConfigurationError`."""

    for entry in entries:
        if entry.label == label:
            return entry
    raise ConfigurationError(f"no template labelled '{label}' in manifest")
