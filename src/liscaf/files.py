"""Filesystem traversal helpers shared by the rewrite, rename and merge passes."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator

__all__ = ["VCS_DIRECTORIES", "decode_text", "walk_tree"]


VCS_DIRECTORIES = frozenset({".git"})


def decode_text(data: bytes) -> str | None:
    """Decode ``data`` as UTF-8 text, or return ``None`` for binary content.

    A NUL byte anywhere marks the content as binary.
    """

    if b"\0" in data:
        return None
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return None


def walk_tree(root: Path) -> Iterator[Path]:
    """Yield every entry below ``root`` top-down in sorted order.

    Version-control metadata (a ``.git`` directory, or a ``.git`` file pointing
    at one) is pruned and never yielded.
    """

    for current, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(name for name in dirnames if name not in VCS_DIRECTORIES)
        base = Path(current)
        for name in dirnames:
            yield base / name
        for name in sorted(name for name in filenames if name not in VCS_DIRECTORIES):
            yield base / name
