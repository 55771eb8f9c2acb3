from __future__ import annotations

import sys
import tempfile
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from liscaf.events import MemorySink  # noqa: E402

PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDRacme-app"


def _write(path: Path, content: str | bytes) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture()
def sink() -> MemorySink:
    return MemorySink()


@pytest.fixture()
def template_dir(tmp_path: Path) -> Path:
    """A small ``acme-app`` template repository on disk."""

    root = tmp_path / "template"
    _write(root / ".git" / "HEAD", "ref: refs/heads/main\n")
    _write(root / ".git" / "description", "acme-app template\n")
    _write(root / "README.md", "# acme-app\n\nWelcome to AcmeApp. Set ACME_APP_HOME.\n")
    _write(root / "acme-app.toml", 'name = "acme-app"\n')
    _write(root / "src" / "acme_app" / "__init__.py", 'class AcmeApp:\n    name = "acme-app"\n')
    _write(root / "src" / "acme_app" / "core.py", "from acme_app import AcmeApp\n")
    _write(root / "assets" / "logo.png", PNG_BYTES)
    return root


@pytest.fixture()
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Pin the scaffold's temporary clone directory inside ``tmp_path``."""

    path = tmp_path / "liscaf-workspace"
    calls: list[str] = []

    def fake_mkdtemp(prefix: str = "", **_: object) -> str:
        created = path if not calls else tmp_path / f"{prefix}{len(calls)}"
        created.mkdir()
        calls.append(str(created))
        return str(created)

    monkeypatch.setattr(tempfile, "mkdtemp", fake_mkdtemp)
    return path
