from __future__ import annotations

from pathlib import Path

import pytest

from liscaf.events import EntryStatus, EventTag, MemorySink
from liscaf.naming import MappingPair, generate_mappings, tokenize
from liscaf.rewrite import apply_mappings, rewrite_contents


def acme_to_shiny() -> list[MappingPair]:
    return generate_mappings(tokenize("acme-app"), tokenize("shiny-app"))


def write_file(path: Path, content: str | bytes) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content, encoding="utf-8")
    return path


def test_apply_mappings_replaces_only_canonical_variants():
    text = "AcmeApp acme_app ACME-APP ACME_APP acme-app acmeApp Acme_App ACMEAPP acmeapp"
    assert apply_mappings(text, acme_to_shiny()) == (
        "ShinyApp shiny_app ACME-APP SHINY_APP shiny-app shinyApp Shiny_App SHINYAPP shinyapp"
    )


@pytest.mark.parametrize("strategy", ["sequential", "single-pass"])
def test_apply_mappings_is_idempotent_on_converted_text(strategy):
    mappings = acme_to_shiny()
    once = apply_mappings("import acme_app\nclass AcmeApp: ...\n", mappings, strategy)
    assert once == "import shiny_app\nclass ShinyApp: ...\n"
    assert apply_mappings(once, mappings, strategy) == once


def test_sequential_strategy_chains_replacements():
    mappings = [MappingPair("a", "b"), MappingPair("b", "c")]
    assert apply_mappings("a b", mappings, "sequential") == "c c"
    assert apply_mappings("a b", mappings, "single-pass") == "b c"


def test_single_pass_prefers_longest_match():
    mappings = [MappingPair("a", "Y"), MappingPair("ab", "X")]
    assert apply_mappings("ab a", mappings, "sequential") == "Yb Y"
    assert apply_mappings("ab a", mappings, "single-pass") == "X Y"


def test_apply_mappings_rejects_unknown_strategy():
    with pytest.raises(ValueError):
        apply_mappings("acme", acme_to_shiny(), "regex")  # type: ignore[arg-type]


def test_rewrite_contents_updates_text_files_only(tmp_path: Path, sink: MemorySink):
    readme = write_file(tmp_path / "README.md", "# acme-app\nAcmeApp\n")
    untouched = write_file(tmp_path / "LICENSE", "MIT\n")
    binary = write_file(tmp_path / "logo.png", b"\x89PNG\x00acme-app")
    latin1 = write_file(tmp_path / "legacy.txt", b"\xff\xfeacme-app")
    git_config = write_file(tmp_path / ".git" / "config", "url = acme-app\n")

    report = rewrite_contents(tmp_path, acme_to_shiny(), sink=sink)

    assert readme.read_text(encoding="utf-8") == "# shiny-app\nShinyApp\n"
    assert untouched.read_text(encoding="utf-8") == "MIT\n"
    assert binary.read_bytes() == b"\x89PNG\x00acme-app"
    assert latin1.read_bytes() == b"\xff\xfeacme-app"
    assert git_config.read_text(encoding="utf-8") == "url = acme-app\n"

    assert [result.path for result in report.applied] == [readme]
    assert {result.path for result in report.with_status(EntryStatus.SKIPPED)} == {binary, latin1}
    assert report.count(EntryStatus.UNCHANGED) == 1
    assert all(result.path != git_config for result in report.results)
    assert f"REPL: Updated file: {readme}" in sink.lines()


def test_rewrite_contents_preserves_line_endings(tmp_path: Path):
    path = write_file(tmp_path / "run.bat", b"echo acme-app\r\n")
    rewrite_contents(tmp_path, acme_to_shiny())
    assert path.read_bytes() == b"echo shiny-app\r\n"


def test_rewrite_contents_dry_run_writes_nothing(tmp_path: Path, sink: MemorySink):
    path = write_file(tmp_path / "pkg" / "acme_app.py", "NAME = 'acme-app'\n")

    report = rewrite_contents(tmp_path, acme_to_shiny(), dry_run=True, sink=sink)

    assert path.read_text(encoding="utf-8") == "NAME = 'acme-app'\n"
    assert report.dry_run
    assert [result.path for result in report.planned] == [path]
    assert sink.tagged(EventTag.DRY_REPL)[0].line() == f"DRY REPL: Would update file: {path}"
    assert not sink.tagged(EventTag.REPL)


def test_rewrite_contents_second_pass_is_a_no_op(tmp_path: Path):
    write_file(tmp_path / "a.py", "import acme_app\n")
    write_file(tmp_path / "b.md", "AcmeApp by ACME_APP\n")
    mappings = acme_to_shiny()

    first = rewrite_contents(tmp_path, mappings)
    second = rewrite_contents(tmp_path, mappings)

    assert len(first.applied) == 2
    assert second.applied == []
    assert second.count(EntryStatus.UNCHANGED) == 2


def test_rewrite_contents_continues_after_write_failure(
    tmp_path: Path, sink: MemorySink, monkeypatch: pytest.MonkeyPatch
):
    locked = write_file(tmp_path / "locked.txt", "acme-app\n")
    other = write_file(tmp_path / "other.txt", "acme-app\n")
    original_write_bytes = Path.write_bytes

    def flaky_write_bytes(self: Path, data: bytes) -> int:
        if self.name == "locked.txt":
            raise PermissionError("read-only")
        return original_write_bytes(self, data)

    monkeypatch.setattr(Path, "write_bytes", flaky_write_bytes)

    report = rewrite_contents(tmp_path, acme_to_shiny(), sink=sink)

    assert locked.read_text(encoding="utf-8") == "acme-app\n"
    assert other.read_text(encoding="utf-8") == "shiny-app\n"
    assert [result.path for result in report.failed] == [locked]
    warnings = sink.tagged(EventTag.WARN)
    assert len(warnings) == 1
    assert warnings[0].line().startswith(f"WARN: Failed to write file {locked}")


def test_rewrite_contents_with_no_mappings_changes_nothing(tmp_path: Path):
    path = write_file(tmp_path / "a.txt", "acme-app\n")
    report = rewrite_contents(tmp_path, generate_mappings(tokenize(""), tokenize("shiny-app")))
    assert path.read_text(encoding="utf-8") == "acme-app\n"
    assert report.applied == []


def test_rewrite_contents_skips_repository_pointer_files(tmp_path: Path):
    pointer = write_file(tmp_path / "vendor" / "lib" / ".git", "gitdir: ../../.git/modules/acme-app\n")
    module = write_file(tmp_path / "vendor" / "lib" / "acme_app.py", "import acme_app\n")

    report = rewrite_contents(tmp_path, acme_to_shiny())

    assert pointer.read_text(encoding="utf-8") == "gitdir: ../../.git/modules/acme-app\n"
    assert module.read_text(encoding="utf-8") == "import shiny_app\n"
    assert all(result.path != pointer for result in report.results)
