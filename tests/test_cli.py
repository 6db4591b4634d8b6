from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from rfcsmith.api.pipeline import ConversionResult
from rfcsmith.core.metadata import TitleMetadata
from rfcsmith.ui.cli import DEFAULT_MARKDOWN_EXTENSIONS, app
from rfcsmith.ui.cli.diagnostics import CliEmitter
from rfcsmith.ui.cli.presenter import summary_lines
from rfcsmith.ui.cli.state import CLIState


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def draft(tmp_path: Path) -> Path:
    path = tmp_path / "draft.md"
    path.write_text(
        "---\ntitle: Demo\n---\n# Intro\n\nSee [@!RFC2119].\n",
        encoding="utf-8",
    )
    return path


def test_render_fragment_to_stdout(runner: CliRunner, draft: Path) -> None:
    result = runner.invoke(app, [str(draft)])
    assert result.exit_code == 0, result.output
    assert '<section anchor="intro">' in result.stdout
    assert "<rfc" not in result.stdout


def test_render_standalone_to_file(runner: CliRunner, draft: Path, tmp_path: Path) -> None:
    output = tmp_path / "out" / "draft.xml"
    result = runner.invoke(app, [str(draft), "--standalone", "-o", str(output)])
    assert result.exit_code == 0, result.output
    content = output.read_bytes()
    assert content.startswith(b'<?xml version="1.0" encoding="UTF-8"?>\n')
    assert b"<title>Demo</title>" in content
    assert b'\t<xi:include href="reference.RFC.2119.xml"/>\n' in content
    assert result.stdout == ""


def test_reference_base_option(runner: CliRunner, draft: Path) -> None:
    result = runner.invoke(
        app, [str(draft), "--standalone", "--reference-base", "https://refs.example.org"]
    )
    assert result.exit_code == 0, result.output
    assert 'href="https://refs.example.org/reference.RFC.2119.xml"' in result.stdout


def test_render_from_stdin(runner: CliRunner) -> None:
    result = runner.invoke(app, [], input="# Hello\n\nWorld.\n")
    assert result.exit_code == 0, result.output
    assert "<t>World.</t>" in result.stdout


def test_list_extensions(runner: CliRunner) -> None:
    result = runner.invoke(app, ["--list-extensions"])
    assert result.exit_code == 0
    assert result.stdout.splitlines() == DEFAULT_MARKDOWN_EXTENSIONS


def test_invalid_title_block_exits_with_error(runner: CliRunner, tmp_path: Path) -> None:
    path = tmp_path / "bad.md"
    path.write_text("---\ndate: someday\n---\n# Intro\n", encoding="utf-8")
    result = runner.invoke(app, [str(path)])
    assert result.exit_code == 1
    assert "Invalid title block" in result.output


def test_level_skip_warning_is_printed(runner: CliRunner, tmp_path: Path) -> None:
    path = tmp_path / "skip.md"
    path.write_text("# One\n\n### Three\n", encoding="utf-8")
    result = runner.invoke(app, [str(path)])
    assert result.exit_code == 0
    assert "warning" in result.output

    quiet = runner.invoke(app, [str(path), "--no-level-warnings"])
    assert quiet.exit_code == 0
    assert "warning" not in quiet.output


def test_missing_input_file_is_rejected(runner: CliRunner, tmp_path: Path) -> None:
    result = runner.invoke(app, [str(tmp_path / "missing.md")])
    assert result.exit_code != 0


def test_cli_emitter_records_events() -> None:
    state = CLIState()
    emitter = CliEmitter(state)
    emitter.event("references_emitted", {"normative": 1, "informative": 0})
    assert state.consume_events("references_emitted") == [{"normative": 1, "informative": 0}]
    assert state.consume_events("references_emitted") == []


def test_cli_emitter_counts_warnings() -> None:
    state = CLIState()
    emitter = CliEmitter(state)
    emitter.warning("first")
    emitter.warning("second")
    assert state.warnings == 2


def test_summary_lines_follow_recorded_events(tmp_path: Path) -> None:
    state = CLIState(warnings=2)
    state.record_event("references_emitted", {"normative": 1, "informative": 0})
    state.record_event("unresolved_citation", {"target": "STD68"})
    state.record_event("heading_level_skip", {"anchor": "deep", "previous": 1, "level": 3})
    result = ConversionResult(xml=b"<t/>", metadata=TitleMetadata())

    lines = summary_lines(state, result, tmp_path / "out.xml")

    assert lines == [
        "references: 1 normative, 0 informative",
        "unresolved citations: STD68",
        "heading level skips: deep",
        "2 warning(s)",
        f"wrote {tmp_path / 'out.xml'} (4 bytes, 0 citations)",
    ]
    assert state.events == {}


def test_verbose_run_prints_summary(runner: CliRunner, tmp_path: Path) -> None:
    path = tmp_path / "refs.md"
    path.write_text("# Intro\n\nSee [@!RFC2119] and [@?STD68].\n", encoding="utf-8")
    output = tmp_path / "refs.xml"

    result = runner.invoke(app, [str(path), "--standalone", "-v", "-o", str(output)])

    assert result.exit_code == 0, result.output
    assert "references: 1 normative, 0 informative" in result.output
    assert "unresolved citations: STD68" in result.output
    assert "1 warning(s)" in result.output
    assert b'<xi:include href="reference.RFC.2119.xml"/>' in output.read_bytes()
