"""Implementation of the primary ``rfcsmith`` CLI command."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
import logging
from pathlib import Path

import click
import typer

from rfcsmith.adapters.driver import build_default_registry
from rfcsmith.adapters.markdown import DEFAULT_MARKDOWN_EXTENSIONS, MarkdownConversionError
from rfcsmith.api.pipeline import ConversionResult, convert_markdown
from rfcsmith.core.exceptions import RfcRenderingError, TitleBlockError, exception_hint

from .._options import (
    DebugOption,
    DebugRulesOption,
    InputPathArgument,
    ListExtensionsOption,
    MarkdownExtensionsOption,
    NoLevelWarningsOption,
    OutputPathOption,
    ReferenceBaseOption,
    StandaloneOption,
    VerboseOption,
)
from ..diagnostics import CliEmitter
from ..presenter import present_rule_descriptions, present_summary
from ..state import CLIState, emit_error, set_cli_state


@contextmanager
def _cli_logging(state: CLIState) -> Iterator[None]:
    """Send rfcsmith log records to the stderr console while converting with ``-v``."""
    if state.verbosity <= 0:
        yield
        return
    from rich.logging import RichHandler

    logger = logging.getLogger("rfcsmith")
    handler = RichHandler(console=state.err_console, show_path=False, markup=False)
    previous_level = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if state.verbosity >= 2 else logging.INFO)
    try:
        yield
    finally:
        logger.removeHandler(handler)
        logger.setLevel(previous_level)


def _read_source(input_path: Path | None) -> str | None:
    if input_path is not None:
        return input_path.read_text(encoding="utf-8")
    stream = click.get_text_stream("stdin")
    if stream.isatty():
        return None
    return stream.read()


def _write_output(result: ConversionResult, output: Path | None) -> None:
    if output is None:
        click.echo(result.xml, nl=False)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(result.xml)


def _report_failure(exc: RfcRenderingError) -> None:
    message = str(exc)
    hint = exception_hint(exc)
    if hint and hint not in message:
        message = f"{message} ({hint})"
    emit_error(message, exception=exc)


def render(
    input_path: InputPathArgument = None,
    output: OutputPathOption = None,
    standalone: StandaloneOption = None,
    reference_base: ReferenceBaseOption = None,
    enable_extensions: MarkdownExtensionsOption = None,
    no_level_warnings: NoLevelWarningsOption = False,
    list_extensions: ListExtensionsOption = False,
    debug_rules: DebugRulesOption = False,
    verbose: VerboseOption = 0,
    debug: DebugOption = False,
) -> None:
    """Convert a Markdown document into xml2rfc (RFC 7991) XML."""
    ctx = click.get_current_context(silent=True)
    typer_ctx = ctx if isinstance(ctx, typer.Context) else None
    state = set_cli_state(verbosity=verbose, debug=debug)

    if typer_ctx is not None and typer_ctx.resilient_parsing:
        return

    if list_extensions:
        for extension in DEFAULT_MARKDOWN_EXTENSIONS:
            typer.echo(extension)
        raise typer.Exit()

    if debug_rules:
        present_rule_descriptions(state, build_default_registry().describe())

    source = _read_source(input_path)
    if source is None:
        if ctx is not None:
            typer.echo(ctx.get_help())
        raise typer.Exit()

    try:
        with _cli_logging(state):
            result = convert_markdown(
                source,
                emitter=CliEmitter(state),
                extensions=enable_extensions,
                standalone=standalone,
                reference_base_url=reference_base,
                warn_on_level_skip=False if no_level_warnings else None,
            )
    except (TitleBlockError, MarkdownConversionError) as exc:
        if state.show_tracebacks:
            raise
        _report_failure(exc)
        raise typer.Exit(code=1) from exc

    _write_output(result, output)
    present_summary(state, result, output)


__all__ = ["render"]
