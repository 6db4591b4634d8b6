"""Typer application for the ``rfcsmith`` command."""

from __future__ import annotations

import typer

from .commands.render import render
from .state import debug_enabled, emit_error, get_cli_state


app = typer.Typer(
    help="Convert Markdown documents into xml2rfc XML.",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command()(render)


def main() -> None:
    """Console script entry point.

    Unexpected failures are reported in one line; ``--debug`` prints the rich
    traceback instead.
    """
    try:
        app()
    except Exception as exc:  # pragma: no cover - last-resort reporting
        if debug_enabled():
            get_cli_state().err_console.print_exception()
        else:
            emit_error(f"unexpected failure: {exc}", exception=exc)
        raise SystemExit(1) from exc


__all__ = ["app", "main"]
