"""Renderer diagnostics presented on the CLI console."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from rfcsmith.core.diagnostics import DiagnosticEmitter, format_event_message

from .state import CLIState, emit_error, emit_warning, get_cli_state, render_message


class CliEmitter(DiagnosticEmitter):
    """Print warnings as they happen and keep events for the run summary.

    Level skips and unresolved citations arrive both as a warning, printed
    immediately, and as an event; ``references_emitted`` only as an event.
    Events are also logged one per line with ``-v``.
    """

    def __init__(self, state: CLIState | None = None) -> None:
        self.state = state or get_cli_state()
        self.debug_enabled = self.state.show_tracebacks

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        self.state.warnings += 1
        emit_warning(message, exception=exc)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        emit_error(message, exception=exc)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        self.state.record_event(name, payload)
        message = format_event_message(name, payload)
        if message:
            render_message("info", message)


__all__ = ["CliEmitter"]
