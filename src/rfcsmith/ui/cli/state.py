"""Diagnostics state for one ``rfcsmith`` invocation.

Standard output carries the rendered XML, so every message printed here goes
to standard error.
"""

from __future__ import annotations

from collections.abc import Mapping
from contextvars import ContextVar
from dataclasses import dataclass, field
import sys
from typing import TYPE_CHECKING, Any

from rfcsmith.core.exceptions import exception_messages


if TYPE_CHECKING:
    from rich.console import Console


_STYLES = {"warning": "yellow", "error": "red"}


@dataclass(slots=True)
class CLIState:
    """Verbosity, recorded events and warning count of the running command."""

    verbosity: int = 0
    show_tracebacks: bool = False
    warnings: int = 0
    events: dict[str, list[dict[str, Any]]] = field(default_factory=dict)
    _err_console: Console | None = field(default=None, init=False, repr=False)

    @property
    def err_console(self) -> Console:
        """Console bound to the current ``sys.stderr``."""
        from rich.console import Console

        if self._err_console is None or self._err_console.file is not sys.stderr:
            self._err_console = Console(file=sys.stderr, highlight=False)
        return self._err_console

    def record_event(self, name: str, payload: Mapping[str, Any]) -> None:
        self.events.setdefault(name, []).append(dict(payload))

    def consume_events(self, name: str) -> list[dict[str, Any]]:
        """Return the events recorded under ``name`` and forget them."""
        return self.events.pop(name, [])


_STATE: ContextVar[CLIState | None] = ContextVar("rfcsmith_cli_state", default=None)


def get_cli_state() -> CLIState:
    """Return the state of the running command, creating a default one."""
    state = _STATE.get()
    if state is None:
        state = CLIState()
        _STATE.set(state)
    return state


def set_cli_state(*, verbosity: int = 0, debug: bool = False) -> CLIState:
    """Install a fresh state for a new invocation."""
    state = CLIState(verbosity=max(0, verbosity), show_tracebacks=debug)
    _STATE.set(state)
    return state


def render_message(
    level: str,
    message: str,
    *,
    exception: BaseException | None = None,
) -> None:
    """Print ``message`` on stderr; ``info`` messages need ``-v``.

    With ``-v`` the causes of ``exception`` are listed below the message.
    """
    state = get_cli_state()
    console = state.err_console
    if level == "info":
        if state.verbosity >= 1:
            console.log(message)
        return

    from rich.text import Text

    style = _STYLES.get(level, "red")
    text = Text.assemble((f"{level}: ", f"bold {style}"), (message, style))
    if exception is not None and state.verbosity >= 1:
        causes = [entry for entry in exception_messages(exception) if entry not in message]
        if causes:
            text.append("\ncaused by:\n", style=style)
            text.append("\n".join(f"  {entry}" for entry in causes), style=style)
    console.print(text)


def emit_warning(message: str, *, exception: BaseException | None = None) -> None:
    render_message("warning", message, exception=exception)


def emit_error(message: str, *, exception: BaseException | None = None) -> None:
    render_message("error", message, exception=exception)


def debug_enabled() -> bool:
    """Return whether ``--debug`` asked for full tracebacks."""
    state = _STATE.get()
    return state is not None and state.show_tracebacks


__all__ = [
    "CLIState",
    "debug_enabled",
    "emit_error",
    "emit_warning",
    "get_cli_state",
    "render_message",
    "set_cli_state",
]
