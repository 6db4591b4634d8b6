"""Rich presentation of the rule table and the end-of-run summary."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from rfcsmith.api.pipeline import ConversionResult

from .state import CLIState


def present_rule_descriptions(state: CLIState, rules: Sequence[Mapping[str, Any]]) -> None:
    """Print the tag handlers in the order they are tried."""
    if not rules:
        return

    from rich import box
    from rich.table import Table

    table = Table(title="Tag handlers", box=box.SIMPLE)
    for column in ("Tag", "Handler", "Classes", "Priority"):
        table.add_column(column)
    for entry in rules:
        table.add_row(
            str(entry.get("tag", "")),
            str(entry.get("name", "")),
            ", ".join(entry.get("classes") or ()),
            str(entry.get("priority", "")),
        )
    state.err_console.print(table)


def summary_lines(state: CLIState, result: ConversionResult, output: Path | None) -> list[str]:
    """Return the summary of one conversion, consuming the recorded events."""
    lines: list[str] = []
    for counts in state.consume_events("references_emitted"):
        lines.append(
            f"references: {counts.get('normative', 0)} normative, "
            f"{counts.get('informative', 0)} informative"
        )

    unresolved = [event["target"] for event in state.consume_events("unresolved_citation")]
    if unresolved:
        lines.append(f"unresolved citations: {', '.join(unresolved)}")

    skips = state.consume_events("heading_level_skip")
    if skips:
        anchors = ", ".join(str(event.get("anchor") or "?") for event in skips)
        lines.append(f"heading level skips: {anchors}")

    if state.warnings:
        lines.append(f"{state.warnings} warning(s)")
    if output is not None:
        lines.append(f"wrote {output} ({len(result.xml)} bytes, {len(result.citations)} citations)")
    return lines


def present_summary(state: CLIState, result: ConversionResult, output: Path | None) -> None:
    """Print the conversion summary with ``-v``."""
    if state.verbosity < 1:
        return
    for line in summary_lines(state, result, output):
        state.err_console.print(line, markup=False)


__all__ = ["present_rule_descriptions", "present_summary", "summary_lines"]
