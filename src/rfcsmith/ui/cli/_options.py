"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


INPUTS_PANEL = "Input Handling"
RENDERING_PANEL = "Rendering"
OUTPUT_PANEL = "Output"
DIAGNOSTICS_PANEL = "Diagnostics"

InputPathArgument = Annotated[
    Path | None,
    typer.Argument(
        metavar="INPUT",
        help="Markdown source document. Reads standard input when omitted.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

OutputPathOption = Annotated[
    Path | None,
    typer.Option(
        "--output",
        "-o",
        help="Output file. Defaults to stdout.",
        dir_okay=False,
        show_default=False,
        rich_help_panel=OUTPUT_PANEL,
    ),
]

StandaloneOption = Annotated[
    bool | None,
    typer.Option(
        "--standalone/--fragment",
        help=(
            "Emit a complete xml2rfc document or only the section fragment "
            "(defaults to the front matter setting, then --fragment)."
        ),
        show_default=False,
        rich_help_panel=RENDERING_PANEL,
    ),
]

ReferenceBaseOption = Annotated[
    str | None,
    typer.Option(
        "--reference-base",
        metavar="URL",
        help="Prefix joined to generated reference file names (e.g. reference.RFC.2119.xml).",
        rich_help_panel=RENDERING_PANEL,
    ),
]

MarkdownExtensionsOption = Annotated[
    list[str] | None,
    typer.Option(
        "--enable-extension",
        "-x",
        help="Additional Markdown extensions to enable (comma or space separated values are accepted).",
        rich_help_panel=INPUTS_PANEL,
    ),
]

NoLevelWarningsOption = Annotated[
    bool,
    typer.Option(
        "--no-level-warnings",
        help="Do not report headings that skip section levels.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]

DebugRulesOption = Annotated[
    bool,
    typer.Option(
        "--debug-rules",
        help="Display the ordered list of registered render rules.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]

ListExtensionsOption = Annotated[
    bool,
    typer.Option(
        "--list-extensions",
        help="List Markdown extensions enabled by default and exit.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]

VerboseOption = Annotated[
    int,
    typer.Option(
        "--verbose",
        "-v",
        count=True,
        help="Increase CLI verbosity. Combine multiple times for additional diagnostics.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]

DebugOption = Annotated[
    bool,
    typer.Option(
        "--debug",
        help="Show full tracebacks when an unexpected error occurs.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]
