#!/usr/bin/env python3
"""
Block Editing CLI

Replays key sequences against a single block and shows the result, the same
way the editor would process them one key at a time.

Commands:
    type  - Replay a key sequence and print the marked buffer
    table - List the autoreplacement shorthands

Key sequences: every character is one key; named keys go in angle brackets
(<Left>, <Right>, <BS>, <Del>, <Enter>).

Examples:\n

    edit_block.py type '$\\frac'                      # -> $\\frac{\\vert }{}$

    edit_block.py type 'x<Left><BS>' --initial 'ab|'  # Edit existing content

    edit_block.py type '$x^2' --render                # Also render a PNG preview

    edit_block.py table --filter sq                   # Shorthands containing 'sq'
"""

from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from mathpad.contexts.assembly import Document
from mathpad.contexts.editing.autoreplace import get_default_table
from mathpad.contexts.editing.buffer import EditBuffer
from mathpad.contexts.editing.deletion import assert_balanced
from mathpad.contexts.editing.engine import EditorSession
from mathpad.contexts.editing.exceptions import UnbalancedDeletionError
from mathpad.contexts.editing.keys import parse_keys
from mathpad.contexts.editing.logger import setup_editing_logger
from mathpad.contexts.rendering import RenderBridge, RenderError


app = typer.Typer(
    help="Replay key sequences against a block and preview the result",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("type")
def type_command(
    keys: Annotated[
        str,
        typer.Argument(help="Key sequence to replay"),
    ],
    initial: Annotated[
        str,
        typer.Option(
            "--initial",
            "-i",
            help="Initial block content with '|' or '\\vert ' marking the cursor",
        ),
    ] = "",
    render: Annotated[
        bool,
        typer.Option("--render", "-r", help="Compile a PNG preview of the result"),
    ] = False,
    output_dir: Annotated[
        Optional[Path],
        typer.Option("--output-dir", "-o", help="Directory for preview renders"),
    ] = None,
    log: Annotated[
        bool,
        typer.Option("--log", help="Write a session log under LOGS_PATH"),
    ] = False,
):
    """
    Replay KEYS against a block and print the buffer with its cursor marker.

    Examples:\n

        $ edit_block.py type '$\\alpha+\\beta'

        $ edit_block.py type '<BS>' --initial '$\\sqrt{x}|$'
    """
    if log:
        log_file = setup_editing_logger(console=False)
        typer.echo(f"Log: {log_file}")

    document = Document()
    block = document.new_text_block()
    block.buffer = EditBuffer.from_marked(initial)

    session = EditorSession(document)
    session.focus(block)
    session.type_keys(parse_keys(keys))

    typer.echo(block.buffer.render())
    typer.echo(f"  mode: {block.buffer.mode.value}, cursor: {block.buffer.cursor}")
    if document.languages:
        typer.echo(f"  languages: {', '.join(document.languages)}")

    try:
        assert_balanced(block.buffer)
    except UnbalancedDeletionError as e:
        typer.secho(f"Warning: {e}", fg=typer.colors.YELLOW, err=True)

    if not render:
        raise typer.Exit(code=0)

    bridge = RenderBridge(work_root=output_dir) if output_dir else RenderBridge()
    try:
        preview = bridge.render(block, document).raise_for_status()
    except RenderError as e:
        typer.secho(f"✗ {e}", fg=typer.colors.RED, err=True)
        typer.echo(f"  showing markup: {block.buffer.render()}")
        raise typer.Exit(code=1)
    finally:
        bridge.shutdown()

    typer.secho(f"✓ Preview: {preview.image_path}", fg=typer.colors.GREEN, bold=True)


@app.command("table")
def table_command(
    filter_text: Annotated[
        Optional[str],
        typer.Option("--filter", "-f", help="Only show shorthands containing this text"),
    ] = None,
):
    """List every shorthand with its canonical markup (<cursor> marks the cursor)."""
    table = get_default_table()
    shown = 0
    for replacement in table:
        if filter_text and filter_text not in replacement.shorthand:
            continue
        typer.echo(f"  {replacement.shorthand:<12} {replacement.canonical}")
        shown += 1

    typer.echo(f"\n{shown} of {len(table)} shorthands")


if __name__ == "__main__":
    app()
