#!/usr/bin/env python3
"""
Document Export CLI

Assembles a YAML block layout into a standalone LaTeX document: preamble,
one positioned textblock* per block, \\end{document}.

Examples:\n

    export_document.py export layout.yaml                 # Print to stdout

    export_document.py export layout.yaml -o page.tex     # Write to file
"""

from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from mathpad.contexts.assembly import assemble_document, load_layout

app = typer.Typer(
    help="Export a block layout to a LaTeX document",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("export")
def export_command(
    layout_path: Annotated[
        Path,
        typer.Argument(
            help="YAML layout file",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
        ),
    ],
    output_path: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Output .tex path (default: stdout)"),
    ] = None,
):
    """
    Export LAYOUT_PATH to LaTeX.

    Examples:\n

        $ export_document.py export examples/page.yaml -o page.tex
    """
    try:
        document = load_layout(layout_path)
    except (ValueError, KeyError, TypeError) as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    latex = assemble_document(document)

    if output_path is None:
        typer.echo(latex)
        raise typer.Exit(code=0)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(latex, encoding="utf-8")
    typer.secho(f"✓ Exported {len(document.blocks)} blocks", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  Output: {output_path}")
    if document.languages:
        typer.echo(f"  Languages: {', '.join(document.languages)}")


if __name__ == "__main__":
    app()
