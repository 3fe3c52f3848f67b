"""
CLI entry point for iampolicy.

This module provides the Typer-based command-line interface for working
with policy documents on disk.

Commands:
    validate    Check that one or more policy files decode cleanly
    fmt         Print a policy in canonical form (pretty, compact or YAML)
    show        Summarise a policy's statements as a table

Architecture Note:
    The CLI is intentionally thin - it parses arguments and delegates to
    iampolicy.loader and iampolicy.document. Everything here is usable
    programmatically without the CLI.
"""

import json
import logging
import traceback
from pathlib import Path
from typing import Annotated, List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from iampolicy import __version__
from iampolicy.document import Policy, Statement
from iampolicy.errors import PolicyError
from iampolicy.loader import dump_policy_yaml, load_policy_file

# Initialize Typer app with metadata
app = typer.Typer(
    name="iampolicy",
    help="Validate, format and inspect IAM policy documents.",
    add_completion=False,
    no_args_is_help=True,
)

# Rich console for formatted output
console = Console()

# Plain output for machine-readable text
out = Console(highlight=False, soft_wrap=True, markup=False, emoji=False)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold]iampolicy[/bold] version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            help="Enable debug logging.",
        ),
    ] = False,
) -> None:
    """
    iampolicy - Build and check IAM policy documents.

    Reads JSON or YAML policy files and reports problems with their
    Version, Effect or overall structure.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_or_exit(path: Path, debug: bool) -> Policy:
    try:
        return load_policy_file(path)
    except PolicyError as e:
        console.print(f"[red]Error loading policy {path}: {escape(e.message)}[/red]")
        if debug:
            console.print(f"[dim]{escape(traceback.format_exc())}[/dim]")
        raise typer.Exit(code=1)


@app.command()
def validate(
    paths: Annotated[
        List[Path],
        typer.Argument(
            help="Policy files to check (JSON, or YAML by .yaml/.yml suffix).",
        ),
    ],
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output results in JSON format.",
        ),
    ] = False,
) -> None:
    """
    Check that policy files decode cleanly.

    Exits with code 1 if any file is invalid.

    Example:
        $ iampolicy validate bucket-policy.json role-policy.yaml
    """
    results = []
    for path in paths:
        try:
            policy = load_policy_file(path)
        except PolicyError as e:
            results.append({"path": str(path), "valid": False, "error": e.to_dict()})
            if not json_output:
                console.print(f"[red]FAIL[/red] {path}: {escape(e.message)}")
            continue

        results.append({
            "path": str(path),
            "valid": True,
            "statements": len(policy.statements),
        })
        if not json_output:
            console.print(f"[green]OK[/green]   {path} ({len(policy.statements)} statement(s))")

    all_ok = all(r["valid"] for r in results)
    if json_output:
        out.print(json.dumps({"valid": all_ok, "results": results}, indent=2))

    raise typer.Exit(code=0 if all_ok else 1)


@app.command()
def fmt(
    path: Annotated[
        Path,
        typer.Argument(help="Policy file to format."),
    ],
    compact: Annotated[
        bool,
        typer.Option(
            "--compact",
            help="Print compact JSON instead of indented JSON.",
        ),
    ] = False,
    as_yaml: Annotated[
        bool,
        typer.Option(
            "--yaml",
            help="Print YAML instead of JSON.",
        ),
    ] = False,
    debug: Annotated[
        bool,
        typer.Option(
            "--debug",
            help="Show full error tracebacks.",
        ),
    ] = False,
) -> None:
    """
    Print a policy in canonical form.

    Legacy "2008-10-17" documents are printed with the current Version.

    Example:
        $ iampolicy fmt bucket-policy.json --compact
    """
    if compact and as_yaml:
        console.print("[red]--compact and --yaml cannot be combined[/red]")
        raise typer.Exit(code=2)

    policy = _load_or_exit(path, debug)

    if as_yaml:
        out.print(dump_policy_yaml(policy), end="")
    elif compact:
        out.print(policy.get().decode("utf-8"))
    else:
        out.print(str(policy))


def _conditions_cell(statement: Statement) -> str:
    if not statement.condition:
        return ""
    lines = []
    for operator, variables in statement.condition.items():
        for variable, values in variables.items():
            lines.append(f"{operator} {variable} = {', '.join(values)}")
    return "\n".join(lines)


@app.command()
def show(
    path: Annotated[
        Path,
        typer.Argument(help="Policy file to summarise."),
    ],
    debug: Annotated[
        bool,
        typer.Option(
            "--debug",
            help="Show full error tracebacks.",
        ),
    ] = False,
) -> None:
    """
    Summarise a policy's statements as a table.

    Example:
        $ iampolicy show bucket-policy.json
    """
    policy = _load_or_exit(path, debug)

    title = f"Policy {policy.id}" if policy.id else "Policy"
    console.print(f"[bold]{title}[/bold] (Version {policy.version.value})")

    if not policy.statements:
        console.print("[dim]No statements.[/dim]")
        raise typer.Exit(code=0)

    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Sid", style="cyan")
    table.add_column("Effect", width=6)
    table.add_column("Principal")
    table.add_column("Action")
    table.add_column("Resource")
    table.add_column("Condition")

    for index, stmt in enumerate(policy.statements):
        effect = "[green]Allow[/green]" if stmt.effect else "[red]Deny[/red]"

        principals = list(stmt.principal.aws)
        if stmt.not_principal is not None:
            principals.extend(f"not {p}" for p in stmt.not_principal.aws)

        actions = list(stmt.action)
        if stmt.not_action is not None:
            actions.extend(f"not {a}" for a in stmt.not_action)

        table.add_row(
            str(index),
            stmt.sid or "",
            effect,
            "\n".join(principals),
            "\n".join(actions),
            stmt.resource,
            _conditions_cell(stmt),
        )

    console.print(table)


if __name__ == "__main__":
    app()
