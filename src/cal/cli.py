"""
cal CLI.

Commands:
  • eval EXPR   → evaluate an expression and print the result
  • tree EXPR   → print the expression tree
  • dump EXPR   → write the expression tree as JSON
  • load FILE   → evaluate a JSON expression tree

Expressions that start with "-" must follow "--", e.g. ``cal eval -- "-5 * 2"``.
"""

from __future__ import annotations

import json
import platform
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from cal._version import get_version
from cal.core.config import CalConfig, OutputFormat, configure_logging, load_config
from cal.core.errors import CalError, NodeLoadError
from cal.core.expression_lang import evaluate, parse_expr
from cal.core.ir import Node, Number, dump_node, load_node

app = typer.Typer(
    help="cal – parse, inspect and evaluate calculator expressions",
    no_args_is_help=True,
)

err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"cal version {get_version()}")
        typer.echo(f"Python {platform.python_implementation()} {platform.python_version()}")
        raise typer.Exit()


def _fail(error: CalError) -> NoReturn:
    err_console.print(f"[bold red]Error:[/bold red] {escape(str(error))}")
    raise typer.Exit(code=1)


def _config(ctx: typer.Context) -> CalConfig:
    if isinstance(ctx.obj, CalConfig):
        return ctx.obj
    return CalConfig()


def _parse(source: str) -> Node:
    try:
        return parse_expr(source)
    except CalError as e:
        _fail(e)


def _echo_tree(node: Node) -> None:
    for line in node.to_tree():
        typer.echo(line)


def _echo_result(
    node: Node,
    result: Number,
    *,
    show_tree: bool,
    output_format: OutputFormat,
    source: str | None = None,
) -> None:
    if output_format == OutputFormat.JSON:
        payload: dict = {"kind": result.kind.value, "value": result.value}
        if source is not None:
            payload = {"expression": source, **payload}
        if show_tree:
            payload["tree"] = node.to_tree()
        typer.echo(json.dumps(payload))
        return

    if show_tree:
        _echo_tree(node)
    typer.echo(str(result))


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version information",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Enable debug logging"),
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help="Config file (default: ./cal.toml if present)"
    ),
) -> None:
    """cal CLI main callback for global options."""
    try:
        config = load_config(config_path)
    except CalError as e:
        _fail(e)
    configure_logging(config, verbose=verbose)
    ctx.obj = config


@app.command("eval")
def eval_command(
    ctx: typer.Context,
    expression: str = typer.Argument(..., help="Expression to evaluate"),
    tree: bool | None = typer.Option(
        None, "--tree/--no-tree", help="Also print the expression tree"
    ),
    as_json: bool = typer.Option(False, "--json", "-j", help="Print the result as JSON"),
) -> None:
    """Evaluate an expression."""
    config = _config(ctx)
    node = _parse(expression)
    _echo_result(
        node,
        evaluate(node),
        show_tree=config.output.tree if tree is None else tree,
        output_format=OutputFormat.JSON if as_json else config.output.format,
        source=expression,
    )


@app.command("tree")
def tree_command(
    expression: str = typer.Argument(..., help="Expression to draw"),
) -> None:
    """Print the expression tree."""
    _echo_tree(_parse(expression))


@app.command("dump")
def dump_command(
    expression: str = typer.Argument(..., help="Expression to serialize"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output file path"),
) -> None:
    """Write the expression tree as JSON."""
    try:
        text = dump_node(_parse(expression))
    except CalError as e:
        _fail(e)
    if output is None:
        typer.echo(text)
        return
    output.write_text(text + "\n")
    typer.echo(f"✓ Wrote expression tree to {output}")


@app.command("load")
def load_command(
    ctx: typer.Context,
    input_file: Path = typer.Argument(..., help="Path to a JSON expression tree"),
    tree: bool | None = typer.Option(
        None, "--tree/--no-tree", help="Also print the expression tree"
    ),
    as_json: bool = typer.Option(False, "--json", "-j", help="Print the result as JSON"),
) -> None:
    """Evaluate a JSON expression tree written by ``cal dump``."""
    config = _config(ctx)
    if not input_file.exists():
        err_console.print(f"[bold red]Error:[/bold red] File not found: {escape(str(input_file))}")
        raise typer.Exit(code=1)

    try:
        data = input_file.read_bytes()
    except OSError as e:
        _fail(NodeLoadError(f"Cannot read {input_file}: {e.strerror or e}"))

    try:
        node = load_node(data)
    except CalError as e:
        _fail(e)

    _echo_result(
        node,
        evaluate(node),
        show_tree=config.output.tree if tree is None else tree,
        output_format=OutputFormat.JSON if as_json else config.output.format,
    )


def main() -> None:
    app()


if __name__ == "__main__":
    main()
