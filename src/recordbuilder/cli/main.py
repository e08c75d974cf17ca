"""
Main CLI entry point for record-builder using Click.

Usage:
    record-builder generate --in FILE --out FILE [--check]
    record-builder inspect FILE [--json]
"""

from __future__ import annotations

import ast
import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError

from recordbuilder.config import GeneratorConfig
from recordbuilder.diagnostics import from_syntax_error
from recordbuilder.errors import GenerationError
from recordbuilder.tools import (
    GENERATOR_VERSION,
    expand_annotated,
    extract_existing_digest,
    find_annotated_classes,
    render_file,
)
from recordbuilder.workflow import ExpansionResult


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure logging based on verbosity."""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


class Config:
    """Shared configuration for CLI commands."""

    def __init__(self) -> None:
        self.verbose = False
        self.debug = False


pass_config = click.make_pass_decorator(Config, ensure=True)


def _generator_config(**options) -> GeneratorConfig:
    values = {k: v for k, v in options.items() if v is not None}
    try:
        return GeneratorConfig(**values)
    except ValidationError as e:
        raise click.ClickException(f"Invalid generator options: {e}")


def _report_diagnostics(path: Path, diagnostics) -> None:
    for diagnostic in diagnostics:
        click.echo(diagnostic.render(path), err=True)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.option("--debug", is_flag=True, help="Enable debug output")
@click.version_option(version=GENERATOR_VERSION, prog_name="record-builder")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, debug: bool) -> None:
    """Generate fluent builder classes for annotated record declarations."""
    ctx.ensure_object(Config)
    ctx.obj.verbose = verbose
    ctx.obj.debug = debug
    setup_logging(verbose=verbose, debug=debug)


@cli.command()
@click.option(
    "--in",
    "input_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Python module containing decorated record classes",
)
@click.option(
    "--out",
    "output_path",
    required=True,
    type=click.Path(dir_okay=False),
    help="Path of the generated module",
)
@click.option("--check", is_flag=True, help="Check the generated module is up to date")
@click.option("--suffix", default=None, help="Builder class name suffix (default: Builder)")
@click.option("--factory-name", default=None, help="Name of the factory added to records")
@click.option("--finalizer-name", default=None, help="Name of the builder's finalize method")
@click.option(
    "--collect-missing",
    is_flag=True,
    help="Report every missing required field instead of the first",
)
@pass_config
def generate(
    config: Config,
    input_path: str,
    output_path: str,
    check: bool,
    suffix: Optional[str],
    factory_name: Optional[str],
    finalizer_name: Optional[str],
    collect_missing: bool,
) -> None:
    """Generate builders for every @derive_builder class of a module.

    The decorated classes keep their fields and gain a builder() factory;
    a <Name>Builder class is inserted after each of them.

    Example:
        record-builder generate --in models.py --out models_gen.py
    """
    logger = logging.getLogger("generate")
    gen_config = _generator_config(
        builder_suffix=suffix,
        factory_name=factory_name,
        finalizer_name=finalizer_name,
        collect_missing=collect_missing,
    )
    in_path = Path(input_path)
    out_path = Path(output_path)

    logger.info(f"Reading source module: {in_path}")
    try:
        source_text = in_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise click.ClickException(f"Error reading {in_path}: {e}")

    try:
        rendered = render_file(in_path, source_text, gen_config)
    except GenerationError as e:
        _report_diagnostics(in_path, e.diagnostics)
        sys.exit(1)

    if check:
        if not out_path.exists():
            click.echo(f"{out_path} is missing (run generator)", err=True)
            sys.exit(1)
        existing = out_path.read_text(encoding="utf-8")
        if existing != rendered:
            click.echo(f"{out_path} is out of date (run generator)", err=True)
            sys.exit(1)
        click.echo(f"up-to-date: {out_path}")
        return

    if out_path.exists():
        existing = out_path.read_text(encoding="utf-8")
        old_digest = extract_existing_digest(existing)
        new_digest = extract_existing_digest(rendered)
        if existing == rendered or (old_digest and old_digest == new_digest):
            click.echo(f"unchanged: {out_path}")
            return

    logger.info(f"Writing generated module: {out_path}")
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(rendered, encoding="utf-8")
    click.echo(click.style(f"generated: {out_path}", fg="green"))


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@pass_config
def inspect(config: Config, file: str, as_json: bool) -> None:
    """Show how the fields of decorated records are classified.

    Example:
        record-builder inspect models.py
    """
    path = Path(file)
    try:
        module = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    except SyntaxError as e:
        _report_diagnostics(path, [from_syntax_error(e)])
        sys.exit(1)

    results = [expand_annotated(a) for a in find_annotated_classes(module)]

    if as_json:
        click.echo(json.dumps([_result_to_dict(r) for r in results], indent=2))
    else:
        if not results:
            click.echo("No decorated records found")
        for result in results:
            _print_expansion(result)

    if any(r.has_errors for r in results):
        sys.exit(1)


def _result_to_dict(result: ExpansionResult) -> dict:
    output: dict = {
        "record": result.record_name,
        "builder": result.builder.name if result.builder else None,
        "fields": [],
        "diagnostics": [
            {"line": d.lineno, "column": d.col_offset + 1, "message": d.message}
            for d in result.diagnostics
        ],
    }
    if result.schema:
        output["fields"] = [
            {
                "name": f.name,
                "declared_type": f.type_source,
                "kind": f.classification.kind.value,
                "effective_type": ast.unparse(f.classification.effective_type),
            }
            for f in result.schema.fields
        ]
    return output


def _print_expansion(result: ExpansionResult) -> None:
    """Print the classification of one record."""
    click.echo(f"Record: {result.record_name}")
    if result.schema is None:
        for d in result.diagnostics:
            click.echo(click.style(f"  ✗ {d.render()}", fg="red"))
        return

    click.echo(f"  Builder: {result.builder.name}")
    for f in result.schema.fields:
        kind = f.classification.kind.value
        color = "cyan" if f.classification.is_optional else None
        effective = ast.unparse(f.classification.effective_type)
        click.echo(click.style(f"    {f.name}: {effective} ({kind})", fg=color))


def app(args: Optional[list[str]] = None) -> int:
    """
    Main application entry point (for testing).

    Args:
        args: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success)
    """
    try:
        cli(args, standalone_mode=False)
        return 0
    except click.ClickException as e:
        e.show()
        return 1
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 1
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        return 1


def main() -> None:
    """CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
