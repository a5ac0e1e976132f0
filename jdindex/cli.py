import logging
from pathlib import Path

import click

from jdindex import api
from jdindex.completion import JD_NUMBER
from jdindex.config import get_setting, load_config
from jdindex.exceptions import ConfigError, JDError
from jdindex.util import Level
from jdindex.validator import validate as validate_system

INDENT = {Level.AREA: "", Level.CATEGORY: "  ", Level.ID: "    "}


def fail(error):
    """Print an error and exit."""
    click.echo(f"ERROR: {error}", err=True)
    raise SystemExit(1)


def get_root(ctx):
    """The index root: --root, then the configured root, then walk up from cwd."""
    try:
        return api.find_root(ctx.obj["root_option"], ctx.obj["config"])
    except JDError as e:
        fail(e)


def is_strict(ctx):
    return bool(get_setting(ctx.obj["config"], "strict", False))


def echo_diagnostics(diagnostics):
    for diagnostic in diagnostics:
        click.echo(f"WARNING: {diagnostic}", err=True)
        for path in diagnostic.paths:
            click.echo(f"     {path}", err=True)


@click.group()
@click.option("--root", "root_option", type=click.Path(file_okay=False, path_type=Path),
              default=None, help="Index root. Default: configured root, or search upward from cwd.")
@click.option("--config", "config_file", type=click.Path(dir_okay=False, path_type=Path),
              default=None, help="Config file. Default: $JD_CONFIG or ~/.config/jd/config.yaml.")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output.")
@click.pass_context
def cli(ctx, root_option, config_file, verbose):
    """Johnny Decimal index: build it, look numbers up, allocate new ones."""
    try:
        config = load_config(config_file)
    except ConfigError as e:
        fail(e)
    level = "DEBUG" if verbose else str(get_setting(config, "log_level", "WARNING")).upper()
    logging.basicConfig(level=getattr(logging, level, logging.WARNING),
                        format="%(levelname)s %(name)s: %(message)s")
    ctx.obj = {"config": config, "root_option": root_option}


@cli.command()
@click.argument("path", type=click.Path(file_okay=False, path_type=Path), required=False)
@click.pass_context
def index(ctx, path):
    """Scan a Johnny Decimal tree and write its .JdIndex.

    \b
    Examples:
        jd index ~/Documents   → index that tree
        jd index               → re-index the configured/current root
    """
    config = ctx.obj["config"]
    if path is None:
        path = ctx.obj["root_option"] or get_setting(config, "root") or Path.cwd()
    try:
        summary = api.index(Path(path).expanduser(), ignore=get_setting(config, "ignore", []))
    except JDError as e:
        fail(e)

    echo_diagnostics(summary.diagnostics)
    click.echo(
        f"Indexed {summary.areas} area(s), {summary.categories} category(ies), "
        f"{summary.ids} ID(s) → {summary.index_path}"
    )
    if summary.diagnostics:
        click.echo(f"Found {len(summary.diagnostics)} problem(s).")


@cli.command()
@click.argument("query", type=JD_NUMBER, required=False)
@click.pass_context
def show(ctx, query):
    """Print the index, or the part of it under an area, category or ID.

    \b
    Examples:
        jd show          → full tree
        jd show 10-19    → area 10-19
        jd show 11       → category 11 and its IDs
    """
    root = get_root(ctx)
    try:
        entries = api.show(root, query, strict=is_strict(ctx))
    except JDError as e:
        fail(e)
    for entry in entries:
        click.echo(f"{INDENT[entry.level]}{entry}")


@cli.command("list")
@click.pass_context
def list_cmd(ctx):
    """List every ID."""
    root = get_root(ctx)
    try:
        entries = api.list_ids(root, strict=is_strict(ctx))
    except JDError as e:
        fail(e)
    for entry in entries:
        click.echo(entry)


@cli.command("cd")
@click.argument("term", type=JD_NUMBER)
@click.pass_context
def cd_cmd(ctx, term):
    """Print the path of a JD number, for a shell function to cd into."""
    root = get_root(ctx)
    try:
        path = api.resolve_for_cd(root, term, strict=is_strict(ctx))
    except JDError as e:
        fail(e)
    click.echo(path)


@cli.command()
@click.argument("category", type=JD_NUMBER)
@click.argument("label", required=False)
@click.pass_context
def add(ctx, category, label):
    """Allocate the next free ID in a category.

    \b
    Examples:
        jd add 11              → prints the next free number, e.g. 11.04
        jd add 11 "Insurance"  → creates 11.04 Insurance and updates the index
    """
    root = get_root(ctx)
    try:
        if label is None:
            click.echo(api.add(root, category, strict=is_strict(ctx)))
            return
        entry = api.create(root, category, label, strict=is_strict(ctx))
    except (JDError, ValueError) as e:
        fail(e)
    click.echo(f"Created: {root / entry.path}")


@cli.command("add-category")
@click.argument("area", type=JD_NUMBER)
@click.argument("label")
@click.pass_context
def add_category(ctx, area, label):
    """Create the next free category in an area (10-19, or any number in it)."""
    root = get_root(ctx)
    try:
        entry = api.create_category(root, area, label, strict=is_strict(ctx))
    except (JDError, ValueError) as e:
        fail(e)
    click.echo(f"Created: {root / entry.path}")


@cli.command()
@click.pass_context
def validate(ctx):
    """Check the stored index for numbering problems."""
    root = get_root(ctx)
    try:
        system = api.get_system(root)
    except JDError as e:
        fail(e)

    diagnostics = validate_system(system)
    if not diagnostics:
        click.echo("No issues found!")
        return
    echo_diagnostics(diagnostics)
    click.echo(f"Found {len(diagnostics)} issue(s).")
    raise SystemExit(1)
