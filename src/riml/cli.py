"""CLI entry point for the RIML compiler."""

import json
import logging
from pathlib import Path

import click
import yaml

from riml.document import Document
from riml.errors import RimlError
from riml.model.base import Route


def _compile(doc_path: Path, confdir: Path | None, prefix: str | None) -> Document:
    """Compile a document, turning expected failures into CLI errors."""
    try:
        return Document.from_file(doc_path, confdir=confdir, prefix=prefix)
    except (RimlError, OSError, yaml.YAMLError) as e:
        raise click.ClickException(f"{doc_path}: {e}") from e


def _describe(route: Route) -> str:
    parts = [route.route_name]
    if route.http:
        parts.append(f"[{route.http}]")
    if route.path is False:
        parts.append("(inherits path)")
    elif route.path is not None:
        parts.append(f"path={route.path}")
    if route.virtual:
        parts.append("virtual")
    return " ".join(parts)


def _echo_routes(routes: list[Route], depth: int = 0) -> None:
    for route in routes:
        click.echo("  " * depth + _describe(route))
        _echo_routes(route.routes, depth + 1)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log include and trait expansion.")
def main(verbose: bool):
    """RIML: compile routing-description documents into route trees."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@main.command("compile")
@click.argument("doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Write the JSON tree to this file.")
@click.option("--dir", "confdir", default=None, type=click.Path(file_okay=False, path_type=Path), help="Directory includes are resolved against.")
@click.option("--prefix", default=None, help="Handler method name prefix.")
def compile_cmd(doc_path: Path, output: Path | None, confdir: Path | None, prefix: str | None):
    """Compile a RIML document and print its route tree as JSON."""
    doc = _compile(doc_path, confdir, prefix)
    result = json.dumps(doc.to_dict(), indent=2, ensure_ascii=False, default=str)

    if output is None:
        click.echo(result)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(result + "\n", encoding="utf-8")
    click.echo(f"Route tree saved to {output}")


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--dir", "confdir", default=None, type=click.Path(file_okay=False, path_type=Path), help="Directory includes are resolved against.")
def routes(doc_path: Path, confdir: Path | None):
    """List the routes of a RIML document, one per line."""
    doc = _compile(doc_path, confdir, None)
    if not doc.has_routes():
        click.echo("No routes.")
        return
    _echo_routes(doc.routes)
