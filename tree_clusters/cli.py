"""Click-based CLI for clustering the elements of HTML documents."""

import json
import sys
from pathlib import Path
from typing import Any

import click
from bs4 import FeatureNotFound
from soupsieve import SelectorSyntaxError

from . import __version__
from .clustering import StructuralClustering
from .clusters_logging import setup_logging
from .config import ClusteringConfig, load_config
from .errors import DocumentError, ValidationError, handle_exception
from .navigation.soup import DEFAULT_PARSER, SoupNavigator, parse_document


SNIPPET_LENGTH = 60


def common_options(f: Any) -> Any:
    """Options shared by every command."""
    f = click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")(f)
    f = click.option("--quiet", "-q", is_flag=True, help="Suppress non-error output")(f)
    f = click.option(
        "--config", type=click.Path(exists=True), help="Configuration file path"
    )(f)
    f = click.option(
        "--log-file", type=click.Path(dir_okay=False), help="Also write a DEBUG log to this file"
    )(f)
    f = click.option(
        "--parser",
        default=DEFAULT_PARSER,
        show_default=True,
        help="BeautifulSoup parser used to read the document",
    )(f)
    return f


def _fail(error: Exception, verbose: bool = False) -> None:
    message, exit_code = handle_exception(error, use_color=sys.stderr.isatty(), verbose=verbose)
    click.echo(message, err=True)
    sys.exit(exit_code)


def _prepare(
    config_path: str | None, verbose: bool, quiet: bool, **overrides: Any
) -> ClusteringConfig:
    if quiet and verbose:
        raise ValidationError("--quiet and --verbose are mutually exclusive")
    config = load_config(config_path, **overrides)
    setup_logging(
        level=config.log_level,
        quiet=quiet,
        verbose=verbose,
        log_format=config.log_format,
        log_file=config.log_file,
    )
    return config


def _load_document(path: str, parser: str) -> Any:
    try:
        markup = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentError(path, str(e)) from e
    try:
        return parse_document(markup, parser)
    except FeatureNotFound as e:
        raise ValidationError(
            f"Parser {parser!r} is not available",
            suggestion="Install the parser or use --parser html.parser",
        ) from e


def _select(document: Any, selector: str) -> list[Any]:
    try:
        return document.select(selector)
    except SelectorSyntaxError as e:
        raise ValidationError(
            f"Invalid selector {selector!r}: {e}",
            suggestion="Use a CSS selector supported by soupsieve",
        ) from e


def describe_node(navigator: SoupNavigator, node: Any) -> dict[str, Any]:
    """Return the tag and a short text snippet for a node."""
    if hasattr(node, "get_text"):
        text = " ".join(node.get_text(" ", strip=True).split())
    else:
        text = str(node).strip()
    if len(text) > SNIPPET_LENGTH:
        text = text[: SNIPPET_LENGTH - 3] + "..."
    return {"tag": navigator.tag_of(node), "text": text}


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """Tree Clusters - group document nodes by structural proximity."""


@cli.command()
@click.argument("document", type=click.Path(exists=True, dir_okay=False))
@click.option("--selector", "-s", required=True, help="CSS selector for the nodes to cluster")
@click.option("--too-far", type=float, default=None, help="Distance at which merging stops")
@click.option("--json", "as_json", is_flag=True, help="Output clusters as JSON")
@common_options
def cluster(
    document: str,
    selector: str,
    too_far: float | None,
    as_json: bool,
    verbose: bool,
    quiet: bool,
    config: str | None,
    log_file: str | None,
    parser: str,
) -> None:
    """Cluster the nodes of DOCUMENT matched by --selector."""
    try:
        settings = _prepare(config, verbose, quiet, too_far=too_far, log_file=log_file)
        soup = _load_document(document, parser)
        nodes = _select(soup, selector)
        navigator = SoupNavigator()
        result = StructuralClustering(navigator, settings).cluster_with_stats(nodes)
    except Exception as e:
        _fail(e, verbose)
        return

    described = [
        {
            "index": index,
            "size": len(members),
            "nodes": [describe_node(navigator, node) for node in members],
        }
        for index, members in enumerate(result.clusters)
    ]

    if as_json:
        click.echo(
            json.dumps(
                {
                    "total_items": result.total_items,
                    "merges": result.merges,
                    "final_distance": result.final_distance,
                    "clusters": described,
                },
                indent=2,
            )
        )
        return

    click.echo(f"{result.total_items} nodes, {result.cluster_count} clusters")
    for entry in described:
        click.echo(f"Cluster {entry['index']} ({entry['size']} nodes)")
        for node in entry["nodes"]:
            click.echo(f"  <{node['tag']}> {node['text']}")


@cli.command()
@click.argument("document", type=click.Path(exists=True, dir_okay=False))
@click.argument("selector_a")
@click.argument("selector_b")
@common_options
def distance(
    document: str,
    selector_a: str,
    selector_b: str,
    verbose: bool,
    quiet: bool,
    config: str | None,
    log_file: str | None,
    parser: str,
) -> None:
    """Print the distance between the first matches of two selectors."""
    try:
        settings = _prepare(config, verbose, quiet, log_file=log_file)
        soup = _load_document(document, parser)
        pair = []
        for selector in (selector_a, selector_b):
            matches = _select(soup, selector)
            if not matches:
                raise ValidationError(f"Selector {selector!r} matched nothing")
            pair.append(matches[0])
        value = StructuralClustering(SoupNavigator(), settings).distance(*pair)
    except Exception as e:
        _fail(e, verbose)
        return

    click.echo(f"{value:g}")


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
