#
# src/treescout/cli/discover_cmds.py
#

import io
import json
from pathlib import Path

import click
import structlog
from rich.console import Console
from rich.text import Text
from rich.tree import Tree

from treescout.cli.utils import logging_settings
from treescout.config import default_config, load_config
from treescout.discovery import DiscoveryOutcome
from treescout.engine import TestDescriptor, request
from treescout.exceptions import TreescoutError
from treescout.launcher import (
    build_filters,
    discover,
    filters_from_config,
    request_from_config,
    select_from_names,
)
from treescout.telemetry import StructLogger

log: StructLogger = structlog.get_logger("cli.discover")

DESCRIPTOR_STYLES = {
    "root": "bold magenta",
    "container": "cyan",
    "test": "green",
}


def _tree_label(descriptor: TestDescriptor) -> Text:
    kind = descriptor.descriptor_type.name.lower()
    return Text.assemble(
        (descriptor.display_name, DESCRIPTOR_STYLES[kind]),
        " ",
        (f"[{descriptor.unique_id}]", "dim"),
    )


def render_tree(root: TestDescriptor) -> str:
    """Renders the discovery tree as plain text."""
    tree = Tree(_tree_label(root))
    branches = [(root, tree)]
    while branches:
        descriptor, branch = branches.pop()
        for child in descriptor.children:
            branches.append((child, branch.add(_tree_label(child))))

    console = Console(file=io.StringIO(), width=200, color_system=None)
    console.print(tree)
    return console.file.getvalue()


def outcome_as_json(outcome: DiscoveryOutcome) -> str:
    return json.dumps(
        {
            "root": outcome.root.to_dict(),
            "counts": outcome.counts(),
            "unresolved_selectors": [str(selector) for selector in outcome.unresolved_selectors],
        },
        indent=2,
    )


@click.command(name="discover")
@click.option("-p", "--package", "packages", multiple=True, help="Select a package or module by dotted name.")
@click.option("-k", "--class", "classes", multiple=True, help="Select a class ('pkg.mod.Class' or 'pkg.mod:Class').")
@click.option("-m", "--method", "methods", multiple=True, help="Select a method ('pkg.mod.Class.method' or 'pkg.mod.Class#method').")
@click.option(
    "--path",
    "paths",
    multiple=True,
    type=click.Path(file_okay=False, path_type=Path),
    help="Select every class below a classpath root directory.",
)
@click.option("-u", "--unique-id", "unique_ids", multiple=True, help="Select a node by its unique id.")
@click.option("--include-class", multiple=True, help="Regex of class names to keep.")
@click.option("--exclude-class", multiple=True, help="Regex of class names to drop.")
@click.option("--include-package", multiple=True, help="Package whose contents are kept.")
@click.option("--exclude-package", multiple=True, help="Package whose contents are dropped.")
@click.option(
    "-c",
    "--config-path",
    type=click.Path(exists=True, file_okay=True, dir_okay=False, readable=True, path_type=Path),
    default=None,
    envvar="TREESCOUT_CONF",
    help="Path to a treescout configuration file (env var TREESCOUT_CONF).",
    show_envvar=True,
)
@click.option("--json", "as_json", is_flag=True, help="Print the tree as JSON.")
@click.option("--fail-if-empty", is_flag=True, help="Exit with status 1 when nothing is discovered.")
@click.pass_context
def discover_cli(
    ctx: click.Context,
    packages: tuple[str, ...],
    classes: tuple[str, ...],
    methods: tuple[str, ...],
    paths: tuple[Path, ...],
    unique_ids: tuple[str, ...],
    include_class: tuple[str, ...],
    exclude_class: tuple[str, ...],
    include_package: tuple[str, ...],
    exclude_package: tuple[str, ...],
    config_path: Path | None,
    as_json: bool,
    fail_if_empty: bool,
):
    """Resolve selectors into a test discovery tree and print it."""
    log.info("Executing 'discover' command", config_path=str(config_path) if config_path else None)

    try:
        if config_path:
            config = load_config(config_path)
            logging_settings(ctx).apply(config)
        else:
            config = default_config()

        if packages or classes or methods or paths or unique_ids:
            builder = select_from_names(
                request(),
                packages=packages,
                classes=classes,
                methods=methods,
                paths=[str(path) for path in paths],
                unique_ids=unique_ids,
            )
            discovery_request = builder.filter(*filters_from_config(config)).build()
        elif not config.selection.is_empty:
            discovery_request = request_from_config(config)
        else:
            raise click.UsageError("No selectors given on the command line or in the configuration.")

        cli_filters = build_filters(include_class, exclude_class, include_package, exclude_package)
        if cli_filters:
            discovery_request = (
                request().select(discovery_request.selectors).filter(*discovery_request.filters, *cli_filters).build()
            )

        outcome = discover(discovery_request, config)
    except TreescoutError as e:
        log.error("Discovery failed", error=str(e))
        click.echo(f"Error: {e}", err=True)
        ctx.exit(2)

    for selector in outcome.unresolved_selectors:
        click.echo(f"Warning: selector '{selector}' matched nothing", err=True)

    if as_json:
        click.echo(outcome_as_json(outcome))
    else:
        click.echo(render_tree(outcome.root), nl=False)
        click.echo(f"{outcome.test_count} test(s) discovered.")

    if fail_if_empty and outcome.test_count == 0:
        ctx.exit(1)

# 🔼⚙️
