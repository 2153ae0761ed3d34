#
# src/treescout/cli/main.py
#
"""
The ``treescout`` command group.
"""

from importlib.metadata import PackageNotFoundError, version

import click

from treescout.cli.config_cmds import config_cli
from treescout.cli.discover_cmds import discover_cli
from treescout.cli.utils import LoggingSettings, logging_options


def _package_version() -> str:
    try:
        return version("treescout")
    except PackageNotFoundError:
        return "0.0.0-dev"


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(_package_version(), "-V", "--version", prog_name="treescout")
@logging_options
@click.pass_context
def cli(ctx: click.Context, log_level: str | None, log_file: str | None, json_logs: bool):
    """
    Treescout: test discovery tree resolver.

    Resolves package, class, method, path and unique id selectors into a
    deduplicated tree of test descriptors.
    """
    settings = LoggingSettings(level=log_level, log_file=log_file, json_logs=json_logs)
    ctx.ensure_object(dict)["logging"] = settings
    settings.apply()


cli.add_command(config_cli)
cli.add_command(discover_cli)

# 🖥️⚙️
