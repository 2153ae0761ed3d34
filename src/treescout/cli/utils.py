#
# src/treescout/cli/utils.py
#
"""
Logging plumbing for the treescout commands.

The group options pick the level when given. Otherwise the ``[global]``
section of a loaded configuration file decides, and without either the CLI
stays at WARNING so stderr only carries problems.
"""

import logging

import click
import structlog
from attrs import define

from treescout.config import TreescoutConfig
from treescout.telemetry import StructLogger, setup_logging

log: StructLogger = structlog.get_logger("cli.utils")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
DEFAULT_CLI_LOG_LEVEL = "WARNING"


def logging_options(f):
    """Adds --log-level, --log-file and --json-logs to a command."""
    f = click.option(
        "-l",
        "--log-level",
        type=click.Choice(LOG_LEVELS, case_sensitive=False),
        default=None,
        envvar="TREESCOUT_LOG_LEVEL",
        help="Logging level; overrides [global] log_level of the configuration file.",
    )(f)
    f = click.option(
        "--log-file",
        type=click.Path(dir_okay=False, writable=True, resolve_path=True),
        default=None,
        envvar="TREESCOUT_LOG_FILE",
        help="Also write logs to this file as JSON lines.",
    )(f)
    f = click.option(
        "--json-logs",
        is_flag=True,
        default=False,
        envvar="TREESCOUT_JSON_LOGS",
        help="Render stderr logs as JSON.",
    )(f)
    return f


@define(frozen=True, slots=True)
class LoggingSettings:
    """Logging choices made on the command line."""

    level: str | None = None
    log_file: str | None = None
    json_logs: bool = False

    def effective_level(self, config: TreescoutConfig | None = None) -> str:
        if self.level:
            return self.level.upper()
        if config is not None:
            return config.global_config.log_level.upper()
        return DEFAULT_CLI_LOG_LEVEL

    def apply(self, config: TreescoutConfig | None = None) -> None:
        level = self.effective_level(config)
        setup_logging(level=logging.getLevelName(level), json_logs=self.json_logs, log_file=self.log_file)
        log.debug("CLI logging configured", level=level, file=self.log_file or "console", json=self.json_logs)


def logging_settings(ctx: click.Context) -> LoggingSettings:
    """Settings stored by the treescout group, or the defaults."""
    ctx.ensure_object(dict)
    return ctx.obj.get("logging", LoggingSettings())

# ⚙️🛠️
