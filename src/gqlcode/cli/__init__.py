import logging
from typing import Optional

import click

from gqlcode.core.utils.logging import LoggingDescriptor

from .__version__ import __version__
from .application import Application, OutputFormat, pass_application
from .commands.discover import discover


@click.group(
    context_settings={"auto_envvar_prefix": "GQLCODE"},
    invoke_without_command=False,
)
@click.option(
    "-f",
    "--format",
    "format",
    type=click.Choice([str(f) for f in OutputFormat]),
    default=None,
    help="Set the output format.",
    show_default=True,
)
@click.option(
    "--color / --no-color",
    "color",
    default=None,
    help="Whether or not to display colored output (default is auto-detection).",
    show_envvar=True,
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Enables verbose mode.",
    show_envvar=True,
)
@click.option(
    "--log",
    is_flag=True,
    help="Enables logging.",
    show_envvar=True,
)
@click.option(
    "--log-level",
    type=click.Choice(["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    help="Sets the log level.",
    default="CRITICAL",
    show_default=True,
    show_envvar=True,
)
@click.option(
    "--log-calls",
    is_flag=True,
    help="Enables logging of method/function calls.",
    show_envvar=True,
)
@click.version_option(version=__version__, prog_name="gqlcode")
@pass_application
def gqlcode(
    app: Application,
    format: Optional[str],
    color: Optional[bool],
    verbose: bool,
    log: bool,
    log_level: str,
    log_calls: bool,
) -> None:
    """\
    Tools for the GraphQL language client of an editor workspace.
    """
    app.config.output_format = OutputFormat(format) if format is not None else None
    app.config.colored_output = color
    app.config.verbose = verbose
    app.config.log_enabled = log
    app.config.log_level = log_level
    app.config.log_calls = log_calls

    if log:
        if log_calls:
            LoggingDescriptor.set_call_tracing(True)

        logging.basicConfig(level=log_level, format="%(name)s:%(levelname)s: %(message)s")


gqlcode.add_command(discover)
