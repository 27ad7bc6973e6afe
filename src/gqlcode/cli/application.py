import json
from dataclasses import dataclass
from enum import Enum, unique
from typing import IO, Any, AnyStr, Callable, Optional, Union

import click

from gqlcode.core.utils.dataclasses import as_dict


@unique
class OutputFormat(str, Enum):
    TEXT = "text"
    JSON = "json"
    JSON_INDENT = "json-indent"

    def __str__(self) -> str:
        return self.value


@dataclass
class CommonConfig:
    verbose: bool = False
    colored_output: Optional[bool] = None
    output_format: Optional[OutputFormat] = None
    log_enabled: bool = False
    log_level: Optional[str] = None
    log_calls: bool = False


class Application:
    def __init__(self) -> None:
        self.config = CommonConfig()

    @property
    def colored(self) -> Optional[bool]:
        return self.config.colored_output

    def verbose(
        self,
        message: Union[str, Callable[[], Any], None],
        file: Optional[IO[AnyStr]] = None,
        nl: bool = True,
        err: bool = True,
    ) -> None:
        if self.config.verbose:
            click.secho(
                message() if callable(message) else message,
                file=file,
                nl=nl,
                err=err,
                color=self.colored,
                fg="bright_black",
            )

    def echo(
        self,
        message: Union[str, Callable[[], Any], None],
        file: Optional[IO[AnyStr]] = None,
        nl: bool = True,
        err: bool = False,
    ) -> None:
        click.secho(message() if callable(message) else message, file=file, nl=nl, err=err, color=self.colored)

    def print_data(self, data: Any, default_output_format: Optional[OutputFormat] = None) -> None:
        format = self.config.output_format or default_output_format or OutputFormat.TEXT

        if format in (OutputFormat.JSON, OutputFormat.JSON_INDENT):
            self.echo(
                json.dumps(
                    data,
                    default=as_dict,
                    indent=2 if format == OutputFormat.JSON_INDENT else None,
                )
            )
        else:
            self.echo(str(data))


pass_application = click.make_pass_decorator(Application, ensure=True)
