import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import click

from gqlcode.client.launch import EXTENSION_NAME, GraphQLConfig, build_server_args, find_config_file
from gqlcode.core.uri import Uri
from gqlcode.core.workspace import Workspace, WorkspaceFolder

from ..application import Application, OutputFormat, pass_application


@dataclass
class DiscoverResult:
    name: str
    uri: str
    config_file: Optional[str] = None
    args: List[str] = field(default_factory=list)

    @property
    def has_client(self) -> bool:
        return self.config_file is not None

    def __str__(self) -> str:
        lines = [f"{self.name} ({self.uri})"]
        if self.config_file is None:
            lines.append("  config: not found, no language client")
        else:
            lines.append(f"  config: {self.config_file}")
            lines.append(f"  args: {' '.join(self.args) if self.args else '<none>'}")
        return "\n".join(lines)


def _load_settings(settings_file: Optional[Path]) -> Dict[str, Any]:
    if settings_file is None:
        return {}

    try:
        result = json.loads(settings_file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise click.BadParameter(f"can't read settings: {e}", param_hint="--settings") from e

    if not isinstance(result, dict):
        raise click.BadParameter("settings must be a JSON object", param_hint="--settings")

    return result


def discover_folders(workspace: Workspace) -> List[DiscoverResult]:
    results = []
    for folder in workspace.workspace_folders:
        config_file = find_config_file(folder.uri.to_path())
        result = DiscoverResult(name=folder.name, uri=str(folder.uri))
        if config_file is not None:
            result.config_file = str(config_file)
            result.args = build_server_args(workspace.get_configuration(GraphQLConfig, folder.uri))
        results.append(result)

    return results


@click.command
@click.option(
    "--settings",
    "settings_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help=f"JSON file with editor settings, the `{EXTENSION_NAME}` section is used.",
)
@click.option("--watchman", type=str, default=None, help="Overrides the `watchman` setting.")
@click.option(
    "--auto-download-gql / --no-auto-download-gql",
    "auto_download_gql",
    default=None,
    help="Overrides the `autoDownloadGQL` setting.",
)
@click.argument(
    "paths",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    nargs=-1,
    required=False,
)
@pass_application
def discover(
    app: Application,
    settings_file: Optional[Path],
    watchman: Optional[str],
    auto_download_gql: Optional[bool],
    paths: List[Path],
) -> None:
    """\
    Shows which folders get a GraphQL language client.

    Takes a list of PATHS, or the current working directory if no PATHS are
    given, treats each one as a workspace folder and prints whether it
    contains a `.gqlconfig` file and the arguments the language server would
    be started with.

    \b
    Examples:
    ```
    gqlcode discover
    gqlcode discover --watchman "npx watchman" project-a project-b
    gqlcode --format json discover
    ```
    """
    settings = _load_settings(settings_file)

    overrides: Dict[str, Any] = {}
    if watchman is not None:
        overrides["watchman"] = watchman
    if auto_download_gql is not None:
        overrides["autoDownloadGQL"] = auto_download_gql
    if overrides:
        section = settings.setdefault(EXTENSION_NAME, {})
        if not isinstance(section, dict):
            raise click.BadParameter(f"`{EXTENSION_NAME}` must be a JSON object", param_hint="--settings")
        section.update(overrides)

    folders = [WorkspaceFolder(p.resolve().name, Uri.from_path(p.resolve())) for p in (paths or [Path.cwd()])]
    app.verbose(lambda: f"Discover {len(folders)} folder(s)")

    results = discover_folders(Workspace(folders, settings=settings))

    if app.config.output_format in (OutputFormat.JSON, OutputFormat.JSON_INDENT):
        app.print_data([{**vars(r), "has_client": r.has_client} for r in results])
    else:
        for r in results:
            app.echo(str(r))
