from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from gqlcode.core.utils.logging import LoggingDescriptor
from gqlcode.core.utils.path import file_exists_silent
from gqlcode.core.window import OutputChannel
from gqlcode.core.workspace import ConfigBase, WorkspaceFolder, config_section

from .language_client import ClientOptions, NodeModule, ServerOptions, TransportKind

EXTENSION_NAME = "graphqlForVSCode"
CLIENT_NAME = "Graphql For VSCode"
CONFIG_FILE_NAME = ".gqlconfig"
DIAGNOSTIC_COLLECTION_NAME = "graphql"
DEFAULT_SERVER_MODULE = "@playlyfe/gql-language-server/lib/bin/cli"
DEBUG_EXEC_ARGV = ["--nolazy", "--debug=6004"]

_logger = LoggingDescriptor(name=__name__)


@config_section(EXTENSION_NAME)
@dataclass
class GraphQLConfig(ConfigBase):
    watchman: Optional[str] = None
    auto_download_gql: Optional[bool] = field(default=None, metadata={"alias": "autoDownloadGQL"})
    node_path: Optional[str] = None
    debug: bool = False


def find_config_file(path: Union[str, Path]) -> Optional[Path]:
    """Returns the `.gqlconfig` file in `path`, or None. Never raises."""
    config_file = Path(path) / CONFIG_FILE_NAME
    if file_exists_silent(config_file):
        return config_file

    return None


def _format_arg_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_server_args(config: GraphQLConfig) -> List[str]:
    """Command line arguments for the language server.

    The order is fixed and options that are not set are left out entirely.
    """
    options = [
        ("--watchman", config.watchman),
        ("--auto-download-gql", config.auto_download_gql),
    ]

    return [f"{name}={_format_arg_value(value)}" for name, value in options if value is not None]


def build_server_options(config: GraphQLConfig, module: str = DEFAULT_SERVER_MODULE) -> ServerOptions:
    return ServerOptions(
        run=NodeModule(module=module, transport=TransportKind.IPC, args=build_server_args(config)),
        debug=NodeModule(module=module, transport=TransportKind.IPC, exec_argv=list(DEBUG_EXEC_ARGV)),
    )


def build_initialization_options(config: GraphQLConfig) -> Dict[str, Any]:
    return {"nodePath": config.node_path, "debug": config.debug}


def output_channel_name(folder: WorkspaceFolder) -> str:
    return f"Graphql-{folder.name}"


def build_client_options(
    folder: WorkspaceFolder,
    config: GraphQLConfig,
    output_channel: OutputChannel,
) -> ClientOptions:
    def initialization_failed(error: BaseException) -> bool:
        output_channel.append_line(f"Server initialization failed: {error}")
        _logger.warning(lambda: f"language server for {folder.name!r} failed to initialize: {error}")
        return False

    return ClientOptions(
        workspace_folder=folder,
        output_channel=output_channel,
        diagnostic_collection_name=DIAGNOSTIC_COLLECTION_NAME,
        initialization_options=lambda: build_initialization_options(config),
        initialization_failed_handler=initialization_failed,
    )
