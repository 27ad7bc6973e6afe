from dataclasses import dataclass, field
from enum import Enum, unique
from typing import Any, Callable, Dict, List, Optional, Protocol

from gqlcode.core.event import Event
from gqlcode.core.types import Disposable
from gqlcode.core.window import OutputChannel
from gqlcode.core.workspace import WorkspaceFolder


@unique
class ConnectionState(Enum):
    STOPPED = 1
    RUNNING = 2
    STARTING = 3


@unique
class TransportKind(str, Enum):
    STDIO = "stdio"
    IPC = "ipc"
    PIPE = "pipe"
    SOCKET = "socket"

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return repr(self.value)


@dataclass
class NodeModule:
    module: str
    transport: TransportKind = TransportKind.IPC
    args: List[str] = field(default_factory=list)
    exec_argv: List[str] = field(default_factory=list)


@dataclass
class ServerOptions:
    run: NodeModule
    debug: NodeModule


@dataclass
class InitializeResult:
    file_extensions: Optional[List[str]] = None


@dataclass
class ClientOptions:
    workspace_folder: WorkspaceFolder
    output_channel: OutputChannel
    diagnostic_collection_name: Optional[str] = None
    initialization_options: Callable[[], Dict[str, Any]] = dict
    initialization_failed_handler: Optional[Callable[[BaseException], bool]] = None


class LanguageClient(Protocol):
    """A language client connected to one server process.

    `start` launches the server and returns a disposable that stops it,
    `on_ready` completes when the server is initialized or raises if that
    fails, `did_change_state` is notified with `(sender, old_state, new_state)`.
    """

    @property
    def name(self) -> str: ...

    @property
    def client_options(self) -> ClientOptions: ...

    @property
    def output_channel(self) -> OutputChannel: ...

    @property
    def initialize_result(self) -> Optional[InitializeResult]: ...

    @property
    def did_change_state(self) -> Event[[Any, ConnectionState, ConnectionState], None]: ...

    def start(self) -> Disposable: ...

    async def on_ready(self) -> None: ...


class LanguageClientFactory(Protocol):
    def __call__(self, name: str, server_options: ServerOptions, client_options: ClientOptions) -> LanguageClient: ...
