import asyncio
from pathlib import Path
from typing import Any, Callable, List, Optional

import pytest

from gqlcode.client.language_client import (
    ClientOptions,
    ConnectionState,
    InitializeResult,
    ServerOptions,
)
from gqlcode.client.launch import GraphQLConfig, build_client_options, build_server_options, output_channel_name
from gqlcode.core.commands import Commands
from gqlcode.core.event import event
from gqlcode.core.types import CallbackDisposable
from gqlcode.core.uri import Uri
from gqlcode.core.window import StatusBarAlignment, TextDocument, TextEditor, Window
from gqlcode.core.workspace import Workspace, WorkspaceFolder


class FakeStatusBarItem:
    def __init__(self, alignment: StatusBarAlignment, priority: int) -> None:
        self.alignment = alignment
        self.priority = priority
        self.text = ""
        self.tooltip: Optional[str] = None
        self.color: Optional[str] = None
        self.command: Optional[str] = None
        self.visible = False
        self.disposed = False

    def show(self) -> None:
        self.visible = True

    def hide(self) -> None:
        self.visible = False

    def dispose(self) -> None:
        self.disposed = True
        self.visible = False


class FakeOutputChannel:
    def __init__(self, name: str) -> None:
        self._name = name
        self.lines: List[str] = []
        self.shown = False
        self.disposed = False
        self.fail_on_dispose = False

    @property
    def name(self) -> str:
        return self._name

    def append_line(self, value: str) -> None:
        self.lines.append(value)

    def show(self, preserve_focus: bool = False) -> None:
        self.shown = True

    def hide(self) -> None:
        self.shown = False

    def dispose(self) -> None:
        if self.fail_on_dispose:
            raise RuntimeError(f"can't dispose {self._name}")
        self.disposed = True


class FakeWindow(Window):
    def __init__(self) -> None:
        super().__init__()
        self.items: List[FakeStatusBarItem] = []
        self.channels: List[FakeOutputChannel] = []

    def create_status_bar_item(
        self, alignment: StatusBarAlignment = StatusBarAlignment.LEFT, priority: int = 0
    ) -> FakeStatusBarItem:
        item = FakeStatusBarItem(alignment, priority)
        self.items.append(item)
        return item

    def create_output_channel(self, name: str) -> FakeOutputChannel:
        channel = FakeOutputChannel(name)
        self.channels.append(channel)
        return channel

    def focus(self, path: Optional[Path]) -> None:
        self.set_active_text_editor(TextEditor(TextDocument(Uri.from_path(path))) if path is not None else None)


class FakeLanguageClient:
    """Stands in for a language client connected to a server process.

    The ready signal is a future the test resolves or rejects.
    """

    def __init__(self, name: str, server_options: ServerOptions, client_options: ClientOptions) -> None:
        self._name = name
        self.server_options = server_options
        self._client_options = client_options
        self._initialize_result: Optional[InitializeResult] = None
        self._ready: Optional["asyncio.Future[None]"] = None
        self.started = False
        self.stopped = False
        self.stop_error: Optional[BaseException] = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def client_options(self) -> ClientOptions:
        return self._client_options

    @property
    def output_channel(self) -> Any:
        return self._client_options.output_channel

    @property
    def initialize_result(self) -> Optional[InitializeResult]:
        return self._initialize_result

    @event
    def did_change_state(sender, old_state: ConnectionState, new_state: ConnectionState) -> None: ...

    @property
    def ready(self) -> "asyncio.Future[None]":
        if self._ready is None:
            self._ready = asyncio.get_running_loop().create_future()
        return self._ready

    def start(self) -> CallbackDisposable:
        self.started = True
        return CallbackDisposable(self.stop)

    async def stop(self) -> None:
        await asyncio.sleep(0)
        self.stopped = True
        if self.stop_error is not None:
            raise self.stop_error

    async def on_ready(self) -> None:
        await asyncio.shield(self.ready)

    def resolve_ready(self, file_extensions: Optional[List[str]] = None) -> None:
        self._initialize_result = InitializeResult(file_extensions=file_extensions)
        self.ready.set_result(None)
        self.set_state(ConnectionState.STARTING, ConnectionState.RUNNING)

    def reject_ready(self, error: BaseException) -> None:
        handler = self._client_options.initialization_failed_handler
        if handler is not None:
            handler(error)
        self.ready.set_exception(error)

    def set_state(self, old_state: ConnectionState, new_state: ConnectionState) -> None:
        self.did_change_state(self, old_state, new_state)


class FakeClientFactory:
    def __init__(self) -> None:
        self.clients: List[FakeLanguageClient] = []
        self.fail_with: Optional[BaseException] = None

    def __call__(self, name: str, server_options: ServerOptions, client_options: ClientOptions) -> FakeLanguageClient:
        if self.fail_with is not None:
            raise self.fail_with
        client = FakeLanguageClient(name, server_options, client_options)
        self.clients.append(client)
        return client

    def for_folder(self, folder: WorkspaceFolder) -> FakeLanguageClient:
        return next(c for c in self.clients if c.client_options.workspace_folder == folder)


def create_folder(root: Path, name: str, with_config: bool = True) -> WorkspaceFolder:
    path = root / name
    path.mkdir(parents=True, exist_ok=True)
    if with_config:
        (path / ".gqlconfig").write_text("{ schema: { files: 'schema/*.gql' } }", encoding="utf-8")
    return WorkspaceFolder(path.name, Uri.from_path(path))


@pytest.fixture
def window() -> FakeWindow:
    return FakeWindow()


@pytest.fixture
def commands() -> Commands:
    return Commands()


@pytest.fixture
def workspace() -> Workspace:
    return Workspace()


@pytest.fixture
def client_factory() -> FakeClientFactory:
    return FakeClientFactory()


@pytest.fixture
def folder_factory(tmp_path: Path) -> Callable[..., WorkspaceFolder]:
    def factory(name: str, with_config: bool = True) -> WorkspaceFolder:
        return create_folder(tmp_path, name, with_config)

    return factory


@pytest.fixture
def make_client(window: FakeWindow) -> Callable[..., FakeLanguageClient]:
    def factory(folder: WorkspaceFolder, config: Optional[GraphQLConfig] = None) -> FakeLanguageClient:
        config = config if config is not None else GraphQLConfig()
        channel = window.create_output_channel(output_channel_name(folder))
        return FakeLanguageClient(
            "Graphql For VSCode", build_server_options(config), build_client_options(folder, config, channel)
        )

    return factory
