import asyncio
import inspect
from enum import Enum, unique
from typing import Any, Dict, Final, Iterable, Iterator, List, Optional, Set, Union

from gqlcode.core.commands import Commands
from gqlcode.core.utils.logging import LoggingDescriptor
from gqlcode.core.window import Window
from gqlcode.core.workspace import Workspace, WorkspaceFolder, WorkspaceFoldersChangeEvent

from .language_client import LanguageClientFactory
from .launch import (
    CLIENT_NAME,
    DEFAULT_SERVER_MODULE,
    GraphQLConfig,
    build_client_options,
    build_server_options,
    find_config_file,
    output_channel_name,
)
from .managed_client import ManagedClient
from .status_indicator import StatusIndicator


@unique
class EntryState(Enum):
    PENDING = "pending"
    ACTIVE = "active"
    DISPOSING = "disposing"

    def __str__(self) -> str:
        return self.value


class RegistryEntry:
    def __init__(self, folder: WorkspaceFolder, client: Optional[ManagedClient]) -> None:
        self.folder = folder
        self.client = client
        self.state = EntryState.PENDING if client is not None else EntryState.ACTIVE
        self.settle_task: Optional["asyncio.Task[bool]"] = None

    def __repr__(self) -> str:
        return f"{type(self).__qualname__}(folder={self.folder!r}, state={self.state!s}, client={self.client!r})"


class WorkspaceClientRegistry:
    """Keeps exactly one language client per workspace folder that has a `.gqlconfig`.

    Folders without a config file are remembered with no client, so they are
    not probed again on every change. All mutation of the mapping happens
    synchronously in `reconcile` and `dispose_all`; client startup and
    disposal run in tasks tracked by the registry.
    """

    _logger: Final = LoggingDescriptor()

    def __init__(
        self,
        workspace: Workspace,
        window: Window,
        commands: Commands,
        client_factory: LanguageClientFactory,
        server_module: str = DEFAULT_SERVER_MODULE,
        settle_timeout: Optional[float] = 30.0,
    ) -> None:
        self.workspace = workspace
        self.window = window
        self.commands = commands
        self.client_factory = client_factory
        self.server_module = server_module
        self.settle_timeout = settle_timeout

        self._entries: Dict[str, RegistryEntry] = {}
        self._disposing: Set["asyncio.Task[None]"] = set()

    def __contains__(self, key: Union[WorkspaceFolder, str]) -> bool:
        return self._key(key) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries.keys()))

    @staticmethod
    def _key(key: Union[WorkspaceFolder, str]) -> str:
        return key.key if isinstance(key, WorkspaceFolder) else key

    def keys(self) -> List[str]:
        return list(self._entries.keys())

    def entries(self) -> List[RegistryEntry]:
        return list(self._entries.values())

    def get_entry(self, key: Union[WorkspaceFolder, str]) -> Optional[RegistryEntry]:
        return self._entries.get(self._key(key), None)

    def get(self, key: Union[WorkspaceFolder, str]) -> Optional[ManagedClient]:
        entry = self.get_entry(key)
        return entry.client if entry is not None else None

    def clients(self) -> List[ManagedClient]:
        return [e.client for e in self._entries.values() if e.client is not None]

    @property
    def pending_disposals(self) -> int:
        return len(self._disposing)

    def on_did_change_workspace_folders(self, sender: Any, event: WorkspaceFoldersChangeEvent) -> None:
        self.reconcile(self.workspace.workspace_folders)

    @_logger.call
    def reconcile(self, folders: Iterable[WorkspaceFolder]) -> None:
        current: Dict[str, WorkspaceFolder] = {}
        for folder in folders:
            current.setdefault(folder.key, folder)

        for key, folder in current.items():
            if key not in self._entries:
                entry = RegistryEntry(folder, self._create_client_silent(folder))
                self._entries[key] = entry
                self._logger.debug(lambda: f"adding client {key}: {entry!r}")

                if entry.client is not None:
                    entry.settle_task = asyncio.get_running_loop().create_task(
                        self._wait_until_settled(entry), name=f"settle[{folder.name}]"
                    )

        for key in [k for k in self._entries if k not in current]:
            entry = self._entries[key]
            self._logger.debug(lambda: f"deleting client {key}: {entry!r}")

            self._schedule_dispose(entry)
            del self._entries[key]

    def _create_client_silent(self, folder: WorkspaceFolder) -> Optional[ManagedClient]:
        try:
            return self.create_client(folder)
        except Exception as e:
            self._logger.exception(e)
            self._logger.error(lambda: f"can't create a language client for {folder.name!r}")
            return None

    def create_client(self, folder: WorkspaceFolder) -> Optional[ManagedClient]:
        if folder.uri.scheme != "file" or find_config_file(folder.uri.to_path()) is None:
            self._logger.debug(lambda: f"no config file found in {folder.name!r}, no client created")
            return None

        config = self.workspace.get_configuration(GraphQLConfig, folder.uri)
        server_options = build_server_options(config, self.server_module)

        output_channel = self.window.create_output_channel(output_channel_name(folder))
        client_options = build_client_options(folder, config, output_channel)

        try:
            client = self.client_factory(CLIENT_NAME, server_options, client_options)
            client_disposable = client.start()
        except BaseException:
            output_channel.dispose()
            raise

        try:
            status_indicator = StatusIndicator(client, self.window, self.workspace, self.commands)
        except BaseException:
            stopping = client_disposable.dispose()
            if inspect.isawaitable(stopping):
                asyncio.ensure_future(stopping)
            output_channel.dispose()
            raise

        self._logger.info(lambda: f"started language client for {folder.name!r} with args {server_options.run.args}")

        return ManagedClient(folder, client, output_channel, status_indicator, client_disposable)

    async def _wait_until_settled(self, entry: RegistryEntry) -> bool:
        assert entry.client is not None

        ready = await entry.client.wait_until_settled()
        if entry.state == EntryState.PENDING:
            entry.state = EntryState.ACTIVE

        return ready

    def _schedule_dispose(self, entry: RegistryEntry) -> None:
        entry.state = EntryState.DISPOSING
        if entry.client is None:
            return

        task = asyncio.get_running_loop().create_task(self._dispose_entry(entry), name=f"dispose[{entry.folder.name}]")
        self._disposing.add(task)
        task.add_done_callback(self._disposing.discard)

    async def _dispose_entry(self, entry: RegistryEntry) -> None:
        assert entry.client is not None

        if entry.settle_task is not None and not entry.settle_task.done():
            done, _ = await asyncio.wait([entry.settle_task], timeout=self.settle_timeout)
            if not done:
                self._logger.warning(
                    lambda: f"client for {entry.folder.name!r} did not get ready "
                    f"in {self.settle_timeout}s, disposing anyway"
                )

        try:
            await entry.client.dispose()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self._logger.exception(e)
        finally:
            if entry.settle_task is not None and not entry.settle_task.done():
                entry.settle_task.cancel()

    async def dispose_all(self) -> None:
        entries = list(self._entries.values())
        self._entries.clear()

        for entry in entries:
            self._schedule_dispose(entry)

        tasks = list(self._disposing)
        if tasks:
            results = await asyncio.gather(*tasks, return_exceptions=True)
            for r in results:
                if isinstance(r, BaseException):
                    self._logger.exception(r)
