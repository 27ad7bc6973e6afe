import asyncio
import itertools
from enum import Enum, unique
from typing import Any, Final, List, NamedTuple, Optional, Sequence

from gqlcode.core.commands import Commands
from gqlcode.core.types import Disposable, dispose_all
from gqlcode.core.uri import Uri
from gqlcode.core.utils.glob_path import extensions_glob, globmatches
from gqlcode.core.utils.logging import LoggingDescriptor
from gqlcode.core.window import StatusBarAlignment, StatusBarItem, TextEditor, Window
from gqlcode.core.workspace import Workspace, WorkspaceFolder

from .language_client import ConnectionState, LanguageClient

STATUS_BAR_ITEM_NAME = "GQL"

_command_ids = itertools.count(1)


@unique
class ClientState(Enum):
    INITIALIZING = "initializing"
    READY = "ready"
    ERROR = "error"

    def __str__(self) -> str:
        return self.value


class StatusUI(NamedTuple):
    icon: str
    tooltip: str
    color: str


STATUS_BAR_UI: Final = {
    ClientState.INITIALIZING: StatusUI("sync", "Graphql language server is initializing.", "white"),
    ClientState.READY: StatusUI("plug", "Graphql language server is running.", "green"),
    ClientState.ERROR: StatusUI("stop", "Graphql language server is not running.", "red"),
}


def render_status(state: ClientState) -> StatusUI:
    return STATUS_BAR_UI[state]


def status_text(state: ClientState) -> str:
    return f"$({STATUS_BAR_UI[state].icon}) {STATUS_BAR_ITEM_NAME}"


def is_indicator_visible(
    document_uri: Optional[Uri],
    document_folder: Optional[WorkspaceFolder],
    folder: WorkspaceFolder,
    file_extensions: Optional[Sequence[str]],
) -> bool:
    """Decides if the indicator of `folder` is shown for the focused document.

    Hidden if nothing is focused or the document belongs to another folder.
    As long as the server has not advertised its file extensions, every
    document of the folder shows the indicator. Afterwards only `file`
    documents that match one of the extensions do.
    """
    if document_uri is None or document_folder is None or document_folder.key != folder.key:
        return False

    if file_extensions is None:
        return True

    if document_uri.scheme != "file" or not file_extensions:
        return False

    return globmatches(extensions_glob(file_extensions), document_uri.to_path())


class StatusIndicator:
    """Shows the state of one language client in the status bar.

    Clicking the item shows the output channel of the client.
    """

    _logger: Final = LoggingDescriptor()

    def __init__(
        self,
        client: LanguageClient,
        window: Window,
        workspace: Workspace,
        commands: Commands,
    ) -> None:
        self._client = client
        self._window = window
        self._workspace = workspace
        self._state = ClientState.INITIALIZING
        self._disposed = False
        self._command_name = f"showOutputChannel-{client.output_channel.name}-{next(_command_ids)}"

        self._item: StatusBarItem = window.create_status_bar_item(StatusBarAlignment.RIGHT, 0)
        self._disposables: List[Disposable] = [self._item]
        self._disposables.append(self._add_on_click_to_show_output_channel(commands))

        self._set_state(ClientState.INITIALIZING)

        self._ready_task: Optional["asyncio.Task[None]"] = None
        self._register_status_change_listeners()

        self.update_visibility(window.active_text_editor)
        self._disposables.append(window.did_change_active_text_editor.add(self._on_did_change_active_text_editor))

    @property
    def state(self) -> ClientState:
        return self._state

    @property
    def folder(self) -> WorkspaceFolder:
        return self._client.client_options.workspace_folder

    @property
    def item(self) -> StatusBarItem:
        return self._item

    @property
    def command_name(self) -> str:
        return self._command_name

    @property
    def disposed(self) -> bool:
        return self._disposed

    def _add_on_click_to_show_output_channel(self, commands: Commands) -> Disposable:
        disposable = commands.register_command(self.command_name, self._show_output_channel)
        self._item.command = self.command_name
        return disposable

    def _show_output_channel(self) -> None:
        self._client.output_channel.show()

    def _register_status_change_listeners(self) -> None:
        self._disposables.append(self._client.did_change_state.add(self._on_did_change_state))
        self._ready_task = asyncio.get_running_loop().create_task(
            self._wait_for_ready(), name=f"{type(self).__qualname__}.ready[{self.folder.name}]"
        )

    def _on_did_change_state(self, sender: Any, old_state: ConnectionState, new_state: ConnectionState) -> None:
        if new_state == ConnectionState.RUNNING:
            self._set_state(ClientState.READY)
        elif new_state == ConnectionState.STOPPED:
            self._set_state(ClientState.ERROR)

    async def _wait_for_ready(self) -> None:
        try:
            await self._client.on_ready()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self._logger.debug(lambda: f"client for {self.folder.name!r} failed to get ready: {e}")
            self._set_state(ClientState.ERROR)
        else:
            self._set_state(ClientState.READY)

    def _on_did_change_active_text_editor(self, sender: Any, editor: Optional[TextEditor]) -> None:
        self.update_visibility(editor)

    def update_visibility(self, editor: Optional[TextEditor]) -> None:
        if self._disposed:
            return

        document_uri = editor.document.uri if editor is not None else None
        initialize_result = self._client.initialize_result

        visible = is_indicator_visible(
            document_uri,
            self._workspace.get_workspace_folder(document_uri) if document_uri is not None else None,
            self.folder,
            initialize_result.file_extensions if initialize_result is not None else None,
        )

        if visible:
            self._item.show()
        else:
            self._item.hide()

    def _set_state(self, state: ClientState) -> None:
        if self._disposed:
            return

        self._logger.debug(lambda: f"{self.folder.name}: {self._state} -> {state}")
        self._state = state

        ui = render_status(state)
        self._item.text = status_text(state)
        self._item.tooltip = ui.tooltip
        self._item.color = ui.color

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True

        if self._ready_task is not None and not self._ready_task.done():
            self._ready_task.cancel()

        disposables, self._disposables = self._disposables, []
        for r in dispose_all(disposables):
            if isinstance(r, BaseException):
                self._logger.exception(r)
