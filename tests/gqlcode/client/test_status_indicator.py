import asyncio
from pathlib import Path
from typing import Any, Callable

import pytest

from gqlcode.client.language_client import ConnectionState
from gqlcode.client.status_indicator import (
    ClientState,
    StatusIndicator,
    is_indicator_visible,
    render_status,
    status_text,
)
from gqlcode.core.commands import Commands
from gqlcode.core.uri import Uri
from gqlcode.core.window import StatusBarAlignment
from gqlcode.core.workspace import Workspace, WorkspaceFolder


async def run_pending() -> None:
    for _ in range(20):
        await asyncio.sleep(0)


@pytest.mark.parametrize(
    ("state", "text", "color"),
    [
        (ClientState.INITIALIZING, "$(sync) GQL", "white"),
        (ClientState.READY, "$(plug) GQL", "green"),
        (ClientState.ERROR, "$(stop) GQL", "red"),
    ],
)
def test_render_status(state: ClientState, text: str, color: str) -> None:
    assert status_text(state) == text
    assert render_status(state).color == color
    assert render_status(state).tooltip


class TestIsIndicatorVisible:
    @pytest.fixture
    def folder(self, tmp_path: Path) -> WorkspaceFolder:
        return WorkspaceFolder("a", Uri.from_path(tmp_path / "a"))

    def test_visible_for_any_document_of_the_folder_before_extensions_are_known(
        self, tmp_path: Path, folder: WorkspaceFolder
    ) -> None:
        assert is_indicator_visible(Uri.from_path(tmp_path / "a" / "readme.md"), folder, folder, None)

    @pytest.mark.parametrize(
        ("file_name", "expected"),
        [
            ("schema.gql", True),
            ("query.graphql", True),
            ("index.js", False),
            ("schema.gql.bak", False),
        ],
    )
    def test_only_matching_documents_after_extensions_are_known(
        self, tmp_path: Path, folder: WorkspaceFolder, file_name: str, expected: bool
    ) -> None:
        document = Uri.from_path(tmp_path / "a" / "src" / file_name)

        assert is_indicator_visible(document, folder, folder, [".gql", ".graphql"]) is expected

    def test_hidden_for_documents_of_other_folders(self, tmp_path: Path, folder: WorkspaceFolder) -> None:
        other = WorkspaceFolder("b", Uri.from_path(tmp_path / "b"))

        assert not is_indicator_visible(Uri.from_path(tmp_path / "b" / "schema.gql"), other, folder, [".gql"])
        assert not is_indicator_visible(Uri.from_path(tmp_path / "b" / "schema.gql"), other, folder, None)

    def test_hidden_without_a_document_or_folder(self, tmp_path: Path, folder: WorkspaceFolder) -> None:
        assert not is_indicator_visible(None, None, folder, None)
        assert not is_indicator_visible(Uri.from_path(tmp_path / "x.gql"), None, folder, [".gql"])

    def test_hidden_for_non_file_documents_and_empty_extensions(
        self, tmp_path: Path, folder: WorkspaceFolder
    ) -> None:
        assert not is_indicator_visible(Uri("untitled:Untitled-1.gql"), folder, folder, [".gql"])
        assert not is_indicator_visible(Uri.from_path(tmp_path / "a" / "schema.gql"), folder, folder, [])


@pytest.fixture
def folder(folder_factory: Callable[..., WorkspaceFolder]) -> WorkspaceFolder:
    return folder_factory("a")


@pytest.fixture
def folder_workspace(folder: WorkspaceFolder) -> Workspace:
    return Workspace([folder])


@pytest.fixture
def client(make_client: Callable[..., Any], folder: WorkspaceFolder) -> Any:
    return make_client(folder)


@pytest.fixture
def create_indicator(
    client: Any, window: Any, folder_workspace: Workspace, commands: Commands
) -> Callable[[], StatusIndicator]:
    def factory() -> StatusIndicator:
        return StatusIndicator(client, window, folder_workspace, commands)

    return factory


@pytest.mark.asyncio
async def test_starts_initializing(create_indicator: Callable[[], StatusIndicator], window: Any) -> None:
    indicator = create_indicator()

    assert indicator.state == ClientState.INITIALIZING
    assert indicator.item is window.items[0]
    assert window.items[0].alignment == StatusBarAlignment.RIGHT
    assert window.items[0].priority == 0
    assert window.items[0].text == "$(sync) GQL"
    assert window.items[0].color == "white"


@pytest.mark.asyncio
async def test_ready_when_client_gets_ready(create_indicator: Callable[[], StatusIndicator], client: Any) -> None:
    indicator = create_indicator()

    client.resolve_ready([".gql"])
    await run_pending()

    assert indicator.state == ClientState.READY
    assert indicator.item.text == "$(plug) GQL"
    assert indicator.item.color == "green"


@pytest.mark.asyncio
async def test_error_when_client_fails_to_get_ready(
    create_indicator: Callable[[], StatusIndicator], client: Any
) -> None:
    indicator = create_indicator()

    client.reject_ready(RuntimeError("can't start server"))
    await run_pending()

    assert indicator.state == ClientState.ERROR
    assert indicator.item.text == "$(stop) GQL"
    assert indicator.item.color == "red"
    assert client.output_channel.lines == ["Server initialization failed: can't start server"]


@pytest.mark.asyncio
async def test_follows_connection_state_changes(create_indicator: Callable[[], StatusIndicator], client: Any) -> None:
    indicator = create_indicator()
    client.resolve_ready(None)
    await run_pending()

    client.set_state(ConnectionState.RUNNING, ConnectionState.STOPPED)
    assert indicator.state == ClientState.ERROR

    client.set_state(ConnectionState.STOPPED, ConnectionState.STARTING)
    assert indicator.state == ClientState.ERROR

    client.set_state(ConnectionState.STARTING, ConnectionState.RUNNING)
    assert indicator.state == ClientState.READY

    client.set_state(ConnectionState.RUNNING, ConnectionState.STOPPED)
    assert indicator.state == ClientState.ERROR
    assert indicator.item.color == "red"


@pytest.mark.asyncio
async def test_click_shows_the_output_channel(
    create_indicator: Callable[[], StatusIndicator], client: Any, commands: Commands
) -> None:
    indicator = create_indicator()

    assert indicator.command_name.startswith("showOutputChannel-Graphql-a-")
    assert indicator.item.command == indicator.command_name

    commands.execute_command(indicator.item.command)

    assert client.output_channel.shown


@pytest.mark.asyncio
async def test_visibility_follows_the_active_editor(
    create_indicator: Callable[[], StatusIndicator],
    client: Any,
    window: Any,
    folder: WorkspaceFolder,
    tmp_path: Path,
) -> None:
    window.focus(tmp_path / "a" / "readme.md")
    indicator = create_indicator()

    assert indicator.item.visible

    client.resolve_ready([".gql"])
    await run_pending()

    window.focus(tmp_path / "a" / "readme.md")
    assert not indicator.item.visible

    window.focus(tmp_path / "a" / "schema.gql")
    assert indicator.item.visible

    window.focus(tmp_path / "elsewhere" / "schema.gql")
    assert not indicator.item.visible

    window.focus(None)
    assert not indicator.item.visible


@pytest.mark.asyncio
async def test_dispose_releases_everything(
    create_indicator: Callable[[], StatusIndicator], client: Any, commands: Commands, window: Any
) -> None:
    indicator = create_indicator()
    command_name = indicator.command_name

    indicator.dispose()
    indicator.dispose()

    assert indicator.disposed
    assert indicator.item.disposed
    assert command_name not in commands
    assert len(client.did_change_state) == 0
    assert len(window.did_change_active_text_editor) == 0

    client.resolve_ready(None)
    await run_pending()

    assert indicator.state == ClientState.INITIALIZING


@pytest.mark.asyncio
async def test_folders_with_the_same_name_have_their_own_click_command(
    make_client: Callable[..., Any],
    folder_factory: Callable[..., WorkspaceFolder],
    window: Any,
    commands: Commands,
) -> None:
    frontend = folder_factory("frontend/app")
    backend = folder_factory("backend/app")
    workspace = Workspace([frontend, backend])
    client_frontend = make_client(frontend)
    client_backend = make_client(backend)
    indicator_frontend = StatusIndicator(client_frontend, window, workspace, commands)
    indicator_backend = StatusIndicator(client_backend, window, workspace, commands)

    assert client_frontend.output_channel.name == client_backend.output_channel.name == "Graphql-app"
    assert indicator_frontend.command_name != indicator_backend.command_name

    commands.execute_command(indicator_frontend.item.command)

    assert client_frontend.output_channel.shown
    assert not client_backend.output_channel.shown

    indicator_backend.dispose()

    assert indicator_frontend.command_name in commands
    commands.execute_command(indicator_frontend.item.command)

    indicator_frontend.dispose()

    assert commands.get_commands() == []
