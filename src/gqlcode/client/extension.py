from typing import Final, List, Optional

from gqlcode.core.commands import Commands
from gqlcode.core.types import Disposable
from gqlcode.core.utils.logging import LoggingDescriptor
from gqlcode.core.window import Window
from gqlcode.core.workspace import Workspace

from .language_client import LanguageClientFactory
from .launch import DEFAULT_SERVER_MODULE
from .registry import WorkspaceClientRegistry


class GraphQLExtension:
    """Entry point called by the editor host.

    `activate` creates clients for the open workspace folders and follows
    folder changes, `deactivate` stops every client.
    """

    _logger: Final = LoggingDescriptor()

    def __init__(
        self,
        workspace: Workspace,
        window: Window,
        commands: Commands,
        client_factory: LanguageClientFactory,
        server_module: str = DEFAULT_SERVER_MODULE,
        registry: Optional[WorkspaceClientRegistry] = None,
    ) -> None:
        self.workspace = workspace
        self.registry = (
            registry
            if registry is not None
            else WorkspaceClientRegistry(workspace, window, commands, client_factory, server_module)
        )
        self._subscriptions: List[Disposable] = []
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def activate(self) -> None:
        if self._active:
            return
        self._active = True

        self._logger.info(lambda: f"activate with {len(self.workspace.workspace_folders)} workspace folder(s)")

        self.registry.reconcile(self.workspace.workspace_folders)
        self._subscriptions.append(
            self.workspace.did_change_workspace_folders.add(self.registry.on_did_change_workspace_folders)
        )

    async def deactivate(self) -> None:
        if not self._active:
            return
        self._active = False

        subscriptions, self._subscriptions = self._subscriptions, []
        for s in subscriptions:
            s.dispose()

        await self.registry.dispose_all()

        self._logger.info("deactivated")
