import asyncio
import inspect
from typing import Any, Final, Optional

from gqlcode.core.types import Disposable
from gqlcode.core.utils.logging import LoggingDescriptor
from gqlcode.core.window import OutputChannel
from gqlcode.core.workspace import WorkspaceFolder

from .language_client import LanguageClient
from .status_indicator import StatusIndicator


class ManagedClient:
    """A started language client together with its output channel and status indicator.

    `dispose` releases all three. Every resource is released even if another
    one fails to, errors are only logged.
    """

    _logger: Final = LoggingDescriptor()

    def __init__(
        self,
        folder: WorkspaceFolder,
        client: LanguageClient,
        output_channel: OutputChannel,
        status_indicator: StatusIndicator,
        client_disposable: Disposable,
    ) -> None:
        self.folder = folder
        self.client = client
        self.output_channel = output_channel
        self.status_indicator = status_indicator
        self._client_disposable = client_disposable
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def __repr__(self) -> str:
        return f"{type(self).__qualname__}(folder={self.folder!r}, state={self.status_indicator.state!s})"

    async def wait_until_settled(self) -> bool:
        """Waits until the client is ready or failed to get ready. Returns True if ready."""
        try:
            await self.client.on_ready()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self._logger.debug(lambda: f"client for {self.folder.name!r} settled with error: {e}")
            return False

        return True

    async def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True

        self._logger.debug(lambda: f"dispose client for {self.folder.name!r}")

        stopping: Optional[Any] = None
        try:
            stopping = self._client_disposable.dispose()
        except Exception as e:
            self._logger.exception(e)

        try:
            self.output_channel.hide()
        except Exception as e:
            self._logger.exception(e)

        try:
            self.output_channel.dispose()
        except Exception as e:
            self._logger.exception(e)

        try:
            self.status_indicator.dispose()
        except Exception as e:
            self._logger.exception(e)

        if inspect.isawaitable(stopping):
            try:
                await stopping
            except asyncio.CancelledError:
                raise
            except Exception as e:
                self._logger.exception(e)
