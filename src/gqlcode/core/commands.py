from typing import Any, Callable, Dict, Final, List

from .types import CallbackDisposable
from .utils.logging import LoggingDescriptor


class CommandAlreadyRegisteredError(Exception):
    pass


class CommandNotFoundError(Exception):
    pass


class Commands:
    _logger: Final = LoggingDescriptor()

    def __init__(self) -> None:
        self._commands: Dict[str, Callable[..., Any]] = {}

    def register_command(self, name: str, callback: Callable[..., Any]) -> CallbackDisposable:
        if name in self._commands:
            raise CommandAlreadyRegisteredError(f"Command '{name}' is already registered.")

        self._commands[name] = callback
        self._logger.debug(lambda: f"register command {name}")

        def unregister() -> None:
            if self._commands.get(name) is callback:
                del self._commands[name]
                self._logger.debug(lambda: f"unregister command {name}")

        return CallbackDisposable(unregister)

    def get_commands(self) -> List[str]:
        return list(self._commands.keys())

    def __contains__(self, name: str) -> bool:
        return name in self._commands

    def execute_command(self, name: str, *args: Any) -> Any:
        callback = self._commands.get(name, None)
        if callback is None:
            raise CommandNotFoundError(f"Command '{name}' not found.")

        return callback(*args)
