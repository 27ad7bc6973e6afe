from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, unique
from typing import Any, Final, Optional, Protocol, Union

from .event import event
from .uri import Uri
from .utils.logging import LoggingDescriptor


@unique
class StatusBarAlignment(Enum):
    LEFT = 1
    RIGHT = 2


class StatusBarItem(Protocol):
    text: str
    tooltip: Optional[str]
    color: Optional[str]
    command: Optional[str]

    def show(self) -> None: ...

    def hide(self) -> None: ...

    def dispose(self) -> Any: ...


class OutputChannel(Protocol):
    @property
    def name(self) -> str: ...

    def append_line(self, value: str) -> None: ...

    def show(self, preserve_focus: bool = False) -> None: ...

    def hide(self) -> None: ...

    def dispose(self) -> Any: ...


class TextDocument:
    def __init__(self, document_uri: Union[Uri, str], language_id: Optional[str] = None) -> None:
        self.uri = document_uri if isinstance(document_uri, Uri) else Uri(document_uri)
        self.language_id = language_id

    def __repr__(self) -> str:
        return f"{type(self).__qualname__}(uri={str(self.uri)!r}, language_id={self.language_id!r})"


@dataclass
class TextEditor:
    document: TextDocument


class Window(ABC):
    """The editor window: the focused editor and factories for UI primitives."""

    _logger: Final = LoggingDescriptor()

    def __init__(self, active_text_editor: Optional[TextEditor] = None) -> None:
        self._active_text_editor = active_text_editor

    @property
    def active_text_editor(self) -> Optional[TextEditor]:
        return self._active_text_editor

    @event
    def did_change_active_text_editor(sender, editor: Optional[TextEditor]) -> None: ...

    def set_active_text_editor(self, editor: Optional[TextEditor]) -> None:
        self._active_text_editor = editor

        for e in self.did_change_active_text_editor(self, editor):
            if isinstance(e, BaseException):
                self._logger.exception(e)

    @abstractmethod
    def create_status_bar_item(
        self, alignment: StatusBarAlignment = StatusBarAlignment.LEFT, priority: int = 0
    ) -> StatusBarItem: ...

    @abstractmethod
    def create_output_channel(self, name: str) -> OutputChannel: ...
