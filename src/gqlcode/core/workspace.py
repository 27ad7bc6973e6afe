from dataclasses import dataclass, field
from typing import (
    Any,
    Callable,
    ClassVar,
    Dict,
    Final,
    Iterable,
    List,
    Optional,
    Sequence,
    Type,
    TypeVar,
    Union,
)

from .event import event
from .uri import Uri
from .utils.dataclasses import CamelSnakeMixin, from_dict
from .utils.logging import LoggingDescriptor
from .utils.path import path_is_relative_to


class WorkspaceFolder:
    def __init__(self, name: str, uri: Union[Uri, str]) -> None:
        super().__init__()
        self.name = name
        self.uri = uri if isinstance(uri, Uri) else Uri(uri)

    @property
    def key(self) -> str:
        return str(self.uri)

    def __eq__(self, o: object) -> bool:
        if isinstance(o, WorkspaceFolder):
            return self.key == o.key
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.key)

    def __repr__(self) -> str:
        return f"{type(self).__qualname__}(name={self.name!r}, uri={str(self.uri)!r})"


@dataclass
class WorkspaceFoldersChangeEvent:
    added: List[WorkspaceFolder] = field(default_factory=list)
    removed: List[WorkspaceFolder] = field(default_factory=list)


_F = TypeVar("_F", bound=Callable[..., Any])


def config_section(name: str) -> Callable[[_F], _F]:
    def decorator(func: _F) -> _F:
        setattr(func, "__config_section__", name)
        return func

    return decorator


class ConfigBase(CamelSnakeMixin):
    __config_section__: ClassVar[str]


TConfig = TypeVar("TConfig", bound=ConfigBase)


def _get_section(settings: Dict[str, Any], section: str) -> Dict[str, Any]:
    result: Any = settings
    for sub_key in section.split("."):
        if isinstance(result, dict) and sub_key in result:
            result = result[sub_key]
        else:
            return {}
    return result if isinstance(result, dict) else {}


class Workspace:
    """The folders open in the editor and their settings.

    Settings are nested dictionaries keyed by section name. Folder scoped
    settings override the global ones key by key.
    """

    _logger: Final = LoggingDescriptor()

    def __init__(
        self,
        workspace_folders: Optional[Sequence[WorkspaceFolder]] = None,
        settings: Optional[Dict[str, Any]] = None,
        folder_settings: Optional[Dict[str, Dict[str, Any]]] = None,
    ) -> None:
        super().__init__()

        self._workspace_folders: List[WorkspaceFolder] = list(workspace_folders) if workspace_folders else []
        self._settings: Dict[str, Any] = settings if settings is not None else {}
        self._folder_settings: Dict[str, Dict[str, Any]] = folder_settings if folder_settings is not None else {}

    @property
    def workspace_folders(self) -> List[WorkspaceFolder]:
        return list(self._workspace_folders)

    @property
    def settings(self) -> Dict[str, Any]:
        return self._settings

    @settings.setter
    def settings(self, value: Dict[str, Any]) -> None:
        self._settings = value

    def set_folder_settings(self, folder: Union[WorkspaceFolder, Uri, str], value: Dict[str, Any]) -> None:
        key = folder.key if isinstance(folder, WorkspaceFolder) else str(folder)
        self._folder_settings[key] = value

    @event
    def did_change_workspace_folders(sender, event: WorkspaceFoldersChangeEvent) -> None: ...

    def update_workspace_folders(
        self,
        added: Iterable[WorkspaceFolder] = (),
        removed: Iterable[WorkspaceFolder] = (),
    ) -> WorkspaceFoldersChangeEvent:
        change = WorkspaceFoldersChangeEvent(added=list(added), removed=list(removed))

        to_remove = {f.key for f in change.removed} | {f.key for f in change.added}
        self._workspace_folders = [f for f in self._workspace_folders if f.key not in to_remove]
        self._workspace_folders.extend(change.added)

        for f in change.removed:
            self._folder_settings.pop(f.key, None)

        self._logger.debug(
            lambda: f"workspace folders changed: added={[f.name for f in change.added]}, "
            f"removed={[f.name for f in change.removed]}"
        )

        for e in self.did_change_workspace_folders(self, change):
            if isinstance(e, BaseException):
                self._logger.exception(e)

        return change

    def get_configuration(
        self,
        section: Type[TConfig],
        scope_uri: Union[str, Uri, None] = None,
    ) -> TConfig:
        result = dict(_get_section(self.settings, section.__config_section__))

        if scope_uri is not None:
            folder = self.get_workspace_folder(scope_uri)
            if folder is not None and folder.key in self._folder_settings:
                result.update(_get_section(self._folder_settings[folder.key], section.__config_section__))

        return from_dict(result, section)

    def get_workspace_folder(self, uri: Union[Uri, str]) -> Optional[WorkspaceFolder]:
        if isinstance(uri, str):
            uri = Uri(uri)

        if uri.scheme != "file":
            return next((f for f in self._workspace_folders if f.uri == uri), None)

        result = sorted(
            [
                f
                for f in self._workspace_folders
                if f.uri.scheme == "file" and path_is_relative_to(uri.to_path(), f.uri.to_path())
            ],
            key=lambda v1: len(v1.uri),
            reverse=True,
        )

        if len(result) > 0:
            return result[0]

        return None
