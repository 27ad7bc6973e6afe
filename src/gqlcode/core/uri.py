from __future__ import annotations

import os
import re
from dataclasses import astuple, dataclass, replace
from pathlib import Path
from typing import Iterator, Optional, Union
from urllib import parse

_IS_WIN = os.name == "nt"

_RE_DRIVE_LETTER_PATH = re.compile(r"^\/[a-zA-Z]:")

_DEFAULT_SCHEME = "file"


class InvalidUriError(Exception):
    pass


@dataclass(frozen=True)
class _Parts:
    scheme: str = _DEFAULT_SCHEME
    netloc: str = ""
    path: str = ""
    params: str = ""
    query: str = ""
    fragment: str = ""

    def __iter__(self) -> Iterator[str]:
        yield from astuple(self)


class Uri:
    """An immutable URI, as used by the editor for folders and documents.

    The string form is the identity of a workspace folder, so two `Uri`
    objects are equal exactly when their string forms are.
    """

    __slots__ = ("_parts", "_path")

    def __init__(self, uri_str: str) -> None:
        parts = _Parts(*parse.urlparse(uri_str))
        if not parts.scheme:
            parts = replace(parts, scheme=_DEFAULT_SCHEME)
        self._parts = parts
        self._path: Optional[Path] = None

    def __str__(self) -> str:
        return parse.urlunparse(tuple(self._parts))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r})"

    @property
    def scheme(self) -> str:
        return self._parts.scheme

    @property
    def netloc(self) -> str:
        return self._parts.netloc

    @property
    def path(self) -> str:
        return self._parts.path

    @property
    def query(self) -> str:
        return self._parts.query

    @property
    def fragment(self) -> str:
        return self._parts.fragment

    def to_path(self) -> Path:
        if self._path is None:
            self._path = Path(self._to_path_str())

        return self._path

    def _to_path_str(self) -> str:
        """Returns the filesystem path of this URI.

        Handles UNC paths and lower-cases windows drive letters. Does *not*
        validate the path itself.
        """
        if self.scheme != "file":
            raise InvalidUriError(f"Invalid URI scheme '{self}'.")

        netloc = parse.unquote(self.netloc)
        path = parse.unquote(self.path)

        if netloc:
            # unc path: file://shares/c$/far/boo
            value = f"//{netloc}{path}"
        elif _RE_DRIVE_LETTER_PATH.match(path):
            # windows drive letter: file:///C:/far/boo
            value = path[1].lower() + path[2:]
        else:
            value = path

        if _IS_WIN:
            value = value.replace("/", "\\")

        return value

    @staticmethod
    def from_path(path: Union[str, os.PathLike[str]]) -> Uri:
        result = Uri(Path(path).absolute().as_uri())
        result._parts = replace(result._parts, path=parse.quote(parse.unquote(result._parts.path)))
        return result

    def __eq__(self, o: object) -> bool:
        if isinstance(o, Uri):
            return str(o) == str(self)
        if isinstance(o, str):
            return str(Uri(o)) == str(self)

        return NotImplemented

    def __hash__(self) -> int:
        return hash(str(self))

    def __len__(self) -> int:
        return len(str(self))
