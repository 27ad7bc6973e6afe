import os
from pathlib import Path
from typing import Any, Union


def path_is_relative_to(
    path: Union[Path, str, "os.PathLike[Any]"],
    other_path: Union[Path, str, "os.PathLike[Any]"],
) -> bool:
    try:
        Path(path).relative_to(other_path)
        return True
    except ValueError:
        return False


def file_exists_silent(path: Union[Path, str, "os.PathLike[Any]"]) -> bool:
    try:
        return Path(path).is_file()
    except (OSError, ValueError):
        return False
