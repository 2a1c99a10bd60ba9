from pathlib import Path
from typing import Optional, Union

from rich.markup import escape

from animation.Processing import console
from _types.errors import DiffSourceError, OutputWriteError
from .diff import get_diff_from_git

PathLike = Union[str, Path]


def read_diff_file(path: PathLike) -> str:
    """
    Read a diff from disk exactly as stored.

    Raises:
        DiffSourceError: If the file is missing or unreadable.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except FileNotFoundError as e:
        raise DiffSourceError(f"Failed to open file: {path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise DiffSourceError(f"Failed to read file: {path} ({e})") from e


def load_diff(file: Optional[PathLike] = None, commit: Optional[str] = None) -> str:
    """
    Resolve the diff text for this run. A file wins over git; git is not
    touched when a file is given.
    """
    if file is not None:
        console.print(f"[info]Reading diff from [dim]{escape(str(file))}[/dim][/info]")
        return read_diff_file(file)
    return get_diff_from_git(commit)


def write_output(path: PathLike, text: str) -> None:
    """
    Write the generated comment to ``path``, overwriting any existing file.

    Raises:
        OutputWriteError: If the file cannot be written.
    """
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        raise OutputWriteError(str(path), str(e)) from e
