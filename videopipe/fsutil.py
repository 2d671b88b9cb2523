"""File-system helpers: path pieces, directory creation, file search and whole-file I/O."""

from __future__ import annotations

import os
from typing import IO

from .textutil import pattern_match

_SEPARATORS = "/\\" if os.name == "nt" else "/"


def _last_sep(path: str) -> int:
    return max(path.rfind(sep) for sep in _SEPARATORS)


def file_name(path: str, include_suffix: bool = True) -> str:
    """Return the last path component, optionally without its suffix."""
    if not path:
        return ""
    start = _last_sep(path) + 1
    if include_suffix:
        return path[start:]
    dot = path.rfind(".")
    if dot == -1:
        return path[start:]
    if dot <= start:
        dot = len(path)
    return path[start:dot]


def directory(path: str) -> str:
    """Return the directory part of ``path`` with its trailing separator, or ``"."``."""
    if not path:
        return "."
    sep = _last_sep(path)
    if sep == -1:
        return "."
    return path[:sep + 1]


def exists(path: str) -> bool:
    """Return True if ``path`` exists and is readable."""
    return os.access(path, os.R_OK)


def isfile(path: str) -> bool:
    """Return True if ``path`` is a regular file."""
    return os.path.isfile(path)


def file_size(path: str) -> int:
    """Return the size of ``path`` in bytes."""
    return os.stat(path).st_size


def last_modify(path: str) -> int:
    """Return the modification time of ``path`` in whole seconds."""
    return int(os.stat(path).st_mtime)


def mkdir(path: str) -> bool:
    """Create one directory; return False if that fails."""
    try:
        os.mkdir(path, 0o755)
    except OSError:
        return False
    return True


def _ensure_dir(path: str) -> bool:
    return exists(path) or mkdir(path) or exists(path)


def mkdirs(path: str) -> bool:
    """Create ``path`` and every missing parent; return False on failure."""
    if not path:
        return False
    if exists(path):
        return True
    for end, ch in enumerate(path):
        if ch in _SEPARATORS and end > 0 and not _ensure_dir(path[:end]):
            return False
    return _ensure_dir(path)


def open_mkdirs(path: str, mode: str) -> IO:
    """Open ``path``, creating its parent directories if the first attempt fails."""
    kwargs = {} if "b" in mode else {"encoding": "utf-8"}
    try:
        return open(path, mode, **kwargs)
    except OSError:
        sep = _last_sep(path)
        if sep == -1 or not mkdirs(path[:sep]):
            raise
    return open(path, mode, **kwargs)


def delete_file(path: str) -> bool:
    """Remove a file; return False if that fails."""
    try:
        os.remove(path)
    except OSError:
        return False
    return True


def find_files(path: str, pattern: str = "*", find_directory: bool = False,
               include_sub_directory: bool = False) -> list[str]:
    """List files (or directories) under ``path`` whose names match ``pattern``.

    Patterns use ``*`` and ``?`` and may be ``;``-separated. Directories are
    searched depth first when ``include_sub_directory`` is set.
    """
    root = path or "./"
    if root[-1] not in "\\/":
        root += "/"

    found: list[str] = []
    stack = [root]
    while stack:
        search = stack.pop()
        try:
            with os.scandir(search) as it:
                entries = sorted(it, key=lambda entry: entry.name)
        except OSError:
            continue
        for entry in entries:
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
            except OSError:
                continue
            if is_dir == find_directory and pattern_match(entry.name, pattern):
                found.append(search + entry.name)
            if include_sub_directory and is_dir:
                stack.append(search + entry.name + "/")
    return found


def rmtree(path: str, ignore_fail: bool = False) -> bool:
    """Remove the files and immediate sub-directories of ``path``, then ``path`` itself."""
    if not path:
        return False
    files = find_files(path, "*", False)
    dirs = find_files(path, "*", True)

    success = True
    for name in files:
        try:
            os.remove(name)
        except OSError:
            success = False
            if not ignore_fail:
                return False

    for name in reversed([path, *dirs]):
        try:
            os.rmdir(name)
        except OSError:
            success = False
            if not ignore_fail:
                return False
    return success


def load_file(path: str) -> bytes:
    """Return the whole file as bytes, or ``b""`` if it cannot be opened."""
    try:
        with open(path, "rb") as handle:
            return handle.read()
    except OSError:
        return b""


def load_text_file(path: str) -> str:
    """Return the whole file as text, or ``""`` if it cannot be opened."""
    return load_file(path).decode("utf-8", errors="replace")


def save_file(path: str, data: bytes | str, mk_dirs: bool = True) -> bool:
    """Write ``data`` to ``path``, creating parent directories if asked."""
    if mk_dirs:
        sep = _last_sep(path)
        if sep != -1 and not mkdirs(path[:sep]):
            return False
    payload = data.encode("utf-8") if isinstance(data, str) else bytes(data)
    try:
        with open(path, "wb") as handle:
            handle.write(payload)
    except OSError:
        return False
    return True