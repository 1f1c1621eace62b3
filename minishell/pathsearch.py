"""Finding the program a command name refers to."""

from __future__ import annotations

import errno
import os
import stat
from collections.abc import Iterable, Sequence
from enum import Enum

from .errors import (
    NOT_EXECUTABLE_STATUS,
    CommandFailure,
    command_not_found,
    is_a_directory,
    no_such_file,
    os_failure,
    permission_denied,
)
from .textutils import split_nonempty

_PATH_PREFIX = "PATH="


class FileKind(Enum):
    """What a path names on disk."""

    DIRECTORY = "directory"
    REGULAR = "regular"
    OTHER = "other"


def file_kind(path: str) -> FileKind:
    """Classify ``path``; a path that cannot be examined counts as ``OTHER``."""
    try:
        mode = os.stat(path).st_mode
    except OSError:
        return FileKind.OTHER
    if stat.S_ISDIR(mode):
        return FileKind.DIRECTORY
    if stat.S_ISREG(mode):
        return FileKind.REGULAR
    return FileKind.OTHER


def _is_executable(path: str) -> bool:
    return os.access(path, os.F_OK | os.X_OK)


def search_path(name: str, directories: Iterable[str]) -> str | None:
    """The first ``directory/name`` that exists and is executable, or ``None``."""
    if not name:
        return None
    for directory in directories:
        candidate = f"{directory}/{name}"
        if _is_executable(candidate):
            return candidate
    return None


def _path_line(envp: Sequence[str]) -> str | None:
    return next((entry for entry in envp if entry.startswith(_PATH_PREFIX)), None)


def _resolve_without_path(name: str) -> str:
    kind = file_kind(name)
    if kind is FileKind.DIRECTORY:
        raise is_a_directory(name)
    if _is_executable(name):
        return name
    if os.access(name, os.F_OK) and kind is FileKind.REGULAR:
        raise CommandFailure(permission_denied(name).message, NOT_EXECUTABLE_STATUS)
    return name


def _resolve_with_slash(name: str) -> str:
    if file_kind(name) is FileKind.DIRECTORY:
        raise is_a_directory(name)
    if _is_executable(name):
        return name
    code = errno.EACCES if os.access(name, os.F_OK) else errno.ENOENT
    raise os_failure(name, OSError(code, os.strerror(code)))


def resolve_command(name: str, envp: Sequence[str]) -> str:
    """The path to execute for ``name`` given ``NAME=VALUE`` environment strings.

    Raises :class:`CommandFailure` when the command cannot be run.
    """
    path_line = _path_line(envp)
    if path_line is None:
        return _resolve_without_path(name)
    directories = split_nonempty(path_line[len(_PATH_PREFIX):], ":")
    if not directories:
        raise no_such_file(name)
    if "/" in name:
        return _resolve_with_slash(name)
    found = search_path(name, directories)
    if found is None:
        raise command_not_found(name)
    return found