"""Creating, checking and opening a command's redirection files."""

from __future__ import annotations

import os
from typing import BinaryIO

from .command import Redirections
from .errors import (
    CommandFailure,
    ambiguous_redirect,
    file_does_not_exist,
    permission_denied,
)

_HEREDOC_PREFIX = "/tmp/_"
_FILE_MODE = 0o644


def _last_index_among(redirections: Redirections, *groups: list[str]) -> int | None:
    for index in range(len(redirections.all_files) - 1, -1, -1):
        name = redirections.all_files[index]
        if any(name in group for group in groups):
            return index
    return None


def last_input_index(redirections: Redirections) -> int | None:
    """Position in ``all_files`` of the last input file or here-document, if any."""
    return _last_index_among(redirections, redirections.infiles, redirections.heredocs)


def last_output_index(redirections: Redirections) -> int | None:
    """Position in ``all_files`` of the last output or append file, if any."""
    return _last_index_among(
        redirections, redirections.outfiles, redirections.append_files
    )


def is_ambiguous(name: str, redirections: Redirections, index: int) -> bool:
    """Whether the target at ``index`` expanded to nothing or to several words."""
    if name and not any(char in " \t\n" for char in name):
        return False
    return index in redirections.ambiguous_indexes


def heredoc_path(name: str) -> str:
    """Where the here-document for delimiter ``name`` is stored."""
    return _HEREDOC_PREFIX + name


def _create_output(name: str, append: bool) -> None:
    flags = os.O_CREAT | os.O_WRONLY
    if not append:
        flags |= os.O_TRUNC
    try:
        fd = os.open(name, flags, _FILE_MODE)
    except OSError as error:
        raise CommandFailure(f"minishell :: {error.strerror}", 1) from error
    os.close(fd)


def prepare_files(redirections: Redirections) -> None:
    """Create every output target and check that every input file is readable.

    Raises :class:`CommandFailure` at the first target that fails.
    """
    for index, name in enumerate(redirections.all_files):
        if is_ambiguous(name, redirections, index):
            raise ambiguous_redirect()
        if name in redirections.append_files or name in redirections.outfiles:
            _create_output(name, name in redirections.append_files)
        elif name not in redirections.heredocs:
            if not os.access(name, os.F_OK):
                raise file_does_not_exist(name)
            if not os.access(name, os.R_OK):
                raise permission_denied(name)


def _open_output(redirections: Redirections, name: str) -> BinaryIO | None:
    if name in redirections.outfiles:
        flags = os.O_CREAT | os.O_WRONLY | os.O_TRUNC
    elif name in redirections.append_files:
        flags = os.O_CREAT | os.O_WRONLY | os.O_APPEND
    else:
        return None
    fd = os.open(name, flags, _FILE_MODE)
    return os.fdopen(fd, "ab" if flags & os.O_APPEND else "wb")


def _open_input(redirections: Redirections, name: str) -> BinaryIO | None:
    if name in redirections.infiles:
        return open(name, "rb")
    if name in redirections.heredocs:
        path = heredoc_path(name)
        stream = open(path, "rb")
        os.unlink(path)
        return stream
    return None


def open_redirections(
    redirections: Redirections,
) -> tuple[BinaryIO | None, BinaryIO | None]:
    """Prepare the files, then open the last input and last output target.

    Returns ``(stdin, stdout)`` as binary file objects, ``None`` where the
    command has no such redirection; the caller closes them.  A here-document
    file is removed once opened.
    """
    prepare_files(redirections)
    out_index = last_output_index(redirections)
    in_index = last_input_index(redirections)
    stdout: BinaryIO | None = None
    stdin: BinaryIO | None = None
    if out_index is not None:
        try:
            stdout = _open_output(redirections, redirections.all_files[out_index])
        except OSError as error:
            raise CommandFailure(
                f"minishell : fails to open outfile: : {error.strerror}", 1
            ) from error
    if in_index is not None:
        try:
            stdin = _open_input(redirections, redirections.all_files[in_index])
        except OSError as error:
            if stdout is not None:
                stdout.close()
            raise CommandFailure(
                f"fails to open infile: {error.strerror}", 1
            ) from error
    return stdin, stdout