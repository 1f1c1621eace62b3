"""Exceptions and the shell's error messages."""

from __future__ import annotations

import errno
import os

NOT_FOUND_STATUS = 127
NOT_EXECUTABLE_STATUS = 126


class ShellExit(Exception):
    """Raised to end the shell (or a pipeline stage) with an exit status."""

    def __init__(self, status: int) -> None:
        self.status = status & 0xFF
        super().__init__(self.status)


class CommandFailure(Exception):
    """An error the shell reports on standard error, with its exit status."""

    def __init__(self, message: str, status: int) -> None:
        super().__init__(message)
        self.message = message
        self.status = status

    def __str__(self) -> str:
        return self.message


def command_not_found(name: str) -> CommandFailure:
    """The command could not be found on PATH."""
    return CommandFailure(f"minishell : {name}: commande not found", NOT_FOUND_STATUS)


def no_such_file(name: str) -> CommandFailure:
    """The command path does not exist."""
    return CommandFailure(
        f"minishell : {name}: No such file or directory", NOT_FOUND_STATUS
    )


def is_a_directory(name: str) -> CommandFailure:
    """The command names a directory."""
    return CommandFailure(f"minishell: {name}: is a directory", NOT_EXECUTABLE_STATUS)


def os_failure(name: str, error: OSError) -> CommandFailure:
    """Running ``name`` failed with an operating-system error."""
    reason = error.strerror or (os.strerror(error.errno) if error.errno else str(error))
    status = NOT_EXECUTABLE_STATUS if error.errno == errno.EACCES else NOT_FOUND_STATUS
    return CommandFailure(f"minishell: {name}: {reason}", status)


def permission_denied(name: str) -> CommandFailure:
    """A file exists but may not be read or executed."""
    return CommandFailure(f"Minishell: {name}: Permission denied", 1)


def file_does_not_exist(name: str) -> CommandFailure:
    """A redirection input file does not exist."""
    return CommandFailure(f"Minishell: {name}: No such file or directory", 1)


def ambiguous_redirect() -> CommandFailure:
    """A redirection target expanded to nothing or to several words."""
    return CommandFailure("Minishell: ambiguous redirect", 1)


def invalid_identifier(builtin: str, name: str) -> CommandFailure:
    """``export`` or ``unset`` was given a bad variable name."""
    return CommandFailure(
        f"minishell: {builtin}: `{name}': not a valid identifier", 1
    )