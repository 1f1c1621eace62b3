"""The commands the shell runs itself: echo, cd, pwd, export, unset, env and exit."""

from __future__ import annotations

import os
from typing import TextIO

from .command import Command, ShellState
from .environment import is_valid_name
from .errors import ShellExit, invalid_identifier
from .textutils import atoi, compare_command_name

_FOLDED_BUILTINS = ("echo", "cd", "pwd", "export", "unset", "env")
_LLONG_MAX_TEXT = "9223372036854775807"


def is_builtin(name: str | None) -> bool:
    """Whether ``name`` is a built-in; all but ``exit`` also match in upper case."""
    if name is None:
        return False
    if any(compare_command_name(name, builtin, True) == 0 for builtin in _FOLDED_BUILTINS):
        return True
    return compare_command_name(name, "exit", False) == 0


def run_builtin(
    command: Command, state: ShellState, out: TextIO, err: TextIO, single: bool
) -> int:
    """Run the built-in named by the command's first argument and record its status."""
    args = command.args
    name = args[0] if args else None
    status = 0
    if compare_command_name(name, "env", True) == 0:
        status = env(state, out)
    elif compare_command_name(name, "echo", True) == 0:
        status = echo(args, state, out)
    elif compare_command_name(name, "pwd", True) == 0:
        status = pwd(state, out, err)
    elif compare_command_name(name, "export", True) == 0:
        status = export(args, state, out, err)
    elif compare_command_name(name, "unset", True) == 0:
        status = unset(args, state, err)
    elif compare_command_name(name, "cd", True) == 0:
        status = cd(args, state, err)
    elif name is not None and name.startswith("exit"):
        status = exit_builtin(args, state, out, err, single)
    state.exit_status = status
    return status


def _is_n_flag(word: str) -> bool:
    return word.startswith("-n") and all(char == "n" for char in word[1:])


def echo(args: list[str], state: ShellState, out: TextIO) -> int:
    """Print the arguments separated by spaces; leading ``-n`` flags drop the newline."""
    words = args[1:]
    if words and _is_n_flag(words[0]):
        rest = words[1:]
        while rest and _is_n_flag(rest[0]):
            rest = rest[1:]
        out.write(" ".join(rest))
    elif words and words[0] == "$?":
        out.write(f"{state.exit_status}\n")
    else:
        out.write(" ".join(words) + "\n")
    return 0


def _env_text(state: ShellState, name: str) -> str:
    value = state.env.get(name)
    return value if value is not None else ""


def _change_pwd(state: ShellState, err: TextIO) -> None:
    state.env.set("OLDPWD", _env_text(state, "PWD"))
    try:
        new_pwd = os.getcwd()
    except OSError as error:
        err.write(f"minishell: cd:: {error.strerror}\n")
        return
    state.env.set("PWD", new_pwd)


def cd(args: list[str], state: ShellState, err: TextIO) -> int:
    """Change directory, to ``HOME`` when no argument is given, and update ``PWD``/``OLDPWD``."""
    target = args[1] if len(args) > 1 else None
    if target == "":
        return 0
    if target is None:
        try:
            os.chdir(_env_text(state, "HOME"))
        except OSError:
            err.write("minishell:  cd: HOME not set\n")
            return 1
        _change_pwd(state, err)
        return 0
    try:
        os.getcwd()
    except OSError:
        err.write(
            "cd: error retrieving current directory: getcwd: "
            "cannot access parent directories: No such file or directory\n"
        )
        try:
            os.chdir(target)
        except OSError:
            pass
        return 1
    try:
        os.chdir(target)
    except OSError as error:
        err.write(f"cd: {target} : {error.strerror}\n")
        return 1
    _change_pwd(state, err)
    return 0


def pwd(state: ShellState, out: TextIO, err: TextIO) -> int:
    """Print the value of ``PWD`` (an empty line when it is unset)."""
    out.write(_env_text(state, "PWD") + "\n")
    return 0


def is_valid_identifier(text: str) -> bool:
    """Whether the name part of an ``export`` argument (before ``=`` or ``+=``) is valid."""
    if not text:
        return False
    first = text[0]
    if not (first.isascii() and first.isalpha()) and first != "_":
        return False
    for index, char in enumerate(text):
        if char == "=" or (char == "+" and text[index + 1 : index + 2] == "="):
            break
        if not (char.isascii() and char.isalnum()) and char != "_":
            return False
    return True


def split_assignment(text: str) -> tuple[str, str | None, bool]:
    """Split an ``export`` argument into name, value and whether it appends (``+=``).

    The value is ``None`` when there is no ``=``.
    """
    name, sep, value = text.partition("=")
    if not sep:
        return text, None, False
    if name.endswith("+"):
        return name[:-1], value, True
    return name, value, False


def _print_export_table(state: ShellState, out: TextIO) -> None:
    for name, value in state.env.sorted_items():
        if value is None:
            out.write(f"declare -x {name}\n")
        else:
            out.write(f'declare -x {name}="{value}"\n')


def export(args: list[str], state: ShellState, out: TextIO, err: TextIO) -> int:
    """Set or list exported variables; ``NAME+=VALUE`` appends to the current value."""
    if len(args) < 2:
        _print_export_table(state, out)
    state.exit_status = 0
    for argument in args[1:]:
        if not is_valid_identifier(argument):
            err.write(str(invalid_identifier("export", argument)) + "\n")
            state.exit_status = 1
            continue
        name, value, append = split_assignment(argument)
        if value is None:
            if name in state.env:
                continue
            state.env.set(name, None)
            continue
        if append:
            value = _env_text(state, name) + value
        state.env.set(name, value)
    return state.exit_status


def unset(args: list[str], state: ShellState, err: TextIO) -> int:
    """Remove variables; invalid names are reported and make the status 1."""
    state.exit_status = 0
    for name in args[1:]:
        if not is_valid_name(name):
            err.write(str(invalid_identifier("unset", name)) + "\n")
            state.exit_status = 1
            continue
        state.env.unset(name)
    return state.exit_status


def env(state: ShellState, out: TextIO) -> int:
    """Print every variable that has a value as ``NAME=VALUE``."""
    for name, value in state.env.items():
        if value is not None:
            out.write(f"{name}={value}\n")
    return 0


def is_numeric(text: str) -> bool:
    """Whether ``text`` is blanks, an optional sign, digits, then blanks."""
    rest = text.lstrip(" \t")
    if rest[:1] in ("+", "-"):
        rest = rest[1:]
    digits = len(rest) - len(rest.lstrip("0123456789"))
    return rest[digits:].lstrip(" \t") == ""


def exit_builtin(
    args: list[str], state: ShellState, out: TextIO, err: TextIO, single: bool
) -> int:
    """Leave the shell by raising :class:`ShellExit`; returns 1 on too many arguments."""
    if single:
        out.write("exit\n")
    if len(args) < 2:
        raise ShellExit(state.exit_status)
    argument = args[1]
    if not argument or not is_numeric(argument):
        err.write(f"Minishell: exit:{argument}: numeric argument required\n")
        raise ShellExit(255)
    if len(args) == 2:
        number = atoi(argument)
        if number == -1 and argument[:19] != _LLONG_MAX_TEXT:
            err.write(f"Minishell: exit: {argument} : numeric argument required\n")
        raise ShellExit(number)
    err.write("minishell: exit: too many arguments\n")
    return 1