"""Running parsed commands: a lone command, or a pipeline of several."""

from __future__ import annotations

import io
import os
import subprocess
import sys
import threading
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TextIO

from .builtins import is_builtin, run_builtin
from .command import Command, ShellState
from .environment import Environment
from .errors import CommandFailure, ShellExit, os_failure
from .pathsearch import resolve_command
from .redirections import open_redirections
from .status import exit_status_from_returncode


def _fileno(stream: object) -> int | None:
    try:
        return stream.fileno()  # type: ignore[attr-defined]
    except (AttributeError, OSError, ValueError):
        return None


def _report(stderr: TextIO, failure: CommandFailure) -> None:
    stderr.write(f"{failure.message}\n")
    stderr.flush()


def _close_quietly(closable: object) -> None:
    try:
        closable.close()  # type: ignore[attr-defined]
    except OSError:
        pass


class _Plumbing:
    """Owns the descriptors and copy threads that connect a pipeline to its streams."""

    def __init__(self) -> None:
        self._fds: set[int] = set()
        self._threads: list[threading.Thread] = []

    def own(self, *fds: int) -> None:
        self._fds.update(fds)

    def close(self, fd: int) -> None:
        if fd in self._fds:
            self._fds.discard(fd)
            try:
                os.close(fd)
            except OSError:
                pass

    def _start(self, target, *args) -> None:
        thread = threading.Thread(target=target, args=args, daemon=True)
        thread.start()
        self._threads.append(thread)

    def source(self, stream: TextIO) -> int:
        """A descriptor the first stage reads ``stream`` from."""
        fd = _fileno(stream)
        if fd is not None:
            duplicate = os.dup(fd)
            self.own(duplicate)
            return duplicate
        read_fd, write_fd = os.pipe()
        self.own(read_fd)
        self._start(_feed, stream, write_fd)
        return read_fd

    def sink(self, stream: TextIO) -> int:
        """A descriptor whose output ends up in ``stream``."""
        fd = _fileno(stream)
        if fd is not None:
            stream.flush()
            duplicate = os.dup(fd)
            self.own(duplicate)
            return duplicate
        read_fd, write_fd = os.pipe()
        self.own(write_fd)
        self._start(_drain, read_fd, stream)
        return write_fd

    def finish(self) -> None:
        for fd in list(self._fds):
            self.close(fd)
        for thread in self._threads:
            thread.join()
        self._threads.clear()


def _feed(stream: TextIO, write_fd: int) -> None:
    with open(write_fd, "wb", closefd=True) as pipe:
        try:
            pipe.write(stream.read().encode("utf-8"))
        except OSError:
            pass


def _drain(read_fd: int, stream: TextIO) -> None:
    with open(read_fd, "rb", closefd=True) as pipe:
        data = pipe.read()
    stream.write(data.decode("utf-8", errors="replace"))


@dataclass
class _Stage:
    """A started pipeline stage: a child process, a built-in thread, or a status."""

    process: subprocess.Popen | None = None
    thread: threading.Thread | None = None
    status: int = 0

    def wait(self) -> int:
        if self.process is not None:
            return self.process.wait()
        if self.thread is not None:
            self.thread.join()
        return self.status


def _child_env(env: Environment) -> dict[str, str]:
    return {name: value for name, value in env.items() if value is not None}


def _start_builtin(command: Command, state: ShellState, out_fd: int, err_fd: int) -> _Stage:
    local = ShellState(Environment(state.env.items()), state.exit_status)
    out = open(os.dup(out_fd), "w", encoding="utf-8", closefd=True)
    err = open(os.dup(err_fd), "w", encoding="utf-8", closefd=True)
    stage = _Stage()

    def work() -> None:
        try:
            stage.status = run_builtin(command, local, out, err, False)
        except ShellExit as leaving:
            stage.status = leaving.status
        except OSError:
            stage.status = 1
        finally:
            _close_quietly(out)
            _close_quietly(err)

    stage.thread = threading.Thread(target=work, daemon=True)
    stage.thread.start()
    return stage


def _start_external(
    command: Command, state: ShellState, in_fd: int, out_fd: int, err_fd: int, stderr: TextIO
) -> _Stage:
    name = command.args[0]
    try:
        path = resolve_command(name, state.env.to_envp())
    except CommandFailure as failure:
        _report(stderr, failure)
        return _Stage(status=failure.status)
    executable = path if "/" in path else os.path.join(".", path)
    try:
        process = subprocess.Popen(
            command.args,
            executable=executable,
            stdin=in_fd,
            stdout=out_fd,
            stderr=err_fd,
            env=_child_env(state.env),
        )
    except OSError as error:
        failure = os_failure(name, error)
        _report(stderr, failure)
        return _Stage(status=failure.status)
    return _Stage(process=process)


def _start_stage(
    command: Command, state: ShellState, in_fd: int, out_fd: int, err_fd: int, stderr: TextIO
) -> _Stage:
    try:
        redirect_in, redirect_out = open_redirections(command.redirections)
    except CommandFailure as failure:
        _report(stderr, failure)
        return _Stage(status=failure.status)
    try:
        if redirect_in is not None:
            in_fd = redirect_in.fileno()
        if redirect_out is not None:
            out_fd = redirect_out.fileno()
        if not command.args:
            return _Stage(status=0)
        if is_builtin(command.args[0]):
            return _start_builtin(command, state, out_fd, err_fd)
        return _start_external(command, state, in_fd, out_fd, err_fd, stderr)
    finally:
        for stream in (redirect_in, redirect_out):
            if stream is not None:
                _close_quietly(stream)


def run_pipeline(
    commands: Sequence[Command],
    state: ShellState,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    """Run the commands connected by pipes; the status is that of the last one.

    Every stage runs apart from the shell: built-ins see a copy of the
    environment, so their changes are not kept.
    """
    stdin = sys.stdin if stdin is None else stdin
    stdout = sys.stdout if stdout is None else stdout
    stderr = sys.stderr if stderr is None else stderr
    commands = list(commands)
    if not commands:
        return state.exit_status
    plumbing = _Plumbing()
    stages: list[_Stage] = []
    try:
        read_fd = plumbing.source(stdin)
        last_out = plumbing.sink(stdout)
        err_fd = plumbing.sink(stderr)
        for position, command in enumerate(commands):
            if position == len(commands) - 1:
                next_read, write_fd = None, last_out
            else:
                next_read, write_fd = os.pipe()
                plumbing.own(next_read, write_fd)
            stages.append(_start_stage(command, state, read_fd, write_fd, err_fd, stderr))
            plumbing.close(read_fd)
            plumbing.close(write_fd)
            if next_read is not None:
                read_fd = next_read
        plumbing.close(err_fd)
        codes = [stage.wait() for stage in stages]
    finally:
        plumbing.finish()
    for position, code in enumerate(codes):
        last = position == len(codes) - 1
        state.exit_status = exit_status_from_returncode(code, last, stdout)
    return state.exit_status


def run_single(
    command: Command,
    state: ShellState,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    """Run one command; a built-in runs in the shell itself and may change its state.

    ``exit`` raises :class:`ShellExit`.
    """
    stdout = sys.stdout if stdout is None else stdout
    stderr = sys.stderr if stderr is None else stderr
    if not command.args or not is_builtin(command.args[0]):
        return run_pipeline([command], state, stdin, stdout, stderr)
    try:
        redirect_in, redirect_out = open_redirections(command.redirections)
    except CommandFailure as failure:
        _report(stderr, failure)
        state.exit_status = failure.status
        return state.exit_status
    if redirect_in is not None:
        redirect_in.close()
    out: TextIO = stdout
    if redirect_out is not None:
        out = io.TextIOWrapper(redirect_out, encoding="utf-8", write_through=True)
    try:
        return run_builtin(command, state, out, stderr, True)
    finally:
        if redirect_out is not None:
            out.close()


def execute(
    commands: Sequence[Command],
    state: ShellState,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    """Run a parsed command line and return the shell's new exit status."""
    commands = list(commands)
    if not commands:
        return state.exit_status
    if len(commands) == 1:
        only = commands[0]
        if not only.args and only.redirections.is_empty():
            return state.exit_status
        return run_single(only, state, stdin, stdout, stderr)
    return run_pipeline(commands, state, stdin, stdout, stderr)