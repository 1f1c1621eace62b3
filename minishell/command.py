"""The parsed form of a command line that the executor runs."""

from __future__ import annotations

from dataclasses import dataclass, field

from .environment import Environment


@dataclass
class Redirections:
    """A command's redirection targets.

    ``all_files`` lists every target in the order written; the other lists
    say which kind each name is.  ``ambiguous_indexes`` holds positions in
    ``all_files`` whose expansion was ambiguous.
    """

    all_files: list[str] = field(default_factory=list)
    infiles: list[str] = field(default_factory=list)
    outfiles: list[str] = field(default_factory=list)
    append_files: list[str] = field(default_factory=list)
    heredocs: list[str] = field(default_factory=list)
    ambiguous_indexes: list[int] = field(default_factory=list)

    def is_empty(self) -> bool:
        """Whether the command has no redirections at all."""
        return not self.all_files


@dataclass
class Command:
    """One stage of a pipeline: its arguments and its redirections."""

    args: list[str] = field(default_factory=list)
    redirections: Redirections = field(default_factory=Redirections)


@dataclass
class ShellState:
    """What the shell keeps between commands: the environment and the last status."""

    env: Environment
    exit_status: int = 0