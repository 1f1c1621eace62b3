"""The shell's environment: an ordered set of variables, some without values."""

from __future__ import annotations

from collections.abc import Iterable, Iterator


def split_entry(text: str) -> tuple[str, str | None]:
    """Split ``NAME=VALUE`` at the first ``=``.

    Without an ``=`` the whole text is the name and the value is ``None``.
    """
    name, sep, value = text.partition("=")
    return (name, value) if sep else (text, None)


def _is_name_start(char: str) -> bool:
    return ("a" <= char <= "z") or ("A" <= char <= "Z") or char == "_"


def _is_name_char(char: str) -> bool:
    return _is_name_start(char) or "0" <= char <= "9"


def is_valid_name(name: str) -> bool:
    """Whether ``name`` is a variable name: a letter or ``_``, then letters, digits or ``_``."""
    if not name or not _is_name_start(name[0]):
        return False
    return all(_is_name_char(char) for char in name)


class Environment:
    """Variables in insertion order; a value of ``None`` marks an exported name with no value."""

    def __init__(self, entries: Iterable[tuple[str, str | None]] = ()) -> None:
        self._entries: dict[str, str | None] = {}
        for name, value in entries:
            self.set(name, value)

    @classmethod
    def from_strings(cls, strings: Iterable[str]) -> "Environment":
        """Build an environment from ``NAME=VALUE`` strings such as ``os.environ`` items."""
        return cls(split_entry(text) for text in strings)

    def get(self, name: str) -> str | None:
        """The value of ``name``, or ``None`` if it is missing or has no value."""
        return self._entries.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def set(self, name: str, value: str | None) -> None:
        """Set ``name`` to ``value``, keeping its place if it already exists."""
        self._entries[name] = value

    def unset(self, name: str) -> bool:
        """Remove ``name``; return whether it was present."""
        return self._entries.pop(name, _MISSING) is not _MISSING

    def items(self) -> Iterator[tuple[str, str | None]]:
        """The variables in order, as ``(name, value)`` pairs."""
        return iter(list(self._entries.items()))

    def sorted_items(self) -> list[tuple[str, str | None]]:
        """The variables ordered by name, as ``export`` lists them."""
        return sorted(self._entries.items(), key=lambda item: item[0])

    def to_envp(self) -> list[str]:
        """``NAME=VALUE`` strings for every variable that has a value."""
        return [f"{name}={value}" for name, value in self._entries.items() if value is not None]

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Environment({list(self._entries.items())!r})"


_MISSING = object()