"""Shell state: variable tables and the per-session interpreter state."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field

STDIN_FD = 0
STDOUT_FD = 1


class ShellError(Exception):
    """Raised when the shell state cannot be built or changed as asked."""


def _split_entry(entry: str) -> tuple[str, str | None]:
    """Split ``NAME=VALUE`` the way the shell does: empty pieces are dropped."""
    parts = [part for part in entry.split("=") if part]
    if not parts:
        raise ShellError(f"`{entry}': not a valid identifier")
    name = parts[0]
    value = parts[1] if len(parts) > 1 else None
    return name, value


def _entries_from(environ: Mapping[str, str] | Iterable[str]) -> Iterator[str]:
    if isinstance(environ, Mapping):
        for name, value in environ.items():
            yield f"{name}={value}"
    else:
        yield from environ


class VarTable:
    """An ordered table of variable names and their (possibly unset) values."""

    def __init__(self) -> None:
        self._vars: dict[str, str | None] = {}

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] | Iterable[str]) -> "VarTable":
        """Build a table from a mapping or from ``NAME=VALUE`` strings."""
        table = cls()
        for entry in _entries_from(environ):
            table.set(entry)
        return table

    def set(self, entry: str) -> None:
        """Set a variable from ``NAME=VALUE``; an existing name keeps its place."""
        name, value = _split_entry(entry)
        self._vars[name] = value

    def get_value(self, text: str) -> str | None:
        """Return the value of the first variable whose name starts ``text``."""
        for name, value in self._vars.items():
            if text.startswith(name):
                return value
        return None

    def get_name(self, value: str) -> str | None:
        """Return the name of the first variable whose value starts ``value``.

        The search stops at the first variable that has no value.
        """
        for name, current in self._vars.items():
            if current is None:
                break
            if value.startswith(current):
                return name
        return None

    def remove(self, name: str) -> bool:
        """Remove ``name``; return whether it was present."""
        return self._vars.pop(name, _MISSING) is not _MISSING

    def sort(self) -> None:
        """Order the table by name."""
        self._vars = dict(sorted(self._vars.items(), key=lambda item: item[0]))

    def entries(self) -> list[tuple[str, str | None]]:
        """Return the ``(name, value)`` pairs in table order."""
        return list(self._vars.items())

    def to_environ(self) -> list[str]:
        """Return the table as ``NAME=VALUE`` strings for a child process."""
        return [f"{name}={value or ''}" for name, value in self._vars.items()]

    def __contains__(self, name: object) -> bool:
        return name in self._vars

    def __iter__(self) -> Iterator[str]:
        return iter(self._vars)

    def __len__(self) -> int:
        return len(self._vars)

    def __repr__(self) -> str:
        return f"VarTable({self._vars!r})"


_MISSING = object()


@dataclass
class Shell:
    """Everything the interpreter keeps between command lines."""

    env: VarTable = field(default_factory=VarTable)
    export: VarTable = field(default_factory=VarTable)
    exit_status: int = 0
    infile: int = STDIN_FD
    outfile: int = STDOUT_FD
    tokens: list[str] = field(default_factory=list)
    kinds: list[int] = field(default_factory=list)
    child_pids: list[int] = field(default_factory=list)

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] | Iterable[str]) -> "Shell":
        """Create a shell whose environment and sorted export list come from ``environ``."""
        entries = list(_entries_from(environ))
        env = VarTable.from_environ(entries)
        export = VarTable.from_environ(entries)
        export.sort()
        return cls(env=env, export=export)

    def reset_fds(self) -> None:
        """Close redirected descriptors and go back to standard input and output."""
        for fd, default in ((self.infile, STDIN_FD), (self.outfile, STDOUT_FD)):
            if fd != default and fd >= 0:
                try:
                    os.close(fd)
                except OSError:
                    pass
        self.infile = STDIN_FD
        self.outfile = STDOUT_FD