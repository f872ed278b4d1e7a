"""Commands the shell runs itself: cd, pwd, echo, env, export and unset."""

from __future__ import annotations

import errno
import os
import sys
from collections.abc import Callable, Sequence
from typing import TextIO

from minish.state import Shell, ShellError, VarTable


def _out(stdout: TextIO | None) -> TextIO:
    return sys.stdout if stdout is None else stdout


def _report(command: str, reason: str) -> None:
    print(f"minishell: {command}: {reason}", file=sys.stderr)


def _print_table(table: VarTable, stdout: TextIO) -> None:
    for name, value in table.entries():
        print(f'{name}="{value or ""}"', file=stdout)


def change_directory(shell: Shell, path: str | None) -> int:
    """Change the working directory to ``path``; return the new exit status."""
    if path is None:
        _report("cd", os.strerror(errno.EFAULT))
        shell.exit_status = 1
        return shell.exit_status
    try:
        os.chdir(path)
    except OSError as exc:
        _report("cd", exc.strerror or str(exc))
        shell.exit_status = 1
        return shell.exit_status
    shell.exit_status = 0
    return shell.exit_status


def builtin_pwd(shell: Shell, stdout: TextIO | None = None) -> int:
    """Print the working directory."""
    try:
        path = os.getcwd()
    except OSError as exc:
        _report("pwd", exc.strerror or str(exc))
        shell.exit_status = exc.errno or 1
        return 1
    print(path, file=_out(stdout))
    shell.exit_status = 0
    return 0


def builtin_echo(shell: Shell, args: Sequence[str], stdout: TextIO | None = None) -> int:
    """Print the arguments separated by spaces; ``-n`` first drops the newline."""
    words = list(args[1:])
    newline = True
    if words and words[0] == "-n":
        newline = False
        words = words[1:]
    stream = _out(stdout)
    stream.write(" ".join(words))
    if newline:
        stream.write("\n")
    shell.exit_status = 0
    return 0


def builtin_env(shell: Shell, args: Sequence[str], stdout: TextIO | None = None) -> int:
    """Print the environment as ``NAME="VALUE"`` lines."""
    if len(args) > 1:
        _report("env", "arguments are not supported")
    else:
        _print_table(shell.env, _out(stdout))
    shell.exit_status = 0
    return 0


def builtin_export(shell: Shell, args: Sequence[str], stdout: TextIO | None = None) -> int:
    """Without arguments print the sorted export list, otherwise set each ``NAME=VALUE``."""
    if len(args) <= 1:
        _print_table(shell.export, _out(stdout))
        shell.exit_status = 0
        return 0
    status = 0
    for entry in args[1:]:
        try:
            shell.env.set(entry)
            shell.export.set(entry)
        except ShellError as exc:
            _report("export", str(exc))
            status = 1
    shell.export.sort()
    shell.exit_status = status
    return status


def builtin_unset(shell: Shell, args: Sequence[str]) -> int:
    """Remove each named variable from the environment and the export list."""
    for name in args[1:]:
        shell.env.remove(name)
        shell.export.remove(name)
    shell.exit_status = 0
    return 0


_Handler = Callable[[Shell, Sequence[str], "TextIO | None"], int]

_COMMANDS: dict[str, _Handler] = {
    "cd": lambda shell, args, out: change_directory(shell, args[1] if len(args) > 1 else None),
    "pwd": lambda shell, args, out: builtin_pwd(shell, out),
    "echo": builtin_echo,
    "env": builtin_env,
    "export": builtin_export,
    "unset": lambda shell, args, out: builtin_unset(shell, args),
}


def run_builtin(shell: Shell, args: Sequence[str], stdout: TextIO | None = None) -> int:
    """Run the builtin named by ``args[0]`` and return the shell's exit status."""
    if not args:
        raise ValueError("no command given")
    name = args[0]
    if name == "exit":
        # Leaving the shell is decided by the prompt loop, not here.
        return shell.exit_status
    handler = _COMMANDS.get(name)
    if handler is None:
        raise ValueError(f"{name}: not a builtin")
    handler(shell, args, stdout)
    return shell.exit_status