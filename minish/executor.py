"""Running a command line: redirections, pipes, builtins and external programs."""

from __future__ import annotations

import contextlib
import os
import subprocess
import sys
import tempfile
from collections.abc import Callable, Iterator, Sequence
from typing import TextIO

from minish.builtins import run_builtin
from minish.lexer import TokenKind, classify, is_builtin, is_redirect, is_special, tokenize
from minish.state import STDIN_FD, STDOUT_FD, Shell

_SYNTAX_ERROR = "Minishell: syntax error near unexpected token `newline'"
_FILE_MODE = 0o644
_COMMAND_KINDS = (TokenKind.WORD, TokenKind.BUILTIN)
_NOT_FOUND = 127


def _sync(shell: Shell) -> None:
    shell.kinds = [classify(token) for token in shell.tokens]


def _close_redirect(fd: int, default: int) -> None:
    if fd != default and fd >= 0:
        with contextlib.suppress(OSError):
            os.close(fd)


def highest_priority(kinds: Sequence[int]) -> int:
    """Return the index of the first token with the highest kind."""
    if not kinds:
        raise ValueError("no tokens to choose from")
    return list(kinds).index(max(kinds))


def find_command_path(name: str, path: str | None) -> str | None:
    """Find an executable ``name`` directly or in the ``:``-separated ``path``."""
    if path is None or not name:
        return None
    if os.access(name, os.X_OK):
        return name
    for directory in filter(None, path.split(":")):
        candidate = f"{directory}/{name}"
        if os.access(candidate, os.X_OK):
            return candidate
    return None


def collect_command(shell: Shell, index: int) -> list[str]:
    """Take the words from ``index`` onwards out of the token list and return them."""
    picked = {
        i for i, token in enumerate(shell.tokens)
        if i >= index and classify(token) in _COMMAND_KINDS
    }
    args = [token for i, token in enumerate(shell.tokens) if i in picked]
    shell.tokens = [token for i, token in enumerate(shell.tokens) if i not in picked]
    _sync(shell)
    return args


def _missing_target(shell: Shell) -> int:
    print(_SYNTAX_ERROR, file=sys.stderr)
    shell.exit_status = 2
    return shell.exit_status


def _read_heredoc(shell: Shell, target: str | None) -> int:
    if target is None:
        return _missing_target(shell)
    interactive = sys.stdin.isatty()
    with tempfile.TemporaryFile() as buffer:
        while True:
            if interactive:
                sys.stdout.write("> ")
                sys.stdout.flush()
            line = sys.stdin.readline()
            if not line or line.rstrip("\n") == target:
                break
            buffer.write((line if line.endswith("\n") else line + "\n").encode())
        buffer.seek(0)
        fd = os.dup(buffer.fileno())
    _close_redirect(shell.infile, STDIN_FD)
    shell.infile = fd
    return 0


def _redirect_input(shell: Shell, target: str | None) -> int:
    if target is None:
        return _missing_target(shell)
    _close_redirect(shell.infile, STDIN_FD)
    try:
        shell.infile = os.open(target, os.O_RDONLY)
    except OSError as exc:
        shell.infile = STDIN_FD
        print(f"Minishell: {target}: {exc.strerror}", file=sys.stderr)
        shell.exit_status = 1
        return 1
    return 0


def _open_output(shell: Shell, target: str | None, flags: int) -> int:
    if target is None:
        return _missing_target(shell)
    _close_redirect(shell.outfile, STDOUT_FD)
    try:
        shell.outfile = os.open(target, os.O_WRONLY | os.O_CREAT | flags, _FILE_MODE)
    except OSError as exc:
        shell.outfile = STDOUT_FD
        print(f"Minishell: {target}: {exc.strerror}", file=sys.stderr)
        shell.exit_status = exc.errno or 1
        return 1
    return 0


_REDIRECTIONS: dict[str, Callable[[Shell, "str | None"], int]] = {
    "<<": _read_heredoc,
    "<": _redirect_input,
    ">>": lambda shell, target: _open_output(shell, target, os.O_APPEND),
    ">": lambda shell, target: _open_output(shell, target, os.O_TRUNC),
}


def handle_redirection(shell: Shell, index: int) -> int:
    """Apply the redirection at ``index`` and drop it and its target from the tokens.

    Returns 0 on success, otherwise the status that stops the line.
    """
    operator = shell.tokens[index]
    handler = _REDIRECTIONS.get(operator)
    if handler is None:
        raise ValueError(f"{operator}: not a redirection")
    target = shell.tokens[index + 1] if index + 1 < len(shell.tokens) else None
    status = handler(shell, target)
    del shell.tokens[index:index + 2]
    _sync(shell)
    return status


def exit_status_message(shell: Shell, line: str | None) -> str:
    """Return the message printed for a line that starts with ``$?``."""
    rest = line[2:] if line else ""
    return f"{shell.exit_status}{rest}: command not found"


@contextlib.contextmanager
def _output_stream(fd: int) -> Iterator[TextIO]:
    if fd == STDOUT_FD:
        yield sys.stdout
        return
    stream = open(fd, "w", encoding="utf-8", closefd=False)
    try:
        yield stream
    finally:
        with contextlib.suppress(BrokenPipeError):
            stream.close()


def _child_environ(shell: Shell) -> dict[str, str]:
    return dict(entry.split("=", 1) for entry in shell.env.to_environ())


class _LineRun:
    """Starts the commands of one line and collects their exit statuses."""

    def __init__(self, shell: Shell) -> None:
        self.shell = shell
        self.pending: list[subprocess.Popen | int] = []

    def dispatch(self, args: list[str], infile: int, outfile: int) -> None:
        if not args:
            self.pending.append(_NOT_FOUND)
        elif is_builtin(args[0]):
            with _output_stream(outfile) as stream, contextlib.suppress(BrokenPipeError):
                run_builtin(self.shell, args, stream)
                stream.flush()
        else:
            self._spawn(args, infile, outfile)

    def _spawn(self, args: list[str], infile: int, outfile: int) -> None:
        path = find_command_path(args[0], os.environ.get("PATH"))
        if path is None:
            print(f"minishell: {args[0]}: command not found", file=sys.stderr)
            self.pending.append(_NOT_FOUND)
            return
        if not os.path.dirname(path):
            path = os.path.abspath(path)
        sys.stdout.flush()
        try:
            process = subprocess.Popen(
                args,
                executable=path,
                stdin=None if infile == STDIN_FD else infile,
                stdout=None if outfile == STDOUT_FD else outfile,
                env=_child_environ(self.shell),
            )
        except OSError as exc:
            print(f"Execution failed: {exc.strerror}", file=sys.stderr)
            self.pending.append(exc.errno or 1)
            return
        self.shell.child_pids.append(process.pid)
        self.pending.append(process)

    def pipe(self, index: int) -> None:
        """Run the command after the pipe at ``index``; later output feeds it."""
        shell = self.shell
        right = collect_command(shell, index + 1)
        del shell.tokens[index]
        _sync(shell)
        read_fd, write_fd = os.pipe()
        try:
            self.dispatch(right, read_fd, shell.outfile)
        finally:
            os.close(read_fd)
        _close_redirect(shell.outfile, STDOUT_FD)
        shell.outfile = write_fd

    def wait(self) -> None:
        for item in self.pending:
            code = item if isinstance(item, int) else item.wait()
            self.shell.exit_status = 128 - code if code < 0 else code


def execute_line(shell: Shell, line: str) -> int:
    """Run one command line and return the resulting exit status."""
    if line.startswith("$?"):
        print(exit_status_message(shell, line))
        return shell.exit_status
    shell.tokens = tokenize(line, shell.env, shell.exit_status)
    _sync(shell)
    shell.exit_status = 0
    run = _LineRun(shell)
    try:
        while shell.tokens:
            index = highest_priority(shell.kinds)
            token = shell.tokens[index]
            if is_redirect(token):
                if handle_redirection(shell, index):
                    break
            elif is_special(token):
                last = max(i for i, tok in enumerate(shell.tokens) if is_special(tok))
                run.pipe(last)
            else:
                run.dispatch(collect_command(shell, index), shell.infile, shell.outfile)
    finally:
        shell.reset_fds()
        run.wait()
        shell.tokens = []
        shell.kinds = []
        shell.child_pids = []
    return shell.exit_status