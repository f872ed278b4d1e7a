"""The interactive prompt loop and the command entry point."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Sequence

from minish.executor import execute_line
from minish.lexer import NO_QUOTE, SINGLE_QUOTE, next_quote_state
from minish.state import Shell

PROMPT = "minishell> "
SQUOTE_PROMPT = "squote> "
DQUOTE_PROMPT = "dquote> "

Reader = Callable[[str], "str | None"]


def unclosed_quote(text: str) -> int:
    """Return 1 if a single quote is left open in ``text``, 2 for a double quote, else 0."""
    quote = NO_QUOTE
    for char in text:
        quote = next_quote_state(char, quote)
    return quote


def complete_quotes(line: str, read: Reader) -> str | None:
    """Read continuation lines until every quote in ``line`` is closed.

    Returns the joined line, or None if input ends first.
    """
    while (quote := unclosed_quote(line)) != NO_QUOTE:
        prompt = SQUOTE_PROMPT if quote == SINGLE_QUOTE else DQUOTE_PROMPT
        more = read(prompt)
        if more is None:
            return None
        line = f"{line}\n{more}"
    return line


def run_prompt(shell: Shell, read: Reader) -> int:
    """Read and run command lines until ``exit`` or end of input; return the exit status."""
    while True:
        line = read(PROMPT)
        if line is None:
            sys.stdout.write("exit\n")
            sys.stdout.flush()
            return shell.exit_status
        if line == "exit":
            print("Terminating Minishell")
            return shell.exit_status
        completed = complete_quotes(line, read)
        if completed is None:
            sys.stdout.write("exit\n")
            sys.stdout.flush()
            return shell.exit_status
        if not completed:
            continue
        execute_line(shell, completed)
        sys.stdout.flush()


def _read_line(prompt: str) -> str | None:
    try:
        return input(prompt)
    except EOFError:
        return None


def main(argv: Sequence[str] | None = None) -> int:
    """Start an interactive shell on the current environment."""
    del argv
    try:
        import readline  # noqa: F401  (enables line editing and history for input())
    except ImportError:
        pass
    shell = Shell.from_environ(os.environ)
    run_prompt(shell, _read_line)
    return 0


if __name__ == "__main__":
    sys.exit(main())