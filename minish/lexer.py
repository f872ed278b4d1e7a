"""Breaking a command line into tokens and classifying them."""

from __future__ import annotations

from enum import IntEnum

from minish.state import VarTable

NO_QUOTE = 0
SINGLE_QUOTE = 1
DOUBLE_QUOTE = 2

REDIRECTIONS = frozenset({">", ">>", "<", "<<"})
SPECIALS = frozenset({"|"})
BUILTINS = frozenset({"cd", "pwd", "echo", "env", "export", "unset", "exit"})
OPERATOR_CHARS = "|><&"
QUOTE_CHARS = "'\""


class TokenKind(IntEnum):
    """What a token is; a higher value is handled first."""

    WORD = 1
    BUILTIN = 2
    SPECIAL = 3
    REDIRECT = 4


def is_redirect(token: str) -> bool:
    """Return whether ``token`` is a redirection operator."""
    return token in REDIRECTIONS


def is_builtin(token: str) -> bool:
    """Return whether ``token`` names a builtin command."""
    return token in BUILTINS


def is_special(token: str) -> bool:
    """Return whether ``token`` is a pipe."""
    return token in SPECIALS


def classify(token: str) -> TokenKind:
    """Return the kind of ``token``."""
    if is_redirect(token):
        return TokenKind.REDIRECT
    if is_special(token):
        return TokenKind.SPECIAL
    if is_builtin(token):
        return TokenKind.BUILTIN
    return TokenKind.WORD


def next_quote_state(char: str, quote: int) -> int:
    """Return the quoting state after reading ``char`` in state ``quote``."""
    if quote == NO_QUOTE:
        if char == "'":
            return SINGLE_QUOTE
        if char == '"':
            return DOUBLE_QUOTE
        return NO_QUOTE
    if (char == "'" and quote == SINGLE_QUOTE) or (char == '"' and quote == DOUBLE_QUOTE):
        return NO_QUOTE
    return quote


class _Scanner:
    """Walks one command line, building tokens as it goes."""

    def __init__(self, line: str, env: VarTable, exit_status: int) -> None:
        self.line = line
        self.env = env
        self.exit_status = exit_status
        self.pos = 0
        self.quote = NO_QUOTE
        self.current: str | None = None
        self.tokens: list[str] = []

    def run(self) -> list[str]:
        while self.pos < len(self.line):
            char = self.line[self.pos]
            self.quote = next_quote_state(char, self.quote)
            if self.quote == NO_QUOTE and char in OPERATOR_CHARS:
                self._operator()
            elif self.quote == NO_QUOTE and char == " ":
                self._flush()
                self.pos += 1
            else:
                self._word_char()
        self._flush()
        return self.tokens

    def _flush(self) -> None:
        if self.current is not None:
            self.tokens.append(self.current)
            self.current = None

    def _operator(self) -> None:
        pair = self.line[self.pos:self.pos + 2]
        self._flush()
        if pair in (">>", "<<"):
            self.tokens.append(pair)
            self.pos += 2
        else:
            self.tokens.append(self.line[self.pos])
            self.pos += 1

    def _word_char(self) -> None:
        line = self.line
        expanding = self.quote in (NO_QUOTE, DOUBLE_QUOTE)
        if expanding and line[self.pos + 1:self.pos + 2] == "?":
            self.current = (self.current or "") + str(self.exit_status)
            self.pos += len(self.current) + 1
            if self.pos >= len(line):
                return
        char = line[self.pos]
        value = self.env.get_value(line[self.pos + 1:])
        if expanding and char == "$" and value is not None:
            self.current = (self.current or "") + value
            name = self.env.get_name(value)
            self.pos += len(name or "") + 1
        else:
            if char not in QUOTE_CHARS:
                self.current = (self.current or "") + char
            self.pos += 1


def tokenize(line: str, env: VarTable, exit_status: int) -> list[str]:
    """Split ``line`` into words and operators, expanding variables from ``env``."""
    return _Scanner(line, env, exit_status).run()