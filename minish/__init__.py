"""A small interactive shell with quoting, variable expansion, redirections, pipes and built-ins."""

__version__ = "0.1.0"
__all__ = ["state", "lexer", "splitting", "builtins", "executor", "cli"]