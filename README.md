# minish

A small interactive shell. It reads a line at a time and splits it into words
and operators while honouring single and double quotes. It expands `$NAME`
and `$?`, applies redirections and pipes, and then runs built-in commands or
external programs found on `PATH`.

## Installing

```
pip install .
```

## Running

```
minish
```

The shell shows a `minishell> ` prompt. If a line ends inside an open quote,
the shell asks for the rest with `squote> ` or `dquote> ` and joins the lines
with a newline. Type `exit` on a line by itself, or press Ctrl-D, to leave.
Ctrl-D prints `exit`. Typing `exit` prints `Terminating Minishell`. Line
editing and history come from Python's `readline` module when it is available.

## What it understands

- **Words** are separated by spaces. Quote characters are removed from the
  word. Text in single quotes is taken literally. Text in double quotes stays
  one word, and variables inside it are still expanded.
- **`$NAME`** is replaced with the value of the first variable whose name is a
  prefix of the text after the `$`. A `$` that matches no variable stays as
  written.
- **`$?`** inside a word is replaced with the exit status of the last command.
  A line that starts with `$?` prints the status followed by the rest of the
  line and `: command not found`.
- **Redirections.** `< file` reads input from a file. `> file` writes output to
  a file and truncates it first. `>> file` appends to the file. `<< WORD` reads
  lines from standard input until a line equal to `WORD` and feeds them to the
  command. A redirection with no file name is a syntax error and sets the
  status to 2.
- **Pipes.** `a | b | c` connects each command's output to the next command's
  input.
- **Built-ins.**
  - `cd DIR` changes directory.
  - `pwd` prints the working directory.
  - `echo [-n] ARGS...` prints its arguments.
  - `env` prints the environment as `NAME="VALUE"` lines.
  - `export NAME=VALUE...` sets variables. With no arguments it lists the
    exported variables sorted by name.
  - `unset NAME...` removes variables.
- **External programs.** Any other command is looked up on `PATH` and run as a
  child process with the shell's current environment. A name that cannot be
  found prints `minishell: NAME: command not found` and gives status 127. A
  command killed by a signal gives status 128 plus the signal number.

## Using it from Python

The shell state, the lexer and the executor can be used on their own:

```python
import io
from minish.state import Shell
from minish.lexer import tokenize
from minish.builtins import run_builtin

shell = Shell.from_environ({"USER": "alice", "HOME": "/home/alice"})
words = tokenize('echo "hi $USER"', shell.env, shell.exit_status)
# ['echo', 'hi alice']

out = io.StringIO()
run_builtin(shell, words, out)
print(out.getvalue())  # hi alice
```

The modules:

- **`minish.state`**
  - `Shell` holds the environment, the sorted export list, the exit status and
    the redirected descriptors.
  - `VarTable` is the ordered variable table. It has `set`, `get_value`,
    `get_name`, `remove`, `sort`, `entries` and `to_environ`.
  - `ShellError` is raised for an entry with no valid name.
- **`minish.lexer`**
  - `tokenize(line, env, exit_status)` splits a line into tokens.
  - `classify` returns a `TokenKind` for a token.
  - `is_redirect`, `is_builtin` and `is_special` test single tokens.
- **`minish.splitting`** has quote-aware string helpers.
  - `strip_quotes(text)` removes the quote characters from a string.
  - `split_out_quotes(text, sep)` splits on a character except inside quotes.
  - `split_keep_separator(text, sep)` splits on a string and keeps the
    separators between the pieces.
- **`minish.builtins`**
  - `run_builtin(shell, args, stdout)` runs a built-in and writes its output to
    `stdout`.
  - `change_directory`, `builtin_pwd`, `builtin_echo`, `builtin_env`,
    `builtin_export` and `builtin_unset` are the individual built-ins.
- **`minish.executor`**
  - `execute_line(shell, line)` runs a whole input line the same way the
    prompt does and returns the exit status.
  - `find_command_path(name, path)` resolves a program on a `PATH`-style
    string.
- **`minish.cli`**
  - `run_prompt(shell, read)` drives the read-and-execute loop. `read` is any
    function that takes a prompt string and returns a line, or `None` at end
    of input.
  - `main()` is the `minish` command.

## What it does not do

- It installs no signal handlers, so Ctrl-C stops the shell.
- It has no `&&`, `||`, `;`, globbing or background jobs.
- `exit` takes no status argument. Only a line that is exactly `exit` leaves
  the shell.
- `env` with arguments only reports that arguments are not supported.

## Tests

```
pip install .[test]
pytest
```