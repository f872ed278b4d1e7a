import io
import os

import pytest

from minish.builtins import (
    builtin_echo,
    builtin_env,
    builtin_export,
    builtin_pwd,
    builtin_unset,
    change_directory,
    run_builtin,
)
from minish.state import Shell


@pytest.fixture
def shell():
    return Shell.from_environ({"B": "2", "A": "1"})


def test_echo_joins_arguments(shell):
    buf = io.StringIO()
    assert builtin_echo(shell, ["echo", "a", "b"], buf) == 0
    assert buf.getvalue() == "a b\n"
    assert shell.exit_status == 0


def test_echo_n_flag_drops_newline(shell):
    buf = io.StringIO()
    builtin_echo(shell, ["echo", "-n", "x", "y"], buf)
    assert buf.getvalue() == "x y"


def test_echo_without_words_prints_newline(shell):
    buf = io.StringIO()
    builtin_echo(shell, ["echo"], buf)
    assert buf.getvalue() == "\n"


def test_env_prints_in_table_order(shell):
    buf = io.StringIO()
    builtin_env(shell, ["env"], buf)
    assert buf.getvalue() == 'B="2"\nA="1"\n'


def test_env_with_arguments_reports(shell, capsys):
    buf = io.StringIO()
    builtin_env(shell, ["env", "X"], buf)
    assert buf.getvalue() == ""
    assert "minishell: env" in capsys.readouterr().err


def test_export_without_arguments_prints_sorted(shell):
    buf = io.StringIO()
    builtin_export(shell, ["export"], buf)
    assert buf.getvalue() == 'A="1"\nB="2"\n'


def test_export_adds_to_both_tables(shell):
    assert builtin_export(shell, ["export", "C=3", "FLAG"]) == 0
    assert shell.env.entries()[-2:] == [("C", "3"), ("FLAG", None)]
    names = [name for name, _ in shell.export.entries()]
    assert names == sorted(names)
    assert "C" in shell.export and "FLAG" in shell.export


def test_export_unset_value_prints_empty(shell):
    buf = io.StringIO()
    builtin_export(shell, ["export", "FLAG"])
    builtin_env(shell, ["env"], buf)
    assert buf.getvalue().endswith('FLAG=""\n')


def test_export_invalid_entry_sets_status(shell, capsys):
    assert builtin_export(shell, ["export", "="]) == 1
    assert shell.exit_status == 1
    assert "minishell: export" in capsys.readouterr().err


def test_unset_removes_from_both(shell):
    builtin_unset(shell, ["unset", "A", "MISSING"])
    assert "A" not in shell.env
    assert "A" not in shell.export
    assert len(shell.env) == 1


def test_cd_changes_directory(shell, tmp_path, monkeypatch):
    monkeypatch.chdir(os.getcwd())
    assert change_directory(shell, str(tmp_path)) == 0
    assert os.path.samefile(os.getcwd(), tmp_path)


def test_cd_missing_directory_fails(shell, tmp_path, capsys):
    assert change_directory(shell, str(tmp_path / "missing")) == 1
    assert shell.exit_status == 1
    assert "minishell: cd" in capsys.readouterr().err


def test_cd_without_path_fails(shell, capsys):
    assert change_directory(shell, None) == 1
    assert "minishell: cd" in capsys.readouterr().err


def test_pwd_prints_cwd(shell, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    buf = io.StringIO()
    assert builtin_pwd(shell, buf) == 0
    assert buf.getvalue() == f"{os.getcwd()}\n"


def test_run_builtin_dispatches(shell):
    buf = io.StringIO()
    assert run_builtin(shell, ["echo", "hi"], buf) == 0
    assert buf.getvalue() == "hi\n"


def test_run_builtin_unset(shell):
    run_builtin(shell, ["unset", "B"])
    assert "B" not in shell.env


def test_run_builtin_unknown_raises(shell):
    with pytest.raises(ValueError):
        run_builtin(shell, ["ls"])


def test_run_builtin_empty_raises(shell):
    with pytest.raises(ValueError):
        run_builtin(shell, [])