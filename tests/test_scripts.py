import io
import sys

import pytest

from vimscape.scripts import format_skill_line, process_cli, setup_cli, show_cli
from vimscape.settings import Settings


def run_cli(monkeypatch, func, *argv):
    monkeypatch.setattr(sys, "argv", [func.__name__, *argv])
    func()


def test_format_skill_line():
    assert format_skill_line("Search", 12, 12345) == "Search                 12      12,345 xp"


def test_setup_process_show(monkeypatch, capsys, tmp_path):
    db_path = tmp_path / "skills.db"
    keystrokes = tmp_path / "keys.txt"
    keystrokes.write_text("100j:w|enter|\n")

    run_cli(monkeypatch, setup_cli, "--db", str(db_path))
    run_cli(monkeypatch, process_cli, "--db", str(db_path), str(keystrokes))
    run_cli(monkeypatch, show_cli, "--db", str(db_path))
    out = capsys.readouterr().out
    assert format_skill_line("VerticalNavigation", 2, 100) in out
    assert format_skill_line("Saving", 1, 1) in out

    run_cli(monkeypatch, show_cli, "--db", str(db_path), "Saving")
    out = capsys.readouterr().out
    assert out.splitlines() == [format_skill_line("Saving", 1, 1), "82 xp to level 2"]


def test_process_reads_stdin(monkeypatch, capsys, tmp_path):
    settings_path = tmp_path / "settings.json"
    Settings(db_path=tmp_path / "skills.db").save(settings_path)
    run_cli(monkeypatch, setup_cli, "--settings", str(settings_path))

    monkeypatch.setattr(sys, "stdin", io.StringIO("yyp\n"))
    run_cli(monkeypatch, process_cli, "--settings", str(settings_path))
    capsys.readouterr()
    run_cli(monkeypatch, show_cli, "--settings", str(settings_path), "Clipboard")
    assert capsys.readouterr().out.splitlines()[0] == format_skill_line("Clipboard", 1, 20)


def test_db_path_expands_home(monkeypatch, capsys, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    run_cli(monkeypatch, setup_cli, "--db", "~/skills.db")
    assert (tmp_path / "skills.db").is_file()

    monkeypatch.setattr(sys, "stdin", io.StringIO("3j"))
    run_cli(monkeypatch, process_cli, "--db", "~/skills.db")
    run_cli(monkeypatch, show_cli, "--db", "~/skills.db", "VerticalNavigation")
    assert format_skill_line("VerticalNavigation", 1, 3) in capsys.readouterr().out


def test_process_without_store_exits(monkeypatch, tmp_path):
    monkeypatch.setattr(sys, "stdin", io.StringIO("5j"))
    with pytest.raises(SystemExit) as excinfo:
        run_cli(monkeypatch, process_cli, "--db", str(tmp_path / "skills.db"))
    assert excinfo.value.code == 1


def test_show_unknown_skill_exits(monkeypatch, capsys, tmp_path):
    db_path = tmp_path / "skills.db"
    run_cli(monkeypatch, setup_cli, "--db", str(db_path))
    with pytest.raises(SystemExit) as excinfo:
        run_cli(monkeypatch, show_cli, "--db", str(db_path), "Juggling")
    assert excinfo.value.code == 1
    assert "No skill named Juggling" in capsys.readouterr().err
