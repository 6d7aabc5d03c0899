# tests/test_main.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

import main
from storage import ReadFailure


@pytest.fixture()
def app_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Points settings at a temp dir and puts the root logger back afterwards."""
    monkeypatch.setenv("TODO_DB_PATH", str(tmp_path / "data" / "db.json"))
    monkeypatch.setenv("TODO_LOG_DIR", str(tmp_path / "logs"))

    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    yield tmp_path
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in saved_handlers:
        root.addHandler(handler)
    root.setLevel(saved_level)
    logging.captureWarnings(False)


def _app_raising(error: BaseException):
    class _App:
        def __init__(self, *args, **kwargs) -> None:
            pass

        def run(self):
            raise error

    return _App


def test_interrupt_during_startup_shuts_down_quietly(
    app_env: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture
) -> None:
    monkeypatch.setattr(main, "App", _app_raising(KeyboardInterrupt()))

    main.main()

    assert capsys.readouterr().out == "todo-CLI has shut down.\n"
    assert (app_env / "data" / "db.json").read_text(encoding="utf-8") == "[]"


def test_fatal_error_is_reported(
    app_env: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture
) -> None:
    monkeypatch.setattr(main, "App", _app_raising(ReadFailure("cannot read db.json")))

    main.main()

    out = capsys.readouterr().out
    assert "An error occurred: cannot read db.json" in out
    assert out.endswith("todo-CLI has shut down.\n")
    assert "Fatal error" in (app_env / "logs" / "todo.log").read_text(encoding="utf-8")
