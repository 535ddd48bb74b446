# tests/test_cli.py
from __future__ import annotations

import io
from dataclasses import dataclass, field
from pathlib import Path

import pytest

import cratchit.cli as cli
from cratchit import config


@dataclass
class FakeUI:
    inputs: list[str]
    outputs: list[str] = field(default_factory=list)

    def read(self, prompt: str) -> str:
        if not self.inputs:
            raise EOFError
        return self.inputs.pop(0)

    def write(self, text: str) -> None:
        self.outputs.append(text)


class FakeStdin(io.StringIO):
    def isatty(self) -> bool:
        return False


def test_run_session_persists_environment(tmp_path: Path) -> None:
    cfg = config.load_system_config()
    settings = config.StartupSettings(cwd=tmp_path, path=None, command="")
    ui = FakeUI(inputs=["q"])

    cli.run_session(settings, cfg, read_fn=ui.read, write_fn=ui.write)

    env_file = tmp_path / "cratchit.env"
    assert env_file.read_text(encoding="utf-8") == (
        '"Test Entry":"Test Value"\n"Test2":"4711"'
    )
    assert "Init from " + str(env_file) in ui.outputs[0]


def test_run_session_keeps_existing_entries(tmp_path: Path) -> None:
    env_file = tmp_path / "cratchit.env"
    env_file.write_text('// user file\n"Name":"Bob \\"C\\""', encoding="utf-8")
    cfg = config.load_system_config()
    settings = config.StartupSettings(cwd=tmp_path, path="/bin", command="x ")

    cli.run_session(settings, cfg, read_fn=FakeUI(["quit"]).read,
                    write_fn=lambda s: None)

    assert env_file.read_text(encoding="utf-8") == (
        '"Name":"Bob \\"C\\""\n"Test Entry":"Test Value"\n"Test2":"4711"'
    )


def test_run_session_routes_store_errors(tmp_path: Path) -> None:
    # Directory in place of the env file: both load and save fail
    (tmp_path / "cratchit.env").mkdir()
    cfg = config.load_system_config()
    settings = config.StartupSettings(cwd=tmp_path, path=None, command="")
    errors: list[str] = []

    cli.run_session(
        settings,
        cfg,
        read_fn=FakeUI(["q"]).read,
        write_fn=lambda s: None,
        error_fn=errors.append,
    )

    assert any(e.startswith("[ERROR] Read from") for e in errors)
    assert any(e.startswith("[ERROR] Write to") for e in errors)


def test_main_legacy_ui_end_to_end(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("CRATCHIT_LEGACY_UI", "1")
    monkeypatch.setenv("PATH", "/usr/bin")
    monkeypatch.setattr("sys.stdin", FakeStdin("q\nnever\n"))

    assert cli.main(["hello"]) == 0

    out = capsys.readouterr().out
    assert out.startswith("\nPATH=/usr/bin")
    assert "Init from" in out
    assert "not yet implemented" in out
    assert "Bye for now" in out
    assert out.endswith("\n")
    assert (tmp_path / "cratchit.env").exists()


def test_main_with_missing_path_shows_unset(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("PATH", raising=False)
    monkeypatch.setattr("sys.stdin", FakeStdin(""))

    assert cli.main([]) == 0

    out = capsys.readouterr().out
    assert out.startswith("\nPATH=<unset>")
    # End of input still ends the session through Quit
    assert "Bye for now" in out


def test_main_uses_sys_argv_by_default(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("sys.argv", ["cratchit", "a", "b"])
    monkeypatch.setattr("sys.stdin", FakeStdin("q\n"))

    seen: list[str] = []
    monkeypatch.setattr(
        cli, "run_session", lambda settings, cfg: seen.append(settings.command)
    )

    assert cli.main() == 0
    assert seen == ["a b "]
