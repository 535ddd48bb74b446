# tests/test_ui.py
from __future__ import annotations

import pytest

prompt_toolkit = pytest.importorskip("prompt_toolkit")

from prompt_toolkit.document import Document  # noqa: E402

import cratchit.ui as ui_mod  # noqa: E402
from cratchit.config import YAMLConfig  # noqa: E402


@pytest.fixture
def printed(monkeypatch: pytest.MonkeyPatch) -> list[str]:
    out: list[str] = []

    def fake_print(text, style=None, end="\n"):
        out.append(text.value + end)

    monkeypatch.setattr(ui_mod, "print_formatted_text", fake_print)
    return out


class FakeSession:
    def __init__(self, answers: list[str]):
        self.answers = answers
        self.messages: list[str] = []

    def prompt(self, message):
        self.messages.append(message.value)
        return self.answers.pop(0)


def test_write_holds_back_partial_line(printed: list[str]) -> None:
    ui = ui_mod.PromptToolkitUI()
    ui.write("\nInit from x\nUpdate for command not yet implemented\n>")
    assert printed == ["\nInit from x\nUpdate for command not yet implemented\n"]


def test_held_back_text_becomes_read_prompt(
    printed: list[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    ui = ui_mod.PromptToolkitUI()
    session = FakeSession(["q"])
    ui.session = session  # type: ignore[assignment]
    monkeypatch.setattr(ui_mod, "patch_stdout", _null_context)

    ui.write("line\n>")
    assert ui.read("") == "q"
    assert session.messages == [">"]

    # Nothing pending after the read
    ui.flush()
    assert printed == ["line\n"]


def test_flush_writes_partial_line(printed: list[str]) -> None:
    ui = ui_mod.PromptToolkitUI()
    ui.write("\nBye for now :)")
    ui.flush()
    assert printed == ["\n", "Bye for now :)"]


def test_write_empty_is_noop(printed: list[str]) -> None:
    ui = ui_mod.PromptToolkitUI()
    ui.write("")
    ui.flush()
    assert printed == []


def test_partial_writes_join_across_calls(printed: list[str]) -> None:
    ui = ui_mod.PromptToolkitUI()
    ui.write("ab")
    ui.write("c\nd")
    assert printed == ["abc\n"]


def _completions(cfg, text: str) -> list[str]:
    completer = ui_mod.TriggerCompleter(cfg)
    doc = Document(text, cursor_position=len(text))
    return [c.text for c in completer.get_completions(doc, None)]


def test_trigger_completer_suggests_quit() -> None:
    cfg = YAMLConfig({})
    assert _completions(cfg, "qu") == ["quit"]
    assert _completions(cfg, "q") == ["quit"]


def test_trigger_completer_only_first_token() -> None:
    cfg = YAMLConfig({})
    assert _completions(cfg, "say qu") == []
    assert _completions(cfg, "") == []


def test_trigger_completer_without_config() -> None:
    assert _completions(None, "q") == []


def test_style_overrides_from_config() -> None:
    cfg = YAMLConfig(
        {"ui": {"theme": {"style": {"completion-menu": "bg:#000000", 1: "x"}}}}
    )
    style = ui_mod._build_style(cfg)
    assert ("completion-menu", "bg:#000000") in style.style_rules


class _null_context:
    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return None
