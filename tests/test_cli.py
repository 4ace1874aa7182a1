"""Tests for the fuzzy-motion CLI."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Callable

import pytest
from click.testing import CliRunner

import fuzzy_motion.cli as cli_module
import fuzzy_motion.session as session_module
from fuzzy_motion.cli import main
from fuzzy_motion.keys import ESCAPE
from fuzzy_motion.labels import recompute

from .virtual_terminal import VirtualTerminal


@pytest.fixture
def runner(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> CliRunner:
    monkeypatch.setenv("FUZZY_MOTION_CONFIG_DIR", str(tmp_path / "global"))
    return CliRunner()


def _write_buffer(name: str = "buffer.txt") -> str:
    Path(name).write_text("foo bar\nfoobar baz\n", encoding="utf-8")
    return name


def _parse(output: str) -> list[dict]:
    return [json.loads(line) for line in output.splitlines() if line.strip()]


class FakeProcessTerminal(VirtualTerminal):
    """Stands in for the raw-mode terminal; records start and stop."""

    def __init__(self, fail_start: bool = False) -> None:
        super().__init__(rows=10, columns=40)
        self.fail_start = fail_start
        self.started = False
        self.stopped = False

    def start(self) -> None:
        self.started = True
        if self.fail_start:
            raise OSError("add_reader failed")

    def stop(self) -> None:
        self.stopped = True


Install = Callable[..., list[FakeProcessTerminal]]


@pytest.fixture
def interactive(monkeypatch: pytest.MonkeyPatch) -> Install:
    """Make `jump` run on a fake terminal that replays the given key codes."""
    created: list[FakeProcessTerminal] = []

    def install(*keys: int | str, fail_start: bool = False) -> list[FakeProcessTerminal]:
        def factory() -> FakeProcessTerminal:
            terminal = FakeProcessTerminal(fail_start=fail_start)
            terminal.press(*(ord(k) if isinstance(k, str) else k for k in keys))
            created.append(terminal)
            return terminal

        monkeypatch.setattr(cli_module, "ProcessTerminal", factory)
        monkeypatch.setattr(cli_module, "_is_interactive", lambda: True)
        return created

    return install


class TestTargetsCommand:
    def test_prints_labeled_targets(self, runner: CliRunner) -> None:
        with runner.isolated_filesystem():
            path = _write_buffer()
            result = runner.invoke(main, ["targets", path, "fo", "--labels", "asd"])

        assert result.exit_code == 0, result.output
        targets = _parse(result.output)
        assert [(t["pos"]["line"], t["char"]) for t in targets] == [(1, "a"), (2, "s")]
        assert targets[0]["text"] == "foo"
        assert (targets[0]["start"], targets[0]["end"]) == (0, 2)

    def test_top_and_height_limit_scanned_lines(self, runner: CliRunner) -> None:
        with runner.isolated_filesystem():
            path = _write_buffer()
            result = runner.invoke(
                main, ["targets", path, "fo", "--labels", "asd", "--top", "2", "--height", "1"]
            )

        assert result.exit_code == 0, result.output
        assert [t["text"] for t in _parse(result.output)] == ["foobar"]

    def test_transliteration_matcher(self, runner: CliRunner) -> None:
        with runner.isolated_filesystem():
            Path("buffer.txt").write_text("café cafe\n", encoding="utf-8")
            settings = {"wordRegexpList": [r"\w+"], "matchers": ["kensaku"]}
            Path("settings.json").write_text(json.dumps(settings), encoding="utf-8")
            result = runner.invoke(
                main,
                ["targets", "buffer.txt", "CAFE", "--labels", "asd", "--config", "settings.json"],
            )

        assert result.exit_code == 0, result.output
        targets = _parse(result.output)
        assert [(t["text"], t["char"]) for t in targets] == [("café", "a"), ("cafe", "s")]

    def test_settings_file(self, runner: CliRunner) -> None:
        with runner.isolated_filesystem():
            path = _write_buffer()
            Path("settings.json").write_text(json.dumps({"labels": "xy"}), encoding="utf-8")
            result = runner.invoke(main, ["targets", path, "fo", "--config", "settings.json"])

        assert result.exit_code == 0, result.output
        assert [t["char"] for t in _parse(result.output)] == ["x", "y"]

    def test_empty_query_prints_nothing(self, runner: CliRunner) -> None:
        with runner.isolated_filesystem():
            path = _write_buffer()
            result = runner.invoke(main, ["targets", path, ""])

        assert result.exit_code == 0
        assert result.output == ""

    def test_duplicate_labels_rejected(self, runner: CliRunner) -> None:
        with runner.isolated_filesystem():
            path = _write_buffer()
            result = runner.invoke(main, ["targets", path, "fo", "--labels", "aa"])

        assert result.exit_code == 1
        assert "Duplicate label" in result.output

    def test_unknown_matcher_rejected(self, runner: CliRunner) -> None:
        with runner.isolated_filesystem():
            path = _write_buffer()
            result = runner.invoke(main, ["targets", path, "fo", "--matcher", "nope"])

        assert result.exit_code == 1
        assert "Unknown matcher" in result.output

    def test_missing_file(self, runner: CliRunner) -> None:
        with runner.isolated_filesystem():
            result = runner.invoke(main, ["targets", "nope.txt", "fo"])

        assert result.exit_code == 2


class TestJumpCommand:
    def test_requires_terminal(self, runner: CliRunner) -> None:
        with runner.isolated_filesystem():
            path = _write_buffer()
            result = runner.invoke(main, ["jump", path])

        assert result.exit_code == 1
        assert "interactive terminal" in result.output

    def test_prints_jump_position(self, runner: CliRunner, interactive: Install) -> None:
        terminals = interactive("f", "o", "o", "b", "s")
        with runner.isolated_filesystem():
            path = _write_buffer()
            result = runner.invoke(main, ["jump", path, "--labels", "as"])

        assert result.exit_code == 0, result.output
        assert result.output == "buffer.txt:2:1\n"
        assert terminals[0].started and terminals[0].stopped

    def test_cancel_exits_quietly(self, runner: CliRunner, interactive: Install) -> None:
        terminals = interactive("f", ESCAPE)
        with runner.isolated_filesystem():
            path = _write_buffer()
            result = runner.invoke(main, ["jump", path, "--labels", "as"])

        assert result.exit_code == 1
        assert result.output == ""
        assert terminals[0].stopped

    def test_session_failure_is_reported_after_restore(
        self, runner: CliRunner, interactive: Install, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def broken(state, query, words, config):  # type: ignore[no-untyped-def]
            if query:
                raise RuntimeError("matcher exploded")
            return recompute(state, query, words, config)

        monkeypatch.setattr(session_module, "recompute", broken)
        terminals = interactive("f")
        with runner.isolated_filesystem():
            path = _write_buffer()
            result = runner.invoke(main, ["jump", path, "--labels", "as"])

        assert result.exit_code == 1
        assert "Motion session failed: matcher exploded" in result.output
        assert terminals[0].stopped

    def test_terminal_restored_when_start_fails(self, runner: CliRunner, interactive: Install) -> None:
        terminals = interactive(fail_start=True)
        with runner.isolated_filesystem():
            path = _write_buffer()
            result = runner.invoke(main, ["jump", path])

        assert result.exit_code == 1
        assert isinstance(result.exception, OSError)
        assert terminals[0].stopped


def test_help_without_command(runner: CliRunner) -> None:
    result = runner.invoke(main, [])
    assert result.exit_code == 0
    assert "targets" in result.output
