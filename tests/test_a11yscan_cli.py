from __future__ import annotations

import io
import json
from pathlib import Path
from types import SimpleNamespace

import pytest

from a11yscan_cli import cli, watcher


CLEAN = '<html lang="en"><body><main><h1>Home</h1><p>Hello</p></main></body></html>'
BROKEN = '<html><body><img src="x.png"><a href="/">click here</a></body></html>'


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_check_clean_file_exits_zero(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    page = _write(tmp_path / "index.html", CLEAN)
    assert cli.main(["check", str(page)]) == 0
    out = capsys.readouterr().out
    assert "Checking file:" in out
    assert "WCAG Level: AA" in out
    assert "All accessibility checks passed!" in out


def test_check_failing_file_exits_one(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    page = _write(tmp_path / "bad.html", BROKEN)
    assert cli.main(["check", str(page)]) == 1
    out = capsys.readouterr().out
    assert "Accessibility issues found" in out
    assert "[CRITICAL]" in out


def test_check_json_format(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    page = _write(tmp_path / "bad.html", BROKEN)
    assert cli.main(["check", str(page), "--format", "json", "--level", "aaa"]) == 1
    payload = json.loads(capsys.readouterr().out)
    assert payload["schema"] == "a11yscan.report.v1"
    assert payload["wcag_level"] == "AAA"
    assert {"img-alt-missing", "no-lang"} <= {e["id"] for e in payload["errors"]}


def test_check_reads_stdin(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO(CLEAN))
    assert cli.main(["check", "-", "--format", "json"]) == 0
    assert json.loads(capsys.readouterr().out)["passed"] is True


def test_check_validate_schema(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    pytest.importorskip("jsonschema")
    page = _write(tmp_path / "bad.html", BROKEN)
    assert cli.main(["check", str(page), "--validate-schema", "--format", "json"]) == 1


def test_disable_and_fail_on_warnings(tmp_path: Path) -> None:
    page = _write(tmp_path / "warn.html", '<html lang="en"><body><h1>x</h1><div tabindex="4">y</div></body></html>')
    assert cli.main(["check", str(page)]) == 0
    assert cli.main(["check", str(page), "--fail-on-warnings"]) == 1
    args = ["check", str(page), "--fail-on-warnings", "--disable", "tabindex-positive", "--disable", "no-main-landmark"]
    assert cli.main(args) == 0


def test_config_file_supplies_defaults(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _write(tmp_path / "a11yscan.toml", '[check]\nformat = "json"\nlevel = "A"\n')
    page = _write(tmp_path / "index.html", CLEAN)
    assert cli.main(["check", str(page)]) == 0
    assert json.loads(capsys.readouterr().out)["wcag_level"] == "A"

    assert cli.main(["check", str(page), "--level", "AA", "--format", "text"]) == 0
    assert "WCAG Level: AA" in capsys.readouterr().out


def test_explicit_config_path(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    cfg = _write(tmp_path / "custom.toml", '[check]\ndisabled_rules = ["img-alt-missing", "no-lang"]\n')
    page = _write(tmp_path / "bad.html", BROKEN)
    assert cli.main(["check", str(page), "--config", str(cfg)]) == 0


def test_missing_file_is_usage_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["check", str(tmp_path / "missing.html")]) == 2
    assert "[error]" in capsys.readouterr().err


def test_json_errors_go_to_stderr(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["--json", "check", str(tmp_path / "missing.html")]) == 2
    err = json.loads(capsys.readouterr().err)
    assert err["ok"] is False
    assert err["code"] == "FileNotFoundError"


def test_invalid_level_flag_is_rejected_by_argparse(tmp_path: Path) -> None:
    page = _write(tmp_path / "index.html", CLEAN)
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["check", str(page), "--level", "B"])
    assert excinfo.value.code == 2


def test_contrast_command(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["contrast", "#000000", "#FFFFFF"]) == 0
    out = capsys.readouterr().out
    assert "Ratio: 21" in out
    assert "4.5:1" in out

    assert cli.main(["contrast", "777777", "888888"]) == 1


def test_contrast_command_json_and_large_text(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["--json", "contrast", "#767676", "#FFFFFF", "--font-size", "14", "--bold"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["wcag_level"] == "AAA"
    assert "3:1" in payload["recommendation"]


def test_contrast_command_rejects_bad_color(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["contrast", "red", "#FFFFFF"]) == 2
    assert "Invalid hex color" in capsys.readouterr().err


def test_demo_contrast(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["demo-contrast"]) == 0
    out = capsys.readouterr().out
    for name in ("Black on White", "White on Black", "Blue on White", "Gray on White", "Red on White"):
        assert name in out
    assert "Level: Fail" in out


def test_watch_rejects_stdin() -> None:
    assert cli.main(["check", "-", "--watch"]) == 2


def test_watch_handler_reruns_only_for_target(tmp_path: Path) -> None:
    target = _write(tmp_path / "index.html", CLEAN)
    calls: list[int] = []
    handler = watcher.CheckEventHandler(target, lambda: calls.append(1) or 0, delay=0)

    def event(path: Path, kind: str = "modified", is_directory: bool = False) -> SimpleNamespace:
        return SimpleNamespace(src_path=str(path), event_type=kind, is_directory=is_directory)

    handler.on_any_event(event(tmp_path / "other.html"))
    handler.on_any_event(event(tmp_path, is_directory=True))
    handler.on_any_event(event(target, kind="deleted"))
    assert calls == []

    handler.on_any_event(event(target))
    assert calls == [1]
    assert handler.last_code == 0


def test_watch_handler_reports_failures(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    target = _write(tmp_path / "index.html", CLEAN)

    def boom() -> int:
        raise RuntimeError("disk gone")

    handler = watcher.CheckEventHandler(target, boom, delay=0)
    handler.on_any_event(SimpleNamespace(src_path=str(target), event_type="modified", is_directory=False))
    assert "[error] Check failed: disk gone" in capsys.readouterr().err


def test_cmd_watch_runs_once_then_stops_on_interrupt(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    target = _write(tmp_path / "index.html", BROKEN)

    class _Observer:
        def schedule(self, handler, path, recursive=False):
            self.path = path

        def start(self):
            pass

        def stop(self):
            pass

        def join(self):
            pass

    def _interrupt(_seconds):
        raise KeyboardInterrupt

    monkeypatch.setattr(watcher, "Observer", _Observer)
    monkeypatch.setattr(watcher, "time", SimpleNamespace(time=lambda: 0.0, sleep=_interrupt))
    assert watcher.cmd_watch(target, lambda: 1) == 1
