"""CLI parser and command behaviour tests."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from codelens.cli import _build_parser, main
from tests._fixtures.source_tree import SourceTree


@pytest.fixture
def workdir(source_tree: SourceTree, monkeypatch) -> Path:
    monkeypatch.chdir(source_tree.path())
    return source_tree.path()


def _write(directory: Path, name: str, content: str) -> str:
    path = directory / name
    path.write_text(content, encoding="utf-8")
    return str(path)


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "detect", "x.py"])
    assert args.verbose is True
    assert args.command == "detect"


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["check", "x.py", "--verbose"])
    assert args.verbose is True
    assert args.command == "check"


def test_cli_format_options() -> None:
    parser = _build_parser()
    args = parser.parse_args(["format", "x.js", "--write", "--indent-size", "4", "--use-tabs"])
    assert args.write is True
    assert args.indent_size == 4
    assert args.use_tabs is True
    assert args.drop_blank_lines is False


def test_cli_rejects_unknown_language() -> None:
    with pytest.raises(SystemExit):
        _build_parser().parse_args(["detect", "x", "--language", "cobol"])


def test_detect_prints_tag_and_name(workdir: Path, capsys) -> None:
    main(["detect", _write(workdir, "tool.py", "print(1)\n")])
    assert capsys.readouterr().out == "python\tPython\n"


def test_detect_from_stdin_can_stay_auto(workdir: Path, monkeypatch, capsys) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("x"))
    main(["detect", "-"])
    assert capsys.readouterr().out == "auto\tAuto-detect\n"


def test_config_language_is_the_fallback(workdir: Path, source_tree: SourceTree, capsys) -> None:
    source_tree.write({"docs/.codelens.yml": "language: python\n", "docs/notes.txt": "x"})
    main(["detect", str(source_tree.file("docs/notes.txt"))])
    assert capsys.readouterr().out == "python\tPython\n"


def test_check_exits_non_zero_on_errors(workdir: Path, capsys) -> None:
    path = _write(workdir, "app.js", "function foo(\n")
    with pytest.raises(SystemExit) as excinfo:
        main(["check", path])
    assert excinfo.value.code == 1
    out = capsys.readouterr().out
    assert "error [unclosed_bracket] Unclosed (" in out


def test_check_json_output(workdir: Path, capsys) -> None:
    main(["check", _write(workdir, "app.js", "const a = 1;\n"), "--json"])
    data = json.loads(capsys.readouterr().out)
    assert data["is_valid"] is True
    assert data["summary"] == "No syntax issues detected"


def test_metrics_json_output(workdir: Path, capsys) -> None:
    main(["metrics", _write(workdir, "app.py", "def f():\n    return 1\n"), "--json"])
    data = json.loads(capsys.readouterr().out)
    assert data["structure"]["functions"] == 1


def test_highlight_prints_html(workdir: Path, capsys) -> None:
    main(["highlight", _write(workdir, "app.js", "const a = 1;")])
    assert '<span class="token keyword">const</span>' in capsys.readouterr().out


def test_format_prints_to_stdout(workdir: Path, capsys) -> None:
    path = _write(workdir, "app.py", "if True:\nprint('x')\n")
    main(["format", path, "--indent-size", "4"])
    assert capsys.readouterr().out == 'if True:\n    print("x")\n'


def test_format_write_rewrites_file(workdir: Path, capsys) -> None:
    path = _write(workdir, "app.js", "const a=1")
    main(["format", path, "--write"])
    assert Path(path).read_text(encoding="utf-8") == "const a = 1;"
    assert capsys.readouterr().out == "Formatted app.js\n"

    main(["format", path, "--write"])
    assert capsys.readouterr().out == "app.js already formatted\n"


def test_format_rejects_invalid_options(workdir: Path) -> None:
    path = _write(workdir, "app.js", "const a = 1;")
    with pytest.raises(SystemExit) as excinfo:
        main(["format", path, "--indent-size", "0"])
    assert excinfo.value.code == 2


def test_validate_reports_issues(workdir: Path, capsys) -> None:
    path = _write(workdir, "x.js", "(]")
    with pytest.raises(SystemExit) as excinfo:
        main(["validate", path])
    assert excinfo.value.code == 1
    out = capsys.readouterr().out
    assert "unbalanced_brackets: Unbalanced bracket: ]" in out


def test_validate_clean_file(workdir: Path, capsys) -> None:
    path = _write(workdir, "data.json", '{"a": 1}')
    main(["validate", path])
    assert capsys.readouterr().out.strip().endswith("data.json: valid")


def test_missing_file_exits_with_message(workdir: Path, capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["check", "nope.js"])
    assert excinfo.value.code == 1
    assert "No such file: nope.js" in capsys.readouterr().err


def test_broken_config_exits_with_message(workdir: Path, capsys) -> None:
    _write(workdir, ".codelens.yml", "language: cobol\n")
    with pytest.raises(SystemExit) as excinfo:
        main(["check", _write(workdir, "app.js", "const a = 1;")])
    assert excinfo.value.code == 1
    assert "Unknown language" in capsys.readouterr().err


def test_serve_runs_the_service(monkeypatch) -> None:
    calls: list[tuple[str, int]] = []
    monkeypatch.setattr("codelens.service.app.run_service", lambda host, port: calls.append((host, port)))
    main(["serve", "--port", "9001"])
    assert calls == [("127.0.0.1", 9001)]


def test_log_file_receives_debug_records(workdir: Path, capsys) -> None:
    log_path = workdir / "logs" / "codelens.log"
    main(["-v", "--log-file", str(log_path), "detect", _write(workdir, "tool.py", "print(1)\n")])
    capsys.readouterr()
    text = log_path.read_text(encoding="utf-8")
    assert "DEBUG codelens.cli: Using language python for" in text


def test_non_utf8_source_exits_with_message(workdir: Path, capsys) -> None:
    path = workdir / "latin1.js"
    path.write_bytes("const s = 'café';\n".encode("latin-1"))
    with pytest.raises(SystemExit) as excinfo:
        main(["check", str(path)])
    assert excinfo.value.code == 1
    err = capsys.readouterr().err
    assert "is not UTF-8 text" in err
    assert "Traceback" not in err
