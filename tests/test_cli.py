## tinyawk — CLI integration tests

import os, sys
import subprocess
from pathlib import Path


def run_cli(*cli_args: str | Path, stdin: str | None = None, extra_args: list[str] | None = None) -> subprocess.CompletedProcess:
    args = [sys.executable, "-m", "tinyawk", "--plain"]
    if extra_args:
        args.extend(extra_args)
    args.extend(str(arg) for arg in cli_args)
    return subprocess.run(args, input=stdin, capture_output=True, text=True, env=os.environ.copy())


def _strip_output_lines(output: str) -> list[str]:
    return [line for line in output.splitlines() if line.strip()]


def test_cli_awk_reads_stdin():
    result = run_cli("awk", "{print $2}", stdin="a b\nc d\n")
    assert result.returncode == 0
    assert result.stdout == "b\nd\n"


def test_cli_awk_field_separator(tmp_path: Path):
    data = tmp_path / "data.csv"
    data.write_text("x,1\ny,2\n", encoding="utf-8")
    result = run_cli("awk", "-F", ",", "{ s += $2 } END { print s }", data)
    assert result.returncode == 0
    assert result.stdout == "3\n"


def test_cli_awk_files_form_one_stream(tmp_path: Path):
    first, second = tmp_path / "one.txt", tmp_path / "two.txt"
    first.write_text("a\nb\n", encoding="utf-8")
    second.write_text("c\n", encoding="utf-8")
    result = run_cli("awk", "END { print NR }", first, second)
    assert result.returncode == 0
    assert result.stdout == "3\n"


def test_cli_awk_syntax_error_shows_context():
    result = run_cli("awk", "{ print $x }", stdin="a\n")
    assert result.returncode != 0
    out = result.stdout
    assert "SYNTAX ERROR." in out
    assert "AwkInvalidField" in out
    assert "1 | { print $x }" in out


def test_cli_awk_unterminated_action_prints_nothing():
    result = run_cli("awk", "{ print", stdin="a\nb\n")
    assert result.returncode != 0
    assert "SYNTAX ERROR." in result.stdout
    assert "a" not in _strip_output_lines(result.stdout)


def test_cli_awk_missing_file():
    result = run_cli("awk", "{ print }", "/does/not/exist.txt")
    assert result.returncode != 0
    assert "IO ERROR." in result.stdout


def test_cli_awk_missing_file_ignored(tmp_path: Path):
    data = tmp_path / "data.txt"
    data.write_text("ok\n", encoding="utf-8")
    result = run_cli("awk", "{ print }", "/does/not/exist.txt", data, extra_args=["--ignore"])
    assert "IO ERROR." in result.stdout
    assert "ok" in _strip_output_lines(result.stdout)
    assert result.returncode != 0


def test_cli_stats_block():
    result = run_cli("awk", "/a/", stdin="a\nb\n", extra_args=["--stats"])
    assert result.returncode == 0
    assert "STATISTICS." in result.stdout
    assert "matched\t1" in result.stdout


def test_cli_sed_substitute_stdin():
    result = run_cli("sed", "s/cat/dog/g", stdin="cat cat\nbird\n")
    assert result.returncode == 0
    assert result.stdout == "dog dog\nbird\n"


def test_cli_sed_quiet_print():
    result = run_cli("sed", "-n", "/b/p", stdin="a\nb\nc\n")
    assert result.returncode == 0
    assert result.stdout == "b\n"


def test_cli_sed_in_place(tmp_path: Path):
    data = tmp_path / "notes.txt"
    data.write_text("keep\n# drop\nkeep too\n", encoding="utf-8")
    result = run_cli("sed", "-i", "/^#/d", data)
    assert result.returncode == 0
    assert result.stdout == ""
    assert data.read_text(encoding="utf-8") == "keep\nkeep too\n"


def test_cli_sed_bad_command():
    result = run_cli("sed", "q", stdin="a\n")
    assert result.returncode != 0
    assert "SYNTAX ERROR." in result.stdout


def test_cli_sed_in_place_keeps_control_characters(tmp_path: Path):
    data = tmp_path / "pages.txt"
    data.write_bytes(b"page1\x0cpage2\nkeep\n")
    result = run_cli("sed", "-i", "/zzz/d", data)
    assert result.returncode == 0
    assert data.read_bytes() == b"page1\x0cpage2\nkeep\n"
