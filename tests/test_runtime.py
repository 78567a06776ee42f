## tinyawk — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import io

import pytest

from tinyawk.runtime import Runtime
from tinyawk.runner import execute
from tinyawk.types import Program
from tinyawk.errors import AwkMissingBraces


def test_runtime_compiles_once_and_runs_many_times():
    rt = Runtime()
    program = rt.compile("{ n += $2 } END { print n }")
    assert isinstance(program, Program)
    assert rt.run_text(program, "a 1\nb 2\n") == ["3"]
    assert rt.run_text(program, "a 1\nb 2\n") == ["3"]


def test_runtime_default_field_separator():
    rt = Runtime(field_separator=":")
    assert rt.run_text("{ print $2 }", "root:x:0\nbin::1") == ["x", ""]
    assert rt.run_text("{ print $2 }", "a b", field_separator=" ") == ["b"]


def test_runtime_run_returns_context():
    rt = Runtime()
    ctx = rt.run("{ t += $1 }", ["4", "5"], out=io.StringIO())
    assert ctx.record_number == 2
    assert ctx.variables["t"] == 9.0


def test_runtime_parse_error_produces_no_output():
    rt = Runtime()
    out = io.StringIO()
    with pytest.raises(AwkMissingBraces):
        rt.run("{ print", ["a", "b"], out=out)
    assert out.getvalue() == ""


def test_runtime_edit_text():
    rt = Runtime()
    assert rt.edit_text("s/o/0/g", "foo\nbar") == ["f00", "bar"]
    assert rt.edit_text("/a/p", "foo\nbar", quiet=True) == ["bar"]


def test_runtime_edit_streams_to_output():
    rt = Runtime()
    out = io.StringIO()
    written = rt.edit("2d", ["one", "two", "three"], out=out)
    assert written == 2
    assert out.getvalue() == "one\nthree\n"


def test_execute_helper():
    out = io.StringIO()
    ctx = execute("NR==1 { print $1 }", ["x y", "z"], out=out)
    assert out.getvalue() == "x\n"
    assert ctx.current_line == "z"


def test_run_text_keeps_form_feeds_inside_records():
    rt = Runtime()
    assert rt.run_text("END { print NR }", "a\x0cb\nc") == ["2"]
    assert rt.run_text("{ print }", "page1\x0cpage2\nkeep\n") == ["page1\x0cpage2", "keep"]


def test_edit_text_keeps_form_feeds_inside_records():
    rt = Runtime()
    assert rt.edit_text("/zzz/d", "page1\x0cpage2\nkeep\n") == ["page1\x0cpage2", "keep"]
