## tinyawk — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import io
from typing import Iterable, TextIO

from .types import Program, Context
from .parser import parse
from .interpreter import interpret, split_records
from . import sed


class Runtime:
    """Minimal runtime facade focused on embedding."""

    def __init__(self, field_separator: str = ' ', verbosity: int = 0):
        self.field_separator = field_separator
        self.verbosity = verbosity

    # Parsing ─────────────────────────────────────────────────────────────────────────────────
    def compile(self, source: str) -> Program:
        return parse(source)

    def compile_edit(self, expression: str) -> sed.SedCommand:
        return sed.parse_command(expression)

    # Execution ───────────────────────────────────────────────────────────────────────────────
    def run(self, program: Program | str, lines: Iterable[str], out: TextIO | None = None,
            field_separator: str | None = None, stats: dict | None = None) -> Context:
        if isinstance(program, str): program = self.compile(program)
        fs = self.field_separator if field_separator is None else field_separator
        return interpret(program, lines, out=out, field_separator=fs, verbosity=self.verbosity, stats=stats)

    def run_text(self, program: Program | str, text: str, field_separator: str | None = None) -> list[str]:
        """Run over a block of text and return the printed lines."""
        out = io.StringIO()
        self.run(program, split_records(text), out=out, field_separator=field_separator)
        return split_records(out.getvalue())

    def edit(self, command: sed.SedCommand | str, lines: Iterable[str], out: TextIO | None = None,
             quiet: bool = False, stats: dict | None = None) -> int:
        if isinstance(command, str): command = self.compile_edit(command)
        return sed.edit(command, lines, out=out, quiet=quiet, stats=stats)

    def edit_text(self, command: sed.SedCommand | str, text: str, quiet: bool = False) -> list[str]:
        if isinstance(command, str): command = self.compile_edit(command)
        return sed.edit_lines(command, split_records(text), quiet=quiet)
