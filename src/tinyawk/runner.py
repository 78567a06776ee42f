## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# tinyawk — A small record-oriented pattern-action language, with a stream editor on the side.
#

from typing import Iterable, TextIO

from .types import Context
from .parser import parse
from .interpreter import interpret


def execute(source: str, lines: Iterable[str], out: TextIO = None, field_separator=' ', verbosity=0, stats=None) -> Context:
    program = parse(source)
    return interpret(program, lines, out=out, field_separator=field_separator, verbosity=verbosity, stats=stats)
