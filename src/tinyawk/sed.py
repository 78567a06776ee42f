## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# Stream editor commands: parsed once, then applied to every line in turn.
#

import re
import sys
from typing import Iterable, TextIO
from dataclasses import dataclass

from .errors import AwkSyntaxError, AwkInvalidRegex, AwkUnsupportedStatement, AwkIOError
from .interpreter import iter_records
from .parser import compile_regex


@dataclass(frozen=True)
class Substitute:
    regex: re.Pattern
    replacement: str
    global_: bool = False

@dataclass(frozen=True)
class Delete:
    regex: re.Pattern | None = None
    line_number: int = 0

@dataclass(frozen=True)
class Select:
    """The `p` command: keeps the addressed lines and marks them as explicit output."""
    regex: re.Pattern | None = None
    line_number: int = 0

SedCommand = Substitute | Delete | Select


@dataclass
class EditResult:
    text: str
    keep: bool = True
    explicit: bool = False


def parse_command(expression: str) -> SedCommand:
    expr = expression.strip()
    if expr.startswith('s'):
        return _parse_substitute(expr)
    if expr.endswith('d'):
        return Delete(*_parse_address(expr[:-1].strip(), expr))
    if expr.endswith('p'):
        return Select(*_parse_address(expr[:-1].strip(), expr))
    raise AwkUnsupportedStatement(f"unsupported command: {expr}", fragment=expr)


def _parse_substitute(expr: str) -> Substitute:
    if len(expr) < 2:
        raise AwkSyntaxError("invalid substitute command", fragment=expr)
    delim = expr[1]
    parts = expr[2:].split(delim)
    if len(parts) < 2:
        raise AwkSyntaxError(f"missing closing {delim} in substitute command", fragment=expr)
    pattern, replacement, flags = parts[0], parts[1], parts[2] if len(parts) > 2 else ''
    regex = compile_regex(pattern)
    try:
        # The template is compiled even without a match, so bad group references fail here.
        regex.sub(replacement, '')
    except re.error as exc:
        raise AwkInvalidRegex(f"invalid replacement: {exc}", fragment=replacement) from exc
    return Substitute(regex=regex, replacement=replacement, global_='g' in flags)


def _parse_address(address: str, expr: str) -> tuple[re.Pattern | None, int]:
    if address.isascii() and address.isdigit():
        return None, int(address)
    if len(address) >= 2 and address.startswith('/') and address.endswith('/'):
        return compile_regex(address[1:-1]), 0
    raise AwkUnsupportedStatement(f"invalid address: {address or expr}", fragment=expr)


def _addressed(regex: re.Pattern | None, line_number: int, line: str, number: int) -> bool:
    if regex is not None:
        return regex.search(line) is not None
    return line_number > 0 and number == line_number


def apply(command: SedCommand, line: str, number: int) -> EditResult:
    match command:
        case Substitute(regex, replacement, global_):
            return EditResult(regex.sub(replacement, line, count=0 if global_ else 1))
        case Delete(regex, line_number):
            return EditResult(line, keep=not _addressed(regex, line_number, line, number))
        case Select(regex, line_number):
            if regex is None and line_number <= 0:
                return EditResult(line)
            hit = _addressed(regex, line_number, line, number)
            return EditResult(line, keep=hit, explicit=hit)
    raise NotImplementedError(f"Unknown command {command!r}.")


def edit_lines(command: SedCommand, lines: Iterable[str], quiet=False) -> list[str]:
    """Process every line before returning, so nothing is produced if one fails."""
    result = []
    for number, line in enumerate(iter_records(lines), start=1):
        edited = apply(command, line, number)
        if edited.keep and (edited.explicit or not quiet):
            result.append(edited.text)
    return result


def edit(command: SedCommand, lines: Iterable[str], out: TextIO = None, quiet=False, stats=None) -> int:
    out = sys.stdout if out is None else out
    number = 0
    written = 0
    for number, line in enumerate(iter_records(lines), start=1):
        edited = apply(command, line, number)
        if not edited.keep or (quiet and not edited.explicit): continue
        try:
            out.write(edited.text + '\n')
            out.flush()
        except OSError as exc:
            raise AwkIOError(f"writing output failed: {exc}", record_number=number) from exc
        written += 1
    if stats is not None:
        stats['records'] = stats.get('records', 0) + number
        stats['matched'] = stats.get('matched', 0) + written
    return written
