## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import sys
from typing import Iterable, TextIO

from .types import (Program, Action, Print, Assign, FieldRef, Expression, Field, Variable, Binary,
                    Pattern, Always, Regex, LineNumber, Context)
from .errors import AwkIOError
from .formatting import format_number, to_number, format_variables


def split_fields(line: str, separator: str) -> list[str]:
    # A single space means runs of whitespace, leading and trailing blanks dropped.
    if separator == ' ':
        return line.split()
    # Without a separator every character is its own field.
    if separator == '':
        return list(line)
    return line.split(separator)


def matches(pattern: Pattern, ctx: Context) -> bool:
    match pattern:
        case Always():
            return True
        case Regex(regex):
            return regex.search(ctx.current_line) is not None
        case LineNumber(number):
            return ctx.record_number == number
    raise NotImplementedError(f"Unknown pattern {pattern!r}.")


def _variable(ctx: Context, name: str) -> float:
    if name == 'NR': return float(ctx.record_number)
    if name == 'NF': return float(ctx.field_count)
    return ctx.variables.get(name, 0.0)


def _field(ctx: Context, index: int) -> float:
    if index == 0:
        return to_number(ctx.current_line)
    if 0 < index <= len(ctx.fields):
        return to_number(ctx.fields[index - 1])
    return 0.0


def evaluate(expr: Expression, ctx: Context) -> float:
    match expr:
        case Field(index):
            return _field(ctx, index)
        case Variable(name):
            return _variable(ctx, name)
        case Binary(op, left, right):
            lhs, rhs = evaluate(left, ctx), evaluate(right, ctx)
            match op:
                case '+': return lhs + rhs
                case '-': return lhs - rhs
                case '*': return lhs * rhs
                case '/': return lhs / rhs if rhs != 0 else 0.0
            return 0.0
    raise NotImplementedError(f"Unknown expression {expr!r}.")


def resolve_field_ref(ref: FieldRef, ctx: Context) -> str:
    if ref.name is not None:
        return format_number(_variable(ctx, ref.name))
    if ref.index == 0:
        return ctx.current_line
    if 0 < ref.index <= len(ctx.fields):
        return ctx.fields[ref.index - 1]
    return ''


def render_print(stmt: Print, ctx: Context) -> str:
    if not stmt.fields:
        return ctx.current_line
    return ' '.join(resolve_field_ref(ref, ctx) for ref in stmt.fields)


def _write_line(out: TextIO, text: str, ctx: Context) -> None:
    try:
        out.write(text + '\n')
        out.flush()
    except OSError as exc:
        raise AwkIOError(f"writing output failed: {exc}", record_number=ctx.record_number) from exc


def execute_action(action: Action, ctx: Context, out: TextIO) -> None:
    for stmt in action:
        match stmt:
            case Print():
                _write_line(out, render_print(stmt, ctx), ctx)
            case Assign(variable, expr):
                ctx.variables[variable] = evaluate(expr, ctx)
            case _:
                raise NotImplementedError(f"Unknown statement {stmt!r}.")


def split_records(text: str) -> list[str]:
    """Split on newlines only; other line-break characters stay inside the record."""
    lines = text.split('\n')
    if lines[-1] == '': lines.pop()
    return lines


def iter_records(lines: Iterable[str]):
    """Yield input lines without their terminator, wrapping read failures."""
    iterator = iter(lines)
    while True:
        try:
            line = next(iterator)
        except StopIteration:
            return
        except OSError as exc:
            raise AwkIOError(f"reading input failed: {exc}") from exc
        if line.endswith('\n'): line = line[:-1]
        if line.endswith('\r'): line = line[:-1]
        yield line


def interpret(program: Program, lines: Iterable[str], out: TextIO = None, field_separator=' ',
              verbosity=0, stats=None) -> Context:
    out = sys.stdout if out is None else out
    ctx = Context(field_separator=field_separator)

    if program.begin is not None:
        execute_action(program.begin, ctx, out)

    matched = 0
    for line in iter_records(lines):
        ctx.record_number += 1
        ctx.current_line = line
        ctx.fields = split_fields(line, ctx.field_separator)

        hit = program.rule is not None and matches(program.rule.pattern, ctx)
        if verbosity > 0 and (hit or verbosity == 2):
            mark = '\033[32m✓\033[0m' if hit else '\033[90m·\033[0m'
            print(f"\033[90m{ctx.record_number:>3} :\033[0m  {mark} {line[:40]!r:<44} \033[36m<=>\033[0m {format_variables(ctx.variables)}",
                  file=sys.stderr)
        if hit:
            matched += 1
            execute_action(program.rule.action, ctx, out)

    if program.end is not None:
        execute_action(program.end, ctx, out)

    if stats is not None:
        stats['records'] = stats.get('records', 0) + ctx.record_number
        stats['matched'] = stats.get('matched', 0) + matched
    return ctx
