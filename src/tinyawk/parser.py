## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re
from functools import lru_cache

import lark
from .types import (Program, Rule, Action, Statement, Print, Assign, FieldRef,
                    Expression, Field, Variable, Binary, Pattern, Always, Regex, LineNumber,
                    PRINT_RECORD, BUILTIN_VARIABLES)
from .errors import (AwkSyntaxError, AwkMissingBraces, AwkInvalidRegex, AwkInvalidLineNumber,
                     AwkInvalidField, AwkUnsupportedStatement)


# Grammar of an action body, once the surrounding braces are gone.  Operands stay
# loose: a `$` token is checked as a field index later, anything else is a name.
GRAMMAR = r"""?start: body
body: statement? (";" statement?)*
?statement: print_stmt | accumulate_stmt
print_stmt: "print" (operand ("," operand)*)?
accumulate_stmt: NAME "+=" operand
?operand: FIELD | NAME

FIELD: /\$[^\s,;]*/
NAME: /[A-Za-z0-9_.]+/

%import common.WS
%ignore WS
"""

_LINE_NUMBER = re.compile(r'[+-]?[0-9]+')


@lru_cache(maxsize=1)
def _statement_parser() -> lark.Lark:
    return lark.Lark(GRAMMAR, start='start', parser='lalr', lexer='contextual')


def parse(source: str) -> Program:
    """Slice program text into BEGIN, the single pattern-action rule, and END."""
    text = source.strip()
    begin, rule, end = None, None, None

    if text.startswith('BEGIN'):
        if (close := text.find('}', len('BEGIN'))) == -1:
            raise AwkSyntaxError("missing closing brace for BEGIN", fragment=text)
        begin = parse_action(text[len('BEGIN'):close + 1])
        text = text[close + 1:].strip()

    # First textual occurrence wins, so `END` inside a regex or a name splits here too.
    if (idx := text.find('END')) >= 0:
        end = parse_action(text[idx + len('END'):])
        text = text[:idx].strip()

    if text:
        rule = parse_rule(text)
    elif begin is None and end is None:
        raise AwkSyntaxError("empty program", fragment=source)

    return Program(begin=begin, rule=rule, end=end, source=source)


def parse_rule(text: str) -> Rule:
    pattern, rest = parse_pattern(text.strip())
    action = parse_action(rest) if rest else PRINT_RECORD
    return Rule(pattern=pattern, action=action)


def parse_pattern(text: str) -> tuple[Pattern, str]:
    """Return the pattern heading a rule, and the remaining action text."""
    if text.startswith('/'):
        if (close := text.find('/', 1)) == -1:
            raise AwkSyntaxError("missing closing / for pattern", fragment=text)
        return Regex(compile_regex(text[1:close])), text[close + 1:].strip()

    if text.startswith('NR=='):
        head, *tail = text.split(None, 1)
        digits = head[len('NR=='):]
        if not _LINE_NUMBER.fullmatch(digits):
            raise AwkInvalidLineNumber(f"invalid line number: {digits}", fragment=head)
        return LineNumber(int(digits)), tail[0].strip() if tail else ''

    return Always(), text


def compile_regex(source: str) -> re.Pattern:
    try:
        return re.compile(source)
    except re.error as exc:
        raise AwkInvalidRegex(f"invalid regex: {exc}", fragment=source) from exc


def parse_action(text: str) -> Action:
    text = text.strip()
    if not (text.startswith('{') and text.endswith('}')):
        raise AwkMissingBraces("action must be enclosed in braces", fragment=text)
    body = text[1:-1].strip()
    return parse_statements(body) if body else ()


def parse_statements(body: str) -> Action:
    try:
        tree = _statement_parser().parse(body)
    except lark.exceptions.UnexpectedInput:
        raise AwkUnsupportedStatement(f"unsupported statement: {body}", fragment=body) from None
    return tuple(_statement(node, body) for node in tree.children)


def _statement(node: lark.Tree, body: str) -> Statement:
    match node.data:
        case 'print_stmt':
            refs = [compile_field_ref(tok.value) for tok in node.children]
            # A lone `$0` is the same as a bare `print`.
            if refs == [FieldRef(index=0)]: refs = []
            return Print(fields=tuple(refs))
        case 'accumulate_stmt':
            target, operand = node.children
            if target.value in BUILTIN_VARIABLES:
                raise AwkUnsupportedStatement(f"cannot assign to {target.value}", fragment=body)
            # Stored as a fold so an absent variable simply starts from zero.
            expr = Binary('+', Variable(target.value), compile_expression(operand.value))
            return Assign(variable=target.value, expr=expr)
    raise NotImplementedError(f"Unexpected statement `{node.data}` from parser.")


def _field_index(text: str) -> int:
    digits = text[1:]
    if not (digits.isascii() and digits.isdigit()):
        raise AwkInvalidField(f"invalid field: {text}", fragment=text)
    return int(digits)


def compile_field_ref(text: str) -> FieldRef:
    if text.startswith('$'):
        return FieldRef(index=_field_index(text))
    return FieldRef(name=text)


def compile_expression(text: str) -> Expression:
    """Field reference for `$N`, otherwise a variable; numeric literals are names too."""
    text = text.strip()
    if text.startswith('$'):
        return Field(_field_index(text))
    return Variable(text)


def format_fragment_context(source: str, fragment: str | None) -> str:
    """Render the program text with the offending fragment highlighted, for error reports."""
    lines = source.splitlines() or ['']
    pos = source.find(fragment) if fragment else -1
    result = []
    offset = 0
    for i, line in enumerate(lines):
        line_color = '\033[90m'
        start, finish = offset, offset + len(line)
        if pos >= 0 and start <= pos <= finish:
            line_color = '\033[97m'
            col = pos - start
            length = min(len(fragment), len(line) - col)
            line = line[:col] + f"\033[48;5;30m\033[1;97m{line[col:col + length]}\033[0m" + line[col + length:]
        result.append(f"{line_color}{i+1:>5} |\033[0m {line}")
        offset = finish + 1
    return '\n' + '\n'.join(result) + '\n'
