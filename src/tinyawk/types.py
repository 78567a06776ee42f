## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re
from typing import Literal
from dataclasses import dataclass, field


# Patterns ─────────────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Always:
    pass

@dataclass(frozen=True)
class Regex:
    regex: re.Pattern

@dataclass(frozen=True)
class LineNumber:
    number: int

Pattern = Always | Regex | LineNumber


# Expressions ──────────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Field:
    index: int

@dataclass(frozen=True)
class Variable:
    name: str

@dataclass(frozen=True)
class Binary:
    op: Literal['+', '-', '*', '/']
    left: 'Expression'
    right: 'Expression'

Expression = Field | Variable | Binary


# Statements ───────────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class FieldRef:
    """Either a field index (0 is the whole record) or a variable name, resolved at print time."""
    index: int | None = None
    name: str | None = None

@dataclass(frozen=True)
class Print:
    fields: tuple[FieldRef, ...] = ()

@dataclass(frozen=True)
class Assign:
    variable: str
    expr: Expression

Statement = Print | Assign


# Program ──────────────────────────────────────────────────────────────────────────────────────

Action = tuple[Statement, ...]

# Implicit action of a rule written without braces.
PRINT_RECORD: Action = (Print(),)


@dataclass(frozen=True)
class Rule:
    pattern: Pattern = Always()
    action: Action = PRINT_RECORD


@dataclass(frozen=True)
class Program:
    begin: Action | None
    rule: Rule | None
    end: Action | None
    source: str = ''


# Execution state ──────────────────────────────────────────────────────────────────────────────

# Names resolved from the record state rather than the variable table.
BUILTIN_VARIABLES = frozenset({'NR', 'NF'})


@dataclass
class Context:
    field_separator: str = ' '
    record_number: int = 0
    current_line: str = ''
    fields: list[str] = field(default_factory=list)
    variables: dict[str, float] = field(default_factory=dict)

    @property
    def field_count(self) -> int:
        return len(self.fields)
