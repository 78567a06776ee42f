## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# tinyawk — A small record-oriented pattern-action language, with a stream editor on the side.
#

import sys
import time
import traceback
from pathlib import Path
from dataclasses import dataclass

import click

from .errors import AwkError, AwkParseError, AwkIOError
from .parser import format_fragment_context
from .formatting import write_without_ansi
from .runtime import Runtime
from .interpreter import split_records
from . import sed


@dataclass(frozen=True)
class RuntimeConfig:
    verbose: int
    ignore: bool
    stats: bool
    plain: bool


class AwkRunner:
    def __init__(self, config: RuntimeConfig, field_separator: str = ' '):
        self.verbose = config.verbose
        self.ignore = config.ignore
        self.stats_enabled = config.stats
        self.plain = config.plain

        if self.plain:
            writer = write_without_ansi(sys.stdout.write)
            sys.stdout.write, sys.stderr.write = writer, writer

        self.runtime = Runtime(field_separator=field_separator, verbosity=config.verbose)
        self.total_stats = {'records': 0, 'matched': 0, 'start': time.time()} if self.stats_enabled else None
        self.failure = False

    def _maybe_fatal_error(self, message: str, detail: str, exc_type: str = None, context: str = '', fatal: bool = False) -> None:
        header = detail if not exc_type else f"{detail} (Exception: \033[33m{exc_type}\033[0m)"
        print(f'\033[30;43m {message} \033[0m {header}\n{context}', file=sys.stderr)
        self.failure = True
        if fatal or not self.ignore: sys.exit(1)

    def _handle_exception(self, exc: Exception, source: str, label: str) -> None:
        if isinstance(exc, AwkParseError):
            context = format_fragment_context(source, exc.fragment)
            context += f"\n\033[90m{str(exc).replace(chr(10), ' ').replace(chr(9), ' ')}\033[0m\n"
            # Nothing can run without a program, so parse errors are always fatal.
            self._maybe_fatal_error("SYNTAX ERROR.", f"Parsing {label} `\033[97m{source}\033[0m` caused a problem!",
                                    type(exc).__name__, context, fatal=True)
        elif isinstance(exc, AwkIOError):
            where = f" at record \033[97m{exc.record_number}\033[0m" if exc.record_number else ""
            self._maybe_fatal_error("IO ERROR.", f"{exc}{where}", type(exc).__name__)
        else:
            print(f'\033[30;43m RUNTIME ERROR. \033[0m Running {label} caused an error! (Exception: \033[33m{type(exc).__name__}\033[0m)', file=sys.stderr)
            traceback.print_exc()
            self.failure = True
            if not self.ignore: sys.exit(1)

    def _iter_lines(self, filenames: tuple[str, ...]):
        for name in filenames or ('-',):
            if name == '-':
                yield from sys.stdin
                continue
            try:
                file = open(name, 'r', encoding='utf-8', errors='replace')
            except OSError as exc:
                self._maybe_fatal_error("IO ERROR.", f"Cannot open `\033[97m{name}\033[0m`: {exc.strerror}", type(exc).__name__)
                continue
            with file:
                yield from file

    def run_awk(self, program: str, filenames: tuple[str, ...]) -> None:
        try:
            compiled = self.runtime.compile(program)
            self.runtime.run(compiled, self._iter_lines(filenames), out=sys.stdout, stats=self.total_stats)
        except (AwkError, Exception) as exc:
            self._handle_exception(exc, program, 'program')

    def run_sed(self, expression: str, filenames: tuple[str, ...], quiet: bool, in_place: bool) -> None:
        try:
            command = self.runtime.compile_edit(expression)
        except AwkError as exc:
            self._handle_exception(exc, expression, 'command')
            return

        for name in filenames or ('-',):
            try:
                if in_place and name != '-':
                    self._edit_in_place(command, Path(name), quiet)
                else:
                    self.runtime.edit(command, self._iter_lines((name,)), out=sys.stdout, quiet=quiet, stats=self.total_stats)
            except (AwkError, Exception) as exc:
                self._handle_exception(exc, expression, 'command')

    def _edit_in_place(self, command: sed.SedCommand, path: Path, quiet: bool) -> None:
        try:
            # No newline translation: a lone carriage return stays inside its record.
            with open(path, 'r', encoding='utf-8', newline='') as file:
                lines = split_records(file.read())
        except OSError as exc:
            raise AwkIOError(f"cannot open '{path}': {exc.strerror}") from exc
        result = sed.edit_lines(command, lines, quiet=quiet)
        try:
            with open(path, 'w', encoding='utf-8', newline='') as file:
                file.write(''.join(line + '\n' for line in result))
        except OSError as exc:
            raise AwkIOError(f"cannot write '{path}': {exc.strerror}") from exc
        if self.total_stats is not None:
            self.total_stats['records'] += len(lines)
            self.total_stats['matched'] += len(result)

    def finalize(self) -> int:
        if self.total_stats:
            elapsed_time = time.time() - self.total_stats['start']
            print(f"\n\033[97m\033[48;5;30m STATISTICS. \033[0m", file=sys.stderr)
            print(f"records\t\033[97m{self.total_stats['records']:,}\033[0m", file=sys.stderr)
            print(f"matched\t\033[97m{self.total_stats['matched']:,}\033[0m", file=sys.stderr)
            print(f"time\t\033[97m{elapsed_time:.3f}s\033[0m", file=sys.stderr)
        return 1 if self.failure else 0


@click.group()
@click.option('--verbose', '-v', default=0, count=True, help='Trace matching records (twice for every record).')
@click.option('--ignore', '-i', is_flag=True, help='Ignore input errors and continue with the next file.')
@click.option('--stats', is_flag=True, help='Display execution statistics (e.g., number of records).')
@click.option('--plain', '-p', is_flag=True, help='Strip ANSI color codes and redirect stderr to stdout.')
@click.pass_context
def cli(ctx: click.Context, verbose: int, ignore: bool, stats: bool, plain: bool) -> None:
    ctx.ensure_object(dict)
    ctx.obj['config'] = RuntimeConfig(verbose=verbose, ignore=ignore, stats=stats, plain=plain)


@cli.command('awk')
@click.option('--field-separator', '-F', default=' ', show_default=True, help='Field separator; a single space splits on runs of whitespace.')
@click.argument('program')
@click.argument('files', nargs=-1)
@click.pass_context
def run_awk(ctx: click.Context, field_separator: str, program: str, files: tuple[str, ...]) -> None:
    """Pattern scanning and text processing.

    \b
      pattern { action }       Execute action when pattern matches
      BEGIN { action }         Execute before processing input
      END { action }           Execute after processing input
      { action }               Execute for every line

    \b
    Examples:
      tinyawk awk '{print $1, $3}'
      tinyawk awk '/pattern/ {print $0}'
      tinyawk awk 'NR==5 {print}'
      tinyawk awk '{sum+=$1} END {print sum}'
    """
    runner = AwkRunner(ctx.obj['config'], field_separator=field_separator)
    runner.run_awk(program, files)
    ctx.exit(runner.finalize())


@cli.command('sed')
@click.option('--quiet', '-n', is_flag=True, help='Suppress automatic printing.')
@click.option('--in-place', '-i', 'in_place', is_flag=True, help='Edit files in place.')
@click.option('--extended', '-E', is_flag=True, help='Accepted for compatibility; Python regex syntax is always used.')
@click.argument('expression')
@click.argument('files', nargs=-1)
@click.pass_context
def run_sed(ctx: click.Context, quiet: bool, in_place: bool, extended: bool, expression: str, files: tuple[str, ...]) -> None:
    """Stream editor for filtering and transforming text.

    \b
      s/pattern/replacement/[g]  Substitute
      /pattern/d, [line]d        Delete matching lines
      /pattern/p, [line]p        Print matching lines
    """
    runner = AwkRunner(ctx.obj['config'])
    runner.run_sed(expression, files, quiet=quiet, in_place=in_place)
    ctx.exit(runner.finalize())


def main(argv: list[str] | None = None) -> None:
    cli.main(args=list(sys.argv[1:] if argv is None else argv), prog_name='tinyawk')


if __name__ == "__main__":
    main()
