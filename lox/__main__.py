"""CLI entry point for the Lox interpreter.

Usage:
    python -m lox [-v|-vv|-vvv] [--parser {descent,grammar}] [script]
    python -m lox [-v...] --emit-ast <script>
    python -m lox [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --parser      Front end to use: the recursive-descent parser (default) or
                the Lark grammar
  --emit-ast    Parse the given .lox file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

Without a script an interactive prompt is started. Each line is run in the
same session, so variables persist between lines. An empty line or `exit`
ends the session.

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero. Scripts that fail to scan, parse or run exit
with status 65.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from .ast_json import ast_from_obj, ast_to_obj
from .errors import ErrorReporter, PipelineError
from .interpreter import PARSERS, Interpreter, parse_with, run_file, run_source
from .scanner import scan

EXIT_DATA_ERROR = 65


def read_source(path: Path) -> str:
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def emit_ast(program_file: Path, parser: str) -> int:
    reporter = ErrorReporter()
    tokens, had_errors = scan(read_source(program_file), reporter)
    if had_errors:
        return EXIT_DATA_ERROR
    statements, had_errors = parse_with(parser, tokens, reporter)
    if had_errors:
        return EXIT_DATA_ERROR
    obj = ast_to_obj(statements)
    out_path = program_file.with_name(program_file.name + '.ast.json')
    with open(out_path, 'w', encoding='utf-8') as out:
        json.dump(obj, out, ensure_ascii=False, indent=2)
    print(str(out_path))
    return 0


def run_ast(ast_path: Path, debug_level: int) -> int:
    with open(ast_path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    try:
        statements = ast_from_obj(data)
    except (TypeError, ValueError, KeyError) as e:
        print(f"Error: invalid AST file {ast_path}: {e}", file=sys.stderr)
        return EXIT_DATA_ERROR
    with Interpreter(debug_level=debug_level) as interpreter:
        if interpreter.interpret(statements):
            return EXIT_DATA_ERROR
    return 0


def run_prompt(debug_level: int, parser: str) -> int:
    line_number = 0
    with Interpreter(debug_level=debug_level) as interpreter:
        while True:
            line_number += 1
            try:
                line = input('> ')
            except EOFError:
                break
            if line == '' or line == 'exit':
                break
            try:
                run_source(line, interpreter, parser=parser)
            except PipelineError as err:
                interpreter.reporter.error(line_number, str(err))
            # newline after each output
            print()
    return 0


def main(argv: Optional[list] = None) -> None:
    parser = argparse.ArgumentParser(prog='lox', description="Lox language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--parser', choices=PARSERS, default='descent', help='front end used to parse source text')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='LOX_FILE', help='emit AST JSON for the given .lox file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('script', nargs='?', help='Lox script (.lox) to execute; omit for a prompt')
    args = parser.parse_args(argv)

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        if not program_file.exists():
            print(f"Error: file {program_file} not found", file=sys.stderr)
            sys.exit(1)
        status = emit_ast(program_file, args.parser)
        if status:
            sys.exit(status)
        return

    # Execute from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        if not ast_path.exists():
            print(f"Error: file {ast_path} not found", file=sys.stderr)
            sys.exit(1)
        status = run_ast(ast_path, args.v)
        if status:
            sys.exit(status)
        return

    # Interactive prompt
    if not args.script:
        run_prompt(args.v, args.parser)
        return

    # Default: execute source file
    program_file = Path(args.script)
    if not program_file.exists():
        print(f"Error: file {program_file} not found", file=sys.stderr)
        sys.exit(1)
    if not run_file(str(program_file), debug_level=args.v, parser=args.parser):
        sys.exit(EXIT_DATA_ERROR)


if __name__ == '__main__':
    main()
