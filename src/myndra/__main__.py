#!/usr/bin/env python3
"""
CLI for the Myndra interpreter.

Usage:
    python -m myndra run FILE [--context dev|prod|test] [--show-ast]
    python -m myndra check FILE
    python -m myndra tokens FILE
    python -m myndra repl [--context dev|prod|test]

Examples:
    # Lex and parse only, reporting diagnostics
    python -m myndra check examples/hello.myn

    # Run a program without printing its AST
    python -m myndra run examples/hello.myn --context prod

    # Show debug logging from the lexer, parser and interpreter
    python -m myndra run examples/hello.myn -v
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .options import CompilerOptions, VALID_CONTEXTS

logger = logging.getLogger("myndra")

PROMPT = "myndra> "

REPL_HELP = """REPL Commands:
  help                    Show this help
  exit/quit               Exit REPL
  context <type>          Change context (dev|prod|test)

Anything else is run as Myndra source; bindings persist between lines."""


def repl_help() -> str:
    """REPL command help followed by the built-in function list."""
    from .runtime import get_builtin_registry

    registry = get_builtin_registry()
    lines = [REPL_HELP, "", "Built-in functions:"]
    for name in registry.list_functions():
        lines.append(f"  {registry.get_function(name).doc}")
    return "\n".join(lines)


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr: INFO by default, DEBUG when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(name)s: %(message)s",
        stream=sys.stderr,
    )


def read_source(path_str: str) -> Optional[str]:
    """Read a UTF-8 source file, reporting missing or unreadable files on stderr."""
    source_path = Path(path_str)
    if not source_path.is_file():
        print(f"Error: File not found: {source_path}", file=sys.stderr)
        return None
    try:
        return source_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: Cannot read {source_path}: {e}", file=sys.stderr)
        return None


def report_diagnostics(stage: str, errors: List[str]) -> None:
    print(f"{stage} failed with {len(errors)} error(s):", file=sys.stderr)
    for message in errors:
        print(f"  {message}", file=sys.stderr)


def resolve_options(args) -> Optional[CompilerOptions]:
    """Environment settings overridden by command-line flags."""
    try:
        options = CompilerOptions.from_env()
        return options.with_overrides(
            context=getattr(args, "context", None),
            show_ast=True if getattr(args, "show_ast", False) else None,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return None


def cmd_tokens(args) -> int:
    """Print the token stream of a source file."""
    from . import tokenize

    source = read_source(args.file)
    if source is None:
        return 1

    tokens, errors = tokenize(source)
    for token in tokens:
        print(f"{token.line}:{token.column}\t{token}")

    if errors:
        report_diagnostics("Lexing", errors)
        return 1
    return 0


def cmd_check(args) -> int:
    """Check a source file for lexer and parser errors."""
    from . import tokenize, parse

    source = read_source(args.file)
    if source is None:
        return 1

    tokens, lex_errors = tokenize(source)
    if lex_errors:
        report_diagnostics("Lexing", lex_errors)
        return 1

    program, parse_errors = parse(tokens)
    if parse_errors:
        report_diagnostics("Parsing", parse_errors)
        return 1

    print(f"OK: {Path(args.file).name} - {len(program.statements)} statement(s), no errors")
    return 0


def cmd_run(args) -> int:
    """Lex, parse and execute a source file."""
    from . import tokenize, parse, Interpreter

    options = resolve_options(args)
    if options is None:
        return 1

    source = read_source(args.file)
    if source is None:
        return 1

    tokens, lex_errors = tokenize(source)
    if lex_errors:
        report_diagnostics("Lexing", lex_errors)
        return 1

    program, parse_errors = parse(tokens)
    if parse_errors:
        report_diagnostics("Parsing", parse_errors)
        return 1

    if options.print_ast:
        print("AST:")
        print(program.to_string(), end="")
        print()

    logger.debug("running %s in context '%s'", args.file, options.context)
    result = Interpreter().execute(program)
    if not result.success:
        print(f"Runtime error: {result.error_message}", file=sys.stderr)
        return 1
    return 0


def run_repl_line(interpreter, line: str, options: CompilerOptions) -> bool:
    """Run one line of REPL input; returns False if it failed."""
    from . import tokenize, parse

    tokens, lex_errors = tokenize(line)
    program, parse_errors = parse(tokens)
    errors = lex_errors + parse_errors
    if errors:
        for message in errors:
            print(f"Error: {message}")
        return False

    if options.print_ast:
        print(program.to_string(), end="")

    result = interpreter.execute(program)
    if not result.success:
        print(f"Runtime error: {result.error_message}")
        return False
    return True


def cmd_repl(args) -> int:
    """Interactive read-eval-print loop."""
    from . import Interpreter

    options = resolve_options(args)
    if options is None:
        return 1

    print("Myndra Interactive REPL")
    print("Type 'exit' to quit, 'help' for commands")
    print()

    # One interpreter for the whole session so bindings persist
    interpreter = Interpreter()

    while True:
        sys.stdout.write(PROMPT)
        sys.stdout.flush()
        line = sys.stdin.readline()
        if not line:
            print()
            break

        line = line.strip()
        if not line:
            continue
        if line in ("exit", "quit"):
            break
        if line == "help":
            print(repl_help())
            continue
        if line == "context" or line.startswith("context "):
            name = line[len("context"):].strip()
            try:
                options = options.with_overrides(context=name)
            except ValueError as e:
                print(f"Error: {e}")
                continue
            print(f"Context changed to: {name}")
            continue

        run_repl_line(interpreter, line, options)

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('-v', '--verbose', action='store_true',
                        help='Enable debug logging')

    parser = argparse.ArgumentParser(
        prog='python -m myndra',
        description='Myndra interpreter',
    )

    subparsers = parser.add_subparsers(dest='action', required=True)

    # run command
    run_parser = subparsers.add_parser('run', parents=[common],
                                       help='Run a Myndra source file')
    run_parser.add_argument('file', help='Myndra source file')
    run_parser.add_argument('-c', '--context', choices=VALID_CONTEXTS,
                            help='Execution context (default: $MYNDRA_CONTEXT or dev)')
    run_parser.add_argument('--show-ast', action='store_true',
                            help='Print the AST before running')

    # check command
    check_parser = subparsers.add_parser('check', parents=[common],
                                         help='Check a source file for errors')
    check_parser.add_argument('file', help='Myndra source file')

    # tokens command
    tokens_parser = subparsers.add_parser('tokens', parents=[common],
                                          help='Print the token stream of a source file')
    tokens_parser.add_argument('file', help='Myndra source file')

    # repl command
    repl_parser = subparsers.add_parser('repl', parents=[common],
                                        help='Start the interactive REPL')
    repl_parser.add_argument('-c', '--context', choices=VALID_CONTEXTS,
                             help='Execution context (default: $MYNDRA_CONTEXT or dev)')

    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.action == 'run':
        return cmd_run(args)
    elif args.action == 'check':
        return cmd_check(args)
    elif args.action == 'tokens':
        return cmd_tokens(args)
    elif args.action == 'repl':
        return cmd_repl(args)
    else:
        parser.print_help()
        return 1


if __name__ == '__main__':
    sys.exit(main())
