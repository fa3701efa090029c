#!/usr/bin/env python3
"""
printexpr - Debug print directives in Python comments

Runs a Python script with its directive comments rewritten into print
statements, optionally filtering imported modules as well.

Philosophy:
    - Comment-first: directives are plain comments unless the filter runs
    - Line-preserving: every directive becomes exactly one statement
    - Loud failures: a failing expression raises like hand-written code

Directives:
    #${ expr }       scalar value
    #"{ expr }       value as a string
    ##{ expr }       value as a number
    #@{ expr }       elements of an iterable
    #%{ expr }       key/value pairs
    #\\{ expr }       structured dump of each item
    #${ label: expr} any directive may carry a label instead of 'line N:'

Usage:
    printexpr script.py [args...]

Examples:
    # Run a script with directives enabled
    printexpr job.py --input data.csv

    # Also filter the myapp package and show the rewritten script
    printexpr -m myapp -d job.py

    # List the directives of a script
    printexpr -l job.py
"""

import sys
import types
from pathlib import Path
from argparse import ArgumentParser, Namespace, RawDescriptionHelpFormatter, REMAINDER
from typing import List, Optional

from pygments import highlight
from pygments.formatters import TerminalFormatter

from .config import appsettings
from .lib import SourceFilter, install, uninstall, handle_set, handle_reset, __version__
from .lib.lexer import DirectiveLexer
from .lib.log import LOG, state_connectToLogger, logger_configure
from .models import ProgramState, pipeline


# Define CLI arguments
parser = ArgumentParser(
    prog="printexpr",
    description="printexpr - run a Python script with debug print directives enabled",
    formatter_class=RawDescriptionHelpFormatter,
)

parser.add_argument("script", type=str, help="Python script to run")

parser.add_argument(
    "scriptArgs", nargs=REMAINDER, help="Arguments passed to the script"
)

parser.add_argument(
    "-m",
    "--module",
    action="append",
    default=None,
    help="Also filter imported modules matching this pattern (repeatable)",
)

parser.add_argument(
    "-d", "--trace", action="store_true", help="Echo the rewritten script to stderr"
)

parser.add_argument(
    "-n", "--nofilter", action="store_true", help="Run without rewriting directives"
)

parser.add_argument(
    "-o",
    "--output",
    choices=["stderr", "stdout"],
    default=None,
    help="Stream receiving directive output (default: PRINTEXPR_OUTPUT or stderr)",
)

parser.add_argument(
    "-l", "--list", dest="listOnly", action="store_true", help="List directives and exit"
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=0,
    help="Increase log verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Resolve the script path.

    Returns:
        ProgramState with added fields:
            - scriptFile: Resolved path to the script
            - envOK: True if the script exists

    Exits:
        1 if the script is not found
    """
    state = inputstate.copy()

    script_file = Path(state.script)
    if not script_file.is_file():
        print(f"Error: Script not found: {script_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.scriptFile = script_file.resolve()
    LOG(f"Script: {state.scriptFile}", level=2)
    state.envOK = True
    return state


def source_read(inputstate: ProgramState) -> ProgramState:
    """
    Read the script source.

    Returns:
        ProgramState with added field:
            - sourceText: Script source

    Exits:
        1 if the file cannot be read or decoded
    """
    state = inputstate.copy()

    try:
        state.sourceText = state.scriptFile.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error reading script: {e}", file=sys.stderr)
        sys.exit(1)
    LOG(f"Read {len(state.sourceText)} characters from {state.scriptFile.name}", level=2)
    return state


def source_filter(inputstate: ProgramState) -> ProgramState:
    """
    Rewrite directive comments in the script.

    Returns:
        ProgramState with added fields:
            - filteredSource: Rewritten source (unchanged with --nofilter)
            - directives: Directives found
    """
    state = inputstate.copy()

    directive_filter = SourceFilter(
        enabled=False if state.nofilter else None,
        trace=True if state.trace else None,
    )
    state.filteredSource = directive_filter.source_transform(state.sourceText, str(state.scriptFile))
    state.directives = list(directive_filter.directives)
    return state


def directives_list(inputstate: ProgramState) -> ProgramState:
    """
    Print every directive of the script, one per line.

    Lines are highlighted with DirectiveLexer when stdout is a terminal.
    """
    state = inputstate.copy()

    # list the directives even when filtering is switched off
    lister = SourceFilter(enabled=True, trace=False)
    lister.source_transform(state.sourceText, str(state.scriptFile))
    lines = state.sourceText.split("\n")
    colorize = sys.stdout.isatty()
    for directive in lister.directives:
        text = lines[directive.line_number - 1].strip()
        if colorize:
            text = highlight(text, DirectiveLexer(), TerminalFormatter()).rstrip("\n")
        print(f"{state.script}:{directive.line_number}: {text}")
    state.directives = list(lister.directives)
    return state


def program_run(inputstate: ProgramState) -> ProgramState:
    """
    Compile and run the filtered script as __main__.

    Exceptions raised by the script propagate, so a failing directive
    reports its traceback at its own line.

    Exits:
        1 if the filtered script does not compile
    """
    state = inputstate.copy()

    try:
        code = compile(state.filteredSource, str(state.scriptFile), "exec", dont_inherit=True)
    except SyntaxError as e:
        print(f"Syntax error: {e}", file=sys.stderr)
        sys.exit(1)

    patterns = (state.module or []) + list(appsettings.modules)
    finder = None
    if patterns and not state.nofilter:
        finder = install(*patterns, source_filter=SourceFilter(trace=True if state.trace else None))
    if state.output:
        handle_set(sys.stdout if state.output == "stdout" else sys.stderr)

    module = types.ModuleType("__main__")
    module.__file__ = str(state.scriptFile)
    saved_main = sys.modules.get("__main__")
    saved_argv = sys.argv
    saved_path = list(sys.path)
    sys.modules["__main__"] = module
    sys.argv = [str(state.scriptFile)] + list(state.scriptArgs)
    sys.path.insert(0, str(state.scriptFile.parent))
    try:
        LOG(f"Running {state.scriptFile.name}", level=1)
        exec(code, module.__dict__)
    finally:
        sys.path[:] = saved_path
        sys.argv = saved_argv
        if saved_main is not None:
            sys.modules["__main__"] = saved_main
        if state.output:
            handle_reset()
        uninstall(finder)

    state.exitCode = 0
    return state


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point - run a script with directive comments enabled.

    Orchestrates the pipeline:
        1. env_check: Resolve the script path
        2. source_read: Read the script
        3. source_filter: Rewrite directives (or directives_list with -l)
        4. program_run: Execute the result as __main__

    Args:
        argv: Command line arguments (sys.argv[1:] when None)

    Returns:
        Process exit status
    """
    options: Namespace = parser.parse_args(argv)
    state: ProgramState = ProgramState.state_createFromNamespace(options)

    if state.verbosity:
        logger_configure()
    state_connectToLogger(state)

    if state.listOnly:
        final = pipeline(state, env_check, source_read, directives_list)
    else:
        final = pipeline(state, env_check, source_read, source_filter, program_run)
    return final.exitCode


if __name__ == "__main__":
    sys.exit(main())
