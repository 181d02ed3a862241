"""
Axiom Programming Language - Main Entry Point
Runs source through lexer, parser, type checker and interpreter
"""

import sys
import argparse
from pathlib import Path
from typing import Optional

from parsing import create_parser, parse_source
from semantics import check_program
from interpreter import execute_program
from ast_nodes import pretty_print_ast
from error_handling import Err, Ok, Result, AxiomError, format_diagnostic


VERSION = "Axiom v0.1.0"

SOURCE_EXTENSION = ".axi"

DEMO_SOURCE = "let t = now\nt"


def create_arg_parser() -> argparse.ArgumentParser:
  """Create command line argument parser"""
  parser = argparse.ArgumentParser(
      description='Axiom - a small statically typed language with a deterministic clock',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
Examples:
  %(prog)s                         # Run the built-in demo program
  %(prog)s script.axi              # Run an Axiom script
  %(prog)s -e "let x = 2 x * 21"   # Run inline source
  %(prog)s --tokens script.axi     # Show the token stream
  %(prog)s --parse script.axi      # Parse and show the AST
  %(prog)s --check script.axi      # Type check and show binding types
  %(prog)s --debug script.axi      # Run with debug output
        """
  )

  parser.add_argument(
      'script',
      nargs='?',
      help='Axiom script file (.axi) to execute'
  )

  parser.add_argument(
      '-e', '--eval',
      metavar='SOURCE',
      help='Run SOURCE instead of a script file'
  )

  stage = parser.add_mutually_exclusive_group()
  stage.add_argument(
      '--tokens',
      action='store_true',
      help='Scan and show tokens (for debugging)'
  )
  stage.add_argument(
      '--parse',
      action='store_true',
      help='Parse and show AST (for debugging)'
  )
  stage.add_argument(
      '--check',
      action='store_true',
      help='Type check and show the type of each binding'
  )

  parser.add_argument(
      '--debug',
      action='store_true',
      help='Enable debug output for all stages'
  )

  parser.add_argument(
      '--version',
      action='version',
      version=VERSION
  )

  return parser


# ============================================================================
# PIPELINE
# ============================================================================

def run_source(source: str, filename: str = "<input>", debug: bool = False) -> Result:
  """
  Run source through every stage, stopping at the first diagnostic.
  Returns Ok(final value or None) or Err(diagnostic).
  """
  parsed = parse_source(source, filename, debug)
  if isinstance(parsed, Err):
    return parsed
  if debug:
    print(f"Parsed {len(parsed.value)} statements")

  checked = check_program(parsed.value, debug)
  if isinstance(checked, Err):
    return checked
  if debug:
    print(f"Type checked {len(parsed.value)} statements")

  return execute_program(parsed.value, debug)


def format_result(result: Result) -> str:
  """Render the final value, or the diagnostic, the way the driver prints it"""
  if isinstance(result, Ok):
    return f"Result: {result.value}"
  return format_diagnostic(result.diagnostic)


def print_diagnostic(result: Err, source: str) -> None:
  print(format_diagnostic(result.diagnostic, source), end='')


# ============================================================================
# COMMANDS
# ============================================================================

def show_tokens(source: str, filename: str, debug: bool = False) -> int:
  try:
    for token in create_parser(debug).tokenize(source, filename):
      print(f"{token.span}: {token}")
  except AxiomError as e:
    print(format_diagnostic(e.diagnostic, source), end='')
    return 1
  return 0


def show_ast(source: str, filename: str, debug: bool = False) -> int:
  parsed = parse_source(source, filename, debug)
  if isinstance(parsed, Err):
    print_diagnostic(parsed, source)
    return 1

  print(f"Parsed {len(parsed.value)} statements:")
  print("=" * 50)
  for stmt in parsed.value:
    print(pretty_print_ast(stmt), end='')
  return 0


def show_types(source: str, filename: str, debug: bool = False) -> int:
  parsed = parse_source(source, filename, debug)
  if isinstance(parsed, Err):
    print_diagnostic(parsed, source)
    return 1

  checked = check_program(parsed.value, debug)
  if isinstance(checked, Err):
    print_diagnostic(checked, source)
    return 1

  print(f"Program is well typed ({len(checked.value)} bindings)")
  for name, type_info in checked.value.items():
    print(f"  {name} : {type_info}")
  return 0


def run(source: str, filename: str, debug: bool = False) -> int:
  result = run_source(source, filename, debug)
  if isinstance(result, Err):
    print_diagnostic(result, source)
    return 1

  print(format_result(result))
  return 0


def read_script(script_path: str) -> Optional[str]:
  """Read a .axi file; prints the problem and returns None on failure"""
  if Path(script_path).suffix != SOURCE_EXTENSION:
    print(f"Error: Invalid file type '{script_path}'")
    print(f"  Hint: Axiom programs must use the {SOURCE_EXTENSION} extension")
    return None

  try:
    return Path(script_path).read_text(encoding='utf-8')
  except FileNotFoundError:
    print(f"Error: Script file '{script_path}' not found")
    print(f"  Hint: Check the file path and make sure the file exists")
  except PermissionError:
    print(f"Error: Permission denied reading '{script_path}'")
    print(f"  Hint: Make sure you have read permissions for this file")
  except UnicodeDecodeError as e:
    print(f"Error: Cannot decode file '{script_path}': {e}")
    print(f"  Hint: Make sure the file is a text file with UTF-8 encoding")
  except OSError as e:
    print(f"Error: Failed to read '{script_path}': {e}")
  return None


def main(argv=None) -> int:
  """Main entry point for Axiom"""
  args = create_arg_parser().parse_args(argv)

  if args.eval is not None:
    source, filename = args.eval, "<eval>"
  elif args.script:
    source, filename = read_script(args.script), args.script
    if source is None:
      return 1
  else:
    source, filename = DEMO_SOURCE, "<demo>"

  if args.tokens:
    command = show_tokens
  elif args.parse:
    command = show_ast
  elif args.check:
    command = show_types
  else:
    command = run

  try:
    return command(source, filename, debug=args.debug)
  except Exception as e:
    print(f"Unexpected error while processing '{filename}': {e}")
    if args.debug:
      import traceback
      traceback.print_exc()
    return 1


if __name__ == "__main__":
  sys.exit(main())
