"""
Main Entry Point for vue-switcheroo CLI.

This module handles argument parsing and dispatches to the command handlers
defined in `vue_switcheroo.cli.commands`.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from vue_switcheroo import __version__
from vue_switcheroo.cli import commands
from vue_switcheroo.utils.console import set_verbose


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="vue-switcheroo: Options API to <script setup> transpiler")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
  parser.add_argument("--verbose", action="store_true", help="Log which transformer units fired")

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: CONVERT ---
  cmd_conv = subparsers.add_parser("convert", help="Convert a .vue file or a directory of .vue files")
  cmd_conv.add_argument("path", type=Path, help="Input component or directory")
  cmd_conv.add_argument("--out", type=Path, help="Output destination (file or dir)")
  cmd_conv.add_argument(
    "--config",
    type=Path,
    default=None,
    help="TOML options file (default: [tool.vue_switcheroo] in the nearest pyproject.toml)",
  )
  cmd_conv.add_argument(
    "--recursive",
    action="store_true",
    help="Descend into sub directories (node_modules, .git, dist and build are skipped)",
  )

  args = parser.parse_args(argv)
  set_verbose(args.verbose)

  if args.command == "convert":
    return commands.handle_convert(args.path, args.out, args.config, args.recursive)

  return 1


if __name__ == "__main__":
  sys.exit(main())
