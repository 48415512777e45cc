"""
Convert Command Handler.

This module implements the logic for the `vue_switcheroo convert` command.
It orchestrates:
1. Options loading (explicit TOML file or `[tool.vue_switcheroo]`).
2. Component discovery for directory inputs.
3. Conversion via the Engine.
4. Output writing and the summary report.
"""

from pathlib import Path
from typing import Dict, List, Optional

from rich.markup import escape
from rich.table import Table

from vue_switcheroo.config import RewriteOptions
from vue_switcheroo.core.engine import ConversionResult, SfcEngine
from vue_switcheroo.utils.console import console, log_error, log_info, log_success, log_warning

SKIPPED_DIRECTORIES = frozenset({"node_modules", ".git", "dist", "build"})


def discover_components(root: Path, recursive: bool) -> List[Path]:
  """
  Lists the `.vue` files below `root` in a stable order.

  Args:
      root: Directory to scan.
      recursive: Descend into sub directories, skipping vendored and build output.

  Returns:
      List[Path]: Sorted component paths.
  """
  if not recursive:
    return sorted(p for p in root.glob("*.vue") if p.is_file())

  found = []
  for path in root.rglob("*.vue"):
    relative = path.relative_to(root)
    if any(part in SKIPPED_DIRECTORIES for part in relative.parts[:-1]):
      continue
    if path.is_file():
      found.append(path)
  return sorted(found)


def handle_convert(
  input_path: Path,
  output_path: Optional[Path],
  config_file: Optional[Path] = None,
  recursive: bool = False,
) -> int:
  """
  Handles the 'convert' command execution.

  Args:
      input_path: Component file or directory to convert.
      output_path: Destination file (single input) or directory (directory input).
          A single file is printed to stdout when omitted.
      config_file: Optional TOML options file.
      recursive: Whether directory inputs are scanned recursively.

  Returns:
      int: Exit code (0 when at least one file converted, 1 otherwise).
  """
  if not input_path.exists():
    log_error(f"Input not found: {escape(str(input_path))}")
    return 1

  try:
    options = RewriteOptions.load(
      config_file=config_file,
      search_path=input_path if input_path.is_dir() else input_path.parent,
    )
  except (OSError, ValueError) as e:
    log_error(f"Could not load options: {escape(str(e))}")
    return 1

  engine = SfcEngine(options)
  batch_results: Dict[str, ConversionResult] = {}

  if input_path.is_file():
    result = _convert_single_file(engine, input_path, output_path)
    batch_results[input_path.name] = result
    if not result.success:
      return 1
    return 0

  if not output_path:
    log_error("Directory conversion requires --out destination directory.")
    return 1

  components = discover_components(input_path, recursive)
  if not components:
    log_warning(f"No .vue files found in {escape(str(input_path))}")
    return 1

  log_info(f"Processing {len(components)} files from {escape(str(input_path))}...")
  for src_file in components:
    rel_path = src_file.relative_to(input_path)
    batch_results[str(rel_path)] = _convert_single_file(engine, src_file, output_path / rel_path)

  _print_batch_summary(batch_results)
  return 0 if any(r.success for r in batch_results.values()) else 1


def _convert_single_file(engine: SfcEngine, input_path: Path, output_path: Optional[Path]) -> ConversionResult:
  """
  Converts one component and writes (or prints) the result.

  Args:
      engine: The shared engine.
      input_path: Source component.
      output_path: Destination file, or None for stdout.

  Returns:
      ConversionResult: Result object containing status and code.
  """
  try:
    with open(input_path, "rt", encoding="utf-8") as f:
      source = f.read()
  except OSError as e:
    log_error(f"Failed to read {escape(str(input_path))}: {escape(str(e))}")
    return ConversionResult(success=False, errors=[str(e)])

  result = engine.run(source)
  if not result.success:
    log_error(f"Failed to convert {escape(str(input_path))}: {escape('; '.join(result.errors))}")
    return result

  if output_path:
    try:
      output_path.parent.mkdir(parents=True, exist_ok=True)
      with open(output_path, "wt", encoding="utf-8") as f:
        f.write(result.code)
    except OSError as e:
      log_error(f"Failed to write {escape(str(output_path))}: {escape(str(e))}")
      return ConversionResult(success=False, errors=[str(e)])
    log_success(f"Converted: [path]{escape(str(input_path))}[/path] -> [path]{escape(str(output_path))}[/path]")
  else:
    print(result.code)

  return result


def _print_batch_summary(results: Dict[str, ConversionResult]) -> None:
  """
  Renders a summary table of conversion results to the console.

  Args:
      results: Dictionary mapping file names to conversion results.
  """
  total = len(results)
  successes = sum(1 for r in results.values() if r.success)
  failures = total - successes

  if failures == 0:
    log_success(f"Batch Complete: {successes}/{total} files converted.")
    return

  table = Table(title="Conversion Report")
  table.add_column("File", style="cyan")
  table.add_column("Status", justify="center")
  table.add_column("Issues", style="red")

  for filename, res in results.items():
    if res.success:
      continue
    issues = "; ".join(res.errors) if res.errors else "Unknown Error"
    table.add_row(escape(filename), "❌ Failed", escape(issues))

  console.print(table)
  console.print(f"\n[bold]Summary:[/bold] {successes} Converted, {failures} Failed.")
