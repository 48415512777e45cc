"""
Codegen Assembler.

Serializes the merged `TransformationResult` into the final component text:
template (with replacements), `<script setup>` (imports followed by the
category blocks), any additional verbatim script blocks, and the style block.
"""

from typing import Dict, List, Tuple

from vue_switcheroo.core.models import SfcSections, TransformationResult

# Sources whose entries are already complete import statements.
RAW_IMPORT_PREFIX = "__"
EXISTING_IMPORTS = "__existing__"
REWRITTEN_IMPORTS = "__rewritten__"

_RELATIVE_PREFIXES = ("@/", "~/", "./", "../")


def rewrite_legacy_alias(line: str) -> str:
  """Rewrites quoted `~/` paths to the `@/` alias."""
  return line.replace("'~/", "'@/").replace('"~/', '"@/')


def _import_sort_key(source: str) -> Tuple[int, int, str]:
  """
  Orders import sources.

  `vue` first, then package sources, then relative/alias sources. Within the
  relative group stores precede composables, then alphabetical.
  """
  if source == "vue":
    return (0, 0, source)
  if not source.startswith(_RELATIVE_PREFIXES):
    return (1, 0, source)
  if source.startswith("@/stores/"):
    return (2, 0, source)
  if source.startswith("@/composables/"):
    return (2, 1, source)
  return (2, 2, source)


def format_imports(imports: Dict[str, List[str]]) -> List[str]:
  """
  Formats the import map into sorted import statements.

  Args:
      imports: Import source -> imported names. Pseudo-sources starting with
          `__` carry preformatted statements and bypass dedup/formatting.

  Returns:
      List[str]: One statement per entry, deterministic for a given map.
  """
  lines: List[str] = []
  for source in sorted(imports, key=_import_sort_key):
    names = imports[source]
    if not names:
      continue
    if source.startswith(RAW_IMPORT_PREFIX):
      lines.extend(names)
      continue
    unique = sorted(set(names))
    lines.append(f"import {{ {', '.join(unique)} }} from '{source}';")
  return lines


def indent_body(body: str, prefix: str = "  ") -> List[str]:
  """
  Re-indents an extracted body for emission inside a new block.

  Extracted bodies keep their source indentation on every line but the first,
  so the common indentation of the trailing lines is removed before `prefix`
  is applied. Blank lines are kept (without the prefix), leading and trailing
  ones are dropped.

  Args:
      body: Body text as produced by the extractor (or a body rewrite).
      prefix: Indentation for the new block.

  Returns:
      List[str]: The emitted lines.
  """
  lines = [line.rstrip() for line in body.strip().splitlines()]
  if not lines:
    return []

  rest = [line for line in lines[1:] if line.strip()]
  base = min((len(line) - len(line.lstrip()) for line in rest), default=0)

  out = [prefix + lines[0].lstrip()]
  for line in lines[1:]:
    if line.strip():
      out.append(prefix + line[base:])
    else:
      out.append("")
  return out


def _trim_blank(lines: List[str]) -> List[str]:
  start, end = 0, len(lines)
  while start < end and not lines[start].strip():
    start += 1
  while end > start and not lines[end - 1].strip():
    end -= 1
  return lines[start:end]


def _category_blocks(result: TransformationResult) -> List[List[str]]:
  """Non-empty category blocks in emission order, with the alias rewrite applied."""
  blocks = [
    [rewrite_legacy_alias(line) for line in result.setup],
    [rewrite_legacy_alias(line) for line in result.reactive_state],
    [rewrite_legacy_alias(line) for line in result.computed_properties],
    [rewrite_legacy_alias(line) for line in result.methods],
    list(result.watchers),
    [rewrite_legacy_alias(line) for line in result.lifecycle_hooks],
  ]
  trimmed = [_trim_blank(block) for block in blocks]
  return [block for block in trimmed if block]


def apply_template_replacements(template: str, replacements: List[Tuple[str, str]]) -> str:
  for find, replace in replacements:
    if find:
      template = template.replace(find, replace)
  return template


def assemble(sections: SfcSections, result: TransformationResult) -> str:
  """
  Builds the converted component.

  Args:
      sections: The raw regions of the input.
      result: The merged transformation result.

  Returns:
      str: The complete `<script setup>` component.
  """
  out: List[str] = []

  if sections.template is not None:
    template = apply_template_replacements(sections.template.strip(), result.template_replacements)
    out.append(f"<template>\n{template}\n</template>\n")

  out.append("<script setup>\n")

  import_lines = format_imports(result.imports_to_add)
  for line in import_lines:
    out.append(line + "\n")
  if import_lines:
    out.append("\n")

  for index, block in enumerate(_category_blocks(result)):
    if index:
      out.append("\n")
    for line in block:
      out.append(line + "\n")

  out.append("</script>")

  for script in result.additional_scripts:
    out.append("\n" + rewrite_legacy_alias(script))

  if sections.style is not None:
    attrs = f" {sections.style_attrs}" if sections.style_attrs else ""
    out.append(f"\n<style{attrs}>\n{sections.style.strip()}\n</style>")

  return "".join(out)
