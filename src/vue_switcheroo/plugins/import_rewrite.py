"""
Plugin for Library Import Rewrites.

Driven entirely by configuration:

*   `imports_rewrite`: retargets named imports of one library to another,
    renaming components (and their template tags, in PascalCase and
    kebab-case) and importing directive objects the template uses.
*   `additional_imports`: injects a verbatim import line, or renames the tag,
    whenever a component tag appears in the template.

Rewritten statements are complete lines and travel under the
`__rewritten__` pseudo-source.
"""

import re
from typing import List, Tuple

from vue_switcheroo.config import ImportRewrite
from vue_switcheroo.core.codegen import REWRITTEN_IMPORTS
from vue_switcheroo.core.hooks import TransformContext, Transformer, register_transformer
from vue_switcheroo.core.models import ImportInfo, TransformationResult

_UPPER = re.compile(r"(?<!^)([A-Z])")


def to_kebab_case(name: str) -> str:
  """`BSidebar` -> `b-sidebar`."""
  return _UPPER.sub(r"-\1", name).lower()


def tag_used(template: str, component: str) -> bool:
  """True when `<Component` or `<component-name` appears in the template."""
  return f"<{component}" in template or f"<{to_kebab_case(component)}" in template


def tag_replacements(old: str, new: str) -> List[Tuple[str, str]]:
  """Find/replace pairs renaming opening and closing tags."""
  return [(f"<{old}", f"<{new}"), (f"</{old}>", f"</{new}>")]


def _rewritten_statement(info: ImportInfo, rule: ImportRewrite, template: str) -> str:
  names = []
  for item in info.items:
    if item.is_default or item.is_namespace:
      continue
    names.append(rule.component_rewrite.get(item.name, item.name))

  for directive, imported in rule.directives.items():
    if directive in template:
      names.append(imported)

  if not names:
    return ""
  return f"import {{ {', '.join(sorted(set(names)))} }} from '{rule.name}';"


@register_transformer("import_rewrite", order=20)
class ImportRewriteTransformer(Transformer):
  def should_transform(self, ctx: TransformContext) -> bool:
    config = ctx.config
    if any(info.source in config.imports_rewrite for info in ctx.script.imports):
      return True
    return any(tag_used(ctx.template_source, component) for component in config.additional_imports)

  def transform(self, ctx: TransformContext) -> TransformationResult:
    result = TransformationResult()
    config = ctx.config
    template = ctx.template_source
    statements = []

    for info in ctx.script.imports:
      rule = config.imports_rewrite.get(info.source)
      if rule is None:
        continue
      statement = _rewritten_statement(info, rule, template)
      if statement:
        statements.append(statement)
      for old, new in rule.component_rewrite.items():
        result.template_replacements.extend(tag_replacements(old, new))
        result.template_replacements.extend(tag_replacements(to_kebab_case(old), to_kebab_case(new)))
      result.imports_to_remove.append(info.source)

    for component, action in config.additional_imports.items():
      if action.import_path and tag_used(template, component):
        statements.append(action.import_path)
      if action.rewrite_to:
        result.template_replacements.extend(tag_replacements(component, action.rewrite_to))
        result.template_replacements.extend(tag_replacements(to_kebab_case(component), action.rewrite_to))

    if statements:
      result.add_imports(REWRITTEN_IMPORTS, statements)
    return result
