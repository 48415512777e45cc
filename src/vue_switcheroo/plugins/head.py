"""
Plugin for Nuxt `head()`.

The `head` option becomes a `useHead` call from `@unhead/vue`. A function
keeps its (rewritten) body inside `useHead(() => { ... })`; a plain object is
passed as is.
"""

from typing import Optional, Set

import tree_sitter

from vue_switcheroo.core.codegen import indent_body
from vue_switcheroo.core.grammar import node_text, rewrite_body
from vue_switcheroo.core.hooks import TransformContext, Transformer, register_transformer
from vue_switcheroo.core.models import TransformationResult

HEAD_SOURCE = "@unhead/vue"


def _needs_comma(node: tree_sitter.Node) -> bool:
  """True for the last property of a multi-line object literal when no comma follows it."""
  parent = node.parent
  if parent is None or parent.type != "object" or node.type in ("{", "}", ",", "comment"):
    return False
  following = [c.type for c in parent.children if c.start_byte >= node.end_byte and c.type != "comment"]
  return following == ["}"] and node.end_point[0] < parent.end_point[0]


def add_trailing_commas(body: str) -> str:
  """
  Terminates the last property of each multi-line object literal with a comma.

  Args:
      body: The rewritten head body.

  Returns:
      str: The body with the commas added, or unchanged if it does not parse.
  """
  pending: Set[int] = set()

  def replace(node: tree_sitter.Node) -> Optional[str]:
    if _needs_comma(node):
      pending.add(node.end_byte)
    if node.child_count == 0 and node.end_byte in pending:
      return f"{node_text(node)},"
    return None

  rewritten = rewrite_body(body, replace)
  return body if rewritten is None else rewritten


@register_transformer("head", order=120)
class HeadTransformer(Transformer):
  def should_transform(self, ctx: TransformContext) -> bool:
    return ctx.script.head_method is not None

  def transform(self, ctx: TransformContext) -> TransformationResult:
    result = TransformationResult()
    head = ctx.script.head_method
    result.add_import(HEAD_SOURCE, "useHead")

    if head.expression is not None:
      result.methods.append(f"useHead({ctx.transform_body(head.expression).strip()});")
      return result

    body = add_trailing_commas(ctx.transform_body(head.body))
    result.methods.append("useHead(() => {")
    result.methods.extend(indent_body(body))
    result.methods.append("});")
    result.methods.append("")
    return result
