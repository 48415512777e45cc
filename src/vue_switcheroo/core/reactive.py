"""
Built-in Reactive Body Rewrite.

Replaces instance-bound accesses (`this.x`) in extracted bodies with their
Composition API form. The rewrite is driven by `member_expression` nodes whose
object is `this`, so `this.item` never clobbers `this.items` and no ordering of
names is required.

Resolution of `this.<name>`:

*   data / computed -> `name.value`
*   prop -> `props.name`
*   method -> `name`
*   framework reserved (`$route`, `$refs`, ...) or mixin member -> `name`
*   anything else -> `/* FIXME: name */ name`
"""

import re
from typing import Optional

import tree_sitter

from vue_switcheroo.core.grammar import node_text, rewrite_body
from vue_switcheroo.core.hooks import TransformContext

_THIS_MEMBER_FALLBACK = re.compile(r"(?<![\w$.])this\.([A-Za-z_$][\w$]*)")


def resolve_member(name: str, ctx: TransformContext) -> str:
  """
  Computes the replacement text for `this.<name>`.

  Args:
      name: The accessed property name.
      ctx: The transform context (facts and config).

  Returns:
      str: Replacement expression text.
  """
  script = ctx.script
  if name in script.data_names() or name in script.computed_properties:
    return f"{name}.value"
  if name in script.prop_names():
    return f"props.{name}"
  if name in script.methods:
    return name
  if name in ctx.config.reserved_names or name in ctx.config.mixin_members():
    return name
  return f"/* FIXME: {name} */ {name}"


def apply_reactive_rewrite(body: str, ctx: TransformContext) -> str:
  """
  Rewrites every remaining `this.<name>` access in `body`.

  Text that the grammar cannot parse (e.g. a fragment produced by an earlier
  textual rewrite) falls back to a token-bounded pattern over `this.<name>`.

  Args:
      body: Body text, already processed by unit specific rewrites.
      ctx: The transform context.

  Returns:
      str: The rewritten body.
  """
  if "this" not in body:
    return body

  def replace(node: tree_sitter.Node) -> Optional[str]:
    if node.type != "member_expression":
      return None
    obj = node.child_by_field_name("object")
    prop = node.child_by_field_name("property")
    if obj is None or prop is None or obj.type != "this" or prop.type != "property_identifier":
      return None
    return resolve_member(node_text(prop), ctx)

  rewritten = rewrite_body(body, replace)
  if rewritten is None:
    return _THIS_MEMBER_FALLBACK.sub(lambda m: resolve_member(m.group(1), ctx), body)
  return rewritten
