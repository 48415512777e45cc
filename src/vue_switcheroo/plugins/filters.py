"""
Plugin for Vue 2 Filters.

Filter functions reached through `this.$options.filters` become plain calls to
functions destructured from the `useFilters` composable:

    Input:  `this.$options.filters.currency(\n  price,\n  'EUR'\n)`
    Output: `currency(price, 'EUR')` + `const { currency } = useFilters();`
"""

import re
from typing import List, Optional

import tree_sitter

from vue_switcheroo.core.grammar import node_text, rewrite_body
from vue_switcheroo.core.hooks import BodyRewrite, TransformContext, Transformer, register_transformer
from vue_switcheroo.core.models import TransformationResult

FILTERS_SOURCE = "@/composables/useFilters"

_FILTER_CALL = re.compile(r"(?:this\.)?\$options\.filters\.([A-Za-z_$][\w$]*)\s*\(")
_FILTER_MEMBER = re.compile(r"(?:this\.)?\$options\.filters\.([A-Za-z_$][\w$]*)")
_FILTER_OWNERS = ("this.$options.filters", "$options.filters")


def filter_names(ctx: TransformContext) -> List[str]:
  """Sorted names of the filters called from any extracted body."""
  names = set()
  for body in ctx.method_bodies():
    names.update(_FILTER_CALL.findall(body))
  return sorted(names)


def _rewrite_filter_call(node: tree_sitter.Node) -> Optional[str]:
  if node.type != "call_expression":
    return None
  callee = node.child_by_field_name("function")
  arguments = node.child_by_field_name("arguments")
  if callee is None or arguments is None or callee.type != "member_expression":
    return None
  if node_text(callee.child_by_field_name("object")) not in _FILTER_OWNERS:
    return None

  name = node_text(callee.child_by_field_name("property"))
  args = [" ".join(line.strip() for line in node_text(a).splitlines()) for a in arguments.named_children if a.type != "comment"]
  return f"{name}({', '.join(args)})"


def _rewrite_filters(body: str, ctx: TransformContext) -> str:
  if "$options.filters" not in body:
    return body
  rewritten = rewrite_body(body, _rewrite_filter_call)
  if rewritten is None:
    return _FILTER_MEMBER.sub(r"\1", body)
  # property reads that are not calls
  return _FILTER_MEMBER.sub(r"\1", rewritten)


@register_transformer("filters", order=70)
class FiltersTransformer(Transformer):
  def should_transform(self, ctx: TransformContext) -> bool:
    return bool(filter_names(ctx))

  def transform(self, ctx: TransformContext) -> TransformationResult:
    result = TransformationResult()
    names = filter_names(ctx)
    result.add_import(FILTERS_SOURCE, "useFilters")
    result.setup.append(f"const {{ {', '.join(names)} }} = useFilters();")
    return result

  def body_rewrite(self) -> Optional[BodyRewrite]:
    return _rewrite_filters
