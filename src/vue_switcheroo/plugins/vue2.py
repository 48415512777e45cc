"""
Plugin for Vue 2 Instance API.

*   Lifecycle options are regrouped by their Vue 3 hook: `created` and
    `beforeCreate` bodies run inline in setup, `beforeDestroy` merges into
    `onBeforeUnmount`, `destroyed` into `onUnmounted`, and so on.
*   `this.$set(obj, key, value)` / `this.$delete(obj, key)` become plain
    assignments / `delete` expressions.
*   `this.$nextTick(` becomes the imported `nextTick(`.
*   `this.$refs.name` becomes a `useTemplateRef('name')` constant.
"""

import re
from typing import Dict, List, Optional

import tree_sitter

from vue_switcheroo.core.codegen import indent_body
from vue_switcheroo.core.grammar import node_text, rewrite_body, string_value
from vue_switcheroo.core.hooks import BodyRewrite, TransformContext, Transformer, register_transformer
from vue_switcheroo.core.models import MethodDetail, TransformationResult

SETUP_HOOK = "setup"

# Options API hook -> Composition API hook
LIFECYCLE_MAP: Dict[str, str] = {
  "beforeCreate": SETUP_HOOK,
  "created": SETUP_HOOK,
  "beforeMount": "onBeforeMount",
  "mounted": "onMounted",
  "beforeUpdate": "onBeforeUpdate",
  "updated": "onUpdated",
  "beforeUnmount": "onBeforeUnmount",
  "beforeDestroy": "onBeforeUnmount",
  "destroyed": "onUnmounted",
  "unmounted": "onUnmounted",
  "activated": "onActivated",
  "deactivated": "onDeactivated",
}

HOOK_ORDER = (
  SETUP_HOOK,
  "onBeforeMount",
  "onMounted",
  "onBeforeUpdate",
  "onUpdated",
  "onBeforeUnmount",
  "onUnmounted",
  "onActivated",
  "onDeactivated",
)

_SET_CALLEES = ("this.$set", "$set", "Vue.set")
_DELETE_CALLEES = ("this.$delete", "$delete", "Vue.delete")
_NEXT_TICK = re.compile(r"(?:this\.)?\$nextTick\(")
_REF_ACCESS = re.compile(r"(?:this\.)?\$refs(?:\?\.|\.)([A-Za-z_$][\w$]*)|(?:this\.)?\$refs(?:\?\.)?\[['\"]([^'\"]+)['\"]\]")
_IDENTIFIER = re.compile(r"^[A-Za-z_$][\w$]*$")


def ref_variable(ref_name: str) -> str:
  """`cat-row` -> `catRowRef`; names already ending in `Ref` are kept."""
  head, *rest = ref_name.split("-")
  name = head + "".join(word[:1].upper() + word[1:].lower() for word in rest)
  return name if name.endswith("Ref") else f"{name}Ref"


def template_refs(ctx: TransformContext) -> List[str]:
  """Names of template refs accessed through `$refs`, in order of first use."""
  refs: List[str] = []
  for body in ctx.method_bodies():
    for match in _REF_ACCESS.finditer(body):
      name = match.group(1) or match.group(2)
      if name not in refs:
        refs.append(name)
  return refs


def lifecycle_methods(ctx: TransformContext) -> List[MethodDetail]:
  return [m for m in ctx.script.lifecycle_hooks if m.name in LIFECYCLE_MAP]


def _member_target(obj: str, key_node: tree_sitter.Node) -> str:
  key = string_value(key_node)
  if key is not None and _IDENTIFIER.match(key):
    return f"{obj}.{key}"
  return f"{obj}[{node_text(key_node)}]"


def _rewrite_set_delete(node: tree_sitter.Node) -> Optional[str]:
  if node.type != "call_expression":
    return None
  callee = node_text(node.child_by_field_name("function"))
  arguments = node.child_by_field_name("arguments")
  if arguments is None:
    return None
  args = [a for a in arguments.named_children if a.type != "comment"]

  if callee in _SET_CALLEES and len(args) == 3:
    return f"{_member_target(node_text(args[0]), args[1])} = {node_text(args[2])}"
  if callee in _DELETE_CALLEES and len(args) == 2:
    return f"delete {_member_target(node_text(args[0]), args[1])}"
  return None


def _rewrite_vue2(body: str, ctx: TransformContext) -> str:
  if "$set(" in body or "$delete(" in body or ".set(" in body or ".delete(" in body:
    body = rewrite_body(body, _rewrite_set_delete) or body
  body = _NEXT_TICK.sub("nextTick(", body)

  refs = template_refs(ctx)
  if refs:
    body = _REF_ACCESS.sub(lambda m: f"{ref_variable(m.group(1) or m.group(2))}.value", body)
  return body


def uses_vue2_api(ctx: TransformContext) -> bool:
  return any("$set(" in b or "$delete(" in b or "$nextTick(" in b or "$refs" in b for b in ctx.method_bodies())


@register_transformer("vue2", order=60)
class Vue2Transformer(Transformer):
  def should_transform(self, ctx: TransformContext) -> bool:
    return bool(lifecycle_methods(ctx)) or uses_vue2_api(ctx)

  def transform(self, ctx: TransformContext) -> TransformationResult:
    result = TransformationResult()

    groups: Dict[str, List[MethodDetail]] = {}
    for method in lifecycle_methods(ctx):
      groups.setdefault(LIFECYCLE_MAP[method.name], []).append(method)

    for hook in HOOK_ORDER:
      methods = groups.get(hook)
      if not methods:
        continue
      if hook == SETUP_HOOK:
        for method in methods:
          result.lifecycle_hooks.extend(indent_body(ctx.transform_body(method.body), prefix=""))
          result.lifecycle_hooks.append("")
        continue

      result.add_import("vue", hook)
      prefix = "async " if any(m.is_async for m in methods) else ""
      result.lifecycle_hooks.append(f"{hook}({prefix}() => {{")
      for method in methods:
        result.lifecycle_hooks.extend(indent_body(ctx.transform_body(method.body)))
      result.lifecycle_hooks.append("});")
      result.lifecycle_hooks.append("")

    if any("$nextTick(" in body for body in ctx.method_bodies()):
      result.add_import("vue", "nextTick")

    refs = template_refs(ctx)
    if refs:
      result.add_import("vue", "useTemplateRef")
      for name in refs:
        result.reactive_state.append(f"const {ref_variable(name)} = useTemplateRef('{name}');")
    return result

  def body_rewrite(self) -> Optional[BodyRewrite]:
    return _rewrite_vue2
