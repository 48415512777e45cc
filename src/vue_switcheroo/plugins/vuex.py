"""
Plugin for Vuex to Pinia Conversion.

Every store namespace the component touches becomes a Pinia-style store:

    import { useUserStore } from '@/stores/user';
    const userStore = useUserStore();

*   `mapGetters` / `mapState` aliases become computed values reading the store,
    and `this.alias` becomes `alias.value`. Only aliases the component uses
    are emitted.
*   `mapActions` / `mapMutations` aliases become store calls.
*   `this.$store.commit|dispatch('ns/name', ...)` becomes `nsStore.name(...)`.
*   `this.$store.state.ns.prop` and `this.$store.getters['ns/name']` become
    `nsStore.prop` / `nsStore.name`, in bodies and in the template.
"""

import re
from typing import Dict, List, NamedTuple, Optional, Set

import tree_sitter

from vue_switcheroo.core.grammar import node_text, parse_js, rewrite_body, string_value, walk
from vue_switcheroo.core.hooks import BodyRewrite, TransformContext, Transformer, register_transformer
from vue_switcheroo.core.models import FunctionCallDetail, TransformationResult

STORES_PREFIX = "@/stores/"
MAP_HELPERS = ("mapState", "mapGetters", "mapActions", "mapMutations")
COMPUTED_HELPERS = ("mapState", "mapGetters")

_NAMESPACED = re.compile(r"^['\"`]([A-Za-z_]\w*)/([A-Za-z_]\w*)['\"`]$")
_NAMESPACED_IN_TEXT = re.compile(r"['\"`]([A-Za-z_]\w*)/[A-Za-z_]\w*['\"`]")
_STATE_ACCESS = re.compile(r"\$store\.state\.([A-Za-z_]\w*)\.([A-Za-z_]\w*)")
_STATE_MEMBER = re.compile(r"^(?:this\.)?\$store\.state\.([A-Za-z_]\w*)\.([A-Za-z_]\w*)$")
_GETTER_ACCESS = re.compile(r"(?:this\.)?\$store\.getters\[['\"`]([A-Za-z_]\w*)/([A-Za-z_]\w*)['\"`]\]")
_STORE_CALL = re.compile(
  r"(?:this\.)?\$store\.(?:commit|dispatch)\(\s*['\"`]([A-Za-z_]\w*)/([A-Za-z_]\w*)['\"`]\s*(?:,\s*([^)]+))?\)"
)
_STORE_CALLEES = ("this.$store.commit", "this.$store.dispatch", "$store.commit", "$store.dispatch")


class StoreMapping(NamedTuple):
  """One alias produced by a `map*` helper."""

  helper: str
  alias: str
  namespace: str
  member: str
  is_array: bool


def store_variable(namespace: str) -> str:
  return f"{namespace}Store"


def store_factory(namespace: str) -> str:
  return f"use{namespace[:1].upper()}{namespace[1:]}Store"


def _array_alias(helper: str, member: str) -> str:
  """`mapGetters('user', ['getUser'])` exposes `getUser` as `user`."""
  if helper == "mapGetters" and member.startswith("get") and len(member) > 3:
    rest = member[3:]
    return rest[:1].lower() + rest[1:]
  return member


def parse_map_call(detail: FunctionCallDetail) -> List[StoreMapping]:
  """
  Reads the aliases declared by a `map*` helper call.

  Supports `mapX({ alias: 'ns/member' })`, `mapX('ns', { alias: 'member' })`
  and `mapX('ns', ['member'])`.

  Args:
      detail: The recorded call.

  Returns:
      List[StoreMapping]: Mappings in declaration order.
  """
  tree = parse_js(detail.full_call)
  call = next((n for n in walk(tree.root_node) if n.type == "call_expression"), None)
  if call is None:
    return []
  arguments = call.child_by_field_name("arguments")
  if arguments is None:
    return []

  namespace: Optional[str] = None
  container: Optional[tree_sitter.Node] = None
  for arg in arguments.named_children:
    if arg.type == "string" and namespace is None and container is None:
      value = string_value(arg) or ""
      if "/" not in value:
        namespace = value
    elif arg.type in ("object", "array") and container is None:
      container = arg

  mappings: List[StoreMapping] = []
  if container is None:
    return mappings

  if container.type == "array":
    if namespace is None:
      return mappings
    for element in container.named_children:
      member = string_value(element)
      if member:
        mappings.append(StoreMapping(detail.name, _array_alias(detail.name, member), namespace, member, True))
    return mappings

  for pair in container.named_children:
    if pair.type != "pair":
      continue
    alias = node_text(pair.child_by_field_name("key")).strip("'\"")
    value = string_value(pair.child_by_field_name("value"))
    if not alias or not value:
      continue
    if namespace is not None:
      mappings.append(StoreMapping(detail.name, alias, namespace, value, False))
    elif "/" in value:
      ns, member = value.split("/", 1)
      mappings.append(StoreMapping(detail.name, alias, ns, member, False))
  return mappings


def store_mappings(ctx: TransformContext) -> List[StoreMapping]:
  mappings: List[StoreMapping] = []
  for detail in ctx.script.function_call_details:
    if detail.name in MAP_HELPERS:
      mappings.extend(parse_map_call(detail))
  return mappings


def store_namespaces(ctx: TransformContext) -> List[str]:
  """Sorted namespaces reached through `$store` or the map helpers."""
  found: Set[str] = set()

  for detail in ctx.script.function_call_details + ctx.template.function_call_details:
    if detail.name in _STORE_CALLEES and detail.arguments:
      match = _NAMESPACED.match(detail.arguments[0].strip())
      if match:
        found.add(match.group(1))
    elif detail.name in MAP_HELPERS:
      for arg in detail.arguments:
        found.update(_NAMESPACED_IN_TEXT.findall(arg))

  found.update(m.namespace for m in store_mappings(ctx))

  texts = ctx.script.identifiers + ctx.template.identifiers + ctx.method_bodies() + [ctx.template_source]
  for text in texts:
    found.update(ns for ns, _ in _STATE_ACCESS.findall(text))
    found.update(ns for ns, _ in _GETTER_ACCESS.findall(text))
  return sorted(found)


def alias_used(alias: str, ctx: TransformContext) -> bool:
  """Whether a mapped alias is read by the template or by `this.alias` in the script."""
  if alias in ctx.template.identifiers:
    return True
  bounded = re.compile(rf"(?<![\w$.]){re.escape(alias)}(?![\w$])")
  if bounded.search(ctx.template_source):
    return True
  return bool(re.search(rf"\bthis\.{re.escape(alias)}(?![\w$])", ctx.script_source))


def _replacement_for(node: tree_sitter.Node, by_alias: Dict[str, StoreMapping]) -> Optional[str]:
  kind = node.type
  if kind == "call_expression":
    callee = node_text(node.child_by_field_name("function"))
    arguments = node.child_by_field_name("arguments")
    if callee not in _STORE_CALLEES or arguments is None:
      return None
    args = [a for a in arguments.named_children if a.type != "comment"]
    match = _NAMESPACED.match(node_text(args[0])) if args else None
    if match is None:
      return None
    rest = ", ".join(node_text(a) for a in args[1:])
    return f"{store_variable(match.group(1))}.{match.group(2)}({rest})"

  if kind == "subscript_expression":
    match = _GETTER_ACCESS.fullmatch(node_text(node))
    if match:
      return f"{store_variable(match.group(1))}.{match.group(2)}"
    return None

  if kind == "member_expression":
    text = node_text(node)
    match = _STATE_MEMBER.match(text)
    if match:
      return f"{store_variable(match.group(1))}.{match.group(2)}"
    obj = node.child_by_field_name("object")
    if obj is None or obj.type != "this":
      return None
    mapping = by_alias.get(node_text(node.child_by_field_name("property")))
    if mapping is None:
      return None
    if mapping.helper in COMPUTED_HELPERS:
      return f"{mapping.alias}.value"
    return f"{store_variable(mapping.namespace)}.{mapping.member}"
  return None


def _fallback_rewrite(body: str, by_alias: Dict[str, StoreMapping]) -> str:
  for alias, mapping in by_alias.items():
    pattern = re.compile(rf"\bthis\.{re.escape(alias)}(?![\w$])")
    if mapping.helper in COMPUTED_HELPERS:
      body = pattern.sub(f"{alias}.value", body)
    else:
      body = pattern.sub(f"{store_variable(mapping.namespace)}.{mapping.member}", body)

  def store_call(match: "re.Match[str]") -> str:
    return f"{store_variable(match.group(1))}.{match.group(2)}({(match.group(3) or '').strip()})"

  body = _STORE_CALL.sub(store_call, body)
  body = _GETTER_ACCESS.sub(lambda m: f"{store_variable(m.group(1))}.{m.group(2)}", body)
  return re.sub(r"(?:this\.)?" + _STATE_ACCESS.pattern, lambda m: f"{store_variable(m.group(1))}.{m.group(2)}", body)


def _rewrite_vuex(body: str, ctx: TransformContext) -> str:
  by_alias = {m.alias: m for m in store_mappings(ctx)}
  if "$store" not in body and not any(f"this.{alias}" in body for alias in by_alias):
    return body
  rewritten = rewrite_body(body, lambda node: _replacement_for(node, by_alias))
  if rewritten is None:
    return _fallback_rewrite(body, by_alias)
  return rewritten


def uses_vuex(ctx: TransformContext) -> bool:
  if any("$store" in call for call in ctx.script.function_calls):
    return True
  if any("$store" in i for i in ctx.script.identifiers + ctx.template.identifiers):
    return True
  return any(helper in ctx.script.identifiers or helper in ctx.script.function_calls for helper in MAP_HELPERS)


@register_transformer("vuex", order=80)
class VuexTransformer(Transformer):
  def should_transform(self, ctx: TransformContext) -> bool:
    return uses_vuex(ctx)

  def transform(self, ctx: TransformContext) -> TransformationResult:
    result = TransformationResult()

    for namespace in store_namespaces(ctx):
      result.add_import(f"{STORES_PREFIX}{namespace}", store_factory(namespace))
      result.setup.append(f"const {store_variable(namespace)} = {store_factory(namespace)}();")

    mappings = store_mappings(ctx)
    # getters are declared before state
    for helper in ("mapGetters", "mapState"):
      for mapping in (m for m in mappings if m.helper == helper):
        if not alias_used(mapping.alias, ctx):
          continue
        call = "()" if helper == "mapGetters" and mapping.is_array else ""
        result.computed_properties.append(
          f"const {mapping.alias} = computed(() => {store_variable(mapping.namespace)}.{mapping.member}{call});"
        )

    seen: Set[str] = set()
    for pattern in (_STATE_ACCESS, _GETTER_ACCESS):
      for match in pattern.finditer(ctx.template_source):
        if match.group(0) not in seen:
          seen.add(match.group(0))
          result.add_template_replacement(match.group(0), f"{store_variable(match.group(1))}.{match.group(2)}")

    result.imports_to_remove.append("vuex")
    return result

  def body_rewrite(self) -> Optional[BodyRewrite]:
    return _rewrite_vuex
