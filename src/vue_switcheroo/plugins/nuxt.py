"""
Plugin for Nuxt 2 Component Features.

Handles the Nuxt specific component options and instance members:

*   `fetch()` becomes a local `fetch` function invoked from `onMounted`.
*   `asyncData()` becomes a `useAsyncData` call; returned keys that are also
    data properties are initialized from it (priority 10, overriding the
    plain `ref` proposals).
*   `nuxtI18n.paths` is exported from an additional `<script>` block.
*   `$nuxt.$on/$off/$emit`, `$nuxt.context.redirect`, `$nuxt.refresh` and
    `$config` are served by the `useNuxtCompat` composable.
*   `<nuxt-link>` / `<NuxtLink>` become `<router-link>`.
"""

import re
from typing import Dict, List, Optional, Tuple

import tree_sitter

from vue_switcheroo.core.codegen import indent_body
from vue_switcheroo.core.grammar import (
  FUNCTION_NODE_TYPES,
  function_body,
  function_parameters,
  key_name,
  node_text,
  parse_js,
  walk,
)
from vue_switcheroo.core.hooks import BodyRewrite, TransformContext, Transformer, register_transformer
from vue_switcheroo.core.models import TransformationResult

COMPAT_SOURCE = "@/composables/useNuxtCompat"
ASYNC_DATA_SOURCE = "@/composables/useAsyncData"
ASYNC_DATA_PRIORITY = 10

_FETCH_CALL = re.compile(r"(?:this\.)?\$fetch\b")
_CONFIG = re.compile(r"(?:this\.)?\$config\b")
_EVENT_BUS = re.compile(r"(?:this\.)?\$nuxt\.\$(on|off|emit)\b")
_REDIRECT = re.compile(r"(?:this\.)?\$nuxt\.context\.redirect\b")
_REFRESH = re.compile(r"(?:this\.)?\$nuxt\.refresh\b")


def uses_fetch_calls(ctx: TransformContext) -> bool:
  return ctx.script_mentions("$fetch")


def uses_event_bus(ctx: TransformContext) -> bool:
  return any(ctx.script_mentions(f"$nuxt.${event}") for event in ("on", "off", "emit"))


def uses_redirect(ctx: TransformContext) -> bool:
  return ctx.script_mentions("$nuxt.context.redirect")


def uses_refresh(ctx: TransformContext) -> bool:
  return ctx.script_mentions("$nuxt.refresh")


def uses_config(ctx: TransformContext) -> bool:
  return ctx.script_mentions("$config") or ctx.template_mentions("$config")


def uses_nuxt_link(ctx: TransformContext) -> bool:
  return ctx.template_mentions("nuxt-link") or ctx.template_mentions("NuxtLink")


def compat_members(ctx: TransformContext) -> List[str]:
  """Members of `useNuxtCompat` the component needs, in a fixed order."""
  members = []
  if uses_event_bus(ctx):
    members.append("eventBus")
  if uses_redirect(ctx):
    members.append("redirect")
  if uses_refresh(ctx):
    members.append("refresh")
  if uses_config(ctx):
    members.append("runtimeConfig")
  return members


def _function_node(source: str) -> Tuple[Optional[tree_sitter.Node], Optional[tree_sitter.Tree]]:
  """
  Locates the function in a method text.

  The text is either a method definition (`async asyncData(ctx) {...}`) or a
  function value; both parse once wrapped in an object literal or parentheses.
  """
  for wrapped in (f"({{ {source} }})", f"({source})"):
    tree = parse_js(wrapped)
    if tree.root_node.has_error:
      continue
    for node in walk(tree.root_node):
      if node.type in FUNCTION_NODE_TYPES:
        return node, tree
  return None, None


def parse_async_data(source: str) -> Optional[Tuple[str, str, List[str]]]:
  """
  Splits an `asyncData` method into its parts.

  Args:
      source: The method text as extracted from the component.

  Returns:
      Optional[Tuple[str, str, List[str]]]: Parameter text, body text and the
      keys of the last returned object literal; None if it does not parse.
  """
  node, _ = _function_node(source)
  if node is None:
    return None

  returned: List[str] = []
  block = node.child_by_field_name("body")
  if block is not None and block.type == "statement_block":
    for statement in block.named_children:
      if statement.type != "return_statement" or not statement.named_children:
        continue
      value = statement.named_children[0]
      if value.type == "parenthesized_expression" and value.named_children:
        value = value.named_children[0]
      if value.type != "object":
        continue
      returned = []
      for child in value.named_children:
        if child.type == "pair":
          returned.append(key_name(child.child_by_field_name("key")))
        elif child.type == "shorthand_property_identifier":
          returned.append(node_text(child))

  return ", ".join(function_parameters(node)), function_body(node), returned


def nuxt_i18n_paths(source: str) -> Optional[Dict[str, str]]:
  """Reads `paths: { locale: 'path' }` from a `nuxtI18n` option object."""
  tree = parse_js(f"({source})")
  if tree.root_node.has_error:
    return None
  for node in walk(tree.root_node):
    if node.type != "pair" or key_name(node.child_by_field_name("key")) != "paths":
      continue
    value = node.child_by_field_name("value")
    if value is None or value.type != "object":
      return None
    return {
      node_text(pair.child_by_field_name("key")): node_text(pair.child_by_field_name("value"))
      for pair in value.named_children
      if pair.type == "pair"
    }
  return None


def _rewrite_nuxt(body: str, ctx: TransformContext) -> str:
  if uses_fetch_calls(ctx):
    body = _FETCH_CALL.sub("fetch", body)
  if uses_event_bus(ctx):
    body = _EVENT_BUS.sub(lambda m: f"eventBus.{m.group(1)}", body)
  if uses_config(ctx):
    body = _CONFIG.sub("runtimeConfig", body)
  if uses_redirect(ctx):
    body = _REDIRECT.sub("redirect", body)
  if uses_refresh(ctx):
    body = _REFRESH.sub("refresh", body)
  return body


@register_transformer("nuxt", order=40)
class NuxtTransformer(Transformer):
  def should_transform(self, ctx: TransformContext) -> bool:
    script = ctx.script
    return (
      script.fetch_method is not None
      or script.async_data_method is not None
      or script.nuxt_i18n is not None
      or uses_fetch_calls(ctx)
      or uses_nuxt_link(ctx)
      or bool(compat_members(ctx))
    )

  def transform(self, ctx: TransformContext) -> TransformationResult:
    result = TransformationResult()

    members = compat_members(ctx)
    if members:
      result.add_import(COMPAT_SOURCE, "useNuxtCompat")
      result.setup.append(f"const {{ {', '.join(members)} }} = useNuxtCompat();")
    if "runtimeConfig" in members:
      result.add_template_replacement("$config", "runtimeConfig")

    self._fetch(ctx, result)
    self._async_data(ctx, result)

    if ctx.script.nuxt_i18n is not None:
      paths = nuxt_i18n_paths(ctx.script.nuxt_i18n)
      if paths:
        lines = [f"  {locale}: {path}," for locale, path in paths.items()]
        result.additional_scripts.append("<script>\nexport const i18n = {\n" + "\n".join(lines) + "\n};\n</script>")

    if uses_nuxt_link(ctx):
      result.add_template_replacement("nuxt-link", "router-link")
      result.add_template_replacement("NuxtLink", "router-link")
    return result

  def _fetch(self, ctx: TransformContext, result: TransformationResult) -> None:
    fetch = ctx.script.fetch_method
    if fetch is None:
      return
    prefix = "async " if fetch.is_async else ""
    result.methods.append(f"const fetch = {prefix}() => {{")
    result.methods.extend(indent_body(ctx.transform_body(fetch.body)))
    result.methods.append("};")

    result.add_import("vue", "onMounted")
    result.lifecycle_hooks.extend([f"onMounted({prefix}() => {{", "  fetch();", "});"])

  def _async_data(self, ctx: TransformContext, result: TransformationResult) -> None:
    source = ctx.script.async_data_method
    if source is None:
      return
    parts = parse_async_data(source)
    if parts is None:
      return
    params, body, returned = parts

    result.add_import(ASYNC_DATA_SOURCE, "useAsyncData")
    result.setup.append(f"const data = await useAsyncData(async ({params}) => {{")
    result.setup.extend(indent_body(body))
    result.setup.append("});")

    data_names = ctx.script.data_names()
    for name in returned:
      if name in data_names:
        result.propose_data_ref(name, f"const {name} = ref(data.{name});", ASYNC_DATA_PRIORITY)

  def body_rewrite(self) -> Optional[BodyRewrite]:
    return _rewrite_nuxt
