"""
Plugin for Component Events.

Collects the events a component emits (template first, then script) and
declares them with `defineEmits`. Vue 2 `v-model` events (`input`) are renamed
to their Vue 3 form (`update:value`). `$nuxt.$emit` is an event bus call and is
left to the nuxt unit.
"""

import re
from typing import Dict, List, Optional

from vue_switcheroo.core.grammar import node_text, parse_js, string_value, walk
from vue_switcheroo.core.hooks import BodyRewrite, TransformContext, Transformer, register_transformer
from vue_switcheroo.core.models import TransformationResult

EVENT_RENAMES: Dict[str, str] = {"input": "update:value"}

_EMIT_EVENT = re.compile(r"(?<!\$nuxt\.)(?:this\.)?\$emit\s*\(\s*['\"`]([^'\"`]+)['\"`]")
_EMIT_CALL = re.compile(r"(?<!\$nuxt\.)(?:this\.)?\$emit\s*\(")


def map_event_name(event: str) -> str:
  return EVENT_RENAMES.get(event, event)


def _first_string_argument(arguments: List[str]) -> Optional[str]:
  for arg in arguments:
    tree = parse_js(arg.strip())
    node = next((n for n in walk(tree.root_node) if n.type in ("string", "template_string")), None)
    if node is None:
      continue
    value = string_value(node) if node.type == "string" else node_text(node).strip("`")
    if value:
      return value
  return None


def emitted_events(ctx: TransformContext) -> List[str]:
  """
  Lists the (renamed) events in order of discovery.

  Template `$emit` calls come first, then directive values, then method
  bodies and computed setters.
  """
  events: List[str] = []

  def add(event: str) -> None:
    mapped = map_event_name(event)
    if mapped not in events:
      events.append(mapped)

  for detail in ctx.template.function_call_details:
    if detail.name == "$emit":
      event = _first_string_argument(detail.arguments)
      if event:
        add(event)

  bodies = [d.value for d in ctx.template.vue_directives]
  bodies.extend(m.body or m.expression or "" for m in ctx.script.method_details)
  bodies.extend(h.body for h in ctx.script.lifecycle_hooks)
  bodies.extend(c.setter or "" for c in ctx.script.computed_details)
  bodies.extend(w.handler_body for w in ctx.script.watchers)
  for body in bodies:
    for event in _EMIT_EVENT.findall(body):
      add(event)
  return events


def uses_emit(ctx: TransformContext) -> bool:
  def emits(text: str) -> bool:
    return "$emit" in text and "$nuxt.$emit" not in text

  texts = ctx.script.identifiers + ctx.script.function_calls + ctx.template.identifiers + ctx.template.function_calls
  texts.extend(d.value for d in ctx.template.vue_directives)
  texts.extend(ctx.method_bodies())
  return any(emits(text) for text in texts)


def _rewrite_emit(body: str, ctx: TransformContext) -> str:
  if "$emit" not in body:
    return body
  body = _EMIT_EVENT.sub(lambda m: f"emit('{map_event_name(m.group(1))}'", body)
  return _EMIT_CALL.sub("emit(", body)


@register_transformer("emit", order=100)
class EmitTransformer(Transformer):
  def should_transform(self, ctx: TransformContext) -> bool:
    return uses_emit(ctx)

  def transform(self, ctx: TransformContext) -> TransformationResult:
    result = TransformationResult()
    events = emitted_events(ctx)
    if events:
      quoted = ", ".join(f"'{e}'" for e in events)
      result.setup.append(f"const emit = defineEmits([{quoted}]);")

    for old, new in EVENT_RENAMES.items():
      for quote in ("'", '"'):
        result.add_template_replacement(f"$emit({quote}{old}{quote}", f"emit({quote}{new}{quote}")
    result.add_template_replacement("$emit(", "emit(")
    return result

  def body_rewrite(self) -> Optional[BodyRewrite]:
    return _rewrite_emit
