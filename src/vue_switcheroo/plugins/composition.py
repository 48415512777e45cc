"""
Plugin for the Options API to Composition API Core.

Converts the structural component options:

*   `props` -> `const props = defineProps({...})`
*   `data()` -> one `ref` per property (priority 0, so other units may
    propose a better initializer)
*   `computed` -> `computed(() => ...)` or `computed({ get, set })`
*   `methods` -> arrow function constants
*   `watch` -> `watch(source, (newVal, oldVal) => ...)`
*   Imports the component keeps are carried over verbatim, and lazily
    imported components are wrapped in `defineAsyncComponent`.
"""

import re
from typing import List

from vue_switcheroo.core.codegen import EXISTING_IMPORTS, indent_body
from vue_switcheroo.core.hooks import TransformContext, Transformer, register_transformer
from vue_switcheroo.core.models import ImportInfo, TransformationResult, WatcherDetail

DATA_REF_PRIORITY = 0

# Import sources served by dedicated units (or dropped altogether).
_CONVERTED_SOURCE_MARKERS = ("@/mixins/", "bootstrap-vue", "@/composables/")
_ASYNC_COMPONENT = re.compile(r"const\s+(\w+)\s*=\s*\(\s*\)\s*=>\s*import\s*\(([^)]+)\)", re.DOTALL)
_PLAIN_NAME = re.compile(r"^[A-Za-z_$][\w$]*$")


def is_converted_source(source: str, ctx: TransformContext) -> bool:
  """True when another unit owns (or removes) imports from `source`."""
  if source in ctx.config.import_keeplist:
    return False
  if any(marker in source for marker in _CONVERTED_SOURCE_MARKERS):
    return True
  if source == "vuex" or source in ctx.config.imports_rewrite:
    return True
  return source.rsplit("/", 1)[-1] in ctx.config.mixins


def format_import(info: ImportInfo) -> str:
  """
  Renders an import statement.

  Args:
      info: The parsed import.

  Returns:
      str: `import D from 's';`, `import { a, b as c } from 's';`,
      `import D, { a } from 's';` or `import * as ns from 's';`.
  """
  defaults = [item.name for item in info.items if item.is_default]
  namespaces = [f"* as {item.name}" for item in info.items if item.is_namespace]
  named = [
    f"{item.name} as {item.alias}" if item.alias else item.name
    for item in info.items
    if not item.is_default and not item.is_namespace
  ]

  clauses = defaults + namespaces
  if named:
    clauses.append(f"{{ {', '.join(named)} }}")
  return f"import {', '.join(clauses)} from '{info.source}';"


def props_definition(ctx: TransformContext) -> List[str]:
  lines = ["const props = defineProps({"]
  for prop in ctx.script.props:
    lines.append(f"  {prop.name}: {{")
    if prop.prop_type is not None:
      lines.append(f"    type: {prop.prop_type},")
    if prop.required is not None:
      lines.append(f"    required: {'true' if prop.required else 'false'},")
    if prop.default is not None:
      lines.append(f"    default: {prop.default},")
    if prop.validator is not None:
      lines.append(f"    validator: {prop.validator},")
    lines.append("  },")
  lines.append("});")
  return lines


def setup_content(ctx: TransformContext) -> List[str]:
  """Top-level statements of the script, with lazy component imports wrapped."""
  content = ctx.script.setup_content or ""
  content = _ASYNC_COMPONENT.sub(r"const \1 = defineAsyncComponent(() => import(\2))", content)
  return [line for line in content.splitlines() if line.strip() and not line.strip().startswith("import ")]


def watch_source(watcher: WatcherDetail, ctx: TransformContext) -> str:
  """
  Computes the first argument of `watch`.

  Refs (data and computed) are watched directly. Everything else (props,
  nested paths such as `'filters.color'`, instance members such as `$route`)
  is watched through a getter over the rewritten member access.
  """
  path = watcher.watched_property
  script = ctx.script
  if _PLAIN_NAME.match(path) and (path in script.data_names() or path in script.computed_properties):
    return path
  return f"() => {ctx.transform_body(f'this.{path}')}"


def _computed_lines(ctx: TransformContext) -> List[str]:
  lines: List[str] = []
  for detail in ctx.script.computed_details:
    if detail.getter is not None and detail.setter is not None:
      lines.append(f"const {detail.name} = computed({{")
      lines.append("  get() {")
      lines.extend(indent_body(ctx.transform_body(detail.getter), prefix="    "))
      lines.append("  },")
      lines.append(f"  set({detail.setter_parameter or 'v'}) {{")
      lines.extend(indent_body(ctx.transform_body(detail.setter), prefix="    "))
      lines.append("  },")
      lines.append("});")
    else:
      lines.append(f"const {detail.name} = computed(() => {{")
      lines.extend(indent_body(ctx.transform_body(detail.getter or "return undefined;")))
      lines.append("});")
    lines.append("")
  return lines


def _method_lines(ctx: TransformContext) -> List[str]:
  lines: List[str] = []
  for method in ctx.script.method_details:
    if method.expression is not None:
      lines.append(f"const {method.name} = {ctx.transform_body(method.expression).strip()};")
    else:
      prefix = "async " if method.is_async else ""
      lines.append(f"const {method.name} = {prefix}({', '.join(method.parameters)}) => {{")
      lines.extend(indent_body(ctx.transform_body(method.body)))
      lines.append("};")
    lines.append("")
  return lines


def _watcher_lines(ctx: TransformContext) -> List[str]:
  lines: List[str] = []
  for watcher in ctx.script.watchers:
    prefix = "async " if watcher.is_async else ""
    new_name, old_name = watcher.param_names
    lines.append(f"watch({watch_source(watcher, ctx)}, {prefix}({new_name}, {old_name}) => {{")
    lines.extend(indent_body(ctx.transform_body(watcher.handler_body)))
    lines.append("});")
    lines.append("")
  return lines


@register_transformer("composition", order=90)
class CompositionTransformer(Transformer):
  def should_transform(self, ctx: TransformContext) -> bool:
    script = ctx.script
    return bool(
      script.imports
      or script.props
      or script.data_properties
      or script.computed_details
      or script.method_details
      or script.watchers
      or script.setup_content
    )

  def transform(self, ctx: TransformContext) -> TransformationResult:
    result = TransformationResult()
    script = ctx.script

    for info in script.imports:
      if is_converted_source(info.source, ctx):
        continue
      if not info.items:
        # side-effect import
        result.add_import(EXISTING_IMPORTS, f"import '{info.source}';")
        continue
      if info.source == "vue":
        # `Vue` itself has no use in <script setup>
        named = [f"{i.name} as {i.alias}" if i.alias else i.name for i in info.items if not i.is_default and not i.is_namespace]
        result.add_imports("vue", named)
        continue
      result.add_import(EXISTING_IMPORTS, format_import(info))

    if script.data_properties:
      result.add_import("vue", "ref")
    if script.computed_details:
      result.add_import("vue", "computed")
    if script.watchers:
      result.add_import("vue", "watch")
    if script.async_components:
      result.add_import("vue", "defineAsyncComponent")

    result.setup.extend(setup_content(ctx))
    if script.props:
      if result.setup:
        result.setup.append("")
      result.setup.extend(props_definition(ctx))

    for data in script.data_properties:
      value = ctx.transform_body(data.value or "undefined").strip()
      result.propose_data_ref(data.name, f"const {data.name} = ref({value});", DATA_REF_PRIORITY)

    result.computed_properties.extend(_computed_lines(ctx))
    result.methods.extend(_method_lines(ctx))
    result.watchers.extend(_watcher_lines(ctx))
    return result
