"""
Script Fact Extractor.

Populates a `ScriptFacts` model from the `<script>` region of an Options API
component in two passes:

1.  **Line pre-pass**: Collects import statements (single and multi-line) and the
    "setup content" that sits between the imports and `export default`.
2.  **Grammar walk**: Parses the script with tree-sitter and dispatches every
    top-level key of the exported component object to a dedicated sub-extractor.
    Keys without a dedicated extractor still feed the generic identifier and
    call collections, so nothing is silently dropped.
"""

import re
from typing import Optional, Tuple

import tree_sitter

from vue_switcheroo.core.grammar import (
  FUNCTION_NODE_TYPES,
  collect_generic,
  function_body,
  function_parameters,
  is_async,
  key_name,
  node_text,
  parse_js_strict,
  walk,
)
from vue_switcheroo.core.models import (
  ComputedDetail,
  DataProperty,
  ImportInfo,
  ImportItem,
  MethodDetail,
  PropDetail,
  ScriptFacts,
  WatcherDetail,
)

LIFECYCLE_HOOKS = (
  "beforeCreate",
  "created",
  "beforeMount",
  "mounted",
  "beforeUpdate",
  "updated",
  "beforeDestroy",
  "destroyed",
  "beforeUnmount",
  "unmounted",
  "activated",
  "deactivated",
)

_DEFAULT_IMPORT_WITH_NAMED = re.compile(r"^([\w$]+)\s*,\s*(\{.*\}|\*\s+as\s+[\w$]+)$", re.DOTALL)
_SIDE_EFFECT_IMPORT = re.compile(r"""^import\s*(['"])([^'"]+)\1\s*;?$""")


def rewrite_import_path(source: str) -> str:
  """Maps the legacy `~/` alias onto the standard `@/` alias."""
  if source.startswith("~/"):
    return "@/" + source[2:]
  return source


def parse_import_line(line: str) -> Optional[ImportInfo]:
  """
  Parses a (joined) import statement.

  Supports default, named (with `as` aliases), namespace, and mixed
  `Default, { named }` forms.

  Args:
      line: The statement text, e.g. `import { a, b as c } from 'mod';`.

  Returns:
      Optional[ImportInfo]: The parsed import, or None if no `from` clause exists.
  """
  if " from " not in line:
    return None

  import_part, source_part = line.split(" from ", 1)
  source = source_part.strip().rstrip(";").strip().strip("'\"")
  clause = import_part.strip()
  if clause.startswith("import"):
    clause = clause[len("import") :].strip()

  items = []
  mixed = _DEFAULT_IMPORT_WITH_NAMED.match(clause)
  if mixed:
    items.append(ImportItem(name=mixed.group(1), is_default=True))
    clause = mixed.group(2)

  if clause.startswith("{") and clause.endswith("}"):
    for raw in clause[1:-1].split(","):
      entry = raw.strip()
      if not entry:
        continue
      if " as " in entry:
        name, alias = entry.split(" as ", 1)
        items.append(ImportItem(name=name.strip(), alias=alias.strip()))
      else:
        items.append(ImportItem(name=entry))
  elif clause.startswith("*"):
    name = clause[1:].strip()
    if name.startswith("as "):
      name = name[3:].strip()
    items.append(ImportItem(name=name, is_namespace=True))
  elif clause:
    items.append(ImportItem(name=clause, is_default=True))

  return ImportInfo(source=rewrite_import_path(source), items=items)


def extract_imports_and_setup(script: str, facts: ScriptFacts) -> None:
  """
  Line-oriented pre-pass over the script.

  Args:
      script: The raw script region.
      facts: Accumulator receiving `imports` and `setup_content`.
  """
  setup_lines = []
  pending = ""
  in_import = False

  for line in script.splitlines():
    stripped = line.strip()

    side_effect = _SIDE_EFFECT_IMPORT.match(stripped)
    if side_effect:
      facts.imports.append(ImportInfo(source=rewrite_import_path(side_effect.group(2))))
    elif stripped.startswith("import "):
      if " from " in stripped:
        info = parse_import_line(stripped)
        if info:
          facts.imports.append(info)
      else:
        pending = stripped
        in_import = True
    elif stripped.startswith("export default"):
      break
    elif in_import:
      pending = f"{pending} {stripped}"
      if " from " in pending:
        info = parse_import_line(pending)
        if info:
          facts.imports.append(info)
        in_import = False
        pending = ""
    elif stripped and not stripped.startswith("//") and not stripped.startswith("/*"):
      setup_lines.append(line)

  if setup_lines:
    facts.setup_content = "\n".join(setup_lines)


def _contains_dynamic_import(node: tree_sitter.Node) -> bool:
  for child in walk(node):
    if child.type == "call_expression" and node_text(child.child_by_field_name("function")) == "import":
      return True
  return False


def _scan_async_components(node: tree_sitter.Node, facts: ScriptFacts) -> None:
  """Records `const X = () => import('...')` declarations."""
  for declarator in node.named_children:
    if declarator.type != "variable_declarator":
      continue
    value = declarator.child_by_field_name("value")
    if value is not None and value.type == "arrow_function" and _contains_dynamic_import(value):
      facts.async_components.append(node_text(declarator.child_by_field_name("name")))


def _component_object(export: tree_sitter.Node) -> Optional[tree_sitter.Node]:
  """
  Resolves the component object of an `export default` statement.

  Accepts a plain object literal as well as wrapper calls such as
  `defineComponent({...})` or `Vue.extend({...})`.
  """
  value = export.child_by_field_name("value")
  if value is None:
    value = next((c for c in export.named_children if c.type in ("object", "call_expression")), None)
  if value is None:
    return None
  if value.type == "object":
    return value
  if value.type == "call_expression":
    args = value.child_by_field_name("arguments")
    if args is not None:
      return next((c for c in args.named_children if c.type == "object"), None)
  return None


def _method_detail(name: str, node: tree_sitter.Node) -> MethodDetail:
  return MethodDetail(
    name=name,
    parameters=function_parameters(node),
    body=function_body(node),
    is_async=is_async(node),
  )


def _parse_methods(node: tree_sitter.Node, facts: ScriptFacts) -> None:
  for child in node.named_children:
    if child.type == "pair":
      name = key_name(child.child_by_field_name("key"))
      value = child.child_by_field_name("value")
      facts.methods.append(name)
      if value is not None and value.type in FUNCTION_NODE_TYPES:
        facts.method_details.append(_method_detail(name, value))
      else:
        facts.method_details.append(MethodDetail(name=name, expression=node_text(value) or None))
      if value is not None:
        collect_generic(value, facts)
    elif child.type == "method_definition":
      name = key_name(child.child_by_field_name("name"))
      facts.methods.append(name)
      facts.method_details.append(_method_detail(name, child))
      collect_generic(child, facts)
    elif child.type == "spread_element":
      collect_generic(child, facts)


def _parse_getter_setter(node: tree_sitter.Node, detail: ComputedDetail) -> None:
  for child in node.named_children:
    if child.type == "method_definition":
      accessor, fn = key_name(child.child_by_field_name("name")), child
    elif child.type == "pair":
      accessor, fn = key_name(child.child_by_field_name("key")), child.child_by_field_name("value")
      if fn is None or fn.type not in FUNCTION_NODE_TYPES:
        continue
    else:
      continue

    if accessor == "get":
      detail.getter = function_body(fn)
    elif accessor == "set":
      detail.setter = function_body(fn)
      params = function_parameters(fn)
      if params:
        detail.setter_parameter = params[0]


def _parse_computed(node: tree_sitter.Node, facts: ScriptFacts) -> None:
  for child in node.named_children:
    if child.type == "pair":
      name = key_name(child.child_by_field_name("key"))
      value = child.child_by_field_name("value")
      facts.computed_properties.append(name)
      detail = ComputedDetail(name=name, is_simple_function=False)
      if value is not None and value.type in FUNCTION_NODE_TYPES:
        detail.is_simple_function = True
        detail.getter = function_body(value)
      elif value is not None and value.type == "object":
        _parse_getter_setter(value, detail)
      facts.computed_details.append(detail)
      if value is not None:
        collect_generic(value, facts)
    elif child.type == "method_definition":
      name = key_name(child.child_by_field_name("name"))
      facts.computed_properties.append(name)
      facts.computed_details.append(ComputedDetail(name=name, getter=function_body(child), is_simple_function=True))
      collect_generic(child, facts)
    elif child.type == "spread_element":
      collect_generic(child, facts)


def _parse_prop_definition(node: tree_sitter.Node, prop: PropDetail) -> None:
  for child in node.named_children:
    if child.type == "pair":
      key = key_name(child.child_by_field_name("key"))
      value = node_text(child.child_by_field_name("value"))
      if key == "type":
        prop.prop_type = value
      elif key == "required":
        prop.required = value == "true"
      elif key == "default":
        prop.default = value
      elif key == "validator":
        prop.validator = value
    elif child.type == "method_definition":
      # default() { ... } / validator(v) { ... }
      key = key_name(child.child_by_field_name("name"))
      if key in ("default", "validator"):
        params = node_text(child.child_by_field_name("parameters"))
        body = node_text(child.child_by_field_name("body"))
        setattr(prop, key, f"function {params} {body}")


def _parse_props(node: tree_sitter.Node, facts: ScriptFacts) -> None:
  if node.type == "array":
    # props: ['a', 'b']
    for child in node.named_children:
      if child.type == "string":
        facts.props.append(PropDetail(name=key_name(child)))
    return

  for child in node.named_children:
    if child.type != "pair":
      continue
    prop = PropDetail(name=key_name(child.child_by_field_name("key")))
    value = child.child_by_field_name("value")
    if value is not None and value.type == "object":
      _parse_prop_definition(value, prop)
    elif value is not None:
      prop.prop_type = node_text(value)
    facts.props.append(prop)


def _parse_data_object(node: tree_sitter.Node, facts: ScriptFacts) -> None:
  for child in node.named_children:
    if child.type == "pair":
      value = child.child_by_field_name("value")
      facts.data_properties.append(
        DataProperty(
          name=key_name(child.child_by_field_name("key")),
          value=node_text(value) if value is not None else None,
        )
      )
      if value is not None:
        collect_generic(value, facts)
    elif child.type == "shorthand_property_identifier":
      name = node_text(child)
      facts.data_properties.append(DataProperty(name=name, value=name))


def _find_return_object(node: tree_sitter.Node, facts: ScriptFacts) -> bool:
  """Parses the first `return { ... }` found below `node`. Returns True when found."""
  if node.type == "return_statement":
    for child in node.named_children:
      target = child
      if target.type == "parenthesized_expression" and target.named_children:
        target = target.named_children[0]
      if target.type == "object":
        _parse_data_object(target, facts)
        return True
  for child in node.named_children:
    if child.type in FUNCTION_NODE_TYPES:
      # returns of nested callbacks do not belong to data()
      continue
    if _find_return_object(child, facts):
      return True
  return False


def _parse_data(node: tree_sitter.Node, facts: ScriptFacts) -> None:
  """
  Handles the supported `data` shapes.

  `data() { return {...} }`, `data: function () { return {...} }`,
  `data: () => ({...})` and `data: () => { return {...} }`.
  """
  if node.type == "arrow_function":
    body = node.child_by_field_name("body")
    if body is None:
      return
    if body.type == "object":
      _parse_data_object(body, facts)
    elif body.type == "parenthesized_expression":
      inner = next((c for c in body.named_children if c.type == "object"), None)
      if inner is not None:
        _parse_data_object(inner, facts)
    else:
      _find_return_object(body, facts)
  elif node.type in FUNCTION_NODE_TYPES:
    body = node.child_by_field_name("body")
    if body is not None:
      _find_return_object(body, facts)
  elif node.type == "object":
    _parse_data_object(node, facts)
  else:
    collect_generic(node, facts)


def _watcher_params(node: tree_sitter.Node) -> Tuple[str, str]:
  names = function_parameters(node)
  if not names:
    return ("newVal", "oldVal")
  if len(names) == 1:
    return (names[0], "oldVal")
  return (names[0], names[1])


def _parse_watchers(node: tree_sitter.Node, facts: ScriptFacts) -> None:
  for child in node.named_children:
    if child.type == "pair":
      watched = key_name(child.child_by_field_name("key"))
      handler = child.child_by_field_name("value")
      if handler is not None and handler.type == "object":
        # { handler(v) {...}, deep: true }
        inner = next(
          (
            c if c.type == "method_definition" else c.child_by_field_name("value")
            for c in handler.named_children
            if (c.type == "method_definition" and key_name(c.child_by_field_name("name")) == "handler")
            or (c.type == "pair" and key_name(c.child_by_field_name("key")) == "handler")
          ),
          None,
        )
        handler = inner
      if handler is None or handler.type not in FUNCTION_NODE_TYPES:
        continue
      fn = handler
    elif child.type == "method_definition":
      watched = key_name(child.child_by_field_name("name"))
      fn = child
    else:
      continue

    facts.watchers.append(
      WatcherDetail(
        watched_property=watched,
        handler_body=function_body(fn),
        is_async=is_async(fn),
        param_names=_watcher_params(fn),
      )
    )

  collect_generic(node, facts)


def _parse_component_object(node: tree_sitter.Node, facts: ScriptFacts) -> None:
  """
  Dispatches each top-level key of the component object.

  Args:
      node: The `object` node exported as the component.
      facts: The accumulator.
  """
  for child in node.named_children:
    if child.type == "pair":
      key = key_name(child.child_by_field_name("key"))
      value = child.child_by_field_name("value")
      if value is None:
        continue

      if key == "methods":
        _parse_methods(value, facts)
      elif key == "computed":
        _parse_computed(value, facts)
      elif key == "props":
        _parse_props(value, facts)
      elif key == "data":
        _parse_data(value, facts)
      elif key == "watch":
        _parse_watchers(value, facts)
      elif key == "head":
        if value.type in FUNCTION_NODE_TYPES:
          facts.head_method = _method_detail("head", value)
        else:
          facts.head_method = MethodDetail(name="head", expression=node_text(value))
        collect_generic(value, facts)
      elif key == "nuxtI18n":
        facts.nuxt_i18n = node_text(value)
      elif key == "asyncData":
        facts.async_data_method = node_text(value)
      elif key in LIFECYCLE_HOOKS or key == "fetch":
        collect_generic(value, facts)
        if value.type in FUNCTION_NODE_TYPES:
          detail = MethodDetail(name=key, body=function_body(value), is_async=is_async(value))
          if key == "fetch":
            facts.fetch_method = detail
          else:
            facts.lifecycle_hooks.append(detail)
      else:
        collect_generic(value, facts)

    elif child.type == "method_definition":
      name = key_name(child.child_by_field_name("name"))

      if name == "data":
        _parse_data(child, facts)
      elif name == "head":
        facts.head_method = _method_detail("head", child)
        collect_generic(child, facts)
      elif name == "fetch":
        facts.fetch_method = _method_detail("fetch", child)
        collect_generic(child, facts)
      elif name == "asyncData":
        facts.async_data_method = node_text(child)
      else:
        collect_generic(child, facts)
        if name in LIFECYCLE_HOOKS:
          facts.lifecycle_hooks.append(MethodDetail(name=name, body=function_body(child), is_async=is_async(child)))


def _find_component_sections(node: tree_sitter.Node, facts: ScriptFacts) -> None:
  for child in node.named_children:
    if child.type in ("lexical_declaration", "variable_declaration"):
      _scan_async_components(child, facts)
    elif child.type == "export_statement" and any(c.type == "default" for c in child.children):
      component = _component_object(child)
      if component is not None:
        _parse_component_object(component, facts)


def extract_script(script: str, facts: ScriptFacts) -> None:
  """
  Extracts all script facts into `facts`.

  Args:
      script: Raw text of the `<script>` region.
      facts: The accumulator owned by the caller.

  Raises:
      GrammarParseError: If the script is not valid JavaScript.
  """
  extract_imports_and_setup(script, facts)
  tree = parse_js_strict(script, what="script")
  _find_component_sections(tree.root_node, facts)
