"""
Fact and Result Models.

This module defines the Pydantic models shared by every stage of the pipeline:

1.  **SfcSections**: Raw template/script/style regions produced by the splitter.
2.  **ScriptFacts**: The accumulator populated by the script extractor.
3.  **TemplateFacts**: The accumulator populated by the template extractor.
4.  **TransformationResult**: The partial (per unit) and merged output of the
    transformer units, keyed by output category.

All records are created fresh per input file and dropped after assembly.
"""

from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field


class SfcSections(BaseModel):
  """
  Raw regions of a Single File Component.
  """

  template: Optional[str] = Field(None, description="Inner text of the outer <template> block.")
  script: Optional[str] = Field(None, description="Inner text of the first <script> block.")
  style: Optional[str] = Field(None, description="Inner text of the first <style> block.")
  style_attrs: Optional[str] = Field(None, description="Raw attribute string of the <style> tag (e.g. 'scoped').")


class ImportItem(BaseModel):
  """A single binding brought in by an import statement."""

  name: str
  alias: Optional[str] = None
  is_default: bool = False
  is_namespace: bool = False

  @property
  def local_name(self) -> str:
    """The name the binding is visible under inside the module."""
    return self.alias or self.name


class ImportInfo(BaseModel):
  """An import statement: source module plus the bindings it provides."""

  source: str
  items: List[ImportItem] = Field(default_factory=list)


class PropDetail(BaseModel):
  name: str
  prop_type: Optional[str] = None
  required: Optional[bool] = None
  default: Optional[str] = None
  validator: Optional[str] = None


class DataProperty(BaseModel):
  name: str
  value: Optional[str] = Field(None, description="Initializer expression text.")


class ComputedDetail(BaseModel):
  """
  A computed property.

  `is_simple_function` distinguishes `name() { ... }` / `name: () => ...` from the
  `{ get() {...}, set(v) {...} }` object form.
  """

  name: str
  getter: Optional[str] = None
  setter: Optional[str] = None
  setter_parameter: Optional[str] = Field(None, description="First parameter of the setter, kept verbatim.")
  is_simple_function: bool = True


class MethodDetail(BaseModel):
  name: str
  parameters: List[str] = Field(default_factory=list)
  body: str = ""
  is_async: bool = False
  expression: Optional[str] = Field(None, description="Initializer text when the member is not a function literal.")


class WatcherDetail(BaseModel):
  watched_property: str
  handler_body: str = ""
  is_async: bool = False
  param_names: Tuple[str, str] = ("newVal", "oldVal")


class FunctionCallDetail(BaseModel):
  """
  A call expression found during a walk.

  Attributes:
      name: Callee text (e.g. `this.$store.dispatch`).
      arguments: Raw text of each argument.
      full_call: Raw text of the whole call.
  """

  name: str
  arguments: List[str] = Field(default_factory=list)
  full_call: str = ""


class VueDirective(BaseModel):
  name: str
  value: str = ""
  element_tag: str = ""


class CallFacts(BaseModel):
  """Identifier and call collections shared by the script and template models."""

  identifiers: List[str] = Field(default_factory=list, description="Referenced names, insertion ordered.")
  function_calls: List[str] = Field(default_factory=list, description="Distinct callee names.")
  function_call_details: List[FunctionCallDetail] = Field(default_factory=list)

  def add_identifier(self, name: str) -> None:
    """Records a name once, keeping first-seen order."""
    if name not in self.identifiers:
      self.identifiers.append(name)

  def add_call(self, detail: FunctionCallDetail) -> None:
    """Records a call detail and its callee name."""
    self.function_call_details.append(detail)
    if detail.name not in self.function_calls:
      self.function_calls.append(detail.name)


class ScriptFacts(CallFacts):
  """
  Facts extracted from the `<script>` region.

  Each construct lives in exactly one collection. `methods` and
  `computed_properties` are name indexes over `method_details` and
  `computed_details`.
  """

  imports: List[ImportInfo] = Field(default_factory=list)
  setup_content: Optional[str] = Field(None, description="Statements between imports and `export default`.")
  props: List[PropDetail] = Field(default_factory=list)
  data_properties: List[DataProperty] = Field(default_factory=list)
  methods: List[str] = Field(default_factory=list)
  method_details: List[MethodDetail] = Field(default_factory=list)
  computed_properties: List[str] = Field(default_factory=list)
  computed_details: List[ComputedDetail] = Field(default_factory=list)
  watchers: List[WatcherDetail] = Field(default_factory=list)
  lifecycle_hooks: List[MethodDetail] = Field(default_factory=list, description="Top-level lifecycle options.")
  async_components: List[str] = Field(default_factory=list, description="Names bound to `() => import(...)`.")
  head_method: Optional[MethodDetail] = None
  fetch_method: Optional[MethodDetail] = None
  async_data_method: Optional[str] = None
  nuxt_i18n: Optional[str] = None

  def data_names(self) -> List[str]:
    return [d.name for d in self.data_properties]

  def prop_names(self) -> List[str]:
    return [p.name for p in self.props]

  def find_method(self, name: str) -> Optional[MethodDetail]:
    for method in self.method_details:
      if method.name == name:
        return method
    return None


class TemplateFacts(CallFacts):
  """Facts extracted from the `<template>` region."""

  vue_directives: List[VueDirective] = Field(default_factory=list)
  mustache_expressions: List[str] = Field(default_factory=list)


class TransformationResult(BaseModel):
  """
  Output of a transformer unit, and the merge target of the orchestrator.

  Category lists hold statement text and are emitted by the assembler in a
  fixed order. `data_refs` is the priority map used to resolve competing
  reactive declarations for the same property.
  """

  imports_to_add: Dict[str, List[str]] = Field(default_factory=dict, description="Import source -> names.")
  imports_to_remove: List[str] = Field(default_factory=list, description="Sources to suppress entirely.")
  setup: List[str] = Field(default_factory=list)
  reactive_state: List[str] = Field(default_factory=list)
  computed_properties: List[str] = Field(default_factory=list)
  methods: List[str] = Field(default_factory=list)
  watchers: List[str] = Field(default_factory=list)
  lifecycle_hooks: List[str] = Field(default_factory=list)
  template_replacements: List[Tuple[str, str]] = Field(default_factory=list, description="(find, replace) pairs.")
  additional_scripts: List[str] = Field(default_factory=list)
  skip_data_properties: List[str] = Field(default_factory=list)
  data_refs: Dict[str, Tuple[str, int]] = Field(default_factory=dict, description="Property -> (declaration, priority).")

  def add_import(self, source: str, name: str) -> None:
    self.imports_to_add.setdefault(source, []).append(name)

  def add_imports(self, source: str, names: List[str]) -> None:
    self.imports_to_add.setdefault(source, []).extend(names)

  def add_template_replacement(self, find: str, replace: str) -> None:
    self.template_replacements.append((find, replace))

  def propose_data_ref(self, name: str, declaration: str, priority: int) -> None:
    """
    Proposes a reactive declaration for `name`.

    The proposal replaces an existing one only when its priority is strictly
    higher; on a tie the first proposal wins.

    Args:
        name: The data property name.
        declaration: The full declaration statement.
        priority: Conflict resolution rank (higher wins).
    """
    existing = self.data_refs.get(name)
    if existing is not None and existing[1] >= priority:
      return
    self.data_refs[name] = (declaration, priority)
