"""
Orchestration Engine for SFC Conversion.

This module provides the `SfcEngine`, the primary driver of a conversion, and
the `TransformerOrchestrator` that runs the rewrite units.

The Engine pipeline consists of:

1.  **Splitting**: Locating template/script/style regions.
2.  **Extraction**: Building the Script and Template fact models.
3.  **Orchestration**:
    - Filtering units by `should_transform`.
    - Composing the body rewrite (unit rewrites in registration order, then
      the built-in reactive rewrite).
    - Running `transform` on each applicable unit.
4.  **Merge**: Concatenating category lists in registration order, resolving
    reactive declarations by priority, and applying import removals.
5.  **Assembly**: Emitting the `<script setup>` component.

Only steps 1 and 2 can fail (`MalformedNestingError`, `GrammarParseError`);
everything after extraction is best effort and cannot raise.
"""

from typing import Callable, List, Optional, Tuple

from pydantic import BaseModel, Field

from vue_switcheroo.config import RewriteOptions, TransformerConfig
from vue_switcheroo.core.codegen import assemble
from vue_switcheroo.core.errors import GrammarParseError, MalformedNestingError
from vue_switcheroo.core.hooks import TransformContext, Transformer, get_transformers
from vue_switcheroo.core.models import ScriptFacts, SfcSections, TemplateFacts, TransformationResult
from vue_switcheroo.core.reactive import apply_reactive_rewrite
from vue_switcheroo.core.script_extractor import extract_script
from vue_switcheroo.core.sfc import split_sfc
from vue_switcheroo.core.template_extractor import extract_template
from vue_switcheroo.utils.console import log_debug


class ConversionResult(BaseModel):
  """
  Structured result of a single file conversion.
  """

  code: str = Field(default="", description="The converted component source.")
  errors: List[str] = Field(default_factory=list, description="A list of error messages.")
  success: bool = Field(default=True, description="True if the pipeline completed without critical failures.")
  applied: List[str] = Field(default_factory=list, description="Names of the transformer units that fired.")

  @property
  def has_errors(self) -> bool:
    return len(self.errors) > 0


class TransformerOrchestrator:
  """
  Runs the registered transformer units and merges their partial results.
  """

  def __init__(self, transformers: Optional[List[Transformer]] = None):
    """
    Args:
        transformers: Units to run, in registration order. Defaults to all
            registered units.
    """
    self.transformers = transformers if transformers is not None else get_transformers()

  def applicable(self, ctx: TransformContext) -> List[Transformer]:
    return [t for t in self.transformers if t.should_transform(ctx)]

  def compose_body_transform(self, units: List[Transformer], ctx: TransformContext) -> Callable[[str], str]:
    """
    Builds the body rewrite shared by every unit.

    Args:
        units: The applicable units, in registration order.
        ctx: The context the rewrites close over.

    Returns:
        Callable[[str], str]: Unit rewrites in order, then the reactive rewrite.
    """
    rewrites = [fn for fn in (u.body_rewrite() for u in units) if fn is not None]

    def transform(body: str) -> str:
      for fn in rewrites:
        body = fn(body, ctx)
      return apply_reactive_rewrite(body, ctx)

    return transform

  def transform(self, ctx: TransformContext) -> Tuple[TransformationResult, List[str]]:
    """
    Runs all applicable units and merges their output.

    Args:
        ctx: The shared, read-only context.

    Returns:
        Tuple[TransformationResult, List[str]]: The merged result and the
        names of the units that fired.
    """
    units = self.applicable(ctx)
    ctx.bind_body_transform(self.compose_body_transform(units, ctx))

    partials = []
    for unit in units:
      log_debug(f"Running transformer [bold]{unit.name}[/bold]")
      partials.append(unit.transform(ctx))

    return merge_results(partials, ctx.config), [u.name for u in units]


def merge_results(partials: List[TransformationResult], config: TransformerConfig) -> TransformationResult:
  """
  Merges partial results in the order given.

  *   Category lists are concatenated.
  *   `data_refs` keep the strictly higher priority proposal (first wins on a tie)
      and are emitted into reactive state sorted by (priority desc, name asc).
  *   Sources listed in `imports_to_remove` are dropped unless keep-listed.
  *   `computed` is imported from `vue` when any unit emitted computed output.

  Args:
      partials: Unit outputs in registration order.
      config: The transformer configuration.

  Returns:
      TransformationResult: The merged result.
  """
  merged = TransformationResult()
  has_computed = False

  for partial in partials:
    if partial.computed_properties:
      has_computed = True

    for source, names in partial.imports_to_add.items():
      merged.add_imports(source, names)
    merged.imports_to_remove.extend(partial.imports_to_remove)

    merged.setup.extend(partial.setup)
    merged.reactive_state.extend(partial.reactive_state)
    merged.computed_properties.extend(partial.computed_properties)
    merged.methods.extend(partial.methods)
    merged.watchers.extend(partial.watchers)
    merged.lifecycle_hooks.extend(partial.lifecycle_hooks)
    merged.template_replacements.extend(partial.template_replacements)
    merged.additional_scripts.extend(partial.additional_scripts)
    merged.skip_data_properties.extend(partial.skip_data_properties)

    for name, (declaration, priority) in partial.data_refs.items():
      merged.propose_data_ref(name, declaration, priority)

  for source in merged.imports_to_remove:
    if source not in config.import_keeplist:
      merged.imports_to_add.pop(source, None)

  ordered = sorted(merged.data_refs.items(), key=lambda item: (-item[1][1], item[0]))
  for name, (declaration, _) in ordered:
    if name not in merged.skip_data_properties:
      merged.reactive_state.append(declaration)

  if has_computed:
    vue_imports = merged.imports_to_add.setdefault("vue", [])
    if "computed" not in vue_imports:
      vue_imports.append("computed")

  return merged


class SfcEngine:
  """
  The main conversion unit.

  Encapsulates the configuration for converting Options API components. The
  engine holds no per-file state, so one instance can serve many files,
  including from several threads.
  """

  def __init__(self, options: Optional[RewriteOptions] = None, transformers: Optional[List[Transformer]] = None):
    """
    Initializes the Engine.

    Args:
        options (RewriteOptions, optional): User options. Defaults apply when None.
        transformers (List[Transformer], optional): Override the unit set (testing).
    """
    self.config = TransformerConfig.from_options(options)
    self._transformers = transformers

  def build_context(self, sections: SfcSections) -> TransformContext:
    """
    Extracts facts from the split regions.

    Raises:
        GrammarParseError: If the script or a template expression does not parse.
    """
    script = ScriptFacts()
    template = TemplateFacts()
    if sections.script is not None:
      extract_script(sections.script.strip(), script)
    if sections.template is not None:
      extract_template(sections.template.strip(), template)

    return TransformContext(
      script=script,
      template=template,
      config=self.config,
      template_source=(sections.template or "").strip(),
      script_source=(sections.script or "").strip(),
    )

  def convert(self, source: str) -> Tuple[str, List[str]]:
    """
    Converts a component, raising on extraction failures.

    Returns:
        Tuple[str, List[str]]: The converted text and the names of the units that fired.

    Raises:
        MalformedNestingError: If a region is not closed.
        GrammarParseError: If the grammar rejects the script or a template expression.
    """
    sections = split_sfc(source)
    ctx = self.build_context(sections)
    orchestrator = TransformerOrchestrator(self._transformers)
    result, applied = orchestrator.transform(ctx)
    return assemble(sections, result), applied

  def run(self, source: str) -> ConversionResult:
    """
    Executes the pipeline and reports failures in the result object.

    Args:
        source (str): The Options API component.

    Returns:
        ConversionResult: The converted code, or `success=False` with the error.
    """
    try:
      code, applied = self.convert(source)
    except (MalformedNestingError, GrammarParseError) as e:
      return ConversionResult(success=False, errors=[str(e)])
    return ConversionResult(code=code, applied=applied)


def rewrite(source: str, options: Optional[RewriteOptions] = None) -> str:
  """
  Converts an Options API component into a `<script setup>` component.

  Args:
      source: The component source text.
      options: Optional rewrite options.

  Returns:
      str: The converted component.

  Raises:
      MalformedNestingError: If a template/script/style region is not closed.
      GrammarParseError: If the script or a template expression does not parse.
  """
  code, _ = SfcEngine(options).convert(source)
  return code
