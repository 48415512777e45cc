"""
Plugin for Mixin to Composable Conversion.

A mixin import whose last path segment matches a configured mixin key is
replaced by a call to the mapped composable, destructuring only the members
the component actually uses (in order of first use, script before template):

    Input:  `import priceMixin from '@/mixins/price';` + `this.priceRaw(1)`
    Output: `import { usePrice } from '@/composables/usePrice';`
            `const { priceRaw } = usePrice();`
"""

from typing import List, Optional

from vue_switcheroo.config import MixinConfig
from vue_switcheroo.core.hooks import TransformContext, Transformer, register_transformer
from vue_switcheroo.core.models import TransformationResult

COMPOSABLES_PREFIX = "@/composables/"


def mixin_for_source(source: str, ctx: TransformContext) -> Optional[MixinConfig]:
  """Returns the mixin mapping for an import source, keyed by its last path segment."""
  return ctx.config.mixins.get(source.rsplit("/", 1)[-1])


def used_members(ctx: TransformContext, members: List[str]) -> List[str]:
  """
  Lists the mixin members referenced by the component.

  Args:
      ctx: The transform context.
      members: Members the composable exposes.

  Returns:
      List[str]: Referenced members in order of discovery.
  """
  found: List[str] = []
  sources = (ctx.script.identifiers, ctx.script.function_calls, ctx.template.identifiers, ctx.template.function_calls)
  for candidates in sources:
    for name in candidates:
      callee = name[len("this.") :] if name.startswith("this.") else name
      if callee in members and callee not in found:
        found.append(callee)
  return found


@register_transformer("mixin", order=30)
class MixinTransformer(Transformer):
  def should_transform(self, ctx: TransformContext) -> bool:
    return any(mixin_for_source(info.source, ctx) is not None for info in ctx.script.imports)

  def transform(self, ctx: TransformContext) -> TransformationResult:
    result = TransformationResult()
    for info in ctx.script.imports:
      mixin = mixin_for_source(info.source, ctx)
      if mixin is None:
        continue
      result.imports_to_remove.append(info.source)

      members = used_members(ctx, mixin.imports)
      if not members:
        continue
      result.add_import(f"{COMPOSABLES_PREFIX}{mixin.name}", mixin.name)
      result.setup.append(f"const {{ {', '.join(members)} }} = {mixin.name}();")
      result.skip_data_properties.extend(members)
    return result
