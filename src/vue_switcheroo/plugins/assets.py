"""
Plugin for Nuxt Asset Paths.

Nuxt resolves `~/assets/...` and `~assets/...` in templates; the converted
component uses the `@/` alias instead. Disabled by
`enable_asset_transforms = false`.
"""

from vue_switcheroo.core.hooks import TransformContext, Transformer, register_transformer
from vue_switcheroo.core.models import TransformationResult

ASSET_PREFIXES = ("~/assets/", "~assets/")
ASSET_TARGET = "@/assets/"


@register_transformer("assets", order=130)
class AssetsTransformer(Transformer):
  def should_transform(self, ctx: TransformContext) -> bool:
    return ctx.config.enable_asset_transforms and any(ctx.template_mentions(p) for p in ASSET_PREFIXES)

  def transform(self, ctx: TransformContext) -> TransformationResult:
    result = TransformationResult()
    for prefix in ASSET_PREFIXES:
      result.add_template_replacement(prefix, ASSET_TARGET)
    return result
