"""
Plugin for vue-i18n and the Nuxt i18n helpers.

*   `$t` / `$n` / `$d` become the functions returned by `useI18n()`.
*   `$i18n.locale` becomes the `locale` ref (`locale.value` in script code).
*   `$i18n.localeProperties`, `localePath` and `localeRoute` are served by the
    `useI18nUtils` composable.

Only the members a component actually uses are destructured. The unit is
disabled by `enable_i18n = false`.
"""

import re
from typing import List, Optional

from vue_switcheroo.core.hooks import BodyRewrite, TransformContext, Transformer, register_transformer
from vue_switcheroo.core.models import TransformationResult

I18N_SOURCE = "vue-i18n"
I18N_UTILS_SOURCE = "@/composables/useI18nUtils"
TRANSLATION_FUNCTIONS = ("t", "n", "d")
LOCALE_HELPERS = ("localePath", "localeRoute")

_TRANSLATE_CALL = re.compile(r"(?<![\w$.])(?:this\.)?\$([tnd])\(")
_LOCALE_PROPERTIES = re.compile(r"(?:this\.)?\$i18n\.localeProperties")
_LOCALE_HELPER = re.compile(r"this\.(localePath|localeRoute)(?![\w$])")
_LOCALE = re.compile(r"(?:this\.)?\$i18n\.locale(?![\w$])")


def uses_translation(ctx: TransformContext, fn: str) -> bool:
  callees = ctx.script.function_calls + ctx.template.function_calls
  names = (f"${fn}", f"this.${fn}")
  return any(c in names for c in callees) or f"${fn}" in ctx.script.identifiers + ctx.template.identifiers


def uses_locale(ctx: TransformContext) -> bool:
  texts = ctx.script.identifiers + ctx.method_bodies() + [d.value or "" for d in ctx.script.data_properties]
  return any(_LOCALE.search(text) for text in texts) or bool(_LOCALE.search(ctx.template_source))


def uses_locale_properties(ctx: TransformContext) -> bool:
  return ctx.script_mentions("$i18n.localeProperties") or ctx.template_mentions("$i18n.localeProperties")


def uses_locale_helper(ctx: TransformContext, helper: str) -> bool:
  callees = ctx.script.function_calls + ctx.template.function_calls
  identifiers = ctx.script.identifiers + ctx.template.identifiers
  return any(c in (helper, f"this.{helper}") for c in callees) or helper in identifiers


def i18n_members(ctx: TransformContext) -> List[str]:
  members = [fn for fn in TRANSLATION_FUNCTIONS if uses_translation(ctx, fn)]
  if uses_locale(ctx):
    members.append("locale")
  return members


def i18n_util_members(ctx: TransformContext) -> List[str]:
  members = ["localeProperties"] if uses_locale_properties(ctx) else []
  members.extend(helper for helper in LOCALE_HELPERS if uses_locale_helper(ctx, helper))
  return members


def _rewrite_i18n(body: str, ctx: TransformContext) -> str:
  body = _TRANSLATE_CALL.sub(r"\1(", body)
  body = _LOCALE_PROPERTIES.sub("localeProperties", body)
  body = _LOCALE_HELPER.sub(r"\1", body)
  return _LOCALE.sub("locale.value", body)


@register_transformer("i18n", order=110)
class I18nTransformer(Transformer):
  def should_transform(self, ctx: TransformContext) -> bool:
    return ctx.config.enable_i18n and bool(i18n_members(ctx) or i18n_util_members(ctx))

  def transform(self, ctx: TransformContext) -> TransformationResult:
    result = TransformationResult()

    members = i18n_members(ctx)
    if members:
      result.add_import(I18N_SOURCE, "useI18n")
      result.setup.append(f"const {{ {', '.join(members)} }} = useI18n();")

    utils = i18n_util_members(ctx)
    if utils:
      result.add_import(I18N_UTILS_SOURCE, "useI18nUtils")
      result.setup.append(f"const {{ {', '.join(utils)} }} = useI18nUtils();")

    for fn in TRANSLATION_FUNCTIONS:
      result.add_template_replacement(f"${fn}(", f"{fn}(")
    # `$i18n.locale` is a prefix of `$i18n.localeProperties`
    result.add_template_replacement("$i18n.localeProperties", "localeProperties")
    if "locale" in members:
      result.add_template_replacement("$i18n.locale", "locale")
    return result

  def body_rewrite(self) -> Optional[BodyRewrite]:
    return _rewrite_i18n
