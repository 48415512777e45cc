"""
Plugin for Nuxt Axios Usage.

Replaces the injected `$axios` client with the `useHttp` composable:

    Input:  `const res = await this.$axios.get('/api');`
    Output: `const res = await http.get('/api');`
            plus `const http = useHttp();` in setup.
"""

from typing import Optional

from vue_switcheroo.core.hooks import BodyRewrite, TransformContext, Transformer, register_transformer
from vue_switcheroo.core.models import TransformationResult

HTTP_COMPOSABLE_SOURCE = "@/composables/useHttp"


def uses_axios(ctx: TransformContext) -> bool:
  script = ctx.script
  return any("$axios" in call for call in script.function_calls) or any("$axios" in i for i in script.identifiers)


def _rewrite_axios(body: str, ctx: TransformContext) -> str:
  if not uses_axios(ctx):
    return body
  return body.replace("this.$axios", "http").replace("$axios", "http")


@register_transformer("axios", order=10)
class AxiosTransformer(Transformer):
  def should_transform(self, ctx: TransformContext) -> bool:
    return uses_axios(ctx)

  def transform(self, ctx: TransformContext) -> TransformationResult:
    result = TransformationResult()
    result.add_import(HTTP_COMPOSABLE_SOURCE, "useHttp")
    result.setup.append("const http = useHttp();")
    return result

  def body_rewrite(self) -> Optional[BodyRewrite]:
    return _rewrite_axios
