"""
Plugin for Vue Router Instance Members.

`this.$route` / `this.$router` become the `route` / `router` constants bound
from `useRoute()` / `useRouter()` of `vue-router`, in script and template.
"""

import re
from typing import Optional

from vue_switcheroo.core.hooks import BodyRewrite, TransformContext, Transformer, register_transformer
from vue_switcheroo.core.models import TransformationResult

_ROUTER_MEMBER = re.compile(r"(?:this\.)?\$(route|router)(?![\w$])")
_ROUTE = re.compile(r"\$route(?![\w$])")


def uses_route(ctx: TransformContext) -> bool:
  # `$route` is a prefix of `$router`, so plain substring checks are not enough
  script = ctx.script
  texts = script.identifiers + script.function_calls + ctx.method_bodies()
  texts += [d.value or "" for d in script.data_properties] + [w.watched_property for w in script.watchers]
  return any(_ROUTE.search(text) for text in texts) or bool(_ROUTE.search(ctx.template_source))


def uses_router(ctx: TransformContext) -> bool:
  return ctx.script_mentions("$router") or ctx.template_mentions("$router")


def _rewrite_router(body: str, ctx: TransformContext) -> str:
  return _ROUTER_MEMBER.sub(lambda m: m.group(1), body)


@register_transformer("router", order=50)
class RouterTransformer(Transformer):
  def should_transform(self, ctx: TransformContext) -> bool:
    return uses_route(ctx) or uses_router(ctx)

  def transform(self, ctx: TransformContext) -> TransformationResult:
    result = TransformationResult()
    route, router = uses_route(ctx), uses_router(ctx)

    if route:
      result.add_import("vue-router", "useRoute")
      result.setup.append("const route = useRoute();")
    if router:
      result.add_import("vue-router", "useRouter")
      result.setup.append("const router = useRouter();")

    if router and ctx.template_mentions("$router"):
      result.add_template_replacement("$router", "router")
    if route and ctx.template_mentions("$route"):
      result.add_template_replacement("$route", "route")
    return result

  def body_rewrite(self) -> Optional[BodyRewrite]:
    return _rewrite_router
