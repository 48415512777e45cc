"""
Tests for the Transformer Registry and TransformContext.
"""

from vue_switcheroo.config import TransformerConfig
from vue_switcheroo.core.engine import TransformerOrchestrator
from vue_switcheroo.core.hooks import (
  TransformContext,
  Transformer,
  clear_transformers,
  get_transformers,
  load_plugins,
  register_transformer,
)
from vue_switcheroo.core.models import (
  ComputedDetail,
  DataProperty,
  MethodDetail,
  ScriptFacts,
  TemplateFacts,
  TransformationResult,
  WatcherDetail,
)

BUILTIN_ORDER = [
  "axios",
  "import_rewrite",
  "mixin",
  "nuxt",
  "router",
  "vue2",
  "filters",
  "vuex",
  "composition",
  "emit",
  "i18n",
  "head",
  "assets",
]


def _ctx(script=None, template_source=""):
  return TransformContext(
    script or ScriptFacts(),
    TemplateFacts(),
    TransformerConfig.from_options(),
    template_source=template_source,
  )


def test_builtin_units_in_registration_order():
  assert [t.name for t in get_transformers()] == BUILTIN_ORDER


def test_load_plugins_counts_units():
  clear_transformers()
  assert load_plugins() == len(BUILTIN_ORDER)


def test_registration_order_is_by_order_not_import():
  clear_transformers()

  @register_transformer("late", order=20)
  class Late(Transformer):
    pass

  @register_transformer("early", order=10)
  class Early(Transformer):
    pass

  names = [t.name for t in get_transformers()]
  assert names.index("early") < names.index("late")


def test_body_transform_is_identity_until_bound():
  ctx = _ctx()
  assert ctx.transform_body("this.a") == "this.a"

  ctx.bind_body_transform(lambda body: body.upper())
  assert ctx.transform_body("this.a") == "THIS.A"


def test_composed_body_rewrite_runs_units_then_reactive():
  def shout(body, ctx):
    return body.replace("hello", "HELLO")

  class Shouter(Transformer):
    name = "shouter"

    def body_rewrite(self):
      return shout

  ctx = _ctx(ScriptFacts(data_properties=[DataProperty(name="a")]))
  orchestrator = TransformerOrchestrator([Shouter()])
  transform = orchestrator.compose_body_transform([Shouter()], ctx)

  assert transform("log('hello', this.a);") == "log('HELLO', a.value);"


def test_only_applicable_units_run():
  class Never(Transformer):
    name = "never"

    def transform(self, ctx):
      raise AssertionError("must not run")

  class Always(Transformer):
    name = "always"

    def should_transform(self, ctx):
      return True

    def transform(self, ctx):
      return TransformationResult(setup=["ok"])

  result, applied = TransformerOrchestrator([Never(), Always()]).transform(_ctx())

  assert applied == ["always"]
  assert result.setup == ["ok"]


def test_context_mentions():
  script = ScriptFacts(
    identifiers=["$nuxt.refresh"],
    method_details=[MethodDetail(name="a", body="this.$config.x")],
    computed_details=[ComputedDetail(name="c", getter="return 1;", setter="this.$emit('x')")],
    watchers=[WatcherDetail(watched_property="w", handler_body="this.$refs.box")],
    data_properties=[DataProperty(name="d", value="this.$i18n.locale")],
  )
  ctx = _ctx(script, template_source="<p>{{ $route.path }}</p>")

  assert ctx.script_mentions("$nuxt.refresh")
  assert ctx.script_mentions("$config")
  assert ctx.script_mentions("$emit")
  assert ctx.script_mentions("$refs")
  assert ctx.script_mentions("$i18n.locale")
  assert not ctx.script_mentions("$route")
  assert ctx.template_mentions("$route")
  assert len(ctx.method_bodies()) == 4
