"""
Tests for the built-in reactive body rewrite.
"""

import pytest

from vue_switcheroo.config import RewriteOptions, TransformerConfig
from vue_switcheroo.core.hooks import TransformContext
from vue_switcheroo.core.models import ComputedDetail, DataProperty, PropDetail, ScriptFacts, TemplateFacts
from vue_switcheroo.core.reactive import apply_reactive_rewrite, resolve_member


@pytest.fixture
def ctx():
  script = ScriptFacts(
    data_properties=[DataProperty(name="item", value="null"), DataProperty(name="items", value="[]")],
    computed_properties=["total"],
    computed_details=[ComputedDetail(name="total", getter="return 1;")],
    props=[PropDetail(name="label")],
    methods=["save"],
  )
  options = RewriteOptions.from_dict({"reserved_names": ["$gtm"], "mixins": {"price": {"name": "usePrice", "imports": ["currency"]}}})
  return TransformContext(script, TemplateFacts(), TransformerConfig.from_options(options))


@pytest.mark.parametrize(
  "name, expected",
  [
    ("item", "item.value"),
    ("total", "total.value"),
    ("label", "props.label"),
    ("save", "save"),
    ("$route", "$route"),
    ("$gtm", "$gtm"),
    ("currency", "currency"),
    ("missing", "/* FIXME: missing */ missing"),
  ],
)
def test_resolve_member(ctx, name, expected):
  assert resolve_member(name, ctx) == expected


def test_prefix_names_do_not_clobber_each_other(ctx):
  body = "this.items.push(this.item);\nreturn this.total + this.label.length;"

  assert apply_reactive_rewrite(body, ctx) == "items.value.push(item.value);\nreturn total.value + props.label.length;"


def test_strings_and_unrelated_members_are_untouched(ctx):
  body = "const msg = 'this.item';\nother.item = this.save();"

  assert apply_reactive_rewrite(body, ctx) == "const msg = 'this.item';\nother.item = save();"


def test_nested_function_bodies_are_rewritten(ctx):
  body = "list.forEach((x) => {\n  this.items.push(x);\n});"

  assert apply_reactive_rewrite(body, ctx) == "list.forEach((x) => {\n  items.value.push(x);\n});"


def test_unparsable_fragment_uses_fallback(ctx):
  body = "foo(this.item, "

  assert apply_reactive_rewrite(body, ctx) == "foo(item.value, "


def test_bodies_without_this_are_returned_unchanged(ctx):
  body = "return 1 +"
  assert apply_reactive_rewrite(body, ctx) is body
