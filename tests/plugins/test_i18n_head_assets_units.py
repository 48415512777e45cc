"""
Tests for the i18n, head and asset path units.
"""

from vue_switcheroo.config import RewriteOptions
from vue_switcheroo.plugins.assets import AssetsTransformer
from vue_switcheroo.plugins.head import HeadTransformer, add_trailing_commas
from vue_switcheroo.plugins.i18n import I18nTransformer, i18n_members, i18n_util_members

I18N_SOURCE = """
<template>
  <div>
    <p>{{ $t('hello') }} {{ $i18n.localeProperties.name }}</p>
    <nuxt-link :to="localePath('/')">home</nuxt-link>
  </div>
</template>
<script>
export default {
  methods: {
    greet() {
      return this.$n(5) + this.$i18n.locale;
    },
  },
}
</script>
"""


def test_i18n_members_only_what_is_used(make_context):
  ctx = make_context(I18N_SOURCE)

  assert i18n_members(ctx) == ["t", "n", "locale"]
  assert i18n_util_members(ctx) == ["localeProperties", "localePath"]


def test_i18n_transform(make_context):
  ctx = make_context(I18N_SOURCE)
  result = I18nTransformer().transform(ctx)

  assert result.imports_to_add == {"vue-i18n": ["useI18n"], "@/composables/useI18nUtils": ["useI18nUtils"]}
  assert result.setup == [
    "const { t, n, locale } = useI18n();",
    "const { localeProperties, localePath } = useI18nUtils();",
  ]
  replacements = result.template_replacements
  assert replacements.index(("$i18n.localeProperties", "localeProperties")) < replacements.index(("$i18n.locale", "locale"))


def test_i18n_body_rewrite(make_context):
  ctx = make_context(I18N_SOURCE)
  rewrite = I18nTransformer().body_rewrite()

  assert rewrite("return this.$n(5) + this.$i18n.locale;", ctx) == "return n(5) + locale.value;"
  assert rewrite("this.$router.push(this.localePath('/'));", ctx) == "this.$router.push(localePath('/'));"
  assert rewrite("const x = this.$i18n.localeProperties.iso;", ctx) == "const x = localeProperties.iso;"


def test_i18n_disabled(make_context):
  ctx = make_context(I18N_SOURCE, RewriteOptions(enable_i18n=False))
  assert not I18nTransformer().should_transform(ctx)


def test_add_trailing_commas():
  body = "return {\n  title: this.title\n};"
  assert add_trailing_commas(body) == "return {\n  title: this.title,\n};"


def test_add_trailing_commas_leaves_terminated_lines():
  body = "return {\n  title: 'a',\n  meta: {\n    charset: 'utf-8',\n  },\n};"
  assert add_trailing_commas(body) == body


def test_add_trailing_commas_ignores_blocks_and_inline_objects():
  body = "if (x) {\n  return { title: a ? 'A' : 'B' }\n}\nreturn {\n  meta: [{ charset: 'utf-8' }],\n  title\n};"
  expected = "if (x) {\n  return { title: a ? 'A' : 'B' }\n}\nreturn {\n  meta: [{ charset: 'utf-8' }],\n  title,\n};"
  assert add_trailing_commas(body) == expected


def test_add_trailing_commas_keeps_unparsable_body():
  body = "return {\n  title: \n"
  assert add_trailing_commas(body) == body


def test_head_function(make_context):
  source = "<script>\nexport default {\n  data() {\n    return { title: 'a' };\n  },\n  head() {\n    return { title: this.title };\n  },\n}\n</script>"
  ctx = make_context(source)
  unit = HeadTransformer()

  assert unit.should_transform(ctx)
  result = unit.transform(ctx)

  assert result.imports_to_add == {"@unhead/vue": ["useHead"]}
  assert result.methods == ["useHead(() => {", "  return { title: title.value };", "});", ""]


def test_head_object(make_context):
  ctx = make_context("<script>\nexport default {\n  head: { title: 'Home' },\n}\n</script>")
  result = HeadTransformer().transform(ctx)

  assert result.methods == ["useHead({ title: 'Home' });"]


ASSET_SOURCE = '<template><div><img src="~/assets/a.png"><img src="~assets/b.png"></div></template>'


def test_asset_paths(make_context):
  ctx = make_context(ASSET_SOURCE)
  unit = AssetsTransformer()

  assert unit.should_transform(ctx)
  assert unit.transform(ctx).template_replacements == [("~/assets/", "@/assets/"), ("~assets/", "@/assets/")]


def test_asset_paths_disabled(make_context):
  ctx = make_context(ASSET_SOURCE, RewriteOptions(enable_asset_transforms=False))
  assert not AssetsTransformer().should_transform(ctx)
