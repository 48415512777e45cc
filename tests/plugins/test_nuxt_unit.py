"""
Tests for the Nuxt component features unit.
"""

from vue_switcheroo.plugins.nuxt import (
  ASYNC_DATA_PRIORITY,
  NuxtTransformer,
  compat_members,
  nuxt_i18n_paths,
  parse_async_data,
)


def test_parse_async_data_method_definition():
  source = "async asyncData({ $axios }) {\n  const a = await $axios.$get('/x');\n  return { items: a, total };\n}"

  params, body, returned = parse_async_data(source)

  assert params == "{ $axios }"
  assert body == "const a = await $axios.$get('/x');\n  return { items: a, total };"
  assert returned == ["items", "total"]


def test_parse_async_data_uses_last_returned_object():
  source = "asyncData(ctx) {\n  if (!ctx) return { a: 1 };\n  return ({ b: 2 });\n}"

  _, _, returned = parse_async_data(source)

  assert returned == ["b"]


def test_parse_async_data_rejects_garbage():
  assert parse_async_data("asyncData( {") is None


def test_nuxt_i18n_paths():
  source = "{ seo: false, paths: { en: '/about', 'de-at': '/ueber' } }"

  assert nuxt_i18n_paths(source) == {"en": "'/about'", "'de-at'": "'/ueber'"}


def test_nuxt_i18n_without_paths():
  assert nuxt_i18n_paths("{ seo: false }") is None


COMPAT_SOURCE = """
<template>
  <p>{{ $config.apiUrl }}</p>
</template>
<script>
export default {
  methods: {
    reload() {
      this.$nuxt.refresh();
      this.$nuxt.$emit('reloaded');
    },
  },
}
</script>
"""


def test_compat_members_in_fixed_order(make_context):
  ctx = make_context(COMPAT_SOURCE)

  assert compat_members(ctx) == ["eventBus", "refresh", "runtimeConfig"]


def test_compat_transform(make_context):
  ctx = make_context(COMPAT_SOURCE)
  result = NuxtTransformer().transform(ctx)

  assert result.imports_to_add == {"@/composables/useNuxtCompat": ["useNuxtCompat"]}
  assert result.setup == ["const { eventBus, refresh, runtimeConfig } = useNuxtCompat();"]
  assert result.template_replacements == [("$config", "runtimeConfig")]


def test_body_rewrite(make_context):
  ctx = make_context(COMPAT_SOURCE)
  rewrite = NuxtTransformer().body_rewrite()

  body = "this.$nuxt.refresh();\nthis.$nuxt.$emit('reloaded');\nreturn this.$config.apiUrl;"
  assert rewrite(body, ctx) == "refresh();\neventBus.emit('reloaded');\nreturn runtimeConfig.apiUrl;"


def test_fetch_becomes_mounted_call(make_context):
  source = "<script>\nexport default {\n  async fetch() {\n    await this.load();\n  },\n  methods: { load() {} },\n}\n</script>"
  ctx = make_context(source)
  result = NuxtTransformer().transform(ctx)

  assert result.methods == ["const fetch = async () => {", "  await load();", "};"]
  assert result.lifecycle_hooks == ["onMounted(async () => {", "  fetch();", "});"]
  assert result.imports_to_add == {"vue": ["onMounted"]}


def test_async_data_overrides_matching_data_refs(make_context):
  source = """
<script>
export default {
  data() {
    return { items: [], page: 1 };
  },
  async asyncData({ $http }) {
    const items = await $http.$get('/items');
    return { items, other: 2 };
  },
}
</script>
"""
  ctx = make_context(source)
  result = NuxtTransformer().transform(ctx)

  assert result.setup[0] == "const data = await useAsyncData(async ({ $http }) => {"
  assert result.setup[-1] == "});"
  assert result.data_refs == {"items": ("const items = ref(data.items);", ASYNC_DATA_PRIORITY)}


def test_nuxt_link_renamed(make_context):
  ctx = make_context("<template><nuxt-link to='/'>x</nuxt-link></template>\n<script>\nexport default {}\n</script>")
  unit = NuxtTransformer()

  assert unit.should_transform(ctx)
  assert ("nuxt-link", "router-link") in unit.transform(ctx).template_replacements
