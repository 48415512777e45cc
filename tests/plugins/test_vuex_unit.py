"""
Tests for the Vuex to Pinia unit.
"""

import pytest

from vue_switcheroo.core.models import FunctionCallDetail
from vue_switcheroo.plugins.vuex import (
  StoreMapping,
  VuexTransformer,
  _array_alias,
  parse_map_call,
  store_factory,
  store_namespaces,
  store_variable,
)


def _call(name, full_call):
  return FunctionCallDetail(name=name, full_call=full_call)


def test_store_names():
  assert store_variable("user") == "userStore"
  assert store_factory("user") == "useUserStore"
  assert store_factory("shoppingCart") == "useShoppingCartStore"


@pytest.mark.parametrize(
  "helper, member, expected",
  [
    ("mapGetters", "getUser", "user"),
    ("mapGetters", "getIsAdmin", "isAdmin"),
    ("mapGetters", "get", "get"),
    ("mapGetters", "total", "total"),
    ("mapState", "getUser", "getUser"),
  ],
)
def test_array_alias(helper, member, expected):
  assert _array_alias(helper, member) == expected


def test_parse_map_call_namespaced_values():
  mappings = parse_map_call(_call("mapGetters", "mapGetters({ name: 'user/name', total: 'cart/total' })"))

  assert mappings == [
    StoreMapping("mapGetters", "name", "user", "name", False),
    StoreMapping("mapGetters", "total", "cart", "total", False),
  ]


def test_parse_map_call_namespace_argument():
  mappings = parse_map_call(_call("mapActions", "mapActions('cart', { add: 'addItem' })"))

  assert mappings == [StoreMapping("mapActions", "add", "cart", "addItem", False)]


def test_parse_map_call_array_form():
  mappings = parse_map_call(_call("mapGetters", "mapGetters('user', ['getUser', 'isAdmin'])"))

  assert mappings == [
    StoreMapping("mapGetters", "user", "user", "getUser", True),
    StoreMapping("mapGetters", "isAdmin", "user", "isAdmin", True),
  ]


def test_parse_map_call_array_without_namespace():
  assert parse_map_call(_call("mapState", "mapState(['count'])")) == []


STORE_SOURCE = """
<template>
  <p>{{ items.length }} {{ $store.state.user.name }}</p>
</template>
<script>
import { mapGetters, mapState, mapActions } from 'vuex';
export default {
  computed: {
    ...mapGetters('user', ['getUser']),
    ...mapState({ items: 'cart/items', unused: 'cart/unused' }),
  },
  methods: {
    ...mapActions('cart', ['add']),
    save() {
      this.add(this.user);
      this.$store.commit('cart/clear', 1);
      return this.$store.getters['user/name'];
    },
  },
}
</script>
"""


def test_store_namespaces_sorted(make_context):
  ctx = make_context(STORE_SOURCE)
  assert store_namespaces(ctx) == ["cart", "user"]


def test_vuex_transform(make_context):
  ctx = make_context(STORE_SOURCE)
  unit = VuexTransformer()

  assert unit.should_transform(ctx)
  result = unit.transform(ctx)

  assert result.imports_to_add == {"@/stores/cart": ["useCartStore"], "@/stores/user": ["useUserStore"]}
  assert result.setup == ["const cartStore = useCartStore();", "const userStore = useUserStore();"]
  assert result.computed_properties == [
    "const user = computed(() => userStore.getUser());",
    "const items = computed(() => cartStore.items);",
  ]
  assert result.template_replacements == [("$store.state.user.name", "userStore.name")]
  assert result.imports_to_remove == ["vuex"]


def test_vuex_body_rewrite(make_context):
  ctx = make_context(STORE_SOURCE)
  rewrite = VuexTransformer().body_rewrite()

  body = "this.add(this.user);\nthis.$store.commit('cart/clear', 1);\nreturn this.$store.getters['user/name'];"
  assert rewrite(body, ctx) == "cartStore.add(user.value);\ncartStore.clear(1);\nreturn userStore.name;"


def test_vuex_body_rewrite_fallback_for_fragments(make_context):
  ctx = make_context(STORE_SOURCE)
  rewrite = VuexTransformer().body_rewrite()

  assert rewrite("foo(this.$store.state.cart.total, ", ctx) == "foo(cartStore.total, "


def test_not_applicable_without_store(make_context):
  ctx = make_context("<script>\nexport default {\n  methods: { a() { return 1; } },\n}\n</script>")
  assert not VuexTransformer().should_transform(ctx)
