"""
Tests for the Codegen Assembler.

Verifies:
1. Deterministic import ordering (vue, packages, stores, composables, rest).
2. Body re-indentation.
3. Category order and blank-line separation.
4. The `~/` alias rewrite (skipped for watchers).
"""

from vue_switcheroo.core.codegen import (
  EXISTING_IMPORTS,
  REWRITTEN_IMPORTS,
  apply_template_replacements,
  assemble,
  format_imports,
  indent_body,
)
from vue_switcheroo.core.models import SfcSections, TransformationResult


def test_import_order_and_dedup():
  lines = format_imports(
    {
      "@/composables/useHttp": ["useHttp"],
      "vue-router": ["useRouter", "useRoute"],
      "@/stores/user": ["useUserStore"],
      "vue": ["ref", "computed", "ref"],
      "@/utils/format": ["format"],
      "@unhead/vue": ["useHead"],
    }
  )

  assert lines == [
    "import { computed, ref } from 'vue';",
    "import { useHead } from '@unhead/vue';",
    "import { useRoute, useRouter } from 'vue-router';",
    "import { useUserStore } from '@/stores/user';",
    "import { useHttp } from '@/composables/useHttp';",
    "import { format } from '@/utils/format';",
  ]


def test_raw_sources_are_emitted_verbatim():
  lines = format_imports(
    {
      REWRITTEN_IMPORTS: ["import { BButton } from 'bootstrap-vue-next';"],
      EXISTING_IMPORTS: ["import Foo from './Foo.vue';"],
      "vue": ["ref"],
      "empty": [],
    }
  )

  assert lines == [
    "import { ref } from 'vue';",
    "import Foo from './Foo.vue';",
    "import { BButton } from 'bootstrap-vue-next';",
  ]


def test_import_order_is_independent_of_insertion_order():
  a = {"@/stores/b": ["useB"], "vue": ["ref"], "lib": ["x"]}
  b = {"lib": ["x"], "vue": ["ref"], "@/stores/b": ["useB"]}
  assert format_imports(a) == format_imports(b)


def test_indent_body_removes_source_indentation():
  body = "if (a) {\n          b();\n        }\n\n        c();"

  assert indent_body(body) == ["  if (a) {", "    b();", "  }", "", "  c();"]
  assert indent_body(body, prefix="") == ["if (a) {", "  b();", "}", "", "c();"]
  assert indent_body("   \n") == []


def test_assemble_category_order_and_separation():
  sections = SfcSections(template="<p>{{ a }}</p>", script="export default {}", style="p {}", style_attrs="scoped")
  result = TransformationResult(
    setup=["const http = useHttp();"],
    reactive_state=["const a = ref(import('~/x'));"],
    computed_properties=["const b = computed(() => 1);", ""],
    methods=["const c = () => {", "};"],
    watchers=["watch(() => '~/keep', () => {});"],
    lifecycle_hooks=["", "onMounted(() => {", "});", ""],
    additional_scripts=["<script>\nexport const x = '~/y';\n</script>"],
  )
  result.add_import("vue", "ref")

  assert assemble(sections, result) == (
    "<template>\n<p>{{ a }}</p>\n</template>\n"
    "<script setup>\n"
    "import { ref } from 'vue';\n"
    "\n"
    "const http = useHttp();\n"
    "\n"
    "const a = ref(import('@/x'));\n"
    "\n"
    "const b = computed(() => 1);\n"
    "\n"
    "const c = () => {\n"
    "};\n"
    "\n"
    "watch(() => '~/keep', () => {});\n"
    "\n"
    "onMounted(() => {\n"
    "});\n"
    "</script>\n"
    "<script>\nexport const x = '@/y';\n</script>\n"
    "<style scoped>\np {}\n</style>"
  )


def test_assemble_empty_result():
  assert assemble(SfcSections(), TransformationResult()) == "<script setup>\n</script>"


def test_template_replacements_apply_in_order():
  template = "<nuxt-link>{{ $t('a') }}</nuxt-link>"
  replaced = apply_template_replacements(
    template, [("nuxt-link", "router-link"), ("$t(", "t("), ("", "ignored"), ("router-link", "RouterLink")]
  )

  assert replaced == "<RouterLink>{{ t('a') }}</RouterLink>"
