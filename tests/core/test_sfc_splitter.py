"""
Tests for the SFC Section Splitter.

Verifies:
1. Regions are returned byte-for-byte.
2. Nested `<template>` tags stay inside the outer region.
3. Absent or whitespace-only regions are reported as None.
4. Unclosed regions raise `MalformedNestingError`.
"""

import pytest

from vue_switcheroo.core.errors import MalformedNestingError
from vue_switcheroo.core.sfc import find_closing_tag, find_opening_tag, split_sfc


def test_split_all_regions():
  sections = split_sfc("<template><p>a</p></template>\n<script>\nexport default {}\n</script>\n<style>p {}</style>")

  assert sections.template == "<p>a</p>"
  assert sections.script == "\nexport default {}\n"
  assert sections.style == "p {}"
  assert sections.style_attrs is None


def test_nested_templates_belong_to_outer_region():
  source = '<template><div><template v-if="ok"><b>x</b></template></div></template><script>export default {}</script>'
  sections = split_sfc(source)

  assert sections.template == '<div><template v-if="ok"><b>x</b></template></div>'


def test_style_attributes_are_kept():
  sections = split_sfc("<template><p/></template><style scoped lang=\"scss\">a {}</style>")

  assert sections.style_attrs == 'scoped lang="scss"'
  assert sections.script is None


def test_whitespace_only_region_is_absent():
  sections = split_sfc("<template>\n   \n</template><script>export default {}</script>")

  assert sections.template is None
  assert sections.script is not None


def test_missing_regions():
  sections = split_sfc("<script>export default {}</script>")

  assert sections.template is None
  assert sections.style is None


def test_unclosed_template_raises():
  with pytest.raises(MalformedNestingError) as exc:
    split_sfc("<template><div></div>\n<script>export default {}</script>")

  assert exc.value.tag == "template"
  assert exc.value.position == 0


def test_unbalanced_nested_template_raises():
  with pytest.raises(MalformedNestingError):
    split_sfc("<template><template v-if='a'><p/></template>")


def test_unclosed_script_raises():
  with pytest.raises(MalformedNestingError) as exc:
    split_sfc("<template><p/></template>\n<script>export default {}")

  assert exc.value.tag == "script"


def test_find_closing_tag_depth():
  text = "<a><a></a></a>"
  assert find_closing_tag(text, 3, "a") == 10
  assert find_closing_tag("<a>", 3, "a") is None


def test_kebab_case_component_is_not_a_style_opener():
  source = '<template>\n  <styled-card :title="title" />\n</template>\n<style scoped>\n.a {}\n</style>'
  sections = split_sfc(source)

  assert sections.template == '\n  <styled-card :title="title" />\n'
  assert sections.style == "\n.a {}\n"
  assert sections.style_attrs == "scoped"


def test_kebab_case_component_is_not_a_nested_template():
  source = '<template><div><template-row v-for="r in rows" :key="r" /></div></template>'

  assert split_sfc(source).template == '<div><template-row v-for="r in rows" :key="r" /></div>'


def test_find_opening_tag_requires_name_boundary():
  text = "<styled-card/><style>x</style>"

  assert find_opening_tag(text, "style") == text.index("<style>")
  assert find_opening_tag("<template-row>", "template") == -1
  assert find_opening_tag("<template\n  v-if='a'>", "template") == 0
