"""
Template Fact Extractor.

Collects mustache interpolations from the raw `<template>` text, then streams
the region (interpolations blanked out, so a `<` inside `{{ }}` is never read as
markup) with the standard library `html.parser`, recording directive/binding
attributes (`v-*`, `:*`, `@*`, `#slot`). Every collected expression is then
re-parsed with the JavaScript grammar so template identifiers and calls
share the shape of the script facts.
"""

import re
from html.parser import HTMLParser
from typing import Dict, List, Optional, Tuple

from vue_switcheroo.core.errors import GrammarParseError
from vue_switcheroo.core.grammar import collect_generic, parse_js
from vue_switcheroo.core.models import TemplateFacts, VueDirective

MUSTACHE_PATTERN = re.compile(r"\{\{(.*?)\}\}", re.DOTALL)
DIRECTIVE_PREFIXES = ("v-", ":", "@", "#")

_V_FOR_PATTERN = re.compile(r"^\s*(.+?)\s+(?:in|of)\s+(.+?)\s*$", re.DOTALL)
_QUOTED = re.compile(r"\"[^\"]*\"|'[^']*'")
_ATTR_NAME = re.compile(r"(?:^|\s)([^\s\"'<>/=]+)")


class DirectiveScanner(HTMLParser):
  """
  HTML Parser callback handler.
  Collects directive attributes from the DOM stream.
  """

  def __init__(self) -> None:
    super().__init__(convert_charrefs=True)
    self.directives: List[VueDirective] = []

  def handle_starttag(self, tag: str, attrs: List[Tuple[str, Optional[str]]]) -> None:
    original = self._original_attr_names()
    for name, value in attrs:
      name = original.get(name, name)
      if name.startswith(DIRECTIVE_PREFIXES):
        self.directives.append(VueDirective(name=name, value=value or "", element_tag=self._original_tag(tag)))

  def handle_startendtag(self, tag: str, attrs: List[Tuple[str, Optional[str]]]) -> None:
    self.handle_starttag(tag, attrs)

  def _original_tag(self, tag: str) -> str:
    raw = self.get_starttag_text() or ""
    name = raw[1 : 1 + len(tag)]
    return name if name.lower() == tag else tag

  def _original_attr_names(self) -> Dict[str, str]:
    """
    Recovers attribute name casing from the raw start tag.

    `HTMLParser` lowercases attribute names, but Vue bindings such as
    `:modelValue` or `@update:someProp` are case sensitive.
    """
    raw = self.get_starttag_text() or ""
    inner = _QUOTED.sub('""', raw.strip("<>/"))
    names = _ATTR_NAME.findall(inner)[1:]
    mapping: Dict[str, str] = {}
    for name in names:
      mapping.setdefault(name.lower(), name)
    return mapping


def _expression_source(directive: VueDirective) -> str:
  """Prepares a directive value for parsing as a standalone program."""
  value = directive.value.strip()
  name = directive.name

  if name == "v-for":
    match = _V_FOR_PATTERN.match(value)
    return f"({match.group(2)})" if match else f"({value})"
  if name.startswith(("v-slot", "#")) or name == "slot-scope":
    return f"({value}) => 0"
  return f"({value})"


def _collect_fragment(source: str, fallback: str, facts: TemplateFacts) -> None:
  """
  Parses one template expression and records its identifiers and calls.

  Event handlers may contain statements (`a = 1; b()`), which are not valid in
  expression position; those are retried as a plain program.

  Raises:
      GrammarParseError: If neither form parses.
  """
  tree = parse_js(source)
  if tree.root_node.has_error:
    tree = parse_js(fallback)
    if tree.root_node.has_error:
      raise GrammarParseError(f"Unable to parse template expression: {fallback!r}", fragment=fallback)
  collect_generic(tree.root_node, facts)


def extract_template(template: str, facts: TemplateFacts) -> None:
  """
  Extracts directive and mustache facts from a template.

  Args:
      template: Raw text of the `<template>` region.
      facts: Accumulator owned by the caller.

  Raises:
      GrammarParseError: If a directive value or interpolation is not a valid expression.
  """
  mustaches = [match.group(1).strip() for match in MUSTACHE_PATTERN.finditer(template)]

  scanner = DirectiveScanner()
  scanner.feed(MUSTACHE_PATTERN.sub("{{}}", template))
  scanner.close()

  for directive in scanner.directives:
    facts.vue_directives.append(directive)
    if directive.value.strip():
      _collect_fragment(_expression_source(directive), directive.value, facts)

  for content in mustaches:
    facts.mustache_expressions.append(content)
    if content:
      _collect_fragment(f"({content})", content, facts)
