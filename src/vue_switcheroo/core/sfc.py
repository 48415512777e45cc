"""
Section Splitter.

Locates the outer `<template>`, `<script>` and `<style>` regions of a Single File
Component. Nested tags of the same name (e.g. `<template v-if>`) are treated as
content of the outer region.
"""

import re
from typing import Optional, Tuple

from vue_switcheroo.core.errors import MalformedNestingError
from vue_switcheroo.core.models import SfcSections


_TAG_NAME_END = re.compile(r"[\s>/]")


def find_opening_tag(text: str, tag: str, start: int = 0) -> int:
  """
  Offset of the next `<tag` whose name ends there, or -1.

  `<styled-card>` is not a `<style` opener and `<template-row>` is not a
  `<template>` opener.
  """
  opening = f"<{tag}"
  pos = text.find(opening, start)
  while pos != -1:
    after = pos + len(opening)
    if after < len(text) and _TAG_NAME_END.match(text, after):
      return pos
    pos = text.find(opening, after)
  return -1


def find_closing_tag(text: str, start: int, tag: str) -> Optional[int]:
  """
  Finds the close tag matching an already-consumed opening tag.

  Args:
      text: The full document.
      start: Offset just past the `>` of the opening tag.
      tag: Tag name without brackets.

  Returns:
      Optional[int]: Offset of the matching `</tag>`, or None when unbalanced.
  """
  opening = f"<{tag}"
  closing = f"</{tag}>"
  depth = 1
  pos = start

  while True:
    close_pos = text.find(closing, pos)
    if close_pos == -1:
      return None

    open_pos = find_opening_tag(text, tag, pos)
    if open_pos != -1 and open_pos < close_pos:
      depth += 1
      pos = open_pos + len(opening)
      continue

    depth -= 1
    if depth == 0:
      return close_pos
    pos = close_pos + len(closing)


def _extract_region(text: str, tag: str) -> Optional[Tuple[str, str]]:
  """
  Returns the raw (attributes, inner text) of the first `tag` region.

  Raises:
      MalformedNestingError: If the opening tag is never terminated or closed.
  """
  start = find_opening_tag(text, tag)
  if start == -1:
    return None

  tag_end = text.find(">", start)
  if tag_end == -1:
    raise MalformedNestingError(tag, start)

  content_start = tag_end + 1
  end = find_closing_tag(text, content_start, tag)
  if end is None:
    raise MalformedNestingError(tag, start)

  attrs = text[start + len(tag) + 1 : tag_end]
  return attrs, text[content_start:end]


def split_sfc(text: str) -> SfcSections:
  """
  Splits an SFC into its raw regions.

  Region text is kept byte-for-byte; a region that is absent or only
  whitespace is reported as None. Only the first region of each kind is used.

  Args:
      text: The component source.

  Returns:
      SfcSections: The located regions.

  Raises:
      MalformedNestingError: If a located region has no matching close tag.
  """
  sections = SfcSections()

  for tag in ("template", "script", "style"):
    region = _extract_region(text, tag)
    if region is None:
      continue
    attrs, content = region
    if not content.strip():
      content = None
    setattr(sections, tag, content)
    if tag == "style":
      sections.style_attrs = attrs.strip() or None

  return sections
