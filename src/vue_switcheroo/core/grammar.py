"""
JavaScript Grammar Access.

Thin helpers around `tree-sitter` and the `tree-sitter-javascript` grammar. The
compiled `Language` is shared and immutable; a fresh `Parser` is created per
parse so concurrent conversions never share parser state.
"""

from typing import Callable, Iterator, List, Optional, Tuple

import tree_sitter
import tree_sitter_javascript

from vue_switcheroo.core.errors import GrammarParseError
from vue_switcheroo.core.models import FunctionCallDetail, CallFacts

JS_LANGUAGE = tree_sitter.Language(tree_sitter_javascript.language())

FUNCTION_NODE_TYPES = ("function", "function_expression", "arrow_function", "method_definition")


def parse_js(source: str) -> tree_sitter.Tree:
  """
  Parses JavaScript source text into a syntax tree.

  Args:
      source: The code to parse.

  Returns:
      tree_sitter.Tree: The concrete syntax tree (may contain ERROR nodes).
  """
  parser = tree_sitter.Parser(JS_LANGUAGE)
  return parser.parse(source.encode("utf-8"))


def parse_js_strict(source: str, what: str = "script") -> tree_sitter.Tree:
  """
  Parses JavaScript and rejects trees containing syntax errors.

  Args:
      source: The code to parse.
      what: Label used in the error message.

  Returns:
      tree_sitter.Tree: The error-free syntax tree.

  Raises:
      GrammarParseError: If the grammar could not parse the text cleanly.
  """
  tree = parse_js(source)
  if tree.root_node.has_error:
    bad = first_error(tree.root_node)
    where = f" at line {bad.start_point[0] + 1}" if bad is not None else ""
    raise GrammarParseError(f"Unable to parse {what}{where}", fragment=source)
  return tree


def first_error(node: tree_sitter.Node) -> Optional[tree_sitter.Node]:
  """Returns the first ERROR or missing node in document order."""
  if node.type == "ERROR" or node.is_missing:
    return node
  for child in node.children:
    if child.has_error or child.is_missing:
      found = first_error(child)
      if found is not None:
        return found
  return None


def node_text(node: Optional[tree_sitter.Node]) -> str:
  if node is None:
    return ""
  return node.text.decode("utf-8")


def key_name(node: Optional[tree_sitter.Node]) -> str:
  """Text of an object key with surrounding quotes removed."""
  return node_text(node).strip("\"'")


def walk(node: tree_sitter.Node) -> Iterator[tree_sitter.Node]:
  """Pre-order traversal of every node below (and including) `node`."""
  stack = [node]
  while stack:
    current = stack.pop()
    yield current
    stack.extend(reversed(current.children))


def is_async(node: tree_sitter.Node) -> bool:
  """True when the function-like node carries the `async` keyword."""
  return any(child.type == "async" for child in node.children)


def function_body(node: tree_sitter.Node) -> str:
  """
  Extracts the body of a function-like node without its braces.

  Expression-bodied arrow functions are returned as a `return` statement so
  every body can be re-emitted inside a block.

  Args:
      node: A function, arrow function or method definition.

  Returns:
      str: The stripped body text, or an empty string.
  """
  body = node.child_by_field_name("body")
  if body is None:
    for child in node.children:
      if child.type == "statement_block":
        body = child
        break
  if body is None:
    return ""

  text = node_text(body)
  if body.type == "statement_block":
    return text[1:-1].strip()
  if body.type == "parenthesized_expression":
    text = text[1:-1].strip()
  return f"return {text};"


def function_parameters(node: tree_sitter.Node) -> List[str]:
  """
  Lists the parameter source texts of a function-like node.

  Plain names, defaults, destructuring patterns and rest parameters are all
  kept verbatim.
  """
  single = node.child_by_field_name("parameter")
  if single is not None:
    return [node_text(single)]

  params = node.child_by_field_name("parameters")
  if params is None:
    return []
  return [node_text(child) for child in params.named_children if child.type != "comment"]


def call_detail(node: tree_sitter.Node) -> Optional[FunctionCallDetail]:
  """Builds a FunctionCallDetail from a `call_expression` node."""
  function = node.child_by_field_name("function")
  arguments = node.child_by_field_name("arguments")
  if function is None or arguments is None:
    return None

  if arguments.type == "arguments":
    args = [node_text(child) for child in arguments.named_children if child.type != "comment"]
  else:
    args = [node_text(arguments)]

  return FunctionCallDetail(name=node_text(function), arguments=args, full_call=node_text(node))


def collect_generic(node: tree_sitter.Node, facts: CallFacts) -> None:
  """
  Catch-all visitor recording identifiers and calls.

  Bare identifiers are recorded once. Member accesses on `this` are recorded by
  the text after `this.` so downstream units can check e.g. `$store.state.x`
  without re-parsing.

  Args:
      node: Subtree to visit.
      facts: Accumulator receiving identifiers and call details.
  """
  kind = node.type
  if kind == "identifier":
    facts.add_identifier(node_text(node))
  elif kind == "call_expression":
    detail = call_detail(node)
    if detail is not None:
      facts.add_call(detail)
  elif kind == "member_expression":
    text = node_text(node)
    if text.startswith("this."):
      facts.add_identifier(text[len("this.") :])

  for child in node.children:
    collect_generic(child, facts)


_BODY_PREFIX = "async function __body__() {\n"
_BODY_SUFFIX = "\n}"


def rewrite_body(body: str, replace: Callable[[tree_sitter.Node], Optional[str]]) -> Optional[str]:
  """
  Rewrites selected nodes of a function body.

  The body is parsed inside a synthetic async function so `return`, `await` and
  bare statements are accepted. `replace` is called for every node in document
  order; when it returns a string the node is replaced by it and its subtree is
  not visited.

  Args:
      body: Statement text of a function body.
      replace: Returns replacement text for a node, or None to descend.

  Returns:
      Optional[str]: The rewritten body, or None if the body does not parse.
  """
  tree = parse_js(_BODY_PREFIX + body + _BODY_SUFFIX)
  if tree.root_node.has_error:
    return None

  offset = len(_BODY_PREFIX.encode("utf-8"))
  edits: List[Tuple[int, int, bytes]] = []
  stack = [tree.root_node]
  while stack:
    node = stack.pop()
    replacement = replace(node)
    if replacement is not None:
      edits.append((node.start_byte - offset, node.end_byte - offset, replacement.encode("utf-8")))
      continue
    stack.extend(reversed(node.children))

  data = body.encode("utf-8")
  for start, end, text in sorted(edits, reverse=True):
    data = data[:start] + text + data[end:]
  return data.decode("utf-8")


def string_value(node: Optional[tree_sitter.Node]) -> Optional[str]:
  """Content of a plain string literal node, or None for anything else."""
  if node is None or node.type != "string":
    return None
  return node_text(node)[1:-1]
