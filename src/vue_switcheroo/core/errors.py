"""
Pipeline Errors.

The two recoverable failure kinds of a conversion. Both abort the whole file;
nothing downstream of extraction raises.
"""


class MalformedNestingError(ValueError):
  """Raised when an SFC section has an opening tag but no matching close."""

  def __init__(self, tag: str, position: int):
    self.tag = tag
    self.position = position
    super().__init__(f"Unclosed <{tag}> opened at offset {position}")


class GrammarParseError(SyntaxError):
  """Raised when the JavaScript grammar rejects the script or a template expression."""

  def __init__(self, message: str, fragment: str = ""):
    self.fragment = fragment
    super().__init__(message)
