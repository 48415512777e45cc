"""
Transformer Registry and Context.

Every rewrite unit subclasses `Transformer` and is registered with the
`register_transformer` decorator. Units receive a `TransformContext` giving
read-only access to the extracted facts, the configuration, and the composed
body rewrite function.

Registration carries an explicit `order`; the orchestrator always iterates
units by that order so output is independent of import order.
"""

import importlib
import pkgutil
import sys
from typing import Callable, Dict, List, Optional, Type, TypeVar

from vue_switcheroo.config import TransformerConfig
from vue_switcheroo.core.models import ScriptFacts, TemplateFacts, TransformationResult

BodyRewrite = Callable[[str, "TransformContext"], str]
T = TypeVar("T", bound=Type["Transformer"])


class TransformContext:
  """
  Context object passed to every transformer unit.

  Provides read-only access to the facts of the file being converted.
  """

  def __init__(
    self,
    script: ScriptFacts,
    template: TemplateFacts,
    config: TransformerConfig,
    template_source: str = "",
    script_source: str = "",
    body_transform: Optional[Callable[[str], str]] = None,
  ):
    """
    Initializes the transform context.

    Args:
        script: Facts extracted from the script region.
        template: Facts extracted from the template region.
        config: The frozen transformer configuration.
        template_source: Raw template text (for literal pattern checks).
        script_source: Raw script text (for literal pattern checks).
        body_transform: The composed body rewrite; identity when not wired yet.
    """
    self.script = script
    self.template = template
    self.config = config
    self.template_source = template_source
    self.script_source = script_source
    self._body_transform = body_transform

  def transform_body(self, body: str) -> str:
    """
    Applies every applicable unit's body rewrite, then the built-in reactive rewrite.

    Args:
        body: Method, computed, watcher or lifecycle body text.

    Returns:
        str: The fully rewritten body.
    """
    if self._body_transform is None:
      return body
    return self._body_transform(body)

  def bind_body_transform(self, fn: Callable[[str], str]) -> None:
    self._body_transform = fn

  def method_bodies(self) -> List[str]:
    """Every extracted function body, including special-case methods."""
    bodies = [m.body or m.expression or "" for m in self.script.method_details]
    bodies.extend(h.body for h in self.script.lifecycle_hooks)
    bodies.extend(c.getter or "" for c in self.script.computed_details)
    bodies.extend(c.setter or "" for c in self.script.computed_details)
    bodies.extend(w.handler_body for w in self.script.watchers)
    for special in (self.script.head_method, self.script.fetch_method):
      if special is not None:
        bodies.append(special.body or special.expression or "")
    return bodies

  def script_mentions(self, needle: str) -> bool:
    """
    Checks whether `needle` occurs in any script fact.

    Identifiers, callee names, extracted bodies and data initializers are
    searched, so usages inside unmodeled keys are found as well.
    """
    script = self.script
    return (
      any(needle in i for i in script.identifiers)
      or any(needle in c for c in script.function_calls)
      or any(needle in body for body in self.method_bodies())
      or any(needle in (d.value or "") for d in script.data_properties)
    )

  def template_mentions(self, needle: str) -> bool:
    return needle in self.template_source


class Transformer:
  """
  Base class for rewrite units.

  Subclasses override `should_transform` and `transform`, and optionally
  `body_rewrite` to contribute a text-level rewrite of extracted bodies.
  """

  name: str = ""
  order: int = 0

  def should_transform(self, ctx: TransformContext) -> bool:
    return False

  def transform(self, ctx: TransformContext) -> TransformationResult:
    return TransformationResult()

  def body_rewrite(self) -> Optional[BodyRewrite]:
    return None


# Global Registry
_TRANSFORMERS: Dict[str, Type[Transformer]] = {}
_PLUGINS_LOADED = False


def register_transformer(name: str, order: int) -> Callable[[T], T]:
  """
  Decorator to register a Transformer subclass.

  Args:
      name: Unique unit identifier.
      order: Position in the fixed registration order (lower runs first).
  """

  def decorator(cls: T) -> T:
    cls.name = name
    cls.order = order
    _TRANSFORMERS[name] = cls
    return cls

  return decorator


def get_transformers() -> List[Transformer]:
  """
  Instantiates every registered unit in registration order.
  Lazily loads the built-in plugins if the registry is empty.
  """
  if not _PLUGINS_LOADED:
    load_plugins()
  ordered = sorted(_TRANSFORMERS.values(), key=lambda cls: (cls.order, cls.name))
  return [cls() for cls in ordered]


def clear_transformers() -> None:
  """Resets the internal registry. Primarily for testing."""
  global _PLUGINS_LOADED
  _TRANSFORMERS.clear()
  _PLUGINS_LOADED = False


def load_plugins() -> int:
  """
  Imports (or re-imports after `clear_transformers`) every module of the
  built-in `vue_switcheroo.plugins` package.

  Returns:
      int: Number of registered units.
  """
  global _PLUGINS_LOADED
  import vue_switcheroo.plugins as package

  for _, module_name, _ in pkgutil.iter_modules(package.__path__):
    if module_name.startswith("_"):
      continue
    qualified = f"{package.__name__}.{module_name}"
    if qualified in sys.modules:
      importlib.reload(sys.modules[qualified])
    else:
      importlib.import_module(qualified)

  _PLUGINS_LOADED = True
  return len(_TRANSFORMERS)
