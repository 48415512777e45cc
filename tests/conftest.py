"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Whitespace-insensitive comparison helper for converted components.
- Global registry isolation so tests registering custom units do not leak.
"""

import sys
from pathlib import Path
from typing import Callable, Optional

import pytest
from rich.console import Console

# Add src to path so we can import 'vue_switcheroo' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from vue_switcheroo.config import RewriteOptions  # noqa: E402
from vue_switcheroo.core.engine import SfcEngine, TransformerOrchestrator  # noqa: E402
from vue_switcheroo.core.hooks import TransformContext, clear_transformers, load_plugins  # noqa: E402
from vue_switcheroo.core.sfc import split_sfc  # noqa: E402
from vue_switcheroo.utils.console import reset_console, set_console  # noqa: E402


def trim_whitespace(text: str) -> str:
  """
  Normalizes a component for comparison.

  Every line is stripped and blank lines are dropped, so only the token
  content and the line structure are compared.
  """
  return "\n".join(line.strip() for line in text.splitlines() if line.strip())


@pytest.fixture
def normalize() -> Callable[[str], str]:
  """Fixture exposing the whitespace normalizer."""
  return trim_whitespace


@pytest.fixture(autouse=True)
def isolate_transformer_registry():
  """
  Ensures every test starts from the built-in units only.

  Tests may register throwaway units; the registry is rebuilt afterwards.
  """
  clear_transformers()
  load_plugins()
  yield
  clear_transformers()
  load_plugins()


@pytest.fixture
def make_context() -> Callable[..., TransformContext]:
  """
  Factory building a fully wired TransformContext for a component source.

  The composed body rewrite of the applicable built-in units is bound, so
  unit tests can call `transform` directly.
  """

  def factory(source: str, options: Optional[RewriteOptions] = None) -> TransformContext:
    engine = SfcEngine(options)
    ctx = engine.build_context(split_sfc(source))
    orchestrator = TransformerOrchestrator()
    ctx.bind_body_transform(orchestrator.compose_body_transform(orchestrator.applicable(ctx), ctx))
    return ctx

  return factory


@pytest.fixture
def recording_console():
  """Routes log output through a recording console for the duration of a test."""
  console = Console(record=True, width=200, force_terminal=False)
  set_console(console)
  yield console
  reset_console()
