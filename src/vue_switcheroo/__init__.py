"""
vue-switcheroo Package.

A deterministic source transpiler converting Vue 2 / Nuxt 2 Single File
Components from the Options API to Vue 3 `<script setup>` components.

Usage
-----

Simple String Conversion
^^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    import vue_switcheroo as vs
    sfc = open("Counter.vue").read()
    print(vs.rewrite(sfc))

Advanced Usage (Engine)
^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    from vue_switcheroo import RewriteOptions, SfcEngine

    options = RewriteOptions(enable_i18n=False, import_keeplist=["lodash"])
    res = SfcEngine(options).run(sfc)

    if res.success:
        print(res.code)
    else:
        print(f"Errors: {res.errors}")
"""

from vue_switcheroo.config import RewriteOptions, TransformerConfig
from vue_switcheroo.core.engine import ConversionResult, SfcEngine, rewrite
from vue_switcheroo.core.errors import GrammarParseError, MalformedNestingError

__version__ = "0.1.0"

__all__ = [
  "ConversionResult",
  "GrammarParseError",
  "MalformedNestingError",
  "RewriteOptions",
  "SfcEngine",
  "TransformerConfig",
  "rewrite",
  "__version__",
]
