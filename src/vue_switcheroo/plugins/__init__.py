"""
Transformer Units Package.

Each public module registers one unit via `register_transformer`. Modules are
discovered by `vue_switcheroo.core.hooks.load_plugins`, so adding a file here
registers its unit without manual edits. Modules prefixed with `_` hold shared
helpers and are skipped.
"""
