"""
Entry point for module execution (``python -m vue_switcheroo``).

This module delegates execution to the CLI handler in ``vue_switcheroo.cli.__main__``.
"""

import sys
from vue_switcheroo.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
