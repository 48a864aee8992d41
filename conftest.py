"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path

# Put the project root (``tests`` and ``benchmarks``) and ``src``
# (``merkle_trees``) on sys.path so the suite runs from a plain checkout.
_project_root = Path(__file__).resolve().parent
for _path in (_project_root / "src", _project_root):
    if str(_path) not in sys.path:
        sys.path.insert(0, str(_path))
