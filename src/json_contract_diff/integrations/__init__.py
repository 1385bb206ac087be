"""Integrations subpackage for json-contract-diff.

Contains the pytest plugin, auto-discovered via the pytest11 entry point.
It is not imported here so that importing the package never imports pytest.
"""

from __future__ import annotations

__all__: list[str] = []
