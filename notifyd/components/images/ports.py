"""
Images component port definitions.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class IconThemePort(Protocol):
    """Icon theme lookup."""

    def resolve(self, name: str) -> str | Path | None:
        """Resolve an icon name to a file path. Returns None if not found."""
        ...
