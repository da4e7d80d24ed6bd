"""
Registry component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass

# --- Errors ---


@dataclass(frozen=True)
class RegistryError:
    """Registry failure. ``ids_exhausted`` is the only one reported to callers."""

    code: str
    message: str
