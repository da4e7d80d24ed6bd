"""
Entity decode component - HTML character reference normalization.
"""

from .component import REPLACEMENT_CHARACTER, decode_entities, has_entities

__all__ = [
    "REPLACEMENT_CHARACTER",
    "decode_entities",
    "has_entities",
]
