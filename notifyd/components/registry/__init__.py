"""
Registry component - Id allocation, replacement, closing and expiry.

Close and action requests from the transport enter through the ingest
component's run_close / run_invoke_action, which delegate here.
"""

from ._impl import NotificationRegistry
from .models import RegistryError
from .ports import DisplayPort, ExpiryPort, HistoryPort, SignalPort

__all__ = [
    # Registry
    "NotificationRegistry",
    "RegistryError",
    # Ports
    "DisplayPort",
    "ExpiryPort",
    "HistoryPort",
    "SignalPort",
]
