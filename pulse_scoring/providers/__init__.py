"""
Signal providers — where raw signal values come from.

The scoring engine only sees Signal lists and TimeSeries; whether values are
live (already fetched by the query layer) or deterministic mock data is
decided once, in get_provider().
"""

from pulse_scoring.providers.base import SignalProvider, get_provider
from pulse_scoring.providers.mock_provider import MockSignalProvider
from pulse_scoring.providers.static_provider import StaticSignalProvider

__all__ = [
    "MockSignalProvider",
    "SignalProvider",
    "StaticSignalProvider",
    "get_provider",
]
