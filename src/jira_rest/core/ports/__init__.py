"""
Ports - Abstract interfaces for external dependencies.

Ports define the contracts that adapters must implement.
This enables dependency inversion and easy testing.
"""

from .config_provider import ConfigProviderPort, JiraConfig
from .transport import (
    HttpStatusError,
    HttpTransportPort,
    TransportConnectionError,
    TransportError,
)

__all__ = [
    "ConfigProviderPort",
    "JiraConfig",
    "HttpStatusError",
    "HttpTransportPort",
    "TransportConnectionError",
    "TransportError",
]
