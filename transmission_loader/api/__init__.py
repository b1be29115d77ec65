"""
Transmission RPC Layer.

This package handles all communication with the daemon's JSON-RPC endpoint,
including the session-id handshake performed before any torrent is added.
"""

from .client import TransmissionRPCClient
from .session import SessionBootstrapper

__all__ = ["SessionBootstrapper", "TransmissionRPCClient"]
