"""
Defines custom exceptions for the application to allow for more specific error handling.
"""


class TransmissionLoaderError(Exception):
    """Base exception for all application-specific errors."""


class ConfigurationError(TransmissionLoaderError):
    """Raised for issues related to configuration loading or validation."""


class ConnectivityError(TransmissionLoaderError):
    """
    Raised when the daemon cannot be reached or returns a malformed response
    while the session is being set up.
    """


class RPCError(TransmissionLoaderError):
    """Raised when the daemon answers an RPC call with a non-success result."""

    def __init__(self, method: str, result: str):
        super().__init__(f"RPC '{method}' responded with result: {result}")
        self.method = method
        self.result = result
