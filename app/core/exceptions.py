"""
Error types raised by the connection service.
"""


class ConnectionServiceError(Exception):
    """Base class for errors the API maps to a client response."""

    message = "Connection service error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.message
        super().__init__(self.message)


class InvalidIpAddress(ConnectionServiceError):
    """The submitted value is not an IPv4 or IPv6 address."""

    message = "Invalid IP address"


class ValidationError(ConnectionServiceError):
    """A record violates a storage constraint."""

    message = "Invalid connection record"
