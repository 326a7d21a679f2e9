"""Cloudportal-specific exceptions for error handling.

Every failure of a ticket read maps to exactly one of these classes so the
caller can tell configuration, identity, transport and payload problems apart.
None of them is retried.
"""


class CloudportalError(Exception):
    """Base exception for all Cloudportal operations."""
    pass


class ConfigurationError(CloudportalError):
    """Provider configuration is missing a credential or URL."""
    pass


class IdentityError(CloudportalError):
    """Client-credential token acquisition failed."""
    pass


class RequestBuildError(CloudportalError):
    """The HTTP request could not be constructed (bad URL, missing ticket id)."""
    pass


class TransportError(CloudportalError):
    """The request was sent but no response came back (connection, TLS, timeout)."""
    pass


class CloudportalAPIError(CloudportalError):
    """Non-success HTTP status from the Cloudportal API.

    Attributes:
        status_code: HTTP status code
        message: Status text or response body
        endpoint: API endpoint that failed
    """

    def __init__(self, status_code: int, message: str, endpoint: str):
        self.status_code = status_code
        self.message = message
        self.endpoint = endpoint
        super().__init__(f"API call failed with status {status_code}: {message} ({endpoint})")


class DecompressionError(CloudportalError):
    """Response body could not be decoded according to its Content-Encoding."""
    pass


class DecodeError(CloudportalError):
    """Response body is not valid JSON or does not have the ticket shape."""
    pass
