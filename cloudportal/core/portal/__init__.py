"""Cloudportal API client library.

Architecture:
- client.py: HTTP client (headers, status check, decompression, JSON decode)
- identity.py: Client-credential token acquisition via azure-identity
- exceptions.py: Typed exceptions, one per failure kind

Usage:
    from cloudportal.core.portal import CloudportalClient

    client = CloudportalClient.from_config(config, debug_log)
    document = client.fetch_ticket_document("42")
"""
from .client import CloudportalClient, decode_body, ACCEPT_ENCODING
from .exceptions import (
    CloudportalError,
    ConfigurationError,
    IdentityError,
    RequestBuildError,
    TransportError,
    CloudportalAPIError,
    DecompressionError,
    DecodeError,
)
from .identity import TokenProvider

__all__ = [
    # Client
    "CloudportalClient",
    "decode_body",
    "ACCEPT_ENCODING",
    "TokenProvider",

    # Exceptions
    "CloudportalError",
    "ConfigurationError",
    "IdentityError",
    "RequestBuildError",
    "TransportError",
    "CloudportalAPIError",
    "DecompressionError",
    "DecodeError",
]
