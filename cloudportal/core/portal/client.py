"""Low-level HTTP client for the Cloudportal ticket API.

Handles token acquisition, request headers, status checking, transport
decompression and JSON decoding. Each failure is raised as its own exception
type (see ``exceptions.py``); nothing is retried.
"""
from __future__ import annotations
import gzip
import json
import zlib
from typing import TYPE_CHECKING, Any, Dict, Optional
from urllib.parse import quote

import requests
import urllib3

from cloudportal.core.debug_log import DebugLog, token_fingerprint
from .exceptions import (
    CloudportalAPIError,
    DecodeError,
    DecompressionError,
    RequestBuildError,
    TransportError,
)
from .identity import TokenProvider

if TYPE_CHECKING:
    from cloudportal.config.settings import ProviderConfig

ACCEPT_ENCODING = "gzip, deflate"
ACCEPT_LANGUAGE = "en-IN,en-GB;q=0.9,en;q=0.8,en-US;q=0.7"

# requests raises these before anything is sent
_REQUEST_BUILD_ERRORS = (
    requests.exceptions.MissingSchema,
    requests.exceptions.InvalidSchema,
    requests.exceptions.InvalidURL,
    requests.exceptions.InvalidHeader,
)


def decode_body(raw: bytes, content_encoding: Optional[str]) -> bytes:
    """Undo the transport encoding named by ``Content-Encoding``.

    Raises:
        DecompressionError: If the body is corrupt or the encoding is unknown
    """
    encoding = (content_encoding or "").strip().lower()
    if encoding in ("", "identity"):
        return raw
    if encoding == "gzip":
        try:
            return gzip.decompress(raw)
        except (OSError, EOFError, zlib.error) as exc:
            raise DecompressionError(f"invalid gzip body: {exc}") from exc
    if encoding == "deflate":
        try:
            return zlib.decompress(raw)
        except zlib.error:
            # Some servers send raw deflate without the zlib header
            try:
                return zlib.decompress(raw, -zlib.MAX_WBITS)
            except zlib.error as exc:
                raise DecompressionError(f"invalid deflate body: {exc}") from exc
    raise DecompressionError(f"unsupported Content-Encoding: {content_encoding}")


class CloudportalClient:
    """HTTP client for the Cloudportal API.

    Usage:
        client = CloudportalClient.from_config(config, debug_log)
        document = client.fetch_ticket_document("42")
    """

    def __init__(
        self,
        base_url: str,
        token_provider: TokenProvider,
        debug_log: DebugLog,
        timeout: Optional[float] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token_provider = token_provider
        self.debug_log = debug_log
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: "ProviderConfig", debug_log: DebugLog) -> "CloudportalClient":
        tokens = TokenProvider(config.tenant_id, config.client_id, config.client_secret)
        return cls(config.base_url, tokens, debug_log, timeout=config.request_timeout)

    def ticket_url(self, ticket_id: str) -> str:
        if not ticket_id:
            raise RequestBuildError("ticket id must not be empty")
        return f"{self.base_url}/ticket/{quote(str(ticket_id), safe='')}"

    def _headers(self, token: str) -> Dict[str, str]:
        return {
            "Accept": "application/json",
            "Accept-Encoding": ACCEPT_ENCODING,
            "Accept-Language": ACCEPT_LANGUAGE,
            "Connection": "keep-alive",
            "Authorization": f"Bearer {token}",
        }

    def fetch_ticket_document(self, ticket_id: str) -> Dict[str, Any]:
        """GET a ticket and return its decoded JSON document.

        Args:
            ticket_id: Ticket identifier

        Returns:
            Decoded JSON object

        Raises:
            RequestBuildError: Empty id or malformed URL
            IdentityError: Token acquisition failed
            TransportError: No response received
            CloudportalAPIError: Status other than 200
            DecompressionError: Body could not be decompressed
            DecodeError: Body is not a JSON object
        """
        url = self.ticket_url(ticket_id)
        self.debug_log.debug(url)

        try:
            token = self.token_provider.get_token()
        except Exception as exc:
            self.debug_log.error(str(exc))
            raise
        self.debug_log.debug(f"Token fingerprint: {token_fingerprint(token)}")

        try:
            resp = requests.get(url, headers=self._headers(token), timeout=self.timeout, stream=True)
        except _REQUEST_BUILD_ERRORS as exc:
            self.debug_log.error(f"Build request: {exc}")
            raise RequestBuildError(f"failed to create HTTP request: {exc}") from exc
        except requests.RequestException as exc:
            self.debug_log.error(f"Send request: {exc}")
            raise TransportError(f"request to {url} failed: {exc}") from exc

        try:
            return self._read_document(resp, url)
        finally:
            resp.close()

    def _read_document(self, resp: requests.Response, url: str) -> Dict[str, Any]:
        self.debug_log.debug(f"{resp.status_code} {resp.reason}")

        if resp.status_code != 200:
            self.debug_log.error(f"Response status: {resp.status_code} {resp.reason}")
            raise CloudportalAPIError(resp.status_code, resp.reason or "", url)

        try:
            raw = resp.raw.read(decode_content=False)
        except (urllib3.exceptions.HTTPError, OSError) as exc:
            self.debug_log.error(f"Read body: {exc}")
            raise TransportError(f"failed to read response from {url}: {exc}") from exc

        try:
            body = decode_body(raw, resp.headers.get("Content-Encoding"))
        except DecompressionError as exc:
            self.debug_log.error(str(exc))
            raise

        self.debug_log.debug(body.decode("utf-8", errors="replace"))

        try:
            document = json.loads(body)
        except ValueError as exc:
            self.debug_log.error(f"Decode: {exc}")
            raise DecodeError(f"invalid JSON from {url}: {exc}") from exc

        if not isinstance(document, dict):
            self.debug_log.error("Decode: top-level JSON value is not an object")
            raise DecodeError(f"expected a JSON object from {url}, got {type(document).__name__}")
        return document
