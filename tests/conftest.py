"""Pytest shared fixtures for the Cloudportal provider tests."""
import copy
import gzip
import json
import pathlib
import sys
from typing import Optional

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from cloudportal.core.debug_log import DebugLog
from cloudportal.core.portal import CloudportalClient


# ─────────────────────────────────────────────────────────────────────────────
# Network Guard Rails
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture(autouse=True)
def _block_network(monkeypatch):
    """Prevent unit tests from hitting live endpoints.

    Tests that need a response install their own stub with ``api_responses``.
    """
    def _unexpected(url, *args, **kwargs):
        raise RuntimeError(f"Unexpected network access in tests: {url}")

    monkeypatch.setattr(requests, "get", _unexpected)
    monkeypatch.setattr(requests, "post", _unexpected)


# ─────────────────────────────────────────────────────────────────────────────
# Stub HTTP responses
# ─────────────────────────────────────────────────────────────────────────────
class _StubRaw:
    def __init__(self, body: bytes):
        self._body = body

    def read(self, decode_content: bool = True):
        assert decode_content is False, "client must read the undecoded body"
        return self._body


class StubResponse:
    """Minimal stand-in for a streamed ``requests.Response``."""

    def __init__(self, body: bytes = b"", status_code: int = 200, reason: str = "OK",
                 headers: Optional[dict] = None):
        self.status_code = status_code
        self.reason = reason
        self.headers = CaseInsensitiveDict(headers or {})
        self.raw = _StubRaw(body)
        self.closed = False

    def close(self):
        self.closed = True

    @classmethod
    def json_body(cls, payload, gzipped: bool = False, **kwargs):
        body = json.dumps(payload).encode("utf-8")
        headers = kwargs.pop("headers", {})
        if gzipped:
            body = gzip.compress(body)
            headers["Content-Encoding"] = "gzip"
        return cls(body, headers=headers, **kwargs)


@pytest.fixture()
def api_responses(monkeypatch):
    """Queue stub responses for ``requests.get`` and record the calls made."""

    class _Recorder:
        def __init__(self):
            self.queue = []
            self.calls = []

        def add(self, response):
            self.queue.append(response)
            return response

        def get(self, url, *args, **kwargs):
            self.calls.append({"url": url, **kwargs})
            if not self.queue:
                raise RuntimeError(f"Unexpected network access in tests: {url}")
            response = self.queue.pop(0)
            if isinstance(response, Exception):
                raise response
            return response

    recorder = _Recorder()
    monkeypatch.setattr(requests, "get", recorder.get)
    return recorder


# ─────────────────────────────────────────────────────────────────────────────
# Collaborators
# ─────────────────────────────────────────────────────────────────────────────
class FakeTokenProvider:
    def __init__(self, token: str = "test-token", error: Optional[Exception] = None):
        self.token = token
        self.error = error
        self.calls = 0

    def get_token(self) -> str:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.token


@pytest.fixture()
def fake_tokens():
    return FakeTokenProvider()


@pytest.fixture()
def debug_log(tmp_path):
    log = DebugLog(True, tmp_path / "provider-debug.log")
    yield log
    log.close()


@pytest.fixture()
def portal_client(fake_tokens, debug_log):
    return CloudportalClient("https://portal.example.com/api/", fake_tokens, debug_log)


# ─────────────────────────────────────────────────────────────────────────────
# Sample ticket document
# ─────────────────────────────────────────────────────────────────────────────
_ALICE = {
    "id": "u-1",
    "email": "alice@example.com",
    "userprincipalname": "alice@corp.example.com",
    "displayname": "Alice Smith",
    "roles": ["requester", "approver"],
}

_BOB = {
    "id": "u-2",
    "email": "bob@example.com",
    "userprincipalname": "bob@corp.example.com",
    "displayname": "Bob Jones",
    "roles": [],
}

TICKET_DOCUMENT = {
    "id": "T-1001",
    "ticketno": 1001,
    "title": "New subscription",
    "description": "Please provision a subscription",
    "status": "Open",
    "substatus": "Waiting",
    "statuschangedat": "2024-02-01T10:00:00Z",
    "createdat": "2024-01-31T09:00:00Z",
    "createdby": _ALICE,
    "changedby": _BOB,
    "claritycode": {
        "code": "CC-7",
        "description": "Platform",
        "costcenter": "4711",
        "emails": ["finance@example.com"],
        "tower": "Cloud",
    },
    "participants": [{"userinfo": _BOB, "role": "approver"}],
    "comments": [
        {
            "id": "c-1",
            "createdat": "2024-02-01T11:00:00Z",
            "modifiedat": "2024-02-01T11:05:00Z",
            "author": _ALICE,
            "content": "Any update?",
            "loginuser": _BOB,
            "iseditable": True,
            "IsEditMode": False,
            "contentcopy": "Any update?",
        }
    ],
    "attachments": [
        {
            "url": "https://files.example.com/a.pdf",
            "uploaddatetime": "2024-02-01T12:00:00Z",
            "uploadedby": [_ALICE],
            "filename": "a.pdf",
        }
    ],
    "billingitems": [
        {
            "id": "b-1",
            "partitionkey": "pk",
            "subscriptionname": "sub-prod",
            "invoiceperiods": {
                "Feb-2024": {"actualcost": 80.25, "startdate": "2024-02-01", "enddate": "2024-02-29"},
                "Jan-2024": {"actualcost": 100.5, "startdate": "2024-01-01", "enddate": "2024-01-31"},
            },
        }
    ],
    "historyitems": [
        {
            "date": "2024-02-01T10:00:00Z",
            "author": [_BOB],
            "changes": [
                {
                    "propertyname": "status",
                    "oldvalue": {"value": "New"},
                    "newvalue": {"value": "Open"},
                }
            ],
        }
    ],
    "validactions": [
        {
            "actionname": "approve",
            "requiredproperties": ["claritycode"],
            "type": "transition",
            "minnumofcatalogitems": 1,
        }
    ],
    "editableproperties": ["title", "description"],
    "mandatoryproperties": ["title"],
    "etag": "\"0x8DC\"",
    "type": "subscription",
    "serviceprovider": "Azure",
    "cloudplatform": "azure",
    "catalogitems": [
        {
            "name": "vnet",
            "resourcename": "virtual-network",
            "label": "Virtual network",
            "catalogitemcloudplatform": "azure",
            "tickettypes": ["subscription"],
            "active": True,
            "catalogitemversion": 3,
            "catalogitemcreated": "2023-12-01",
            "catalogitemapproved": "2023-12-02",
            "catalogitemapprovedby": "carol",
            "catalogitemicon": "network.svg",
            "catalogfields": [
                {
                    "key": "cidr",
                    "label": "Address space",
                    "value": "10.0.0.0/16",
                    "ismandatory": True,
                    "inputType": "text",
                }
            ],
            "variables": {"region": "westeurope"},
        }
    ],
}


@pytest.fixture()
def ticket_document():
    """A fresh deep copy of the sample ticket document."""
    return copy.deepcopy(TICKET_DOCUMENT)


@pytest.fixture()
def stub_response():
    """The ``StubResponse`` class, for building responses inside tests."""
    return StubResponse


@pytest.fixture()
def token_provider_factory():
    """Build ``FakeTokenProvider`` instances with a custom token or error."""
    return FakeTokenProvider
