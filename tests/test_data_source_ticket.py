"""End-to-end tests: provider configuration → HTTP → flattened state."""
from unittest.mock import Mock

import pytest

from cloudportal.config.settings import ProviderConfig
from cloudportal.core.portal import (
    CloudportalAPIError,
    CloudportalClient,
    ConfigurationError,
    DecompressionError,
    IdentityError,
    RequestBuildError,
)
from cloudportal.core.portal import client as client_module
from cloudportal.core.schema import ticket_schema
from cloudportal.provider import Provider, ResourceData, TicketDataSource, TICKET_DATA_SOURCE


@pytest.fixture()
def config(tmp_path):
    return ProviderConfig(
        base_url="https://portal.example.com/api",
        api_key="key",
        tenant_id="tenant",
        client_id="client",
        client_secret="secret",
        debug_info=True,
        debug_log_path=str(tmp_path / "provider-debug.log"),
    )


@pytest.fixture()
def provider(config, monkeypatch, token_provider_factory):
    monkeypatch.setattr(client_module, "TokenProvider", Mock(return_value=token_provider_factory()))
    provider = Provider()
    provider.configure(config)
    yield provider
    provider.close()


def test_read_populates_state(provider, api_responses, stub_response, ticket_document):
    api_responses.add(stub_response.json_body(ticket_document))

    data = provider.read_data_source(TICKET_DATA_SOURCE, {"id": "T-1001"})

    assert data.id == "T-1001"
    state = data.state
    assert len(state["comments"]) == 1
    assert len(state["attachments"]) == 1
    assert len(state["billingitems"][0]["invoiceperiods"]) == 2
    assert [p["invoiceperiod"] for p in state["billingitems"][0]["invoiceperiods"]] == ["Feb-2024", "Jan-2024"]
    assert state["ticketno"] == 1001
    assert state["catalogitems"][0]["catalogitemdisclaimer"] is None
    assert state["catalogitems"][0]["catalogitemicon"] == "network.svg"
    assert set(state) == ticket_schema().attribute_names()


def test_read_gzip_response(provider, api_responses, stub_response, ticket_document):
    api_responses.add(stub_response.json_body(ticket_document, gzipped=True))
    data = provider.read_data_source(TICKET_DATA_SOURCE, {"id": "T-1001"})
    assert data.get("title") == "New subscription"


def test_404_sets_no_state(provider, api_responses, stub_response):
    api_responses.add(stub_response(b"", status_code=404, reason="Not Found"))
    data = ResourceData(ticket_schema(), {"id": "missing"})

    with pytest.raises(CloudportalAPIError):
        TicketDataSource(provider.client, provider.debug_log).read(data)

    assert data.state == {}
    assert data.id == ""


def test_corrupt_gzip_sets_no_state(provider, api_responses, stub_response):
    api_responses.add(stub_response(b"not gzip", headers={"Content-Encoding": "gzip"}))
    data = ResourceData(ticket_schema(), {"id": "T-1"})

    with pytest.raises(DecompressionError):
        TicketDataSource(provider.client, provider.debug_log).read(data)

    assert data.state == {}


def test_missing_id_is_rejected(provider, api_responses):
    with pytest.raises(RequestBuildError):
        provider.read_data_source(TICKET_DATA_SOURCE, {})
    assert api_responses.calls == []


def test_token_failure_only_fails_this_read(config, debug_log, api_responses, stub_response,
                                            token_provider_factory, ticket_document):
    failing = CloudportalClient(config.base_url, token_provider_factory(error=IdentityError("denied")), debug_log)
    working = CloudportalClient(config.base_url, token_provider_factory(), debug_log)

    with pytest.raises(IdentityError):
        TicketDataSource(failing, debug_log).read(ResourceData(ticket_schema(), {"id": "T-1"}))

    api_responses.add(stub_response.json_body(ticket_document))
    data = ResourceData(ticket_schema(), {"id": "T-1001"})
    TicketDataSource(working, debug_log).read(data)
    assert data.id == "T-1001"


def test_read_is_logged(provider, api_responses, stub_response, ticket_document, config):
    api_responses.add(stub_response.json_body(ticket_document))
    provider.read_data_source(TICKET_DATA_SOURCE, {"id": "T-1001"})
    provider.close()

    contents = open(config.debug_log_path, encoding="utf-8").read()
    assert "INFO: start" in contents
    assert "DEBUG: https://portal.example.com/api/ticket/T-1001" in contents
    assert "INFO: read ticket T-1001" in contents


def test_unknown_data_source(provider):
    with pytest.raises(KeyError):
        provider.read_data_source("cloudportal_resource", {"id": "1"})


def test_unconfigured_provider_refuses_reads():
    with pytest.raises(ConfigurationError):
        Provider().read_data_source(TICKET_DATA_SOURCE, {"id": "1"})


def test_configure_accepts_provider_block(monkeypatch, tmp_path, token_provider_factory):
    monkeypatch.setattr(client_module, "TokenProvider", Mock(return_value=token_provider_factory()))
    provider = Provider()
    client = provider.configure({
        "api_key": "key",
        "base_url": "https://portal.example.com/api/",
        "debug_info": False,
        "clientID": "client",
        "clientSecret": "secret",
        "tenantID": "tenant",
    })
    assert client.base_url == "https://portal.example.com/api"
    assert provider.debug_log.enabled is False
    provider.close()


def test_configure_rejects_missing_url():
    with pytest.raises(ConfigurationError):
        Provider().configure({"api_key": "key", "clientID": "c", "clientSecret": "s", "tenantID": "t"})


def test_reconfigure_closes_previous_debug_log(monkeypatch, tmp_path, token_provider_factory):
    monkeypatch.setattr(client_module, "TokenProvider", Mock(return_value=token_provider_factory()))
    block = {
        "api_key": "key",
        "base_url": "https://portal.example.com/api",
        "debug_info": True,
        "debug_log_path": str(tmp_path / "provider-debug.log"),
        "clientID": "client",
        "clientSecret": "secret",
        "tenantID": "tenant",
    }
    provider = Provider()
    provider.configure(block)
    first_log = provider.debug_log
    assert first_log.is_open

    provider.configure(block)

    assert not first_log.is_open
    assert provider.debug_log is not first_log
    provider.close()
