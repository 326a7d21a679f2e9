"""Provider: configuration, collaborators and data source registry."""
from __future__ import annotations
from typing import Any, Callable, Dict, Mapping, Optional

from cloudportal.config.settings import ProviderConfig
from cloudportal.core.debug_log import DebugLog
from cloudportal.core.flattener import TicketFlattener
from cloudportal.core.portal import CloudportalClient, ConfigurationError
from cloudportal.core.schema import Block, provider_schema

from .data_source_ticket import TicketDataSource
from .resource_data import ResourceData

TICKET_DATA_SOURCE = "cloudportal_datasource"


class Provider:
    """Cloudportal provider.

    Lifecycle:
        provider = Provider()
        provider.configure(config)          # creates debug log, token provider, client
        data = provider.read_data_source("cloudportal_datasource", {"id": "42"})
        provider.close()                    # closes the debug log
    """

    def __init__(self, flattener: Optional[TicketFlattener] = None):
        self.flattener = flattener or TicketFlattener()
        self.config: Optional[ProviderConfig] = None
        self.debug_log: Optional[DebugLog] = None
        self.client: Optional[CloudportalClient] = None
        self.data_sources: Dict[str, Callable[[], Any]] = {
            TICKET_DATA_SOURCE: self._ticket_data_source,
        }

    @staticmethod
    def schema() -> Block:
        return provider_schema()

    def configure(self, config: ProviderConfig | Mapping[str, Any]) -> CloudportalClient:
        """Validate the configuration and build the API client.

        Args:
            config: A ``ProviderConfig`` or a raw provider block

        Raises:
            ConfigurationError: Missing credential or URL
            IdentityError: Credential could not be created
        """
        if not isinstance(config, ProviderConfig):
            config = ProviderConfig.from_mapping(config)
        self.config = config
        if self.debug_log is not None:
            self.debug_log.close()
        self.debug_log = DebugLog(config.debug_info, config.debug_log_path)
        self.debug_log.info("start")
        try:
            self.client = CloudportalClient.from_config(config, self.debug_log)
        except Exception as exc:
            self.debug_log.error(str(exc))
            raise
        return self.client

    def _ticket_data_source(self) -> TicketDataSource:
        if self.client is None or self.debug_log is None:
            raise ConfigurationError("provider is not configured")
        return TicketDataSource(self.client, self.debug_log, self.flattener)

    def read_data_source(self, name: str, inputs: Mapping[str, Any]) -> ResourceData:
        """Run a data source read and return its populated state.

        Raises:
            KeyError: Unknown data source name
            CloudportalError: Any read failure (state is never partially set)
        """
        if name not in self.data_sources:
            raise KeyError(f"unknown data source: {name}")
        data_source = self.data_sources[name]()
        data = ResourceData(data_source.schema(), inputs)
        data_source.read(data)
        return data

    def close(self) -> None:
        if self.debug_log is not None:
            self.debug_log.close()
