"""Provider surface: data source registry and host-side state."""
from .data_source_ticket import TicketDataSource
from .provider import Provider, TICKET_DATA_SOURCE
from .resource_data import ResourceData

__all__ = ["Provider", "ResourceData", "TicketDataSource", "TICKET_DATA_SOURCE"]
