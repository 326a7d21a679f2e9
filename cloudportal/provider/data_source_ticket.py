"""Read-only ticket data source."""
from __future__ import annotations

from cloudportal.core.debug_log import DebugLog
from cloudportal.core.flattener import TicketFlattener
from cloudportal.core.models import Ticket
from cloudportal.core.portal import CloudportalClient, CloudportalError, RequestBuildError
from cloudportal.core.schema import Block, ticket_schema

from .resource_data import ResourceData


class TicketDataSource:
    """Fetch one ticket by ``id`` and expose it as flat attributes."""

    def __init__(self, client: CloudportalClient, debug_log: DebugLog, flattener: TicketFlattener | None = None):
        self.client = client
        self.debug_log = debug_log
        self.flattener = flattener or TicketFlattener()

    @staticmethod
    def schema() -> Block:
        return ticket_schema()

    def read(self, data: ResourceData) -> None:
        """Populate ``data`` with the ticket's attributes.

        State is only assigned once the whole document has been fetched,
        decoded and flattened; on any error ``data`` is left untouched.

        Raises:
            CloudportalError: Any subclass, see ``CloudportalClient.fetch_ticket_document``
        """
        ticket_id = data.get("id")
        if not ticket_id:
            raise RequestBuildError("the 'id' argument is required")

        try:
            document = self.client.fetch_ticket_document(str(ticket_id))
            ticket = Ticket.from_dict(document)
        except CloudportalError as exc:
            self.debug_log.error(f"read ticket {ticket_id}: {exc}")
            raise

        attributes = self.flattener.flatten_ticket(ticket)
        for key, value in attributes.items():
            data.set(key, value)
        data.set_id(ticket.id)
        self.debug_log.info(f"read ticket {ticket.id}")
