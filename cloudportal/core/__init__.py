"""Core Logic Module

This module provides the ticket read pipeline, independent of the host that
consumes the resulting state (provider runtime, CLI).

Module Structure:
    - portal/        : Low-level Cloudportal API client and token acquisition
    - models.py      : Ticket records decoded from the API document
    - flattener.py   : Ticket → flat attribute transformations
    - schema.py      : Declarative attribute tables
    - debug_log.py   : Lock-serialised debug log file

Usage Pattern:
    Import explicitly when needed:
        from cloudportal.core.portal import CloudportalClient
        from cloudportal.core.models import Ticket
        from cloudportal.core.flattener import TicketFlattener
        from cloudportal.core.schema import ticket_schema
"""
