"""Cloudportal ticket provider package.

To read a ticket:
    from cloudportal.provider import Provider

To use the API client directly:
    from cloudportal.core.portal import CloudportalClient

To flatten an already decoded ticket:
    from cloudportal.core.flattener import TicketFlattener
"""
