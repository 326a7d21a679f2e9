"""Ticket → flat attribute transformations.

Converts the nested ``Ticket`` records into lists of plain mappings whose keys
match the blocks declared in ``schema.py``.

Rules:
    - Output lists have the same length and order as the input; empty input
      gives ``[]``, never ``None``.
    - Singular nested records (``createdby``, ``claritycode``, a comment's
      ``author``...) become one-element lists.
    - Invoice periods are keyed by label in the source; they come out as a list
      sorted by label, each entry carrying its label as ``invoiceperiod``.
    - String maps (``oldvalue``, ``newvalue``, ``variables``) are copied as-is.
    - Nullable strings stay ``None`` unless ``absent_as_empty`` is set.

Usage:
    state = TicketFlattener().flatten_ticket(ticket)
    state["billingitems"][0]["invoiceperiods"]
"""
from __future__ import annotations
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .models import (
    Action,
    Attachment,
    BillingItem,
    CatalogField,
    CatalogItem,
    Change,
    ClarityCode,
    Comment,
    HistoryItem,
    InvoicePeriod,
    Participant,
    Ticket,
    User,
)

Flat = Dict[str, Any]


class TicketFlattener:
    """Flatten ticket records into schema-shaped attribute maps."""

    def __init__(self, absent_as_empty: bool = False):
        self.absent_as_empty = absent_as_empty

    def _optional(self, value: Optional[str]) -> Optional[str]:
        if value is None and self.absent_as_empty:
            return ""
        return value

    @staticmethod
    def flatten_string_list(values: Iterable[str]) -> List[str]:
        return list(values)

    @staticmethod
    def flatten_string_map(values: Mapping[str, str]) -> Dict[str, str]:
        return dict(values)

    def flatten_user(self, user: User) -> Flat:
        return {
            "email": user.email,
            "userprincipalname": user.user_principal_name,
            "id": user.id,
            "displayname": user.display_name,
            "roles": self.flatten_string_list(user.roles),
        }

    def flatten_users(self, users: Iterable[User]) -> List[Flat]:
        return [self.flatten_user(user) for user in users]

    def flatten_clarity_code(self, clarity_code: ClarityCode) -> Flat:
        return {
            "code": clarity_code.code,
            "description": clarity_code.description,
            "costcenter": clarity_code.cost_center,
            "emails": self.flatten_string_list(clarity_code.emails),
            "tower": clarity_code.tower,
        }

    def flatten_participants(self, participants: Iterable[Participant]) -> List[Flat]:
        return [
            {
                "userinfo": [self.flatten_user(participant.user_info)],
                "role": participant.role,
            }
            for participant in participants
        ]

    def flatten_comments(self, comments: Iterable[Comment]) -> List[Flat]:
        return [
            {
                "id": comment.id,
                "createdat": comment.created_at,
                "modifiedat": comment.modified_at,
                "author": [self.flatten_user(comment.author)],
                "content": comment.content,
                "loginuser": [self.flatten_user(comment.login_user)],
                "iseditable": comment.is_editable,
                "iseditmode": comment.is_edit_mode,
                "contentcopy": comment.content_copy,
            }
            for comment in comments
        ]

    def flatten_attachments(self, attachments: Iterable[Attachment]) -> List[Flat]:
        return [
            {
                "url": attachment.url,
                "uploaddatetime": attachment.upload_datetime,
                "uploadedby": self.flatten_users(attachment.uploaded_by),
                "filename": attachment.filename,
            }
            for attachment in attachments
        ]

    @staticmethod
    def flatten_invoice_periods(periods: Mapping[str, InvoicePeriod]) -> List[Flat]:
        """Turn the label-keyed mapping into a list ordered by label."""
        return [
            {
                "invoiceperiod": label,
                "actualcost": periods[label].actual_cost,
                "startdate": periods[label].start_date,
                "enddate": periods[label].end_date,
            }
            for label in sorted(periods)
        ]

    def flatten_billing_items(self, billing_items: Iterable[BillingItem]) -> List[Flat]:
        return [
            {
                "id": item.id,
                "partitionkey": item.partition_key,
                "subscriptionname": item.subscription_name,
                "invoiceperiods": self.flatten_invoice_periods(item.invoice_periods),
            }
            for item in billing_items
        ]

    def flatten_changes(self, changes: Iterable[Change]) -> List[Flat]:
        return [
            {
                "propertyname": change.property_name,
                "oldvalue": self.flatten_string_map(change.old_value),
                "newvalue": self.flatten_string_map(change.new_value),
            }
            for change in changes
        ]

    def flatten_history_items(self, history_items: Iterable[HistoryItem]) -> List[Flat]:
        return [
            {
                "date": item.date,
                "author": self.flatten_users(item.author),
                "changes": self.flatten_changes(item.changes),
            }
            for item in history_items
        ]

    def flatten_actions(self, actions: Iterable[Action]) -> List[Flat]:
        return [
            {
                "actionname": action.action_name,
                "requiredproperties": self.flatten_string_list(action.required_properties),
                "type": action.type,
                "minnumofcatalogitems": action.min_num_of_catalog_items,
            }
            for action in actions
        ]

    def flatten_catalog_fields(self, catalog_fields: Iterable[CatalogField]) -> List[Flat]:
        result = []
        for catalog_field in catalog_fields:
            lookup_values = catalog_field.lookup_values
            result.append({
                "key": catalog_field.key,
                "label": catalog_field.label,
                "value": catalog_field.value,
                "ismandatory": catalog_field.is_mandatory,
                "lookupfunction": self._optional(catalog_field.lookup_function),
                # Lists have no empty-string form: absent degrades to []
                "lookupvalues": (
                    self.flatten_string_list(lookup_values)
                    if lookup_values is not None
                    else ([] if self.absent_as_empty else None)
                ),
                "hintvalue": self._optional(catalog_field.hint_value),
                "inputtype": self._optional(catalog_field.input_type),
                "inputformat": self._optional(catalog_field.input_format),
                "enabletoggleby": self._optional(catalog_field.enable_toggle_by),
                "disabled": self._optional(catalog_field.disabled),
            })
        return result

    def flatten_catalog_items(self, catalog_items: Iterable[CatalogItem]) -> List[Flat]:
        return [
            {
                "name": item.name,
                "resourcename": item.resource_name,
                "label": item.label,
                "catalogitemdisclaimer": self._optional(item.disclaimer),
                "catalogitemcloudplatform": item.cloud_platform,
                "tickettypes": self.flatten_string_list(item.ticket_types),
                "active": item.active,
                "catalogitemversion": item.version,
                "catalogitemcreated": item.created,
                "catalogitemapproved": item.approved,
                "catalogitemapprovedby": item.approved_by,
                "catalogitemicon": self._optional(item.icon),
                "catalogfields": self.flatten_catalog_fields(item.catalog_fields),
                "variables": self.flatten_string_map(item.variables),
                "resourcecontractname": self._optional(item.resource_contract_name),
                "resourcecontainername": self._optional(item.resource_container_name),
            }
            for item in catalog_items
        ]

    def flatten_ticket(self, ticket: Ticket) -> Flat:
        """Return every top-level ticket attribute, ready for state assignment."""
        return {
            "id": ticket.id,
            "ticketno": ticket.ticket_no,
            "title": ticket.title,
            "description": ticket.description,
            "status": ticket.status,
            "substatus": ticket.sub_status,
            "statuschangedat": ticket.status_changed_at,
            "createdat": ticket.created_at,
            "createdby": [self.flatten_user(ticket.created_by)],
            "changedby": [self.flatten_user(ticket.changed_by)],
            "claritycode": [self.flatten_clarity_code(ticket.clarity_code)],
            "participants": self.flatten_participants(ticket.participants),
            "comments": self.flatten_comments(ticket.comments),
            "attachments": self.flatten_attachments(ticket.attachments),
            "billingitems": self.flatten_billing_items(ticket.billing_items),
            "historyitems": self.flatten_history_items(ticket.history_items),
            "validactions": self.flatten_actions(ticket.valid_actions),
            "editableproperties": self.flatten_string_list(ticket.editable_properties),
            "mandatoryproperties": self.flatten_string_list(ticket.mandatory_properties),
            "etag": ticket.etag,
            "type": ticket.type,
            "serviceprovider": ticket.service_provider,
            "cloudplatform": ticket.cloud_platform,
            "catalogitems": self.flatten_catalog_items(ticket.catalog_items),
        }
