"""Declarative attribute schema for the provider and the ticket data source.

Pure data: the flattener produces exactly the keys declared here, and
``ResourceData`` refuses to store keys that are not declared.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

TYPE_STRING = "string"
TYPE_INT = "int"
TYPE_FLOAT = "float"
TYPE_BOOL = "bool"
TYPE_LIST = "list"
TYPE_MAP = "map"


@dataclass(frozen=True)
class Attribute:
    type: str
    required: bool = False
    optional: bool = False
    description: str = ""
    # Element type for lists/maps: a scalar type name or a nested Block
    elem: Optional[Union[str, "Block"]] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "type": self.type,
            "required": self.required,
            "optional": self.optional,
        }
        if self.description:
            result["description"] = self.description
        if isinstance(self.elem, Block):
            result["elem"] = self.elem.to_dict()
        elif self.elem is not None:
            result["elem"] = self.elem
        return result


@dataclass(frozen=True)
class Block:
    schema: Dict[str, Attribute] = field(default_factory=dict)

    def attribute_names(self) -> frozenset:
        return frozenset(self.schema)

    def nested(self, name: str) -> "Block":
        """Return the element block of a list attribute."""
        elem = self.schema[name].elem
        if not isinstance(elem, Block):
            raise KeyError(f"{name} is not a nested block")
        return elem

    def to_dict(self) -> Dict[str, Any]:
        return {name: attr.to_dict() for name, attr in self.schema.items()}


def _req(type_: str, description: str = "", elem=None) -> Attribute:
    return Attribute(type_, required=True, description=description, elem=elem)


def _opt(type_: str, description: str = "", elem=None) -> Attribute:
    return Attribute(type_, optional=True, description=description, elem=elem)


def provider_schema() -> Block:
    return Block({
        "api_key": _req(TYPE_STRING, "API key for authenticating with the custom API"),
        "base_url": _req(TYPE_STRING, "Base URL of the custom API"),
        "debug_info": _req(TYPE_BOOL, "Debug information logging"),
        "clientID": _req(TYPE_STRING, "clientID key for authenticating with the custom API"),
        "clientSecret": _req(TYPE_STRING, "clientSecret key for authenticating with the custom API"),
        "tenantID": _req(TYPE_STRING, "tenantID key for authenticating with the custom API"),
    })


def user_block() -> Block:
    return Block({
        "email": _req(TYPE_STRING, "User's email address"),
        "userprincipalname": _req(TYPE_STRING, "User principal name"),
        "id": _req(TYPE_STRING, "User ID"),
        "displayname": _req(TYPE_STRING, "User's display name"),
        "roles": _req(TYPE_LIST, "Roles of the user", TYPE_STRING),
    })


def clarity_code_block() -> Block:
    return Block({
        "code": _req(TYPE_STRING, "Clarity code"),
        "description": _req(TYPE_STRING, "Description of the clarity code"),
        "costcenter": _req(TYPE_STRING, "Cost center for the clarity code"),
        "emails": _opt(TYPE_LIST, "List of emails related to the clarity code", TYPE_STRING),
        "tower": _req(TYPE_STRING, "Tower associated with the clarity code"),
    })


def participant_block() -> Block:
    return Block({
        "userinfo": _req(TYPE_LIST, elem=user_block()),
        "role": _req(TYPE_STRING, "Role of the participant"),
    })


def comment_block() -> Block:
    return Block({
        "id": _req(TYPE_STRING, "Comment ID"),
        "createdat": _req(TYPE_STRING, "Comment creation timestamp"),
        "modifiedat": _req(TYPE_STRING, "Comment modification timestamp"),
        "author": _req(TYPE_LIST, elem=user_block()),
        "content": _req(TYPE_STRING, "Comment content"),
        "loginuser": _req(TYPE_LIST, elem=user_block()),
        "iseditable": _opt(TYPE_BOOL, "Whether the comment is editable"),
        "iseditmode": _opt(TYPE_BOOL, "Whether the comment is in edit mode"),
        "contentcopy": _opt(TYPE_STRING, "A copy of the content"),
    })


def attachment_block() -> Block:
    return Block({
        "url": _req(TYPE_STRING, "URL of the attachment"),
        "uploaddatetime": _req(TYPE_STRING, "Upload timestamp of the attachment"),
        "uploadedby": _req(TYPE_LIST, elem=user_block()),
        "filename": _req(TYPE_STRING, "Name of the attachment file"),
    })


def invoice_period_block() -> Block:
    return Block({
        "invoiceperiod": _req(TYPE_STRING, "Invoice period for the item"),
        "actualcost": _req(TYPE_FLOAT, "Actual cost of the billing item for the period"),
        "startdate": _req(TYPE_STRING, "Start date of the billing period"),
        "enddate": _req(TYPE_STRING, "End date of the billing period"),
    })


def billing_item_block() -> Block:
    return Block({
        "id": _req(TYPE_STRING, "Billing item ID"),
        "partitionkey": _req(TYPE_STRING, "Partition key for billing"),
        "subscriptionname": _req(TYPE_STRING, "Subscription name"),
        "invoiceperiods": _req(TYPE_LIST, "Invoice periods for the billing item", invoice_period_block()),
    })


def change_block() -> Block:
    return Block({
        "propertyname": _req(TYPE_STRING, "Name of the changed property"),
        "oldvalue": _opt(TYPE_MAP, "Old value of the changed property", TYPE_STRING),
        "newvalue": _opt(TYPE_MAP, "New value of the changed property", TYPE_STRING),
    })


def history_item_block() -> Block:
    return Block({
        "date": _req(TYPE_STRING, "Date of history item"),
        "author": _req(TYPE_LIST, elem=user_block()),
        "changes": _opt(TYPE_LIST, "List of changes made to the ticket", change_block()),
    })


def action_block() -> Block:
    return Block({
        "actionname": _req(TYPE_STRING, "Name of the action"),
        "requiredproperties": _req(TYPE_LIST, "List of required properties for the action", TYPE_STRING),
        "type": _req(TYPE_STRING, "Type of action"),
        "minnumofcatalogitems": _req(TYPE_INT, "Minimum number of catalog items for the action"),
    })


def catalog_field_block() -> Block:
    return Block({
        "key": _req(TYPE_STRING, "Key for the catalog field"),
        "label": _req(TYPE_STRING, "Label for the catalog field"),
        "value": _req(TYPE_STRING, "Value of the catalog field"),
        "ismandatory": _req(TYPE_BOOL, "Indicates if the catalog field is mandatory"),
        "lookupfunction": _opt(TYPE_STRING, "Look-up function for the catalog field"),
        "lookupvalues": _opt(TYPE_LIST, "List of possible look-up values for the catalog field", TYPE_STRING),
        "hintvalue": _opt(TYPE_STRING, "Hint value for the catalog field"),
        "inputtype": _opt(TYPE_STRING, "Input type for the catalog field (e.g., text, number)"),
        "inputformat": _opt(TYPE_STRING, "Input format for the catalog field"),
        "enabletoggleby": _opt(TYPE_STRING, "Field that enables or disables this catalog field based on its value"),
        "disabled": _opt(TYPE_STRING, "Indicates if the field is disabled"),
    })


def catalog_item_block() -> Block:
    return Block({
        "name": _req(TYPE_STRING, "Name of the catalog item"),
        "resourcename": _req(TYPE_STRING, "The resource name associated with the catalog item"),
        "label": _req(TYPE_STRING, "Label for the catalog item"),
        "catalogitemdisclaimer": _opt(TYPE_STRING, "Disclaimer associated with the catalog item"),
        "catalogitemcloudplatform": _req(TYPE_STRING, "Cloud platform associated with the catalog item (e.g., Azure)"),
        "tickettypes": _req(TYPE_LIST, "List of ticket types for this catalog item", TYPE_STRING),
        "active": _req(TYPE_BOOL, "Indicates if the catalog item is active"),
        "catalogitemversion": _req(TYPE_INT, "Version of the catalog item"),
        "catalogitemcreated": _req(TYPE_STRING, "Creation timestamp of the catalog item"),
        "catalogitemapproved": _req(TYPE_STRING, "Approval timestamp of the catalog item"),
        "catalogitemapprovedby": _req(TYPE_STRING, "User who approved the catalog item"),
        "catalogitemicon": _opt(TYPE_STRING, "Icon associated with the catalog item"),
        "catalogfields": _req(TYPE_LIST, "List of catalog fields for the item", catalog_field_block()),
        "variables": _req(TYPE_MAP, "Variables associated with the catalog item", TYPE_STRING),
        "resourcecontractname": _opt(TYPE_STRING, "Name of the resource contract associated with the catalog item"),
        "resourcecontainername": _opt(TYPE_STRING, "Name of the resource container for the catalog item"),
    })


def ticket_schema() -> Block:
    """Top-level attributes of the ticket data source; ``id`` is the only input."""
    return Block({
        "id": _req(TYPE_STRING, "Unique identifier for the ticket"),
        "ticketno": _opt(TYPE_INT, "Ticket number"),
        "title": _opt(TYPE_STRING, "Ticket title"),
        "description": _opt(TYPE_STRING, "Ticket description"),
        "status": _opt(TYPE_STRING, "Current status of the ticket"),
        "substatus": _opt(TYPE_STRING, "Sub-status of the ticket"),
        "statuschangedat": _opt(TYPE_STRING, "Timestamp when the status was last changed"),
        "createdat": _opt(TYPE_STRING, "Timestamp when the ticket was created"),
        "createdby": _opt(TYPE_LIST, "Details of the user who created the ticket", user_block()),
        "changedby": _opt(TYPE_LIST, "Details of the user who last changed the ticket", user_block()),
        "claritycode": _opt(TYPE_LIST, "Clarity code details", clarity_code_block()),
        "participants": _opt(TYPE_LIST, "List of participants in the ticket", participant_block()),
        "comments": _opt(TYPE_LIST, "List of comments on the ticket", comment_block()),
        "attachments": _opt(TYPE_LIST, "List of attachments for the ticket", attachment_block()),
        "billingitems": _opt(TYPE_LIST, "List of billing items related to the ticket", billing_item_block()),
        "historyitems": _opt(TYPE_LIST, "History of changes to the ticket", history_item_block()),
        "validactions": _opt(TYPE_LIST, "List of valid actions that can be performed on the ticket", action_block()),
        "editableproperties": _opt(TYPE_LIST, "List of editable properties of the ticket", TYPE_STRING),
        "mandatoryproperties": _opt(TYPE_LIST, "List of mandatory properties for the ticket", TYPE_STRING),
        "etag": _opt(TYPE_STRING, "ETag for the ticket"),
        "type": _opt(TYPE_STRING, "Ticket type"),
        "serviceprovider": _opt(TYPE_STRING, "Service provider name"),
        "cloudplatform": _opt(TYPE_STRING, "Cloud platform for the ticket"),
        "catalogitems": _opt(TYPE_LIST, "Catalog items associated with the ticket", catalog_item_block()),
    })
