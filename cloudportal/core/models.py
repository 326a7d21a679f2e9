"""Ticket domain records decoded from the Cloudportal API.

Every record is a frozen dataclass built once by ``from_dict`` and never
mutated. Missing or ``null`` scalars take zero values, missing collections
become empty, and the nullable catalog fields stay ``None``. A value of the
wrong JSON type raises ``DecodeError``.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, TypeVar

from cloudportal.core.portal.exceptions import DecodeError

T = TypeVar("T")


def _mapping(data: Any, where: str) -> Mapping[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise DecodeError(f"{where}: expected object, got {type(data).__name__}")
    return data


def _str(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise DecodeError(f"{key}: expected string, got {type(value).__name__}")
    return value


def _opt_str(data: Mapping[str, Any], key: str) -> Optional[str]:
    if data.get(key) is None:
        return None
    return _str(data, key)


def _int(data: Mapping[str, Any], key: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DecodeError(f"{key}: expected integer, got {type(value).__name__}")
    if isinstance(value, float):
        if not value.is_integer():
            raise DecodeError(f"{key}: expected integer, got {value}")
        return int(value)
    return value


def _float(data: Mapping[str, Any], key: str) -> float:
    value = data.get(key)
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DecodeError(f"{key}: expected number, got {type(value).__name__}")
    return float(value)


def _bool(data: Mapping[str, Any], key: str) -> bool:
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise DecodeError(f"{key}: expected boolean, got {type(value).__name__}")
    return value


def _list(data: Mapping[str, Any], key: str, build: Callable[[Any], T]) -> List[T]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise DecodeError(f"{key}: expected array, got {type(value).__name__}")
    return [build(item) for item in value]


def _str_list(data: Mapping[str, Any], key: str) -> List[str]:
    def build(item: Any) -> str:
        if not isinstance(item, str):
            raise DecodeError(f"{key}: expected array of strings")
        return item
    return _list(data, key, build)


def _opt_str_list(data: Mapping[str, Any], key: str) -> Optional[List[str]]:
    if data.get(key) is None:
        return None
    return _str_list(data, key)


def _str_map(data: Mapping[str, Any], key: str) -> Dict[str, str]:
    value = _mapping(data.get(key), key)
    result = {}
    for k, v in value.items():
        if not isinstance(v, str):
            raise DecodeError(f"{key}.{k}: expected string, got {type(v).__name__}")
        result[k] = v
    return result


@dataclass(frozen=True)
class User:
    id: str = ""
    email: str = ""
    user_principal_name: str = ""
    display_name: str = ""
    roles: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "User":
        data = _mapping(data, "user")
        return cls(
            id=_str(data, "id"),
            email=_str(data, "email"),
            user_principal_name=_str(data, "userprincipalname"),
            display_name=_str(data, "displayname"),
            roles=_str_list(data, "roles"),
        )


@dataclass(frozen=True)
class Participant:
    user_info: User = field(default_factory=User)
    role: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "Participant":
        data = _mapping(data, "participant")
        return cls(user_info=User.from_dict(data.get("userinfo")), role=_str(data, "role"))


@dataclass(frozen=True)
class Comment:
    id: str = ""
    created_at: str = ""
    modified_at: str = ""
    author: User = field(default_factory=User)
    content: str = ""
    login_user: User = field(default_factory=User)
    is_editable: bool = False
    is_edit_mode: bool = False
    content_copy: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "Comment":
        data = _mapping(data, "comment")
        return cls(
            id=_str(data, "id"),
            created_at=_str(data, "createdat"),
            modified_at=_str(data, "modifiedat"),
            author=User.from_dict(data.get("author")),
            content=_str(data, "content"),
            login_user=User.from_dict(data.get("loginuser")),
            is_editable=_bool(data, "iseditable"),
            is_edit_mode=_bool(data, "IsEditMode"),
            content_copy=_str(data, "contentcopy"),
        )


@dataclass(frozen=True)
class Attachment:
    url: str = ""
    upload_datetime: str = ""
    uploaded_by: List[User] = field(default_factory=list)
    filename: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "Attachment":
        data = _mapping(data, "attachment")
        return cls(
            url=_str(data, "url"),
            upload_datetime=_str(data, "uploaddatetime"),
            uploaded_by=_list(data, "uploadedby", User.from_dict),
            filename=_str(data, "filename"),
        )


@dataclass(frozen=True)
class InvoicePeriod:
    """One billing period; ``invoice_period`` is the label it is keyed by."""
    invoice_period: str = ""
    actual_cost: float = 0.0
    start_date: str = ""
    end_date: str = ""

    @classmethod
    def from_dict(cls, data: Any, label: str = "") -> "InvoicePeriod":
        data = _mapping(data, "invoice period")
        return cls(
            invoice_period=label or _str(data, "invoiceperiod"),
            actual_cost=_float(data, "actualcost"),
            start_date=_str(data, "startdate"),
            end_date=_str(data, "enddate"),
        )


@dataclass(frozen=True)
class BillingItem:
    id: str = ""
    partition_key: str = ""
    subscription_name: str = ""
    invoice_periods: Dict[str, InvoicePeriod] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "BillingItem":
        data = _mapping(data, "billing item")
        periods = _mapping(data.get("invoiceperiods"), "invoiceperiods")
        return cls(
            id=_str(data, "id"),
            partition_key=_str(data, "partitionkey"),
            subscription_name=_str(data, "subscriptionname"),
            invoice_periods={
                label: InvoicePeriod.from_dict(period, label=label)
                for label, period in periods.items()
            },
        )


@dataclass(frozen=True)
class Change:
    property_name: str = ""
    old_value: Dict[str, str] = field(default_factory=dict)
    new_value: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "Change":
        data = _mapping(data, "change")
        return cls(
            property_name=_str(data, "propertyname"),
            old_value=_str_map(data, "oldvalue"),
            new_value=_str_map(data, "newvalue"),
        )


@dataclass(frozen=True)
class HistoryItem:
    date: str = ""
    author: List[User] = field(default_factory=list)
    changes: List[Change] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "HistoryItem":
        data = _mapping(data, "history item")
        return cls(
            date=_str(data, "date"),
            author=_list(data, "author", User.from_dict),
            changes=_list(data, "changes", Change.from_dict),
        )


@dataclass(frozen=True)
class Action:
    action_name: str = ""
    required_properties: List[str] = field(default_factory=list)
    type: str = ""
    min_num_of_catalog_items: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> "Action":
        data = _mapping(data, "action")
        return cls(
            action_name=_str(data, "actionname"),
            required_properties=_str_list(data, "requiredproperties"),
            type=_str(data, "type"),
            min_num_of_catalog_items=_int(data, "minnumofcatalogitems"),
        )


@dataclass(frozen=True)
class CatalogField:
    key: str = ""
    label: str = ""
    value: str = ""
    is_mandatory: bool = False
    lookup_function: Optional[str] = None
    lookup_values: Optional[List[str]] = None
    hint_value: Optional[str] = None
    input_type: Optional[str] = None
    input_format: Optional[str] = None
    enable_toggle_by: Optional[str] = None
    disabled: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "CatalogField":
        data = _mapping(data, "catalog field")
        return cls(
            key=_str(data, "key"),
            label=_str(data, "label"),
            value=_str(data, "value"),
            is_mandatory=_bool(data, "ismandatory"),
            lookup_function=_opt_str(data, "lookupfunction"),
            lookup_values=_opt_str_list(data, "lookupvalues"),
            hint_value=_opt_str(data, "hintvalue"),
            input_type=_opt_str(data, "inputType"),
            input_format=_opt_str(data, "inputformat"),
            enable_toggle_by=_opt_str(data, "enabletoggleby"),
            disabled=_opt_str(data, "disabled"),
        )


@dataclass(frozen=True)
class CatalogItem:
    name: str = ""
    resource_name: str = ""
    label: str = ""
    disclaimer: Optional[str] = None
    cloud_platform: str = ""
    ticket_types: List[str] = field(default_factory=list)
    active: bool = False
    version: int = 0
    created: str = ""
    approved: str = ""
    approved_by: str = ""
    icon: Optional[str] = None
    catalog_fields: List[CatalogField] = field(default_factory=list)
    variables: Dict[str, str] = field(default_factory=dict)
    resource_contract_name: Optional[str] = None
    resource_container_name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "CatalogItem":
        data = _mapping(data, "catalog item")
        return cls(
            name=_str(data, "name"),
            resource_name=_str(data, "resourcename"),
            label=_str(data, "label"),
            disclaimer=_opt_str(data, "catalogitemdisclaimer"),
            cloud_platform=_str(data, "catalogitemcloudplatform"),
            ticket_types=_str_list(data, "tickettypes"),
            active=_bool(data, "active"),
            version=_int(data, "catalogitemversion"),
            created=_str(data, "catalogitemcreated"),
            approved=_str(data, "catalogitemapproved"),
            approved_by=_str(data, "catalogitemapprovedby"),
            icon=_opt_str(data, "catalogitemicon"),
            catalog_fields=_list(data, "catalogfields", CatalogField.from_dict),
            variables=_str_map(data, "variables"),
            resource_contract_name=_opt_str(data, "resourcecontractname"),
            resource_container_name=_opt_str(data, "resourcecontainername"),
        )


@dataclass(frozen=True)
class ClarityCode:
    code: str = ""
    description: str = ""
    cost_center: str = ""
    emails: List[str] = field(default_factory=list)
    tower: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "ClarityCode":
        data = _mapping(data, "clarity code")
        return cls(
            code=_str(data, "code"),
            description=_str(data, "description"),
            cost_center=_str(data, "costcenter"),
            emails=_str_list(data, "emails"),
            tower=_str(data, "tower"),
        )


@dataclass(frozen=True)
class Ticket:
    id: str = ""
    ticket_no: int = 0
    title: str = ""
    description: str = ""
    status: str = ""
    sub_status: str = ""
    status_changed_at: str = ""
    created_at: str = ""
    created_by: User = field(default_factory=User)
    changed_by: User = field(default_factory=User)
    clarity_code: ClarityCode = field(default_factory=ClarityCode)
    participants: List[Participant] = field(default_factory=list)
    comments: List[Comment] = field(default_factory=list)
    attachments: List[Attachment] = field(default_factory=list)
    billing_items: List[BillingItem] = field(default_factory=list)
    history_items: List[HistoryItem] = field(default_factory=list)
    valid_actions: List[Action] = field(default_factory=list)
    editable_properties: List[str] = field(default_factory=list)
    mandatory_properties: List[str] = field(default_factory=list)
    etag: str = ""
    type: str = ""
    service_provider: str = ""
    cloud_platform: str = ""
    catalog_items: List[CatalogItem] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "Ticket":
        """Build a ticket from the decoded API document.

        Raises:
            DecodeError: If a field has the wrong JSON type
        """
        data = _mapping(data, "ticket")
        return cls(
            id=_str(data, "id"),
            ticket_no=_int(data, "ticketno"),
            title=_str(data, "title"),
            description=_str(data, "description"),
            status=_str(data, "status"),
            sub_status=_str(data, "substatus"),
            status_changed_at=_str(data, "statuschangedat"),
            created_at=_str(data, "createdat"),
            created_by=User.from_dict(data.get("createdby")),
            changed_by=User.from_dict(data.get("changedby")),
            clarity_code=ClarityCode.from_dict(data.get("claritycode")),
            participants=_list(data, "participants", Participant.from_dict),
            comments=_list(data, "comments", Comment.from_dict),
            attachments=_list(data, "attachments", Attachment.from_dict),
            billing_items=_list(data, "billingitems", BillingItem.from_dict),
            history_items=_list(data, "historyitems", HistoryItem.from_dict),
            valid_actions=_list(data, "validactions", Action.from_dict),
            editable_properties=_str_list(data, "editableproperties"),
            mandatory_properties=_str_list(data, "mandatoryproperties"),
            etag=_str(data, "etag"),
            type=_str(data, "type"),
            service_provider=_str(data, "serviceprovider"),
            cloud_platform=_str(data, "cloudplatform"),
            catalog_items=_list(data, "catalogitems", CatalogItem.from_dict),
        )
