"""Host-side state for a single data source instance."""
from __future__ import annotations
from typing import Any, Dict, Mapping, Optional

from cloudportal.core.schema import Block


class ResourceData:
    """Inputs and computed state of one data source read, checked against a schema."""

    def __init__(self, schema: Block, inputs: Optional[Mapping[str, Any]] = None):
        self.schema = schema
        self.inputs: Dict[str, Any] = dict(inputs or {})
        unknown = set(self.inputs) - schema.attribute_names()
        if unknown:
            raise KeyError(f"unknown attributes: {', '.join(sorted(unknown))}")
        self._state: Dict[str, Any] = {}
        self._id = ""

    @property
    def id(self) -> str:
        return self._id

    @property
    def state(self) -> Dict[str, Any]:
        return dict(self._state)

    def get(self, key: str, default: Any = None) -> Any:
        if key in self._state:
            return self._state[key]
        return self.inputs.get(key, default)

    def set(self, key: str, value: Any) -> None:
        if key not in self.schema.schema:
            raise KeyError(f"attribute '{key}' is not declared in the schema")
        self._state[key] = value

    def set_id(self, value: str) -> None:
        self._id = value
