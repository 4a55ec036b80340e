"""Normalized edit-operation models produced from a write document.

A ``Node`` describes one edit on one resource: its ``meta`` (type, temp-id
and the requested operation), its ``attributes`` and its nested
``relationships``. The tree is built once per request and never mutated,
so every model here is frozen.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict

_HTTP_METHODS = {
    "POST": "create",
    "PUT": "update",
    "PATCH": "update",
    "DELETE": "destroy",
}


class OperationKind(str, Enum):
    """The edit requested for a resource."""

    CREATE = "create"
    UPDATE = "update"
    DESTROY = "destroy"
    DISASSOCIATE = "disassociate"

    @classmethod
    def from_http_method(cls, method: str | None) -> OperationKind | None:
        """Map an HTTP verb to the root operation; unmapped verbs yield None."""
        if not isinstance(method, str):
            return None
        value = _HTTP_METHODS.get(method.upper())
        return cls(value) if value else None

    @classmethod
    def parse(cls, token: str | None) -> OperationKind | None:
        """Normalize a relationship ``method`` token, or None if unrecognized."""
        if not isinstance(token, str):
            return None
        try:
            return cls(token.strip().lower())
        except ValueError:
            return None

    @property
    def removes(self) -> bool:
        """True for operations that drop the related resource from the graph."""
        return self in (OperationKind.DESTROY, OperationKind.DISASSOCIATE)


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    def to_dict(self) -> dict[str, Any]:
        """Return plain, JSON-serializable data with enums as their values."""
        return self.model_dump(mode="json")


class RootMeta(FrozenModel):
    """Meta for the primary resource: its type, temp-id and verb-derived method."""

    type: str | None = None
    temp_id: str | None = None
    method: OperationKind | None = None


class NodeMeta(FrozenModel):
    """Meta for a related resource, taken from the pointer that reached it."""

    jsonapi_type: str | None = None
    temp_id: str | None = None
    method: OperationKind | None = None


class Node(FrozenModel):
    """One edit operation on one related resource."""

    meta: NodeMeta
    attributes: dict[str, Any] = {}
    relationships: dict[str, RelationshipValue] = {}

    @property
    def removed(self) -> bool:
        return self.meta.method is not None and self.meta.method.removes


# A single node (to-one), a list of nodes (to-many), or None when the
# client sent ``data: null`` to clear the relationship.
RelationshipValue = Union[Node, list[Node], None]

Node.model_rebuild()
