"""Normalizes a JSON:API write payload into a tree of edit operations.

Given a PATCH payload like::

    {
        "data": {
            "id": "1",
            "type": "posts",
            "attributes": {"title": "My Title"},
            "relationships": {
                "author": {"data": {"id": "1", "type": "authors"}}
            },
        },
        "included": [
            {"id": "1", "type": "authors", "attributes": {"name": "Joe Author"}}
        ],
    }

the deserializer exposes::

    deserializer.attributes
    # {"title": "My Title", "id": "1"}
    deserializer.meta
    # RootMeta(type="posts", temp_id=None, method=OperationKind.UPDATE)
    deserializer.relationships
    # {"author": Node(meta=..., attributes={"name": "Joe Author", "id": "1"}, relationships={})}
    deserializer.include_directive
    # {"author": {}}

Related resources are resolved against the ``included`` pool and expanded
to any depth. A resource already being expanded higher up the same path
is emitted with its attributes but without relationships, so cyclic
payloads still produce a finite tree.
"""

from __future__ import annotations

import logging
from collections.abc import Generator
from functools import cached_property
from typing import Any

from payloadtree.config import Settings, get_settings
from payloadtree.include import IncludeDirective, include_directive
from payloadtree.resolver import EMPTY_OBJECT, Identity, SideloadIndex, identity
from payloadtree.schemas.jsonapi import Document, Pointer, RawObject, RelationshipPayload
from payloadtree.schemas.nodes import (
    Node,
    NodeMeta,
    OperationKind,
    RelationshipValue,
    RootMeta,
)

logger = logging.getLogger(__name__)

Relationships = dict[str, RelationshipValue]


class Deserializer:
    """Parses one write request into attributes, meta, relationships and includes.

    Each instance owns its document and per-pass caches, so instances must
    not be shared across requests.

    Args:
        payload: The decoded request body.
        http_method: The request verb, used only for the root ``meta.method``.
        settings: Optional settings override; defaults to :func:`get_settings`.
    """

    def __init__(
        self,
        payload: Any,
        http_method: str | None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings if settings is not None else get_settings()
        self.document = Document.parse(payload, self.settings.envelope_key)
        self.http_method = http_method
        self._index = SideloadIndex(self.document.included)
        self._expanded: dict[Identity, Relationships] = {}

    # ------------------------------------------------------------------
    # Primary resource
    # ------------------------------------------------------------------

    @property
    def data(self) -> RawObject | None:
        return self.document.data

    @property
    def id(self) -> str | None:
        return self.data.id if self.data else None

    @cached_property
    def attributes(self) -> dict[str, Any]:
        """The primary resource's attributes plus its ``id``, if it has one."""
        if self.data is None:
            return {}
        attributes = dict(self.data.attributes)
        if self.id is not None:
            attributes["id"] = self.id
        return attributes

    @cached_property
    def meta(self) -> RootMeta:
        """Type, temp-id and the operation implied by the HTTP method."""
        return RootMeta(
            type=self.data.type if self.data else None,
            temp_id=self.data.temp_id if self.data else None,
            method=OperationKind.from_http_method(self.http_method),
        )

    @cached_property
    def relationships(self) -> Relationships:
        """The normalized relationship tree of the primary resource."""
        if self.data is None:
            return {}
        root = identity(self.data.type, self.data.id, self.data.temp_id)
        path = {root} if root is not None else set()
        return _run(self._process_relationships(self.data.relationships, path))

    @cached_property
    def include_directive(self) -> IncludeDirective:
        """Relationships to load for the response, omitting removed branches."""
        return include_directive(self.relationships)

    @property
    def force_includes(self) -> bool:
        """Whether the write's own include directive applies when none was requested."""
        return self.data is not None

    def include_for_render(self, requested: IncludeDirective | None = None) -> IncludeDirective:
        """Return the client's requested includes, falling back to the write's directive."""
        if requested:
            return requested
        if self.force_includes:
            return self.include_directive
        return {}

    def to_dict(self) -> dict[str, Any]:
        """Return all four views as plain, JSON-serializable data."""
        return {
            "meta": self.meta.to_dict(),
            "attributes": dict(self.attributes),
            "relationships": _dump_relationships(self.relationships),
            "include_directive": self.include_directive,
        }

    # ------------------------------------------------------------------
    # Expansion
    #
    # Each step is a generator that yields the sub-step it needs and is
    # resumed with that sub-step's result. ``_run`` drives them from an
    # explicit stack, so payload depth never reaches the interpreter's
    # recursion limit.
    # ------------------------------------------------------------------

    def _process_relationships(
        self,
        payloads: dict[str, RelationshipPayload],
        path: set[Identity],
    ) -> Generator[Any, Any, Relationships]:
        relationships: Relationships = {}
        for name, payload in payloads.items():
            if not payload.is_present:
                continue
            if payload.data is None:
                relationships[name] = None
            elif isinstance(payload.data, list):
                nodes = []
                for pointer in payload.data:
                    nodes.append((yield self._process_pointer(pointer, path)))
                relationships[name] = nodes
            else:
                relationships[name] = yield self._process_pointer(payload.data, path)
        return relationships

    def _process_pointer(
        self, pointer: Pointer, path: set[Identity]
    ) -> Generator[Any, Any, Node]:
        entry = self._index.resolve(pointer.type, pointer.id, pointer.temp_id)
        if entry is EMPTY_OBJECT and self.settings.log_unresolved:
            logger.debug(
                "No included resource for %s (id=%s, temp-id=%s)",
                pointer.type,
                pointer.id,
                pointer.temp_id,
            )

        attributes = dict(entry.attributes)
        if pointer.id is not None:
            attributes["id"] = pointer.id
        relationships = yield self._expand(entry, path)

        return Node(
            meta=NodeMeta(
                jsonapi_type=pointer.type,
                temp_id=pointer.temp_id,
                method=self._operation(pointer),
            ),
            attributes=attributes,
            relationships=relationships,
        )

    def _expand(self, entry: RawObject, path: set[Identity]) -> Generator[Any, Any, Relationships]:
        """Expand an included entry's relationships once per pass.

        The first expansion of an entry is memoized and reused wherever the
        entry is referenced again, including any cycle cut made beneath it.
        """
        key = identity(entry.type, entry.id, entry.temp_id)
        if key is None:
            return {}
        if key in path:
            logger.debug("Cycle detected at %s; not expanding its relationships", key)
            return {}
        if key in self._expanded:
            return self._expanded[key]

        path.add(key)
        try:
            relationships = yield self._process_relationships(entry.relationships, path)
        finally:
            path.discard(key)
        self._expanded[key] = relationships
        return relationships

    def _operation(self, pointer: Pointer) -> OperationKind | None:
        method = OperationKind.parse(pointer.method)
        if method is None and pointer.method is not None and self.settings.warn_unknown_methods:
            logger.warning(
                "Ignoring unknown relationship method %r on %s", pointer.method, pointer.type
            )
        return method


def _dump_relationships(relationships: Relationships) -> dict[str, Any]:
    dumped: dict[str, Any] = {}
    for name, value in relationships.items():
        if value is None:
            dumped[name] = None
        elif isinstance(value, list):
            dumped[name] = [node.to_dict() for node in value]
        else:
            dumped[name] = value.to_dict()
    return dumped


def _run(step: Generator[Any, Any, Any]) -> Any:
    """Drive a generator step and every sub-step it yields to completion."""
    stack = [step]
    value = None
    while stack:
        try:
            child = stack[-1].send(value)
        except StopIteration as stop:
            stack.pop()
            value = stop.value
        else:
            stack.append(child)
            value = None
    return value
