"""Side-load pool lookup for relationship pointers.

Pointers reference ``included`` entries by ``(type, id)`` or
``(type, temp-id)``. The pool is indexed once per document; a lookup
returns the earliest entry matching either key, which is what a front-to-back
scan of the pool would find. When two entries share an identifier the first
one wins.
"""

from __future__ import annotations

from collections.abc import Iterable

from payloadtree.schemas.jsonapi import RawObject

Identity = tuple[str | None, str, str]

EMPTY_OBJECT = RawObject()


def identity(type_: str | None, id_: str | None, temp_id: str | None) -> Identity | None:
    """Return the ``(type, kind, value)`` key, or None if there is no identifier.

    ``kind`` is ``"id"`` or ``"temp-id"`` so a persisted resource and a new
    one whose temp-id happens to share its text never collide.
    """
    if id_ is not None:
        return (type_, "id", id_)
    if temp_id is not None:
        return (type_, "temp-id", temp_id)
    return None


class SideloadIndex:
    """Index over the ``included`` pool of a single document.

    Args:
        included: The side-loaded resource objects, in payload order.
    """

    def __init__(self, included: Iterable[RawObject]) -> None:
        self._entries = list(included)
        self._by_id: dict[tuple[str | None, str], int] = {}
        self._by_temp_id: dict[tuple[str | None, str], int] = {}
        for position, entry in enumerate(self._entries):
            if entry.id is not None:
                self._by_id.setdefault((entry.type, entry.id), position)
            if entry.temp_id is not None:
                self._by_temp_id.setdefault((entry.type, entry.temp_id), position)

    def __len__(self) -> int:
        return len(self._entries)

    def find(
        self,
        type_: str | None,
        id_: str | None = None,
        temp_id: str | None = None,
    ) -> RawObject | None:
        """Return the first entry of ``type_`` matching ``id_`` or ``temp_id``."""
        hits = []
        if id_ is not None:
            hits.append(self._by_id.get((type_, id_)))
        if temp_id is not None:
            hits.append(self._by_temp_id.get((type_, temp_id)))
        positions = [hit for hit in hits if hit is not None]
        if not positions:
            return None
        return self._entries[min(positions)]

    def resolve(
        self,
        type_: str | None,
        id_: str | None = None,
        temp_id: str | None = None,
    ) -> RawObject:
        """Like :meth:`find`, but an unmatched pointer yields an empty placeholder."""
        entry = self.find(type_, id_, temp_id)
        return entry if entry is not None else EMPTY_OBJECT
