"""JSON:API write-document models using Pydantic v2.

Models the inbound side of a JSON:API write: a primary ``data`` resource,
relationship payloads that point into a flat ``included`` pool, and the
pointers themselves. Parsing is lenient: every field degrades
to an empty or null value instead of failing validation, so a partially
specified payload still normalizes and rejection is left to a later
validation stage.

Reference: https://jsonapi.org/format/#crud
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_ENVELOPE_KEY = "_jsonapi"


def _coerce_identifier(value: Any) -> str | None:
    """Return ``value`` as a string identifier, or None if it cannot be one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, int):
        return str(value)
    return None


def _coerce_mapping(value: Any) -> dict:
    if isinstance(value, Mapping):
        return dict(value)
    return {}


class WireModel(BaseModel):
    """Base for all inbound wire models: frozen, alias-aware, extras ignored."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _require_mapping(cls, value: Any) -> Any:
        if isinstance(value, BaseModel):
            return value
        return _coerce_mapping(value)


# ---------------------------------------------------------------------------
# Relationship pointers
# ---------------------------------------------------------------------------


class Pointer(WireModel):
    """A resource linkage ``{type, id | temp-id}`` with an optional ``method``."""

    type: str | None = None
    id: str | None = None
    temp_id: str | None = Field(default=None, alias="temp-id")
    method: str | None = None

    @field_validator("type", "id", "temp_id", mode="before")
    @classmethod
    def _identifier(cls, value: Any) -> str | None:
        return _coerce_identifier(value)

    @field_validator("method", mode="before")
    @classmethod
    def _method(cls, value: Any) -> str | None:
        return value if isinstance(value, str) else None


class RelationshipPayload(WireModel):
    """The value of one entry in a ``relationships`` object.

    ``data`` is tri-state. When the key is missing entirely the relationship
    is not part of the write (``is_present`` is False); ``data: null`` is an
    explicit request to clear it; otherwise it holds one pointer (to-one) or
    a list of pointers (to-many).
    """

    data: Pointer | list[Pointer] | None = None

    @field_validator("data", mode="before")
    @classmethod
    def _data(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return [item for item in value if isinstance(item, (Mapping, Pointer))]
        if isinstance(value, (Mapping, Pointer)):
            return value
        return None

    @property
    def is_present(self) -> bool:
        return "data" in self.model_fields_set


# ---------------------------------------------------------------------------
# Resource objects
# ---------------------------------------------------------------------------


class RawObject(WireModel):
    """A full resource object, either the primary ``data`` or an ``included`` entry."""

    type: str | None = None
    id: str | None = None
    temp_id: str | None = Field(default=None, alias="temp-id")
    attributes: dict[str, Any] = Field(default_factory=dict)
    relationships: dict[str, RelationshipPayload] = Field(default_factory=dict)

    @field_validator("type", "id", "temp_id", mode="before")
    @classmethod
    def _identifier(cls, value: Any) -> str | None:
        return _coerce_identifier(value)

    @field_validator("attributes", "relationships", mode="before")
    @classmethod
    def _mapping(cls, value: Any) -> dict:
        return {str(key): item for key, item in _coerce_mapping(value).items()}


class Document(WireModel):
    """A JSON:API write document: primary ``data`` plus the ``included`` pool."""

    data: RawObject | None = None
    included: list[RawObject] = Field(default_factory=list)

    @field_validator("data", mode="before")
    @classmethod
    def _data(cls, value: Any) -> Any:
        if isinstance(value, (Mapping, RawObject)):
            return value
        return None

    @field_validator("included", mode="before")
    @classmethod
    def _included(cls, value: Any) -> list:
        if not isinstance(value, (list, tuple)):
            return []
        return [item for item in value if isinstance(item, (Mapping, RawObject))]

    @classmethod
    def parse(
        cls,
        payload: Any,
        envelope_key: str | None = DEFAULT_ENVELOPE_KEY,
    ) -> Document:
        """Parse a raw payload, unwrapping the enclosing envelope key if present.

        Args:
            payload: The decoded request body. Anything that is not a mapping
                parses as an empty document.
            envelope_key: Top-level wrapper key used by some client encodings.
                ``None`` disables unwrapping.

        Returns:
            The parsed Document.
        """
        if isinstance(payload, Mapping) and envelope_key and envelope_key in payload:
            payload = payload[envelope_key]
        return cls.model_validate(_coerce_mapping(payload))
