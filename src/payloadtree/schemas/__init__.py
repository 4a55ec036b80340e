"""Pydantic schemas for inbound write documents and normalized edit trees."""

from payloadtree.schemas.jsonapi import (
    Document,
    Pointer,
    RawObject,
    RelationshipPayload,
)
from payloadtree.schemas.nodes import Node, NodeMeta, OperationKind, RootMeta

__all__ = [
    "Document",
    "Node",
    "NodeMeta",
    "OperationKind",
    "Pointer",
    "RawObject",
    "RelationshipPayload",
    "RootMeta",
]
