"""Normalize JSON:API write payloads into edit-operation trees and include directives."""

from payloadtree.deserializer import Deserializer
from payloadtree.include import deep_merge, include_directive, include_paths
from payloadtree.schemas.nodes import Node, NodeMeta, OperationKind, RootMeta

__all__ = [
    "Deserializer",
    "Node",
    "NodeMeta",
    "OperationKind",
    "RootMeta",
    "deep_merge",
    "include_directive",
    "include_paths",
]
