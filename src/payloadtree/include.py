"""Include directives derived from a normalized relationship tree.

An include directive is a pure-structure nested dict such as
``{"comments": {"author": {}}}``: every key is a relationship to traverse
and an empty dict means nothing further below it. Relationships whose
every node is being destroyed or disassociated are left out, since there
is nothing to load for them afterwards.
"""

from __future__ import annotations

from collections.abc import Mapping

from payloadtree.schemas.nodes import Node, RelationshipValue

IncludeDirective = dict[str, "IncludeDirective"]


def deep_merge(target: IncludeDirective, source: Mapping) -> IncludeDirective:
    """Merge ``source`` into ``target`` in place and return ``target``.

    Keys missing from ``target`` receive a copy of the ``source`` subtree;
    keys present in both are merged level by level. Nothing is overwritten.
    """
    pending = [(target, source)]
    while pending:
        into, branch = pending.pop()
        for name, child in branch.items():
            pending.append((into.setdefault(name, {}), child))
    return target


def _as_nodes(value: RelationshipValue) -> list[Node]:
    if value is None:
        return []
    if isinstance(value, Node):
        return [value]
    return list(value)


def include_directive(relationships: Mapping[str, RelationshipValue]) -> IncludeDirective:
    """Build the include directive for a relationships mapping.

    Every node under a kept relationship contributes its own sub-directive
    to that relationship's branch, so siblings in a to-many are unioned.

    Args:
        relationships: Relationship name to Node, list of Nodes, or None,
            as produced by the deserializer.

    Returns:
        The nested include directive.
    """
    directive: IncludeDirective = {}
    pending = [(directive, relationships)]
    while pending:
        into, level = pending.pop()
        for name, value in level.items():
            nodes = _as_nodes(value)
            # Vacuously true for an empty to-many list or an explicit null
            if all(node.removed for node in nodes):
                continue
            branch = into.setdefault(name, {})
            pending.extend((branch, node.relationships) for node in nodes)
    return directive


def include_paths(directive: Mapping) -> list[str]:
    """Flatten a directive into sorted dotted paths, e.g. ``["author", "comments.author"]``.

    Intermediate paths are implied by their descendants and omitted, matching
    the JSON:API ``include`` query parameter.
    """
    paths: list[str] = []
    pending = [(name, branch) for name, branch in directive.items()]
    while pending:
        path, branch = pending.pop()
        if branch:
            pending.extend((f"{path}.{name}", child) for name, child in branch.items())
        else:
            paths.append(path)
    return sorted(paths)
