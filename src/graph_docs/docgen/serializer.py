"""Text form of Cypher values as shown in rendered result tables."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from neo4j.graph import Node, Path, Relationship

NULL = "<null>"


def _properties(entity: Node | Relationship) -> str:
    return "{" + ",".join(f"{k}:{serialize(v)}" for k, v in sorted(entity.items())) + "}"


def serialize(value: Any) -> str:
    """Render *value* the way result tables show it."""
    if value is None:
        return NULL
    if isinstance(value, Node):
        return f"Node[{value.element_id}]{_properties(value)}"
    if isinstance(value, Relationship):
        return f":{value.type}[{value.element_id}]{_properties(value)}"
    if isinstance(value, Path):
        parts: list[str] = [serialize(value.start_node)]
        for rel, node in zip(value.relationships, value.nodes[1:], strict=True):
            parts.append(serialize(rel))
            parts.append(serialize(node))
        return "[" + ",".join(parts) + "]"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return f'"{value}"'
    if isinstance(value, Mapping):
        return "{" + ", ".join(f"{k} -> {serialize(v)}" for k, v in value.items()) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(serialize(v) for v in value) + "]"
    return str(value)
