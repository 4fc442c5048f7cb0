"""
JSON serialization of expression trees.

Each node record is tagged with its ``type`` discriminant ("plain",
"unary", "binary"); loading validates the tag against the closed node
set, so a loaded tree has exactly the variants and actions that were
dumped and evaluates identically.
"""

from __future__ import annotations

import logging

from pydantic import TypeAdapter, ValidationError

from cal.core.errors import NodeDumpError, NodeLoadError
from cal.core.ir.nodes import Node

logger = logging.getLogger(__name__)

_NODE_ADAPTER: TypeAdapter[Node] = TypeAdapter(Node)


def dump_node(node: Node, *, indent: int | None = 2) -> str:
    """Serialize a tree to JSON.

    Raises:
        NodeDumpError: If the tree is too deep to serialize.
    """
    try:
        return _NODE_ADAPTER.dump_json(node, indent=indent).decode()
    except (ValueError, RecursionError) as e:
        raise NodeDumpError(f"Cannot serialize expression tree: {e}") from e


def node_to_dict(node: Node) -> dict:
    """Serialize a tree to plain Python data."""
    try:
        return _NODE_ADAPTER.dump_python(node, mode="json")
    except (ValueError, RecursionError) as e:
        raise NodeDumpError(f"Cannot serialize expression tree: {e}") from e


def load_node(data: str | bytes | dict) -> Node:
    """Load a tree from JSON text or from already-decoded data.

    Raises:
        NodeLoadError: If the data is not a valid expression tree.
    """
    try:
        if isinstance(data, dict):
            node = _NODE_ADAPTER.validate_python(data)
        else:
            node = _NODE_ADAPTER.validate_json(data)
    except ValidationError as e:
        raise NodeLoadError(f"Invalid expression tree ({e.error_count()} errors)\n{e}") from e
    except RecursionError:
        raise NodeLoadError("Invalid expression tree: nested too deeply") from None

    logger.debug("Loaded expression tree with %d nodes", node.size())
    return node
