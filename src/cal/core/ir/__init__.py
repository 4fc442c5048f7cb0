"""
cal Intermediate Representation (IR) types.

Numbers, actions and the AST node set, plus their JSON form. All types
are re-exported from this package.
"""

from .actions import BinaryAction, Function, UnaryAction, UnaryActionKind
from .nodes import BinaryNode, Node, PlainNode, UnaryNode
from .number import EPSILON, INT_MAX, INT_MIN, Number, NumberKind
from .serialization import dump_node, load_node, node_to_dict

__all__ = [
    # Numbers
    "EPSILON",
    "INT_MAX",
    "INT_MIN",
    "Number",
    "NumberKind",
    # Actions
    "BinaryAction",
    "Function",
    "UnaryAction",
    "UnaryActionKind",
    # Nodes
    "BinaryNode",
    "Node",
    "PlainNode",
    "UnaryNode",
    # Serialization
    "dump_node",
    "load_node",
    "node_to_dict",
]
