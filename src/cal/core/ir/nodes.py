"""
AST node types for cal expressions.

The node set is closed: PlainNode (a number), UnaryNode (one operand)
and BinaryNode (two operands). Each record carries a ``type``
discriminant so trees round-trip through JSON without ambiguity.

Nodes are frozen. A composite node owns its children, and children are
always built before their parent, so a tree never shares or cycles.

Long operator chains build trees as deep as the chain is long, so the
walks below use an explicit stack instead of recursion.
"""

from __future__ import annotations

from typing import Annotated, Any, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field

from cal.core.ir.actions import BinaryAction, UnaryAction
from cal.core.ir.number import Number

# Prefixes used when drawing a child below its parent.
BRANCH = "`-- "
CONTINUATION = "|   "
INDENT = "    "


class _NodeBase(BaseModel):
    """Shared tree walks for every node variant."""

    model_config = ConfigDict(frozen=True)

    _indent_last_child: ClassVar[bool] = False

    @property
    def label(self) -> str:
        raise NotImplementedError

    def children(self) -> tuple[Node, ...]:
        return ()

    def to_tree(self) -> list[str]:
        """Render the tree, one string per line.

        A child's first line gets the branch marker. Lines below a child
        keep a vertical bar, except below the right operand of a binary
        node, which are indented.
        """
        lines: list[str] = []
        # (node, prefix of its own line, prefix of the lines below it)
        stack: list[tuple[_NodeBase, str, str]] = [(self, "", "")]
        while stack:
            node, head, body = stack.pop()
            lines.append(head + node.label)
            kids = node.children()
            # Pushed in reverse so the first child is drawn first
            for index in range(len(kids) - 1, -1, -1):
                indented = node._indent_last_child and index == len(kids) - 1
                rest = INDENT if indented else CONTINUATION
                stack.append((kids[index], body + BRANCH, body + rest))
        return lines

    def size(self) -> int:
        """Number of nodes in the tree."""
        count = 0
        stack: list[_NodeBase] = [self]
        while stack:
            node = stack.pop()
            count += 1
            stack.extend(node.children())
        return count

    def __str__(self) -> str:
        return "\n".join(self.to_tree())


class PlainNode(_NodeBase):
    """A leaf holding a single number."""

    type: Literal["plain"] = "plain"
    value: Number = Field(description="The literal value")

    @classmethod
    def of(cls, value: Any) -> PlainNode:
        return cls(value=Number.of(value))

    @property
    def label(self) -> str:
        return str(self.value)


class UnaryNode(_NodeBase):
    """A unary action applied to one operand: -x, +x, sin(x)."""

    type: Literal["unary"] = "unary"
    action: UnaryAction
    operand: Node

    @property
    def label(self) -> str:
        return self.action.label

    def children(self) -> tuple[Node, ...]:
        return (self.operand,)


class BinaryNode(_NodeBase):
    """A binary action applied to a left and a right operand."""

    type: Literal["binary"] = "binary"
    left: Node
    action: BinaryAction
    right: Node

    _indent_last_child: ClassVar[bool] = True

    @property
    def label(self) -> str:
        return self.action.label

    def children(self) -> tuple[Node, ...]:
        return (self.left, self.right)


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

Node = Annotated[PlainNode | UnaryNode | BinaryNode, Field(discriminator="type")]

# Rebuild models for recursive forward references
UnaryNode.model_rebuild()
BinaryNode.model_rebuild()
