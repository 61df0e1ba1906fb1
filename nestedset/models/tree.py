"""
In-memory tree models for nestedset.

TreeNodes are created by the TreeBuilder, annotated in place by the
NestedSetIndexer and read by the flattening step.
"""

from typing import Iterator, List, Optional, Tuple
from pydantic import BaseModel, Field

from .record import Record


class TreeNode(BaseModel):
    """
    One node of a Forest, wrapping the record it was built from.
    """

    record: Record = Field(
        ...,
        description="The originating record (shared by reference)"
    )

    children: List['TreeNode'] = Field(
        default_factory=list,
        description="Child nodes in input order"
    )

    left: Optional[int] = Field(None, description="Nested-set left value, unset before indexing")
    right: Optional[int] = Field(None, description="Nested-set right value, unset before indexing")
    depth: Optional[int] = Field(None, description="Distance from the root; roots are 0")

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def descendant_count(self) -> int:
        """Number of descendants, derived from the assigned indices."""
        if self.left is None or self.right is None:
            raise ValueError("Node has not been indexed")
        return (self.right - self.left - 1) // 2

    def __repr__(self) -> str:
        return (
            f"TreeNode(position={self.record.position}, left={self.left}, "
            f"right={self.right}, depth={self.depth}, children={len(self.children)})"
        )


TreeNode.model_rebuild()


class Forest(BaseModel):
    """
    Ordered sequence of root nodes, in order of first appearance.
    """

    roots: List[TreeNode] = Field(default_factory=list)

    def iter_preorder(self) -> Iterator[Tuple[TreeNode, Optional[TreeNode]]]:
        """
        Yield `(node, parent)` pairs in pre-order: parents before children,
        siblings in stored order. Roots are yielded with a parent of None.
        """
        stack: List[Tuple[TreeNode, Optional[TreeNode]]] = [(root, None) for root in reversed(self.roots)]
        while stack:
            node, parent = stack.pop()
            yield node, parent
            stack.extend((child, node) for child in reversed(node.children))

    def node_count(self) -> int:
        return sum(1 for _ in self.iter_preorder())

    def is_indexed(self) -> bool:
        return all(node.left is not None and node.right is not None for node, _ in self.iter_preorder())

    def __len__(self) -> int:
        return self.node_count()
