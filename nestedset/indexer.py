"""
Nested-set indexer for nestedset.

Assigns left, right and depth values to every node of a Forest using the
pre-order/post-order counter algorithm. The counter starts at 1 and carries
across roots, so ranges are disjoint over the whole forest and the largest
right value is twice the node count.
"""

import logging
from typing import Iterator, List, Tuple

from .models import Forest, TreeNode


class NestedSetIndexer:
    """
    Annotates a validated Forest with nested-set indices.

    Indexing cannot fail: the builder has already guaranteed a well-formed
    forest.
    """

    def __init__(self, start: int = 1):
        self.start = start
        self.last_value = start - 1

    def index(self, forest: Forest) -> Forest:
        """
        Assign indices in place and return the same forest.

        Siblings are visited in stored order; nothing is re-sorted.
        """
        counter = self.start

        for root in forest.roots:
            root.left = counter
            root.depth = 0
            counter += 1

            # Each frame holds a node and an iterator over its remaining children.
            stack: List[Tuple[TreeNode, Iterator[TreeNode]]] = [(root, iter(root.children))]
            while stack:
                node, children = stack[-1]
                child = next(children, None)
                if child is None:
                    node.right = counter
                    counter += 1
                    stack.pop()
                    continue

                child.left = counter
                child.depth = node.depth + 1
                counter += 1
                stack.append((child, iter(child.children)))

        self.last_value = counter - 1
        logging.debug(f"Indexed {len(forest.roots)} roots, counter ended at {self.last_value}")
        return forest
