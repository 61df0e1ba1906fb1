"""
Tree builder for nestedset.

Reconstructs a Forest from an ordered sequence of flat records, validating
that ids are unique, that every parent exists and that parent links are
acyclic.
"""

import logging
from typing import Dict, List, Optional, Sequence

from .errors import CycleError, DuplicateIdError, MissingParentError, ParseError
from .models import ConversionSettings, Forest, Record, TreeNode


class TreeBuilder:
    """
    Builds a Forest from flat records.

    Building is two-pass: every node is indexed by id before any parent link
    is resolved, so a child may appear before its parent in the input.
    """

    def __init__(self, settings: Optional[ConversionSettings] = None):
        self.settings = settings or ConversionSettings()

    def build(self, records: Sequence[Record]) -> Forest:
        """
        Build a Forest from records in input order.

        Args:
            records: Records in stable input order

        Returns:
            Forest whose roots appear in input order, children likewise

        Raises:
            ParseError: A record has no id
            DuplicateIdError: Two records share an id
            MissingParentError: A parent id does not match any record
            CycleError: Parent links loop back on themselves
        """
        nodes = self._index_nodes(records)
        parents = self._resolve_parents(nodes)
        self._check_cycles(nodes, parents)

        roots: List[TreeNode] = []
        for key, node in nodes.items():
            parent_key = parents[key]
            if parent_key is None:
                roots.append(node)
            else:
                nodes[parent_key].children.append(node)

        logging.debug(f"Built forest of {len(nodes)} nodes with {len(roots)} roots")
        return Forest(roots=roots)

    def _index_nodes(self, records: Sequence[Record]) -> Dict[str, TreeNode]:
        """Create one node per record, keyed by id, preserving input order."""
        id_field = self.settings.id_field
        nodes: Dict[str, TreeNode] = {}

        for record in records:
            key = record.key(id_field)
            if key is None:
                raise ParseError(f"missing value for id field '{id_field}'", row=record.position)

            existing = nodes.get(key)
            if existing is not None:
                raise DuplicateIdError(record.get(id_field), existing.record.position, record.position)

            nodes[key] = TreeNode(record=record)

        return nodes

    def _resolve_parents(self, nodes: Dict[str, TreeNode]) -> Dict[str, Optional[str]]:
        """Map each node key to its parent's key (None for roots)."""
        parent_field = self.settings.parent_field
        parents: Dict[str, Optional[str]] = {}

        for key, node in nodes.items():
            parent_key = node.record.key(parent_field)
            if parent_key is not None and parent_key not in nodes:
                raise MissingParentError(node.record.get(self.settings.id_field), node.record.get(parent_field))
            parents[key] = parent_key

        return parents

    def _check_cycles(self, nodes: Dict[str, TreeNode], parents: Dict[str, Optional[str]]) -> None:
        """
        Walk parent links from every node; each walk must reach a root.

        A walk is bounded by the node count. Nodes already known to reach a
        root end a walk early, which keeps the whole check linear.
        """
        limit = len(nodes)
        grounded = set()

        for start in nodes:
            path: List[str] = []
            on_path = set()
            current: Optional[str] = start

            while current is not None and current not in grounded:
                if current in on_path or len(path) > limit:
                    raise CycleError(nodes[current].record.get(self.settings.id_field))
                path.append(current)
                on_path.add(current)
                current = parents[current]

            grounded.update(path)
