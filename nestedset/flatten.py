"""
Output projection for nestedset.

Walks an indexed Forest in pre-order and emits one output record per node.
"""

from typing import List, Optional

from .models import ConversionSettings, Forest, Record


def flatten_forest(forest: Forest, settings: Optional[ConversionSettings] = None) -> List[Record]:
    """
    Flatten an indexed forest into output records.

    Passthrough fields are copied unchanged; the index fields are then set
    (overwriting any input columns of the same name). Records are emitted
    parents before children, siblings in input order.

    Args:
        forest: Forest annotated by NestedSetIndexer
        settings: Output field names; defaults apply when omitted

    Returns:
        Output records numbered 1..N in emission order

    Raises:
        ValueError: If the forest has not been indexed
    """
    settings = settings or ConversionSettings()
    output: List[Record] = []

    for node, parent in forest.iter_preorder():
        if node.left is None or node.right is None:
            raise ValueError(f"Record {node.record.position} has not been indexed")

        data = dict(node.record.data)
        data[settings.left_field] = node.left
        data[settings.right_field] = node.right
        if settings.emit_depth:
            data[settings.depth_field] = node.depth
        if settings.position_field:
            data[settings.position_field] = node.record.position
        if settings.parent_position_field:
            data[settings.parent_position_field] = parent.record.position if parent is not None else None
        if settings.child_count_field:
            data[settings.child_count_field] = len(node.children)

        output.append(Record(position=len(output) + 1, data=data))

    return output
