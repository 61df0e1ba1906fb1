"""
Error types for nestedset.

Every error is fatal to the conversion that raised it. Each one carries the
id or row needed to locate the offending record in the input.
"""

from typing import Any, Optional


class NestedSetError(Exception):
    """Base class for all conversion errors."""


class ParseError(NestedSetError):
    """
    Raised when input cannot be decoded into records.

    Attributes:
        row: Row (or element) number where the problem was found, if known
    """

    def __init__(self, message: str, row: Optional[int] = None):
        self.row = row
        if row is not None:
            message = f"row {row}: {message}"
        super().__init__(message)


class DuplicateIdError(NestedSetError):
    """Raised when two records share the same id."""

    def __init__(self, node_id: Any, first_position: int, position: int):
        self.node_id = node_id
        self.first_position = first_position
        self.position = position
        super().__init__(
            f"Duplicate id {node_id!r} at record {position} "
            f"(first seen at record {first_position})"
        )


class MissingParentError(NestedSetError):
    """Raised when a record references a parent id absent from the input."""

    def __init__(self, child_id: Any, parent_id: Any):
        self.child_id = child_id
        self.parent_id = parent_id
        super().__init__(f"Parent node not found: {parent_id!r} (referenced by {child_id!r})")


class CycleError(NestedSetError):
    """Raised when parent links form a cycle. `node_id` lies on the cycle."""

    def __init__(self, node_id: Any):
        self.node_id = node_id
        super().__init__(f"Cycle detected in parent links involving id {node_id!r}")


class EncodeError(NestedSetError):
    """
    Raised when records cannot be written in the target format.

    Attributes:
        position: Position of the offending record, if known
    """

    def __init__(self, message: str, position: Optional[int] = None):
        self.position = position
        if position is not None:
            message = f"record {position}: {message}"
        super().__init__(message)
