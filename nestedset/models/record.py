"""
Record model for nestedset.

A Record is one flat row of input or output. Adapters produce records in
stable input order; that order is the only source of sibling ordering.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


def id_key(value: Any) -> Optional[str]:
    """
    Normalize an id or parent id value for lookups.

    Integer and string forms of the same id compare equal, so `1` and `"1"`
    refer to the same node. Returns None for null or blank values.
    """
    if value is None:
        return None
    key = str(value).strip()
    return key or None


class Record(BaseModel):
    """
    A flat record: an ordered mapping of field names to values.

    The id and parent id columns are picked out by configured field name;
    every other field is opaque passthrough.
    """

    position: int = Field(
        ...,
        ge=1,
        description="1-based position of the record within its sequence"
    )

    data: Dict[str, Any] = Field(
        default_factory=dict,
        description="All fields of the row, in column order"
    )

    def get(self, name: str, default: Any = None) -> Any:
        """Return the value of a field, or `default` if it is absent."""
        return self.data.get(name, default)

    def key(self, name: str) -> Optional[str]:
        """Return the normalized lookup key of an id-like field."""
        return id_key(self.data.get(name))

    def is_root(self, parent_field: str) -> bool:
        """A record is a root iff its parent value is null or blank."""
        return self.key(parent_field) is None
