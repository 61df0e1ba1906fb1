"""
Conversion settings for nestedset.

Names the id/parent columns read from input and the index columns written
to output.
"""

from typing import List, Optional
from pydantic import BaseModel, Field, model_validator


class ConversionSettings(BaseModel):
    """
    Field names and output switches consumed by the builder, the flattening
    step and the hierarchical adapters.
    """

    id_field: str = Field("id", min_length=1, description="Field holding the unique record id")
    parent_field: str = Field("parent_id", min_length=1, description="Field holding the parent id; blank for roots")
    left_field: str = Field("left", min_length=1, description="Output field for the nested-set left value")
    right_field: str = Field("right", min_length=1, description="Output field for the nested-set right value")
    depth_field: str = Field("depth", min_length=1, description="Output field for the node depth (roots are 0)")
    emit_depth: bool = Field(True, description="Whether the depth field is written")

    position_field: Optional[str] = Field(
        None,
        min_length=1,
        description="Output field for the 1-based input position of the record"
    )
    parent_position_field: Optional[str] = Field(
        None,
        min_length=1,
        description="Output field for the input position of the parent record"
    )
    child_count_field: Optional[str] = Field(
        None,
        min_length=1,
        description="Output field for the number of direct children"
    )

    children_field: str = Field(
        "children",
        min_length=1,
        description="Key holding nested children in hierarchical formats"
    )

    @model_validator(mode="after")
    def check_distinct_names(self) -> "ConversionSettings":
        names = self.field_names()
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Field names must be distinct, repeated: {', '.join(duplicates)}")
        return self

    def field_names(self) -> List[str]:
        """All field names in use, including the enabled optional ones."""
        names = [self.id_field, self.parent_field, self.left_field, self.right_field, self.children_field]
        if self.emit_depth:
            names.append(self.depth_field)
        for optional in (self.position_field, self.parent_position_field, self.child_count_field):
            if optional is not None:
                names.append(optional)
        return names
