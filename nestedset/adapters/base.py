"""
Base adapter interface for nestedset.

This module defines the abstract interface that all format adapters must
implement, plus the shared flattening and nesting logic used by the
hierarchical formats.
"""

import collections.abc
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

import edn_format

from ..errors import EncodeError, ParseError
from ..models import ConversionSettings, Record, id_key


class BaseAdapter(ABC):
    """
    Abstract base class for all format adapters.

    Each adapter converts between the bytes of one external format (CSV,
    JSON, EDN, ...) and an ordered list of Record objects.
    """

    @abstractmethod
    def decode(self, data: bytes) -> List[Record]:
        """
        Decode input bytes into records.

        Args:
            data: Raw input bytes

        Returns:
            Records numbered from 1 in stable input order

        Raises:
            ParseError: If the input is malformed
        """
        pass

    @abstractmethod
    def encode(self, records: List[Record]) -> bytes:
        """
        Encode records into output bytes, preserving their order.

        Args:
            records: Records to write

        Returns:
            Encoded output
        """
        pass

    @staticmethod
    def _decode_text(data: bytes) -> str:
        """Decode UTF-8 input, accepting a leading byte order mark."""
        try:
            return data.decode('utf-8-sig')
        except UnicodeDecodeError as e:
            raise ParseError(f"input is not valid UTF-8: {e}") from e


class HierarchicalAdapter(BaseAdapter):
    """
    Shared logic for tree-shaped formats.

    On decode, nested children are flattened in pre-order and each child's
    parent field is set to the id of the item that contains it. Top-level
    items keep whatever parent value they carry, so flat documents decode
    unchanged. On encode, nesting is rebuilt from the index fields.
    """

    def __init__(self, settings: Optional[ConversionSettings] = None, nested: bool = False):
        self.settings = settings or ConversionSettings()
        self.nested = nested

    def _flatten_items(self, items: Any) -> List[Record]:
        if items is None:
            return []
        if isinstance(items, (str, bytes)) or not isinstance(items, collections.abc.Sequence):
            raise ParseError(f"expected a list of objects at the top level, got {type(items).__name__}")

        records: List[Record] = []
        children_field = self.settings.children_field

        # Stack frames: (item, containing item's id, top-level ordinal). Reversed
        # pushes keep the pop order equal to document order.
        stack = [(item, None, ordinal) for ordinal, item in reversed(list(enumerate(items, start=1)))]
        while stack:
            item, parent_id, ordinal = stack.pop()
            if not isinstance(item, collections.abc.Mapping):
                raise ParseError(f"expected an object, got {type(item).__name__}", row=ordinal)

            data = {self._field_name(key): value for key, value in item.items()}
            children = data.pop(children_field, None) or []
            data = {name: self._field_value(value) for name, value in data.items()}
            if parent_id is not None:
                data[self.settings.parent_field] = parent_id

            if isinstance(children, (str, bytes)) or not isinstance(children, collections.abc.Sequence):
                raise ParseError(f"'{children_field}' must be a list", row=ordinal)
            if children and id_key(data.get(self.settings.id_field)) is None:
                raise ParseError(f"item with children has no '{self.settings.id_field}'", row=ordinal)

            records.append(Record(position=len(records) + 1, data=data))
            own_id = data.get(self.settings.id_field)
            stack.extend((child, own_id, ordinal) for child in reversed(list(children)))

        return records

    def _field_name(self, key: Any) -> str:
        """Map a source key to a field name. Subclasses unwrap format-specific keys."""
        return str(key)

    def _field_value(self, value: Any) -> Any:
        """Map a source value to a record value. Subclasses convert format-specific types."""
        return value

    def _nest_records(self, records: List[Record]) -> List[Dict[str, Any]]:
        """
        Rebuild nesting from flat records.

        Uses the left/right fields when every record carries them, and falls
        back to the parent field otherwise. The children field is reserved:
        a record that already carries it raises EncodeError.
        """
        left_field = self.settings.left_field
        right_field = self.settings.right_field
        children_field = self.settings.children_field

        for record in records:
            if children_field in record.data:
                raise EncodeError(
                    f"field '{children_field}' is reserved for nested children; "
                    f"configure a different children field",
                    position=record.position
                )

        if records and all(r.get(left_field) is not None and r.get(right_field) is not None for r in records):
            return self._nest_by_range(records, left_field, right_field, children_field)
        return self._nest_by_parent(records, children_field)

    @staticmethod
    def _nest_by_range(records: List[Record], left_field: str, right_field: str,
                       children_field: str) -> List[Dict[str, Any]]:
        roots: List[Dict[str, Any]] = []
        # Open ancestors as (right value, item) pairs.
        open_items: List[Any] = []

        for record in sorted(records, key=lambda r: int(r.get(left_field))):
            left = int(record.get(left_field))
            while open_items and open_items[-1][0] < left:
                open_items.pop()

            item = dict(record.data)
            item[children_field] = []
            if open_items:
                open_items[-1][1][children_field].append(item)
            else:
                roots.append(item)
            open_items.append((int(record.get(right_field)), item))

        return roots

    def _nest_by_parent(self, records: List[Record], children_field: str) -> List[Dict[str, Any]]:
        pairs = []
        by_id: Dict[str, Dict[str, Any]] = {}
        for record in records:
            item = dict(record.data)
            item[children_field] = []
            pairs.append((record, item))
            key = record.key(self.settings.id_field)
            if key is not None:
                by_id.setdefault(key, item)

        roots: List[Dict[str, Any]] = []
        for record, item in pairs:
            parent_key = record.key(self.settings.parent_field)
            parent = by_id.get(parent_key) if parent_key is not None else None
            if parent is None or parent is item:
                roots.append(item)
            else:
                parent[children_field].append(item)

        return roots


def is_array(value: Any) -> bool:
    """True for list-like values, excluding strings and bytes."""
    return isinstance(value, collections.abc.Sequence) and not isinstance(value, (str, bytes, bytearray))


def plain_value(value: Any) -> Any:
    """
    Fallback conversion for values a text format has no type for.

    EDN keywords become their name, sets become lists, dates use ISO format
    and anything else is written with str().
    """
    if isinstance(value, edn_format.Keyword):
        return value.name
    if isinstance(value, (set, frozenset)):
        return list(value)
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def dump_nested(value: Any, scalar: Callable[[Any], str], key: Callable[[Any], str],
                separator: str, indent: Optional[str] = None) -> str:
    """
    Serialize nested mappings and lists with an explicit stack.

    Trees of any depth are written without hitting the recursion limit.

    Args:
        value: Mapping, list or scalar to write
        scalar: Renders a non-container value
        key: Renders a mapping key, including its trailing key separator
        separator: Written between two entries of the same container
        indent: Indent unit; when set every entry goes on its own line

    Returns:
        The serialized text
    """
    parts: List[str] = []
    # Frames: [entries iterator, closing bracket, first entry pending]
    stack: List[List[Any]] = []

    def start(item: Any) -> None:
        if isinstance(item, collections.abc.Mapping):
            brackets, entries = "{}", ((key(k), v) for k, v in item.items())
        elif is_array(item):
            brackets, entries = "[]", (("", v) for v in item)
        else:
            parts.append(scalar(item))
            return
        if not len(item):
            parts.append(brackets)
            return
        parts.append(brackets[0])
        stack.append([entries, brackets[1], True])

    start(value)
    while stack:
        frame = stack[-1]
        entry = next(frame[0], None)
        if entry is None:
            stack.pop()
            if indent is not None:
                parts.append("\n" + indent * len(stack))
            parts.append(frame[1])
            continue

        if not frame[2]:
            parts.append(separator)
        frame[2] = False
        if indent is not None:
            parts.append("\n" + indent * len(stack))
        parts.append(entry[0])
        start(entry[1])

    return "".join(parts)
