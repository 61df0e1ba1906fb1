"""
JSON adapter for nestedset.

Reads a top-level array of objects, flat or nested, and writes either a flat
array (`json`) or a nested tree (`json_tree`).
"""

import json
from typing import Any, List

from ..errors import ParseError
from ..models import Record
from .base import HierarchicalAdapter, dump_nested, plain_value


def _scalar(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, default=plain_value)


def _key(name: Any) -> str:
    if not isinstance(name, str):
        # Same key coercion as json.dumps: numbers, booleans and null by their JSON text
        name = json.dumps(name) if name is None or isinstance(name, (int, float)) else str(plain_value(name))
    return json.dumps(name, ensure_ascii=False) + ": "


def dumps(payload: Any) -> str:
    """Pretty-print like json.dumps(indent=2, ensure_ascii=False), at any nesting depth."""
    return dump_nested(payload, _scalar, _key, ",", indent="  ")


class JsonAdapter(HierarchicalAdapter):
    """
    Adapter for JSON documents.

    With `nested=True` output is a list of root objects, each carrying its
    children under the configured children field.
    """

    def decode(self, data: bytes) -> List[Record]:
        text = self._decode_text(data)
        if not text.strip():
            return []

        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as e:
            raise ParseError(f"invalid JSON: {e.msg}", row=e.lineno) from e
        except RecursionError as e:
            raise ParseError("JSON nesting is too deep to parse") from e

        return self._flatten_items(parsed)

    def encode(self, records: List[Record]) -> bytes:
        if self.nested:
            payload = self._nest_records(records)
        else:
            payload = [record.data for record in records]

        return dumps(payload).encode('utf-8')
