"""
EDN adapter for nestedset.

Reads and writes a vector of maps keyed by keywords, e.g.

    [{:id "1" :parent_id nil :name "Clothing"
      :children [{:id "2" :name "Men's"}]}]

Nested children are flattened like the JSON adapter does.
"""

import collections.abc
import re
from typing import Any, List, Tuple

import edn_format

from ..errors import ParseError
from ..models import Record
from .base import HierarchicalAdapter, dump_nested, is_array

# Field names that can be written as EDN keywords; anything else is written as a string key.
KEYWORD_NAME = re.compile(r"^[A-Za-z*+!_?<>=.-][\w*+!?<>=./-]*$")

# Strings (possibly unterminated), comments, character literals, brackets, atoms, whitespace.
_TOKEN = re.compile(
    r'"(?:\\.|[^"\\])*"?'
    r'|;[^\n]*'
    r'|\\(?:newline|return|space|tab|u[0-9a-fA-F]{4}|.)'
    r'|[\[\](){}]'
    r'|[^\s,\[\](){}";\\]+'
    r'|[\s,]+',
    re.S
)


def split_elements(text: str) -> List[Tuple[int, str]]:
    """
    Split the top-level vector of an EDN document into (line, source) pairs.

    Only used to locate a syntax error, so the pieces are not expected to
    be valid EDN. A document that is not a vector or list is one element.
    """
    elements: List[Tuple[int, str]] = []
    depth = 0
    opened = False
    line = 1
    start = None
    start_line = 1

    for match in _TOKEN.finditer(text):
        token = match.group()
        token_line = line
        line += token.count("\n")
        if token[0] in ";," or token[0].isspace():
            continue

        if depth == 0:
            if opened:
                break
            if token not in ("[", "("):
                return [(token_line, text)]
            depth, opened = 1, True
            continue

        if depth == 1 and token in ("]", ")", "}"):
            break
        if start is None:
            start, start_line = match.start(), token_line
        if token in ("[", "(", "{"):
            depth += 1
            continue
        if token in ("]", ")", "}"):
            depth -= 1
        elif depth == 1 and token.startswith("#"):
            # Tag or discard prefix: the element continues with the next form
            continue
        if depth == 1:
            elements.append((start_line, text[start:match.end()]))
            start = None

    if start is not None:
        elements.append((start_line, text[start:]))
    return elements


class EdnAdapter(HierarchicalAdapter):
    """
    Adapter for EDN documents.

    Decoded maps and vectors become plain dicts and lists with string keys.
    Keyword values are kept, so they survive an EDN round trip.
    """

    def decode(self, data: bytes) -> List[Record]:
        text = self._decode_text(data)
        if not text.strip():
            return []

        try:
            parsed = edn_format.loads(text)
            return self._flatten_items(parsed)
        except edn_format.EDNDecodeError as e:
            raise self._syntax_error(text, e) from e
        except RecursionError as e:
            raise ParseError("EDN nesting is too deep to parse") from e

    @staticmethod
    def _syntax_error(text: str, error: Exception) -> ParseError:
        """Find the first top-level element that fails to parse on its own."""
        for ordinal, (line, source) in enumerate(split_elements(text), start=1):
            try:
                edn_format.loads(source)
            except edn_format.EDNDecodeError as element_error:
                return ParseError(f"invalid EDN at line {line}: {element_error}", row=ordinal)
        return ParseError(f"invalid EDN: {error}")

    def _field_name(self, key: Any) -> str:
        if isinstance(key, edn_format.Keyword):
            return key.name
        return str(key)

    def _field_value(self, value: Any) -> Any:
        if isinstance(value, collections.abc.Mapping):
            return {self._field_name(key): self._field_value(item) for key, item in value.items()}
        if is_array(value):
            return [self._field_value(item) for item in value]
        return value

    def encode(self, records: List[Record]) -> bytes:
        if self.nested:
            payload = self._nest_records(records)
        else:
            payload = [record.data for record in records]

        return dump_nested(payload, edn_format.dumps, self._edn_key, " ").encode('utf-8')

    @staticmethod
    def _edn_key(name: Any) -> str:
        if isinstance(name, str) and KEYWORD_NAME.match(name):
            name = edn_format.Keyword(name)
        return edn_format.dumps(name) + " "
