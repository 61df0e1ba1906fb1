"""
Delimited text adapter for nestedset.

Handles CSV and TSV: a header row naming the fields, then one row per
record.
"""

import csv
import io
import json
from typing import Any, Dict, List

import edn_format

from ..errors import ParseError
from ..models import Record
from .base import BaseAdapter, is_array, plain_value


class CsvAdapter(BaseAdapter):
    """
    Adapter for delimiter-separated tables with a header row.
    """

    def __init__(self, delimiter: str = ","):
        """
        Args:
            delimiter: Single-character field separator ("," for CSV, "\\t" for TSV)
        """
        self.delimiter = delimiter

    def decode(self, data: bytes) -> List[Record]:
        text = self._decode_text(data)
        reader = csv.reader(io.StringIO(text, newline=''), delimiter=self.delimiter)
        records: List[Record] = []

        try:
            header = None
            for row in reader:
                if not row:
                    continue
                if header is None:
                    header = self._check_header(row, reader.line_num)
                    continue
                if len(row) != len(header):
                    raise ParseError(
                        f"expected {len(header)} fields, found {len(row)}",
                        row=reader.line_num
                    )
                records.append(Record(position=len(records) + 1, data=dict(zip(header, row))))
        except csv.Error as e:
            raise ParseError(str(e), row=reader.line_num) from e

        return records

    @staticmethod
    def _check_header(row: List[str], line_num: int) -> List[str]:
        header = [name.strip() for name in row]
        if any(not name for name in header):
            raise ParseError("header contains an empty field name", row=line_num)
        seen = set()
        for name in header:
            if name in seen:
                raise ParseError(f"header repeats field name '{name}'", row=line_num)
            seen.add(name)
        return header

    def encode(self, records: List[Record]) -> bytes:
        fieldnames: Dict[str, None] = {}
        for record in records:
            for name in record.data:
                fieldnames.setdefault(name, None)

        if not fieldnames:
            return b""

        buffer = io.StringIO()
        writer = csv.DictWriter(
            buffer,
            fieldnames=list(fieldnames),
            delimiter=self.delimiter,
            lineterminator="\n",
            restval=""
        )
        writer.writeheader()
        for record in records:
            writer.writerow({name: self._cell(value) for name, value in record.data.items()})

        return buffer.getvalue().encode('utf-8')

    @staticmethod
    def _cell(value: Any) -> Any:
        """Nested values are written as compact JSON text, keywords by name."""
        if isinstance(value, edn_format.Keyword):
            return value.name
        if isinstance(value, dict) or is_array(value):
            return json.dumps(value, ensure_ascii=False, default=plain_value)
        return value
