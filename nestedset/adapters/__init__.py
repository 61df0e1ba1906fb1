"""Format adapters for nestedset."""

from pathlib import PurePath
from typing import Optional

from ..models import ConversionSettings
from .base import BaseAdapter, HierarchicalAdapter
from .delimited import CsvAdapter
from .json_adapter import JsonAdapter
from .edn_adapter import EdnAdapter

SUPPORTED_FORMATS = ("csv", "tsv", "json", "json_tree", "edn", "edn_tree")

_EXTENSIONS = {
    ".csv": "csv",
    ".tsv": "tsv",
    ".tab": "tsv",
    ".json": "json",
    ".edn": "edn",
}


def get_adapter(fmt: str, settings: Optional[ConversionSettings] = None) -> BaseAdapter:
    """
    Return the adapter for a format name.

    Args:
        fmt: One of SUPPORTED_FORMATS (case-insensitive)
        settings: Field names used by the hierarchical formats

    Raises:
        ValueError: If the format is not supported
    """
    name = fmt.strip().lower()
    if name == "csv":
        return CsvAdapter(",")
    if name == "tsv":
        return CsvAdapter("\t")
    if name in ("json", "json_tree"):
        return JsonAdapter(settings, nested=name == "json_tree")
    if name in ("edn", "edn_tree"):
        return EdnAdapter(settings, nested=name == "edn_tree")
    raise ValueError(f"Unsupported format '{fmt}'. Choose one of: {', '.join(SUPPORTED_FORMATS)}")


def detect_format(filename: str) -> Optional[str]:
    """Guess a format name from a file extension; None when unknown."""
    return _EXTENSIONS.get(PurePath(filename).suffix.lower())


__all__ = [
    "BaseAdapter",
    "HierarchicalAdapter",
    "CsvAdapter",
    "JsonAdapter",
    "EdnAdapter",
    "SUPPORTED_FORMATS",
    "get_adapter",
    "detect_format"
]
