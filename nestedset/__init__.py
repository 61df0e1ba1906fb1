"""
nestedset: rebuild nested-set indices from flat parent/child tables.

Reads CSV, TSV, JSON or EDN rows that name each node's parent and writes
them back with left, right and depth values.
"""

__version__ = "0.1.0"
__author__ = "nestedset Project"

# Import main components
from .errors import NestedSetError, ParseError, EncodeError, DuplicateIdError, MissingParentError, CycleError
from .models import Record, TreeNode, Forest, ConversionSettings
from .builder import TreeBuilder
from .indexer import NestedSetIndexer
from .flatten import flatten_forest
from .adapters import BaseAdapter, get_adapter, detect_format
from .pipeline import rebuild, convert

__all__ = [
    "NestedSetError",
    "ParseError",
    "EncodeError",
    "DuplicateIdError",
    "MissingParentError",
    "CycleError",
    "Record",
    "TreeNode",
    "Forest",
    "ConversionSettings",
    "TreeBuilder",
    "NestedSetIndexer",
    "flatten_forest",
    "BaseAdapter",
    "get_adapter",
    "detect_format",
    "rebuild",
    "convert"
]
