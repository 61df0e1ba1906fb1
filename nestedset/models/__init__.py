"""Data models for nestedset."""

from .record import Record, id_key
from .settings import ConversionSettings
from .tree import TreeNode, Forest

__all__ = [
    "Record",
    "id_key",
    "ConversionSettings",
    "TreeNode",
    "Forest"
]
