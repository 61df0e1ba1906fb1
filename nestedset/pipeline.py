"""
Conversion pipeline for nestedset.

decode -> build -> index -> flatten -> encode, all on one thread with no
I/O beyond the bytes handed in and returned.
"""

import logging
from typing import List, Optional, Sequence

from .adapters import get_adapter
from .builder import TreeBuilder
from .config import config
from .flatten import flatten_forest
from .indexer import NestedSetIndexer
from .models import ConversionSettings, Record


def rebuild(records: Sequence[Record], settings: Optional[ConversionSettings] = None) -> List[Record]:
    """
    Rebuild nested-set indices for a sequence of flat records.

    Args:
        records: Records in input order
        settings: Field names; the configured ones are used when omitted

    Returns:
        Output records in pre-order, annotated with left/right/depth

    Raises:
        NestedSetError: If the records do not describe a valid forest
    """
    settings = settings or config.conversion_settings()
    forest = TreeBuilder(settings).build(records)
    NestedSetIndexer().index(forest)
    output = flatten_forest(forest, settings)
    logging.debug(f"Rebuilt {len(output)} records across {len(forest.roots)} trees")
    return output


def convert(data: bytes, source_format: str, target_format: Optional[str] = None,
            settings: Optional[ConversionSettings] = None) -> bytes:
    """
    Convert a flat tree description into nested-set annotated output.

    Args:
        data: Input document
        source_format: Input format name (see adapters.SUPPORTED_FORMATS)
        target_format: Output format name; defaults to the input format
        settings: Field names; the configured ones are used when omitted

    Returns:
        The encoded output document

    Raises:
        ValueError: If a format name is not supported
        NestedSetError: If the input is malformed or not a valid forest
    """
    settings = settings or config.conversion_settings()
    target_format = target_format or source_format

    reader = get_adapter(source_format, settings)
    writer = get_adapter(target_format, settings)

    records = reader.decode(data)
    output = rebuild(records, settings)

    roots = sum(1 for record in output if record.is_root(settings.parent_field))
    logging.info(f"Converted {len(output)} records ({roots} roots) from {source_format} to {target_format}")
    return writer.encode(output)
