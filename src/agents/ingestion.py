"""
Source Parser.

Reads a StackExchange Posts.xml export into flat attribute records.
"""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, List, Union

from defusedxml import DefusedXmlException
from defusedxml import ElementTree as ET

from src.errors import ParseError
from src.models.question import RawRecord

logger = logging.getLogger(__name__)

CONTAINER_TAG = "posts"
ROW_TAG = "row"


def as_record_sequence(obj: Any) -> List[Any]:
    """
    Coerce a parser result into a list of records.

    A container holding a single row may surface as one mapping instead of
    a list of mappings; downstream stages always receive a list.
    """
    if obj is None:
        return []
    if isinstance(obj, Mapping):
        return [obj]
    return list(obj)


def parse_posts(xml_text: Union[str, bytes]) -> List[RawRecord]:
    """
    Parse Posts.xml markup into raw attribute records.

    Args:
        xml_text: Full document markup

    Returns:
        One dict of attribute name -> string per <row>, in source order

    Raises:
        ParseError: If the markup is malformed, the root is not <posts>,
            or there are no <row> elements
    """
    try:
        root = ET.fromstring(xml_text)
    except (ET.ParseError, DefusedXmlException) as e:
        raise ParseError(f"Malformed XML: {e}") from e

    if root.tag != CONTAINER_TAG:
        raise ParseError(
            f"Expected <{CONTAINER_TAG}> root element, found <{root.tag}>"
        )

    rows = root.findall(ROW_TAG)
    if not rows:
        raise ParseError(f"No <{ROW_TAG}> elements found under <{CONTAINER_TAG}>")

    # Only flat attributes are consumed; nested elements are ignored
    records = as_record_sequence(dict(row.attrib) for row in rows)
    logger.debug(f"Parsed {len(records)} rows")
    return records


def read_posts(path: Union[str, Path]) -> List[RawRecord]:
    """Read and parse a Posts.xml file from disk."""
    try:
        with open(path, "rb") as f:
            xml_bytes = f.read()
    except OSError as e:
        logger.error(f"Failed to read source file {path}: {e}")
        raise ParseError(f"Cannot read source file {path}: {e}") from e

    records = parse_posts(xml_bytes)
    logger.info(f"Parsed {len(records)} rows from {path}")
    return records
