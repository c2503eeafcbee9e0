"""
Record Normalizer.

Maps raw Posts.xml attribute records onto the canonical Question schema.
"""

import html
import logging
import re
from typing import Optional, Union

from src.errors import MalformedRecordError
from src.models.question import (
    DEFAULT_LICENSE,
    DEFAULT_TITLE,
    Question,
    RawRecord,
)

logger = logging.getLogger(__name__)

# Tag lists come as "<a><b>" in older dumps and "|a|b|" in newer ones
_TAG_DELIMITERS = re.compile(r"[<>|]")


def _present(raw: RawRecord, name: str) -> Optional[str]:
    """Attribute value, or None when absent or empty."""
    value = raw.get(name)
    if value is None or value == "":
        return None
    return value


def _parse_int(raw: RawRecord, name: str, default: Optional[int] = None) -> Optional[int]:
    value = _present(raw, name)
    if value is None:
        return default
    try:
        return int(value.strip())
    except ValueError:
        raise MalformedRecordError(raw.get("Id"), name, value) from None


def _parse_tags(value: Optional[str]) -> list:
    if not value:
        return []
    return _TAG_DELIMITERS.sub(" ", value).split()


class RecordNormalizer:
    """
    Converts raw attribute records into Question objects.

    Pure: no I/O, no state. Missing optional attributes fall back to
    defaults; only an unparseable integer raises.
    """

    def normalize(self, raw: Union[RawRecord, Question]) -> Question:
        """
        Normalize one record.

        Args:
            raw: Attribute mapping from the source parser (a Question
                passes through unchanged)

        Returns:
            Question with coerced and defaulted fields

        Raises:
            MalformedRecordError: If Score is absent or non-numeric, or a
                present ViewCount/AnswerCount/CommentCount is non-numeric
        """
        if isinstance(raw, Question):
            return raw

        score = _parse_int(raw, "Score")
        if score is None:
            raise MalformedRecordError(raw.get("Id"), "Score", raw.get("Score"))

        return Question(
            Id=raw.get("Id"),
            PostTypeId=raw.get("PostTypeId"),
            AcceptedAnswerId=_present(raw, "AcceptedAnswerId"),
            CreationDate=raw.get("CreationDate"),
            Score=score,
            ViewCount=_parse_int(raw, "ViewCount"),
            Body=html.unescape(raw.get("Body") or ""),
            OwnerUserId=_present(raw, "OwnerUserId"),
            LastActivityDate=raw.get("LastActivityDate"),
            Title=_present(raw, "Title") or DEFAULT_TITLE,
            Tags=_parse_tags(raw.get("Tags")),
            AnswerCount=_parse_int(raw, "AnswerCount", default=0),
            CommentCount=_parse_int(raw, "CommentCount", default=0),
            ContentLicense=_present(raw, "ContentLicense") or DEFAULT_LICENSE
        )
