"""
Question data model.

Canonical question entity loaded into the store, plus the raw record type
produced by the XML parser.
"""

from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional

# Attribute name -> raw string value, one per <row> element
RawRecord = Dict[str, str]

QUESTION_POST_TYPE = "1"
DEFAULT_TITLE = "Sin título"
DEFAULT_LICENSE = "Desconocida"

# Field under which a question is nested in the stored document
DOCUMENT_FIELD = "question"


@dataclass
class Question:
    """
    A post normalized into the canonical schema.
    ViewCount is None when the source row had no ViewCount attribute.
    """
    Id: str
    PostTypeId: str
    CreationDate: Optional[str]
    Score: int
    ViewCount: Optional[int]
    LastActivityDate: Optional[str]
    AcceptedAnswerId: Optional[str] = None
    Body: str = ""
    OwnerUserId: Optional[str] = None
    Title: str = DEFAULT_TITLE
    Tags: List[str] = field(default_factory=list)
    AnswerCount: int = 0
    CommentCount: int = 0
    ContentLicense: str = DEFAULT_LICENSE

    def to_dict(self) -> dict:
        """Convert to a BSON/JSON-serializable dict in canonical field order."""
        data = asdict(self)
        order = [
            "Id", "PostTypeId", "AcceptedAnswerId", "CreationDate", "Score",
            "ViewCount", "Body", "OwnerUserId", "LastActivityDate", "Title",
            "Tags", "AnswerCount", "CommentCount", "ContentLicense"
        ]
        return {key: data[key] for key in order}


def to_stored_document(question: Question) -> dict:
    """Wrap a question under the `question` field for storage."""
    return {DOCUMENT_FIELD: question.to_dict()}
