"""
Ranked Selector.

Filters normalized posts down to eligible questions and keeps the
top-N by view count.
"""

import logging
from typing import Any, Callable, List

from src.agents.ingestion import as_record_sequence
from src.agents.normalization import RecordNormalizer
from src.errors import MalformedRecordError
from src.models.question import QUESTION_POST_TYPE, Question

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10000
MALFORMED_POLICIES = ("abort", "skip")


def is_eligible(question: Question) -> bool:
    """A post is kept only if it is a question with a ViewCount."""
    return question.PostTypeId == QUESTION_POST_TYPE and question.ViewCount is not None


def view_count(question: Question) -> int:
    return question.ViewCount


class RankedSelector:
    """
    Normalize -> filter -> rank -> truncate.
    """

    def __init__(self, normalizer: RecordNormalizer = None, on_malformed: str = "abort"):
        """
        Initialize selector.

        Args:
            normalizer: Record normalizer (default: new RecordNormalizer)
            on_malformed: "abort" re-raises the first MalformedRecordError,
                "skip" logs and drops the offending record
        """
        if on_malformed not in MALFORMED_POLICIES:
            raise ValueError(
                f"Invalid on_malformed: {on_malformed}. Must be one of {MALFORMED_POLICIES}"
            )
        self.normalizer = normalizer or RecordNormalizer()
        self.on_malformed = on_malformed

    def select(
        self,
        records: Any,
        predicate: Callable[[Question], bool] = is_eligible,
        rank_key: Callable[[Question], int] = view_count,
        limit: int = DEFAULT_LIMIT
    ) -> List[Question]:
        """
        Select the top `limit` eligible questions.

        Args:
            records: Raw records and/or Questions (a single mapping is
                accepted and treated as one record)
            predicate: Eligibility test applied after normalization
            rank_key: Sort key, ordered descending
            limit: Maximum number of questions returned

        Returns:
            Questions sorted by rank_key descending; ties keep source order

        Raises:
            MalformedRecordError: On the first malformed record when
                on_malformed="abort"
            ValueError: If limit is negative
        """
        if limit < 0:
            raise ValueError(f"Invalid limit: {limit}. Must be >= 0")

        records = as_record_sequence(records)

        normalized = []
        skipped = 0
        for raw in records:
            try:
                normalized.append(self.normalizer.normalize(raw))
            except MalformedRecordError as e:
                if self.on_malformed == "abort":
                    logger.error(f"Aborting batch on malformed record: {e}")
                    raise
                logger.warning(f"Skipping malformed record: {e}")
                skipped += 1

        eligible = [q for q in normalized if predicate(q)]

        # sorted() is stable, reverse=True included
        ranked = sorted(eligible, key=rank_key, reverse=True)[:limit]

        logger.info(
            f"Selected {len(ranked)} of {len(eligible)} eligible questions "
            f"({len(records)} records, {skipped} skipped, limit {limit})"
        )
        return ranked
