"""
Pipeline error taxonomy.

Every failure that terminates a job is raised as one of these.
"""

from typing import Optional


class PipelineError(Exception):
    """Base class for all load/report job failures."""


class ParseError(PipelineError):
    """Source markup is malformed or lacks the posts/row structure."""


class MalformedRecordError(PipelineError):
    """A record failed required numeric coercion."""

    def __init__(self, record_id: Optional[str], field: str, value: Optional[str]):
        self.record_id = record_id
        self.field = field
        self.value = value
        super().__init__(
            f"Record {record_id!r}: field {field} has invalid integer value {value!r}"
        )


class StoreConnectionError(PipelineError):
    """The document store could not be reached or a read failed."""


class StoreWriteError(PipelineError):
    """The delete or insert phase of a bulk replace failed."""

    def __init__(self, phase: str, message: str):
        self.phase = phase
        super().__init__(f"{phase} phase failed: {message}")


class ReportWriteError(PipelineError):
    """A report output file could not be written."""
