"""
Report Renderer and writers.

Turns an ordered list of stored question documents into a numbered report
and writes it to PDF, with an optional CSV table and metadata side file.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List

import pandas as pd
from fpdf import FPDF
from fpdf.enums import XPos, YPos

from src.errors import ReportWriteError
from src.models.question import DEFAULT_TITLE, DOCUMENT_FIELD

logger = logging.getLogger(__name__)


@dataclass
class ReportDocument:
    """A rendered report: centered title plus numbered body lines."""
    title: str
    lines: List[str] = field(default_factory=list)


def _question_title(document: dict) -> str:
    return document.get(DOCUMENT_FIELD, {}).get("Title", DEFAULT_TITLE)


def render(title: str, results: List[dict]) -> ReportDocument:
    """
    Render results as numbered lines, 1..N, in the order given.

    No sorting or filtering happens here. An empty result list yields a
    title-only document.
    """
    lines = [
        f"{index}. {_question_title(document)}"
        for index, document in enumerate(results, start=1)
    ]
    return ReportDocument(title=title, lines=lines)


def _latin1(text: str) -> str:
    # Core PDF fonts only cover Latin-1
    return text.encode("latin-1", "replace").decode("latin-1")


class PdfReportWriter:
    """
    Writes ReportDocuments to PDF files using fpdf2.
    """

    def __init__(self, font: str = "Helvetica", title_size: int = 16, body_size: int = 12):
        self.font = font
        self.title_size = title_size
        self.body_size = body_size

    def write(self, document: ReportDocument, path: str) -> str:
        """
        Write document to `path`.

        Returns:
            The path written

        Raises:
            ReportWriteError: If the PDF cannot be built or saved
        """
        try:
            pdf = FPDF()
            pdf.set_creation_date(datetime(2000, 1, 1, tzinfo=timezone.utc))
            pdf.add_page()

            pdf.set_font(self.font, size=self.title_size)
            pdf.multi_cell(
                0, 10, _latin1(document.title), align="C",
                new_x=XPos.LMARGIN, new_y=YPos.NEXT
            )
            pdf.ln(5)

            pdf.set_font(self.font, size=self.body_size)
            for line in document.lines:
                pdf.multi_cell(0, 7, _latin1(line), new_x=XPos.LMARGIN, new_y=YPos.NEXT)

            pdf.output(path)
        except Exception as e:
            logger.error(f"Failed to write PDF report {path}: {e}")
            raise ReportWriteError(f"Cannot write report {path}: {e}") from e

        logger.info(f"PDF report written: {path} ({len(document.lines)} lines)")
        return path


def export_table(results: List[dict], csv_path: str) -> str:
    """
    Save results as a CSV table (Rank, Id, Title, ViewCount, Score, Tags).

    Raises:
        ReportWriteError: If the file cannot be written
    """
    rows = []
    for rank, document in enumerate(results, start=1):
        question = document.get(DOCUMENT_FIELD, {})
        rows.append({
            "Rank": rank,
            "Id": question.get("Id"),
            "Title": question.get("Title", DEFAULT_TITLE),
            "ViewCount": question.get("ViewCount"),
            "Score": question.get("Score"),
            "Tags": " ".join(question.get("Tags", []))
        })

    df = pd.DataFrame(rows, columns=["Rank", "Id", "Title", "ViewCount", "Score", "Tags"])

    try:
        df.to_csv(csv_path, index=False)
    except OSError as e:
        logger.error(f"Failed to write table {csv_path}: {e}")
        raise ReportWriteError(f"Cannot write table {csv_path}: {e}") from e

    logger.info(f"Table saved to {csv_path} ({len(df)} rows)")
    return csv_path


def export_metadata(document: ReportDocument, report_path: str, metadata_path: str) -> str:
    """Save a JSON side file describing the report."""
    metadata = {
        "title": document.title,
        "report": os.path.basename(report_path),
        "result_count": len(document.lines),
        "generated_at": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    }

    try:
        with open(metadata_path, 'w', encoding='utf-8') as f:
            json.dump(metadata, f, indent=2, ensure_ascii=False)
    except OSError as e:
        logger.error(f"Failed to write metadata {metadata_path}: {e}")
        raise ReportWriteError(f"Cannot write metadata {metadata_path}: {e}") from e

    logger.info(f"Metadata saved to {metadata_path}")
    return metadata_path
