"""
Pipeline Orchestrator.

Runs the load job (XML -> MongoDB) and the report job (MongoDB -> PDFs).
The two jobs are independent and may run in separate invocations.
"""

import logging
import os
from dataclasses import dataclass
from functools import partial
from typing import Callable, Dict, List

from pymongo.collection import Collection

from src.agents.analytics import above_average_view_count, keyword_title_search
from src.agents.ingestion import read_posts
from src.agents.loading import BulkLoader
from src.agents.reporting import (
    PdfReportWriter,
    export_metadata,
    export_table,
    render,
)
from src.agents.selection import RankedSelector
from src.errors import ReportWriteError
from src.models.question import to_stored_document
from src.utils.storage import MongoStore
import config.settings as settings

logger = logging.getLogger(__name__)


@dataclass
class ReportSpec:
    """One report: output file, title line, and the query producing its rows."""
    file_name: str
    title: str
    query: Callable[[Collection], List[dict]]


def default_reports(keywords: List[str]) -> List[ReportSpec]:
    return [
        ReportSpec(
            file_name=settings.ABOVE_AVERAGE_REPORT_FILE,
            title=settings.ABOVE_AVERAGE_REPORT_TITLE,
            query=above_average_view_count
        ),
        ReportSpec(
            file_name=settings.KEYWORD_REPORT_FILE,
            title=settings.KEYWORD_REPORT_TITLE,
            query=partial(keyword_title_search, keywords=keywords)
        ),
    ]


class PipelineOrchestrator:
    """
    Coordinates:
    load:   parse -> normalize/select -> replace collection
    report: for each report, query -> render -> write
    """

    def __init__(
        self,
        store_factory: Callable[[], MongoStore],
        collection_name: str = settings.MONGO_COLLECTION,
        output_dir: str = str(settings.OUTPUT_ROOT),
        max_questions: int = settings.MAX_QUESTIONS,
        on_malformed: str = settings.ON_MALFORMED_RECORD,
        reports: List[ReportSpec] = None,
        export_tables: bool = settings.EXPORT_TABLES
    ):
        """
        Initialize pipeline orchestrator.

        Args:
            store_factory: Returns a new, unconnected MongoStore
            collection_name: Questions collection
            output_dir: Directory for report files
            max_questions: Cap on questions loaded
            on_malformed: Malformed record policy ("abort" or "skip")
            reports: Reports to produce (default: above-average and keyword)
            export_tables: Also write CSV and metadata next to each PDF
        """
        self.store_factory = store_factory
        self.collection_name = collection_name
        self.output_dir = output_dir
        self.max_questions = max_questions
        self.export_tables = export_tables

        self.on_malformed = on_malformed
        self.loader = BulkLoader()
        self.pdf_writer = PdfReportWriter()
        self.reports = reports if reports is not None else default_reports(settings.TITLE_KEYWORDS)

    def run_load(self, source_path: str) -> int:
        """
        Replace the questions collection with the top questions from source.

        Parsing and selection finish before the store is touched, so a
        ParseError or MalformedRecordError leaves the collection as it was.

        Returns:
            Number of documents inserted
        """
        logger.info(f"Starting load job from {source_path}")

        # on_malformed is validated only when a load runs
        selector = RankedSelector(on_malformed=self.on_malformed)

        records = read_posts(source_path)
        questions = selector.select(records, limit=self.max_questions)
        documents = [to_stored_document(q) for q in questions]
        logger.info(f"Prepared {len(documents)} question documents")

        store = self.store_factory()
        try:
            store.connect()
            inserted = self.loader.load(store, self.collection_name, documents)
        finally:
            store.close()

        logger.info(f"Load job complete: {inserted} documents in {self.collection_name}")
        return inserted

    def run_report(self) -> Dict[str, str]:
        """
        Produce every configured report from the stored collection.

        A failure writing one report does not stop the others; the job
        raises ReportWriteError at the end if any report failed.

        Returns:
            Mapping of report file name -> written path
        """
        logger.info("Starting report job")
        os.makedirs(self.output_dir, exist_ok=True)

        written = {}
        failed = []

        store = self.store_factory()
        try:
            store.connect()
            collection = store.collection(self.collection_name)

            for report in self.reports:
                logger.info(f"Running query for {report.file_name}")
                results = report.query(collection)
                logger.info(f"{report.file_name}: {len(results)} questions found")

                try:
                    written[report.file_name] = self._write_report(report, results)
                except ReportWriteError as e:
                    logger.error(f"Report {report.file_name} failed: {e}")
                    failed.append(report.file_name)
        finally:
            store.close()

        if failed:
            raise ReportWriteError(f"Failed reports: {', '.join(failed)}")

        logger.info(f"Report job complete: {len(written)} reports written")
        return written

    def _write_report(self, report: ReportSpec, results: List[dict]) -> str:
        document = render(report.title, results)
        pdf_path = os.path.join(self.output_dir, report.file_name)
        self.pdf_writer.write(document, pdf_path)

        if self.export_tables:
            stem = os.path.splitext(pdf_path)[0]
            export_table(results, f"{stem}.csv")
            export_metadata(document, pdf_path, f"{stem}_metadata.json")

        return pdf_path
