"""
Unit tests for report rendering and the PDF/CSV writers.
"""

import json
from unittest.mock import patch

import pandas as pd
import pytest

from src.agents.reporting import (
    PdfReportWriter,
    ReportDocument,
    export_metadata,
    export_table,
    render,
)
from src.errors import ReportWriteError


def make_document(doc_id, title, view_count=1):
    return {"question": {"Id": doc_id, "Title": title, "ViewCount": view_count, "Score": 0, "Tags": ["t"]}}


def test_render_numbers_lines_in_order():
    results = [make_document("1", "Zebra"), make_document("2", "Apple"), make_document("3", "Mango")]

    document = render("Report", results)

    assert document.title == "Report"
    assert document.lines == ["1. Zebra", "2. Apple", "3. Mango"]


def test_render_empty_results_is_title_only():
    document = render("Nothing here", [])

    assert document == ReportDocument(title="Nothing here", lines=[])


def test_render_is_deterministic():
    results = [make_document(str(i), f"Question {i}") for i in range(50)]

    assert render("R", results) == render("R", results)
    assert render("R", results).lines[-1] == "50. Question 49"


def test_render_missing_title_uses_placeholder():
    document = render("R", [{"question": {"Id": "1"}}])

    assert document.lines == ["1. Sin título"]


def test_pdf_writer_creates_file(tmp_path):
    path = tmp_path / "informe1.pdf"
    document = render("Preguntas con palabras clave en el título", [make_document("1", "Yak 😀 shaving")])

    PdfReportWriter().write(document, str(path))

    assert path.read_bytes().startswith(b"%PDF")


def test_pdf_writer_empty_document(tmp_path):
    path = tmp_path / "empty.pdf"

    PdfReportWriter().write(render("Empty", []), str(path))

    assert path.exists()


def test_pdf_writer_unwritable_path(tmp_path):
    path = tmp_path / "missing_dir" / "report.pdf"

    with pytest.raises(ReportWriteError):
        PdfReportWriter().write(render("R", []), str(path))


def test_export_table(tmp_path):
    path = tmp_path / "informe1.csv"
    results = [make_document("7", "Second", 50), make_document("3", "First", 80)]

    export_table(results, str(path))

    df = pd.read_csv(path)
    assert list(df.columns) == ["Rank", "Id", "Title", "ViewCount", "Score", "Tags"]
    assert df["Rank"].tolist() == [1, 2]
    assert df["Title"].tolist() == ["Second", "First"]


def test_export_table_unwritable(tmp_path):
    with pytest.raises(ReportWriteError):
        export_table([], str(tmp_path / "nope" / "x.csv"))


def test_export_metadata(tmp_path):
    path = tmp_path / "informe1_metadata.json"
    document = render("Título", [make_document("1", "a"), make_document("2", "b")])

    export_metadata(document, str(tmp_path / "informe1.pdf"), str(path))

    metadata = json.loads(path.read_text(encoding="utf-8"))
    assert metadata["title"] == "Título"
    assert metadata["report"] == "informe1.pdf"
    assert metadata["result_count"] == 2


def test_pdf_writer_wraps_output_errors(tmp_path):
    with patch("src.agents.reporting.FPDF") as mock_fpdf:
        mock_fpdf.return_value.output.side_effect = PermissionError("read-only")

        with pytest.raises(ReportWriteError):
            PdfReportWriter().write(render("R", []), str(tmp_path / "r.pdf"))
