"""Tests for text extraction from uploaded files."""

from unittest.mock import MagicMock, patch

from docx import Document

from docqa.core.text.chunking import chunk_document_with_pages
from docqa.infrastructure.document_loaders import (
    CompositeLoader,
    DocxLoader,
    PDFLoader,
    TextLoader,
)


def test_text_loader(tmp_path):
    path = tmp_path / "Notes.MD"
    path.write_text("# Title\n\nBody text.", encoding="utf-8")

    document = TextLoader().load(path)

    assert TextLoader().supports(path)
    assert document.text == "# Title\n\nBody text."
    assert document.file_name == "Notes.MD"
    assert document.file_type == "md"
    assert document.page_breaks == []


def test_docx_loader_skips_empty_paragraphs(tmp_path):
    path = tmp_path / "policy.docx"
    doc = Document()
    doc.add_paragraph("First paragraph.")
    doc.add_paragraph("   ")
    doc.add_paragraph("Second paragraph.")
    doc.save(path)

    document = DocxLoader().load(path)

    assert document.text == "First paragraph.\n\nSecond paragraph."
    assert document.file_type == "docx"


def test_pdf_loader_records_page_breaks(tmp_path):
    path = tmp_path / "report.pdf"
    pages = [MagicMock(), MagicMock(), MagicMock()]
    pages[0].extract_text.return_value = "Page one. "
    pages[1].extract_text.return_value = None
    pages[2].extract_text.return_value = "Page three."

    with patch("docqa.infrastructure.document_loaders.pdf_loader.PdfReader") as reader:
        reader.return_value.pages = pages
        document = PDFLoader().load(path)

    assert document.text == "Page one.\n\n\n\nPage three."
    assert document.page_breaks == [11, 13]
    assert document.text[13:] == "Page three."
    assert document.file_type == "pdf"


def test_pdf_loader_blank_first_page_keeps_numbering(tmp_path):
    path = tmp_path / "scan.pdf"
    pages = [MagicMock(), MagicMock(), MagicMock()]
    pages[0].extract_text.return_value = ""
    pages[1].extract_text.return_value = "Second page text."
    pages[2].extract_text.return_value = "Third page text."

    with patch("docqa.infrastructure.document_loaders.pdf_loader.PdfReader") as reader:
        reader.return_value.pages = pages
        document = PDFLoader().load(path)

    assert document.page_breaks == [2, 21]

    chunks = chunk_document_with_pages(document.text, document.page_breaks)

    assert [c.page_number for c in chunks] == [2, 3]
    assert [c.text for c in chunks] == ["Second page text.", "Third page text."]


def test_composite_loader_dispatches_by_extension(tmp_path):
    path = tmp_path / "a.txt"
    path.write_text("plain", encoding="utf-8")
    loader = CompositeLoader()

    assert loader.load(path).text == "plain"
    assert loader.supports(tmp_path / "b.pdf")
    assert not loader.supports(tmp_path / "c.xlsx")
    assert loader.load(tmp_path / "c.xlsx") is None


def test_composite_loader_returns_none_on_failure(tmp_path):
    broken = tmp_path / "broken.docx"
    broken.write_bytes(b"not a zip archive")

    assert CompositeLoader().load(broken) is None
