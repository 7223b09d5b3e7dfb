"""Renderers that normalize source documents into paginated PDFs.

Every supported format converges on a PaginatedDocument, so the splitter and
uploader only ever deal with PDF pages. Office Open XML formats are read
with their Python libraries and laid out with PyMuPDF; legacy binary
formats are handed to a headless LibreOffice.
"""

import csv
import io
import logging
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Protocol

import fitz  # PyMuPDF
import openpyxl
from docx import Document as DocxDocument
from docx.table import Table
from pptx import Presentation
from pptx.enum.shapes import MSO_SHAPE_TYPE

from src.corpus.ingestion.layout import TextPdfBuilder
from src.corpus.models.documents import PaginatedDocument

logger = logging.getLogger(__name__)

CELL_SEPARATOR = " | "


class ConversionError(Exception):
    """Raised when a renderer cannot convert its input to PDF."""

    pass


class Renderer(Protocol):
    """Strategy converting one source format into a paginated PDF."""

    def render(self, data: bytes) -> PaginatedDocument:
        ...


def _format_row(values: Iterable[object]) -> str:
    cells = ["" if value is None else str(value) for value in values]
    # Drop trailing empty cells so ragged sheets don't print separators
    while cells and not cells[-1].strip():
        cells.pop()
    return CELL_SEPARATOR.join(cells)


class PdfRenderer:
    """Parses PDF input directly; no conversion."""

    def render(self, data: bytes) -> PaginatedDocument:
        try:
            pdf = fitz.open(stream=data, filetype="pdf")
        except (RuntimeError, ValueError) as e:
            raise ConversionError(f"Invalid PDF document: {e}") from e

        if pdf.page_count == 0:
            pdf.close()
            raise ConversionError("PDF document has no pages")
        return PaginatedDocument(pdf=pdf)


class WordRenderer:
    """Renders .docx paragraphs and tables with python-docx, in body order."""

    def render(self, data: bytes) -> PaginatedDocument:
        try:
            document = DocxDocument(io.BytesIO(data))
        except Exception as e:
            raise ConversionError(f"Invalid Word document: {e}") from e

        builder = TextPdfBuilder()
        for block in document.iter_inner_content():
            if isinstance(block, Table):
                for row in block.rows:
                    builder.add_line(_format_row(cell.text for cell in row.cells))
            elif block.style is not None and (block.style.name or "").startswith("Heading"):
                builder.add_heading(block.text)
            else:
                builder.add_line(block.text)

        return PaginatedDocument(pdf=builder.build())


class SpreadsheetRenderer:
    """Renders .xlsx/.xlsm workbooks with openpyxl, one sheet per section."""

    def render(self, data: bytes) -> PaginatedDocument:
        try:
            workbook = openpyxl.load_workbook(io.BytesIO(data), read_only=True, data_only=True)
        except Exception as e:
            raise ConversionError(f"Invalid spreadsheet: {e}") from e

        builder = TextPdfBuilder()
        try:
            for sheet in workbook.worksheets:
                builder.new_page()
                builder.add_heading(sheet.title)
                for row in sheet.iter_rows(values_only=True):
                    builder.add_line(_format_row(row))
        finally:
            workbook.close()

        return PaginatedDocument(pdf=builder.build())


class CsvRenderer:
    """Renders delimited text the same way as a single worksheet."""

    def __init__(self, encoding: str = "utf-8-sig"):
        self._encoding = encoding

    def render(self, data: bytes) -> PaginatedDocument:
        try:
            text = data.decode(self._encoding)
            rows: List[List[str]] = list(csv.reader(io.StringIO(text)))
        except (UnicodeDecodeError, csv.Error) as e:
            raise ConversionError(f"Invalid CSV file: {e}") from e

        builder = TextPdfBuilder()
        builder.add_lines(_format_row(row) for row in rows)
        return PaginatedDocument(pdf=builder.build())


def _shape_lines(shapes) -> Iterator[str]:
    for shape in shapes:
        if shape.shape_type == MSO_SHAPE_TYPE.GROUP:
            yield from _shape_lines(shape.shapes)
        elif shape.has_text_frame:
            for paragraph in shape.text_frame.paragraphs:
                # python-pptx reports soft line breaks as vertical tabs
                yield from paragraph.text.split("\v")
        elif shape.has_table:
            for row in shape.table.rows:
                yield _format_row(cell.text for cell in row.cells)


class PresentationRenderer:
    """Renders .pptx slides with python-pptx, each slide on its own page."""

    def render(self, data: bytes) -> PaginatedDocument:
        try:
            presentation = Presentation(io.BytesIO(data))
        except Exception as e:
            raise ConversionError(f"Invalid presentation: {e}") from e

        builder = TextPdfBuilder()
        for slide in presentation.slides:
            builder.new_page()
            builder.add_lines(_shape_lines(slide.shapes))

        return PaginatedDocument(pdf=builder.build())


class LibreOfficeRenderer:
    """Converts legacy binary formats (.doc, .xls, .ppt, ...) via LibreOffice.

    The input is written to a temporary directory which is removed on every
    exit path.
    """

    def __init__(
        self,
        source_suffix: str,
        libreoffice_path: str = "soffice",
        timeout_seconds: int = 120,
    ):
        self._source_suffix = source_suffix
        self._libreoffice_path = libreoffice_path
        self._timeout_seconds = timeout_seconds

    def _resolve_binary(self) -> str:
        binary = shutil.which(self._libreoffice_path) or shutil.which("libreoffice")
        if not binary:
            raise ConversionError(
                f"LibreOffice is required to convert {self._source_suffix} files "
                f"but '{self._libreoffice_path}' was not found on PATH"
            )
        return binary

    def render(self, data: bytes) -> PaginatedDocument:
        binary = self._resolve_binary()
        work_dir = tempfile.mkdtemp(prefix="corpus-convert-")
        try:
            source_path = Path(work_dir) / f"source{self._source_suffix}"
            source_path.write_bytes(data)

            try:
                completed = subprocess.run(
                    [
                        binary, "--headless", "--convert-to", "pdf",
                        "--outdir", work_dir, str(source_path),
                    ],
                    capture_output=True,
                    timeout=self._timeout_seconds,
                )
            except subprocess.TimeoutExpired as e:
                raise ConversionError(
                    f"LibreOffice timed out after {self._timeout_seconds}s"
                ) from e

            output_path = Path(work_dir) / "source.pdf"
            if completed.returncode != 0 or not output_path.exists():
                stderr = completed.stderr.decode(errors="replace")[:500]
                raise ConversionError(
                    f"LibreOffice could not convert {self._source_suffix} file: {stderr}"
                )

            logger.debug(f"LibreOffice converted {self._source_suffix} input to PDF")
            return PdfRenderer().render(output_path.read_bytes())
        finally:
            shutil.rmtree(work_dir, ignore_errors=True)


def default_renderers(
    libreoffice_path: str = "soffice",
    timeout_seconds: int = 120,
) -> Dict[str, Renderer]:
    """Renderer for each supported lowercase file extension."""

    def legacy(suffix: str) -> LibreOfficeRenderer:
        return LibreOfficeRenderer(suffix, libreoffice_path, timeout_seconds)

    return {
        ".doc": legacy(".doc"),
        ".docx": WordRenderer(),
        ".dotx": legacy(".dotx"),
        ".xls": legacy(".xls"),
        ".xlsx": SpreadsheetRenderer(),
        ".xlsm": SpreadsheetRenderer(),
        ".xlsb": legacy(".xlsb"),
        ".csv": CsvRenderer(),
        ".ppt": legacy(".ppt"),
        ".pptx": PresentationRenderer(),
        ".pdf": PdfRenderer(),
    }
