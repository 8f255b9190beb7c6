"""
Renovation Estimator - Document Extraction

Reduces uploaded project documents to something the AI service can read:
spreadsheets and PDFs become newline-delimited text, images are passed
through as base64 with their MIME type.
"""

import base64
import csv
import io
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

import openpyxl
import pdfplumber

from .errors import EmptyDocumentError, UnsupportedFileError

logger = logging.getLogger(__name__)


class FileKind(str, Enum):
    SPREADSHEET = "spreadsheet"
    PDF = "pdf"
    IMAGE = "image"
    TEXT = "text"


EXTENSION_KINDS = {
    '.xlsx': FileKind.SPREADSHEET,
    '.xlsm': FileKind.SPREADSHEET,
    '.csv': FileKind.SPREADSHEET,
    '.pdf': FileKind.PDF,
    '.png': FileKind.IMAGE,
    '.jpg': FileKind.IMAGE,
    '.jpeg': FileKind.IMAGE,
    '.gif': FileKind.IMAGE,
    '.webp': FileKind.IMAGE,
    '.heic': FileKind.IMAGE,
    '.heif': FileKind.IMAGE,
    '.txt': FileKind.TEXT,
    '.md': FileKind.TEXT,
}

IMAGE_MEDIA_TYPES = {
    '.png': 'image/png',
    '.jpg': 'image/jpeg',
    '.jpeg': 'image/jpeg',
    '.gif': 'image/gif',
    '.webp': 'image/webp',
    '.heic': 'image/heic',
    '.heif': 'image/heif',
}

# Binary Excel 97-2003 workbooks; openpyxl only reads the OOXML formats
LEGACY_SPREADSHEET_EXTENSIONS = ('.xls', '.xlt')

CSV_MEDIA_TYPES = ('text/csv', 'application/csv')


@dataclass
class ExtractedDocument:
    """Extraction output: text for documents, base64 payload for images."""
    kind: FileKind
    filename: str = "document"
    text: str = ""
    image_base64: Optional[str] = None
    image_mime_type: Optional[str] = None

    @property
    def is_image(self) -> bool:
        return self.kind == FileKind.IMAGE


def classify_file(filename: str, content_type: Optional[str] = None) -> FileKind:
    """
    Determine the file kind from the extension, falling back to the MIME type.

    Raises:
        UnsupportedFileError: If the file kind can't be ingested
    """
    suffix = Path(filename or "").suffix.lower()
    if suffix in EXTENSION_KINDS:
        return EXTENSION_KINDS[suffix]
    if suffix in LEGACY_SPREADSHEET_EXTENSIONS:
        raise UnsupportedFileError(
            f"Legacy Excel workbooks are not supported: {filename}. Save it as .xlsx or .csv"
        )

    content_type = (content_type or "").lower()
    if content_type.startswith("image/"):
        return FileKind.IMAGE
    if content_type == "application/pdf":
        return FileKind.PDF
    if content_type in CSV_MEDIA_TYPES + ("application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",):
        return FileKind.SPREADSHEET
    if content_type.startswith("text/"):
        return FileKind.TEXT

    raise UnsupportedFileError(f"Unsupported file type: {filename or content_type or 'unknown'}")


def _cell_text(value) -> str:
    if value is None:
        return ""
    return str(value).strip()


def is_csv(filename: str, content_type: Optional[str] = None) -> bool:
    """A .csv name wins; otherwise trust the upload's MIME type."""
    suffix = Path(filename or "").suffix.lower()
    if suffix in EXTENSION_KINDS:
        return suffix == '.csv'
    return (content_type or "").lower() in CSV_MEDIA_TYPES


def extract_spreadsheet_text(content: bytes, filename: str, content_type: Optional[str] = None) -> str:
    """Join spreadsheet rows into lines, cells separated by tabs."""
    lines = []

    if is_csv(filename, content_type):
        reader = csv.reader(io.StringIO(content.decode("utf-8-sig", errors="replace")))
        for row in reader:
            cells = [cell.strip() for cell in row]
            if any(cells):
                lines.append("\t".join(cells))
        return "\n".join(lines)

    workbook = openpyxl.load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    try:
        for sheet in workbook.worksheets:
            lines.append(f"# {sheet.title}")
            for row in sheet.iter_rows(values_only=True):
                cells = [_cell_text(value) for value in row]
                if any(cells):
                    lines.append("\t".join(cells).rstrip())
    finally:
        workbook.close()

    return "\n".join(lines)


def extract_pdf_text(content: bytes) -> str:
    """Concatenate the text of every PDF page."""
    pages = []
    with pdfplumber.open(io.BytesIO(content)) as pdf:
        for page in pdf.pages:
            pages.append(page.extract_text() or "")
    return "\n\n".join(pages)


def extract_document(
    filename: str,
    content: bytes,
    content_type: Optional[str] = None
) -> ExtractedDocument:
    """
    Extract an uploaded file.

    Args:
        filename: Original file name (used to classify the file)
        content: Raw file bytes
        content_type: MIME type reported by the upload, if any

    Returns:
        ExtractedDocument with text or an image payload

    Raises:
        UnsupportedFileError: If the file kind can't be ingested or parsed
        EmptyDocumentError: If a text document yields no text
    """
    kind = classify_file(filename, content_type)

    if kind == FileKind.IMAGE:
        if not content:
            raise EmptyDocumentError(f"{filename} is empty")
        suffix = Path(filename or "").suffix.lower()
        media_type = IMAGE_MEDIA_TYPES.get(suffix) or content_type or 'image/png'
        return ExtractedDocument(
            kind=kind,
            filename=filename,
            image_base64=base64.b64encode(content).decode('utf-8'),
            image_mime_type=media_type,
        )

    try:
        if kind == FileKind.SPREADSHEET:
            text = extract_spreadsheet_text(content, filename, content_type)
        elif kind == FileKind.PDF:
            text = extract_pdf_text(content)
        else:
            text = content.decode("utf-8", errors="replace")
    except Exception as e:
        logger.warning("Could not read %s: %s", filename, e)
        raise UnsupportedFileError(f"Could not read {filename}: {e}") from e

    if not text.strip():
        raise EmptyDocumentError(f"No text could be extracted from {filename}")

    logger.info("Extracted %d characters from %s (%s)", len(text), filename, kind.value)
    return ExtractedDocument(kind=kind, filename=filename, text=text)
