"""PDF validation, text extraction and per-document fact extraction.

Flow for one upload:
    bytes -> format check -> PdfDecoder.decode -> text_normalizer.normalize
          -> field_extractor (basic info, skills, experience)

Any failure is fatal for that document and raised as a ``DocumentError``
subclass. Retrying is the caller's business.
"""

import io
import logging
import re
from dataclasses import dataclass, field
from typing import Protocol

import pdfplumber
from pdfminer.pdfdocument import PDFEncryptionError, PDFPasswordIncorrect

from config import settings
from models.schemas.document import ExtractedDocument, ParsedResume
from services import field_extractor, text_normalizer
from services.exceptions import (
    CorruptDocumentError,
    DocumentError,
    EncryptedDocumentError,
    InvalidFormatError,
    NoTextError,
)

logger = logging.getLogger(__name__)
logging.getLogger("pdfminer").setLevel(logging.ERROR)

PDF_SIGNATURE = b"%PDF"
_VERSION_RE = re.compile(rb"%PDF-(\d+\.\d+)")


@dataclass
class DecodedPdf:
    text: str
    page_count: int
    info: dict[str, str] = field(default_factory=dict)
    format_version: str = ""


@dataclass
class PdfValidation:
    valid: bool
    reason: str | None = None


class DocumentDecoder(Protocol):
    def decode(self, data: bytes, max_pages: int | None = None) -> DecodedPdf: ...


def _is_encryption_failure(exc: BaseException) -> bool:
    """Walk the exception chain (and wrapped args) looking for a password error."""
    seen: set[int] = set()
    pending: list[BaseException] = [exc]
    while pending:
        current = pending.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        if isinstance(current, (PDFEncryptionError, PDFPasswordIncorrect)):
            return True
        message = str(current).lower()
        if "encrypt" in message or "password" in message:
            return True
        for nested in (current.__cause__, current.__context__, *current.args):
            if isinstance(nested, BaseException):
                pending.append(nested)
    return False


def _stringify_info(info: dict) -> dict[str, str]:
    result = {}
    for key, value in (info or {}).items():
        if isinstance(value, bytes):
            value = value.decode("utf-8", errors="ignore")
        result[str(key)] = str(value)
    return result


class PdfDecoder:
    """Document decode service backed by pdfplumber."""

    def decode(self, data: bytes, max_pages: int | None = None) -> DecodedPdf:
        try:
            with pdfplumber.open(io.BytesIO(data)) as pdf:
                if pdf.doc.encryption is not None:
                    raise EncryptedDocumentError("PDF is password protected or encrypted")
                pages = pdf.pages[:max_pages] if max_pages else pdf.pages
                texts = [page.extract_text() or "" for page in pages]
                page_count = len(pdf.pages)
                info = _stringify_info(pdf.metadata)
        except DocumentError:
            raise
        except Exception as e:
            if _is_encryption_failure(e):
                raise EncryptedDocumentError(
                    "PDF is password protected or encrypted", cause=e
                ) from e
            raise CorruptDocumentError(f"Failed to parse PDF: {e}", cause=e) from e

        version_match = _VERSION_RE.match(data[:16])
        return DecodedPdf(
            text="\n".join(texts),
            page_count=page_count,
            info=info,
            format_version=version_match.group(1).decode() if version_match else "",
        )


class DocumentPipeline:
    """Turns uploaded PDF bytes into an ``ExtractedDocument``."""

    def __init__(
        self,
        decoder: DocumentDecoder | None = None,
        min_bytes: int = settings.min_pdf_bytes,
        max_pages: int = settings.max_pdf_pages,
    ) -> None:
        self.decoder = decoder or PdfDecoder()
        self.min_bytes = min_bytes
        self.max_pages = max_pages or None

    def _check_format(self, data: bytes, filename: str = "") -> None:
        if not data or data[:4] != PDF_SIGNATURE:
            raise InvalidFormatError("Invalid PDF signature", filename=filename)
        if len(data) < self.min_bytes:
            raise InvalidFormatError("File too small to be a valid PDF", filename=filename)

    def validate(self, data: bytes) -> PdfValidation:
        """Fail-closed check: signature, minimum size and a one-page parse."""
        try:
            self._check_format(data)
            self.decoder.decode(data, max_pages=1)
        except DocumentError as e:
            return PdfValidation(valid=False, reason=e.message)
        except Exception as e:
            return PdfValidation(valid=False, reason=f"PDF validation failed: {e}")
        return PdfValidation(valid=True)

    def extract_raw_text(self, data: bytes, filename: str = "") -> DecodedPdf:
        try:
            decoded = self.decoder.decode(data, max_pages=self.max_pages)
        except DocumentError as e:
            e.details.setdefault("filename", filename)
            raise
        except Exception as e:
            raise CorruptDocumentError(
                f"Failed to extract text from PDF: {e}", filename=filename, cause=e
            ) from e

        if not decoded.text or not decoded.text.strip():
            raise NoTextError("PDF contains no readable text content", filename=filename)
        return decoded

    def extract_document(self, data: bytes, filename: str = "") -> ExtractedDocument:
        logger.info("Starting PDF text extraction: %s (%d bytes)", filename, len(data or b""))
        try:
            self._check_format(data, filename)
            decoded = self.extract_raw_text(data, filename)
            clean_text = text_normalizer.normalize(decoded.text)
            if not clean_text:
                raise NoTextError("PDF contains no readable text content", filename=filename)
        except DocumentError as e:
            logger.warning("PDF text extraction failed for %s: %s (%s)", filename, e.message, e.kind.value)
            raise

        document = ExtractedDocument(
            filename=filename,
            clean_text=clean_text,
            raw_text=decoded.text,
            page_count=decoded.page_count,
            word_count=text_normalizer.word_count(clean_text),
            char_count=len(clean_text),
            info=decoded.info,
            format_version=decoded.format_version,
        )
        logger.info(
            "PDF text extraction completed: %s pages=%d words=%d chars=%d",
            filename, document.page_count, document.word_count, document.char_count,
        )
        return document

    def parse_resume(self, data: bytes, filename: str = "") -> ParsedResume:
        """Extract text, then run every heuristic extractor over the clean text."""
        document = self.extract_document(data, filename)
        text = document.clean_text
        return ParsedResume(
            document=document,
            basic_info=field_extractor.extract_basic_info(text),
            skills=field_extractor.extract_skills(text),
            experience=field_extractor.extract_experience(text),
            sections=field_extractor.extract_sections(text),
            quality=text_normalizer.validate_text_quality(text),
        )
