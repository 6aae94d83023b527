"""PyMuPDF-based PDF text extractor with Tesseract OCR fallback."""

import io
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Optional

import fitz  # PyMuPDF
import pymupdf4llm
import pytesseract
from PIL import Image

from document_checker.config import ExtractorConfig
from document_checker.exceptions import ExtractionError, TooManyPagesError
from document_checker.logger import Timer, get_logger
from document_checker.models import ExtractedDocument

logger = get_logger(__name__)


class PdfTextExtractor:
    """Turns PDF bytes into plain text and a page count.

    Uses PyMuPDF4LLM for the native text layer (markdown output suited to
    LLM prompts) and Tesseract OCR for scanned documents.
    """

    def __init__(self, config: Optional[ExtractorConfig] = None):
        self.config = config or ExtractorConfig()
        self.ocr_config = self.config.ocr_config

        if self.ocr_config.enabled and self.ocr_config.tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = self.ocr_config.tesseract_cmd

        logger.debug(
            "Initializing PdfTextExtractor",
            extra_data={
                "max_pages": self.config.max_pages,
                "output_format": self.config.output_format,
                "ocr_enabled": self.ocr_config.enabled,
            },
        )

    def extract(
        self, file_bytes: bytes, file_name: str = "document.pdf"
    ) -> ExtractedDocument:
        """Extract text from a PDF.

        Args:
            file_bytes: Raw PDF bytes
            file_name: Original filename, for logging only

        Returns:
            ExtractedDocument with the text and page count. The text may be
            empty when the document has nothing extractable.

        Raises:
            ExtractionError: If the bytes are not a readable PDF
            TooManyPagesError: If the page count exceeds the configured maximum
        """
        doc = self._open(file_bytes, file_name)
        try:
            page_count = doc.page_count

            if page_count > self.config.max_pages:
                logger.warning(
                    "PDF exceeds page limit",
                    extra_data={
                        "file_name": file_name,
                        "page_count": page_count,
                        "max_pages": self.config.max_pages,
                    },
                )
                raise TooManyPagesError(page_count, self.config.max_pages)

            try:
                with Timer("pdf_native_extraction") as native_timer:
                    text = self._native_text(doc)
            except Exception as exc:
                logger.error(
                    "PDF text extraction failed",
                    extra_data={
                        "file_name": file_name,
                        "error_type": type(exc).__name__,
                        "error": str(exc),
                    },
                    exc_info=True,
                )
                raise ExtractionError(f"Failed to extract text from PDF: {exc}") from exc
        finally:
            doc.close()

        logger.debug(
            "PDF native text extraction completed",
            extra_data={
                "file_name": file_name,
                "characters_extracted": len(text),
                "page_count": page_count,
                "extraction_time_ms": native_timer.get_elapsed_ms(),
            },
        )

        ocr_used = False
        if self._should_ocr_pdf(len(text), page_count, len(file_bytes)):
            logger.info(
                "Triggering OCR fallback for PDF",
                extra_data={
                    "file_name": file_name,
                    "native_characters": len(text),
                    "page_count": page_count,
                },
            )
            with Timer("pdf_ocr") as ocr_timer:
                ocr_text = self._ocr_pdf(file_bytes, page_count, file_name)

            logger.info(
                "OCR extraction completed",
                extra_data={
                    "file_name": file_name,
                    "characters_extracted": len(ocr_text),
                    "ocr_time_ms": ocr_timer.get_elapsed_ms(),
                },
            )
            if len(ocr_text) > len(text):
                text = ocr_text
                ocr_used = True

        if not text:
            logger.warning(
                "No text content extracted from PDF",
                extra_data={"file_name": file_name, "page_count": page_count},
            )

        logger.info(
            "Successfully extracted text from PDF",
            extra_data={
                "file_name": file_name,
                "page_count": page_count,
                "character_count": len(text),
                "ocr_used": ocr_used,
            },
        )
        return ExtractedDocument(text=text, page_count=page_count, ocr_used=ocr_used)

    @staticmethod
    def _open(file_bytes: bytes, file_name: str) -> fitz.Document:
        if not file_bytes:
            raise ExtractionError("Failed to read PDF file: document is empty")

        try:
            doc = fitz.open(stream=file_bytes, filetype="pdf")
        except Exception as exc:
            logger.error(
                "Failed to open PDF",
                extra_data={
                    "file_name": file_name,
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )
            raise ExtractionError(f"Failed to read PDF file: {exc}") from exc

        if doc.needs_pass:
            doc.close()
            raise ExtractionError("Failed to read PDF file: document is password protected")
        return doc

    def _native_text(self, doc: fitz.Document) -> str:
        if doc.page_count == 0:
            return ""

        if self.config.output_format == "text":
            return "\n".join(page.get_text() for page in doc).strip()

        md_text = pymupdf4llm.to_markdown(
            doc,
            table_strategy=self.config.table_strategy,
            force_text=self.config.force_text,
            write_images=False,
            ignore_images=True,
            fontsize_limit=self.config.fontsize_limit,
            show_progress=False,
        )
        return md_text.strip()

    def _ocr_page(
        self, file_bytes: bytes, page_num: int, file_name: str
    ) -> tuple[int, str]:
        """OCR a single page - worker function for parallel processing.

        Each worker opens its own document; PyMuPDF documents are not shared
        across threads.
        """
        try:
            with fitz.open(stream=file_bytes, filetype="pdf") as pdf_document:
                pix = pdf_document[page_num].get_pixmap(dpi=self.ocr_config.dpi)
                image = Image.open(io.BytesIO(pix.tobytes("png")))

            page_text = pytesseract.image_to_string(
                image,
                lang=self.ocr_config.languages,
                config=f"--psm {self.ocr_config.psm_mode}",
            )
            return page_num, page_text.strip()

        except Exception as exc:
            logger.error(
                f"OCR failed for page {page_num + 1}",
                extra_data={
                    "file_name": file_name,
                    "page_number": page_num + 1,
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )
            return page_num, ""

    def _ocr_pdf(self, file_bytes: bytes, page_count: int, file_name: str) -> str:
        """Perform OCR on all pages in parallel, keeping page order."""
        page_results: dict[int, str] = {}
        with ThreadPoolExecutor(max_workers=self.ocr_config.max_workers) as executor:
            futures = [
                executor.submit(self._ocr_page, file_bytes, page_num, file_name)
                for page_num in range(page_count)
            ]
            for future in as_completed(futures):
                page_num, page_text = future.result()
                page_results[page_num] = page_text

        pages = [page_results[i] for i in range(page_count) if page_results.get(i)]
        return "\n\n".join(pages)

    def _should_ocr_pdf(
        self, native_char_count: int, page_count: int, file_size_bytes: int
    ) -> bool:
        """Decide whether to run OCR fallback after native extraction."""
        if not self.ocr_config.enabled or page_count == 0:
            return False

        if native_char_count == 0:
            return True

        # Very little text per page likely means a scanned PDF
        if native_char_count / page_count < self.ocr_config.min_chars_per_page:
            return True

        return (
            native_char_count < self.ocr_config.min_chars
            and file_size_bytes >= self.ocr_config.min_file_size_bytes
        )
