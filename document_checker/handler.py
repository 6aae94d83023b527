"""Check pipeline orchestration."""

from datetime import datetime, timezone
from typing import Optional, Protocol

from document_checker.config import CheckerConfig
from document_checker.exceptions import DocumentCheckerError, InternalCheckError
from document_checker.extractor import PdfTextExtractor
from document_checker.logger import Timer, check_context, get_logger
from document_checker.models import CheckReport, CheckRequest, ExtractedDocument
from document_checker.prompts import PromptBuilder, truncate_document
from document_checker.providers import LLMProvider, create_provider
from document_checker.rule_checker import RuleChecker
from document_checker.validator import RequestValidator

logger = get_logger(__name__)


class TextExtractor(Protocol):
    def extract(self, file_bytes: bytes, file_name: str = ...) -> ExtractedDocument: ...


class CheckHandler:
    def __init__(
        self,
        config: Optional[CheckerConfig] = None,
        extractor: Optional[TextExtractor] = None,
        provider: Optional[LLMProvider] = None,
        validator: Optional[RequestValidator] = None,
    ) -> None:
        """Initialize check handler.

        Args:
            config: Limits, provider and extraction settings. If None, uses defaults.
            extractor: Text extractor. If None, creates a PdfTextExtractor.
            provider: LLM provider. If None, created from ``config.llm``.
            validator: Request validator. If None, creates default.
        """
        self.config = config or CheckerConfig()
        self.validator = validator or RequestValidator(self.config)
        self.extractor = extractor or PdfTextExtractor(self.config.extractor)
        self.provider = provider or create_provider(self.config.llm)
        self.rule_checker = RuleChecker(
            self.provider,
            PromptBuilder(self.config.llm, self.config.truncation_threshold),
            max_workers=self.config.max_workers,
            timeout_seconds=self.config.request_timeout_seconds,
        )

    def check(self, request: CheckRequest) -> CheckReport:
        """Validate, extract, check every rule and aggregate.

        Returns:
            CheckReport with one result per rule, in submitted order

        Raises:
            ValidationFailedError: If the request is invalid (no work is done)
            ExtractionError: If the PDF cannot be read or has too many pages
            InternalCheckError: On any uncategorized failure
        """
        with check_context() as check_id, Timer("check") as total_timer:
            logger.info(
                "Received check request",
                extra_data={
                    "file_name": request.file_name,
                    "file_size_bytes": request.file_size_bytes,
                    "rule_count": len(request.rules or ()),
                },
            )
            try:
                report = self._run(request, total_timer)
            except DocumentCheckerError:
                raise
            except Exception as exc:
                logger.error(
                    "Unexpected error processing check request",
                    extra_data={"error_type": type(exc).__name__, "error": str(exc)},
                    exc_info=True,
                )
                raise InternalCheckError(
                    f"Unexpected error during check {check_id}: {exc}"
                ) from exc

            logger.info(
                "Check completed",
                extra_data={
                    "file_name": report.file_name,
                    "overall_status": report.overall_status.value,
                    "processing_time_ms": report.processing_time_ms,
                },
            )
            return report

    def _run(self, request: CheckRequest, total_timer: Timer) -> CheckReport:
        self.validator.ensure_valid(request)

        with Timer("extraction") as extract_timer:
            document = self.extractor.extract(request.document, request.file_name)

        logger.debug(
            "Document extracted",
            extra_data={
                "page_count": document.page_count,
                "character_count": document.character_count,
                "extraction_time_ms": extract_timer.get_elapsed_ms(),
            },
        )

        # Truncation depends only on the text, so it is done once for all rules
        document_text = truncate_document(document.text, self.config.truncation_threshold)
        results = self.rule_checker.check_rules(document_text, request.rules)

        return CheckReport(
            file_name=request.file_name,
            total_pages=document.page_count,
            results=results,
            processing_time_ms=total_timer.get_elapsed_ms(),
            timestamp=datetime.now(timezone.utc),
        )
