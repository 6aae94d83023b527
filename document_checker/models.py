"""Data models for document checker."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

MIN_CONFIDENCE = 0
MAX_CONFIDENCE = 100


class RuleStatus(str, Enum):
    PASS = "PASS"
    FAIL = "FAIL"
    ERROR = "ERROR"


class OverallStatus(str, Enum):
    NO_RESULTS = "NO_RESULTS"
    ALL_PASS = "ALL_PASS"
    ALL_FAIL = "ALL_FAIL"
    PARTIAL_PASS = "PARTIAL_PASS"
    ERROR = "ERROR"


@dataclass(frozen=True)
class CheckRequest:
    """A document and the ordered rules to check it against."""

    document: Optional[bytes]
    file_name: Optional[str]
    rules: Optional[tuple[str, ...]]

    def __post_init__(self):
        if isinstance(self.rules, str):
            object.__setattr__(self, "rules", (self.rules,))
        elif self.rules is not None and not isinstance(self.rules, tuple):
            object.__setattr__(self, "rules", tuple(self.rules))

    @property
    def file_size_bytes(self) -> int:
        return len(self.document) if self.document else 0


@dataclass
class ExtractedDocument:
    """Result of text extraction."""

    text: str  # Markdown or plain text, depending on the extractor config
    page_count: int
    ocr_used: bool = False

    @property
    def character_count(self) -> int:
        return len(self.text)


@dataclass(frozen=True)
class LLMInvocation:
    model: str
    document_text: str
    rule: str
    max_tokens: int
    temperature: float
    system_prompt: str
    user_prompt: str


@dataclass
class LLMVerdict:
    """Structured judgment returned by the provider for one rule."""

    status: Optional[str]
    evidence: Optional[str]
    reasoning: Optional[str]
    confidence: Optional[int]
    raw_response: Optional[str] = None
    error: Optional[str] = None

    def has_error(self) -> bool:
        return bool(self.error)

    def is_valid(self) -> bool:
        """True when the verdict can be trusted as a PASS or FAIL outcome."""
        return (
            not self.has_error()
            and self.status in (RuleStatus.PASS.value, RuleStatus.FAIL.value)
            and self.evidence is not None
            and self.reasoning is not None
            and self.confidence is not None
            and MIN_CONFIDENCE <= self.confidence <= MAX_CONFIDENCE
        )

    def invalid_reason(self) -> Optional[str]:
        """Describe why ``is_valid()`` is False, or None when it is valid."""
        if self.has_error():
            return self.error
        if self.status not in (RuleStatus.PASS.value, RuleStatus.FAIL.value):
            return f"Invalid verdict status: {self.status!r}"
        if self.evidence is None or self.reasoning is None:
            return "Verdict is missing evidence or reasoning"
        if self.confidence is None or not (
            MIN_CONFIDENCE <= self.confidence <= MAX_CONFIDENCE
        ):
            return (
                f"Verdict confidence {self.confidence} outside "
                f"{MIN_CONFIDENCE}-{MAX_CONFIDENCE}"
            )
        return None


@dataclass
class RuleResult:
    rule: str
    status: RuleStatus
    evidence: str
    reasoning: str
    confidence: int

    @property
    def passed(self) -> bool:
        return self.status is RuleStatus.PASS

    @property
    def failed(self) -> bool:
        return self.status is RuleStatus.FAIL

    @property
    def has_error(self) -> bool:
        return self.status is RuleStatus.ERROR

    @property
    def confidence_level(self) -> str:
        """Human-readable band for the confidence score."""
        if self.confidence >= 90:
            return "Very High"
        if self.confidence >= 75:
            return "High"
        if self.confidence >= 60:
            return "Medium"
        if self.confidence >= 40:
            return "Low"
        return "Very Low"

    def to_dict(self) -> dict[str, Any]:
        return {
            "rule": self.rule,
            "status": self.status.value,
            "evidence": self.evidence,
            "reasoning": self.reasoning,
            "confidence": self.confidence,
        }


@dataclass
class CheckReport:
    """Outcome of checking one document against all of its rules.

    The overall status is always derived from ``results``.
    """

    file_name: str
    total_pages: int
    results: list[RuleResult]
    processing_time_ms: int
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def overall_status(self) -> OverallStatus:
        from document_checker.aggregator import aggregate

        return aggregate(self.results)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the logical response payload."""
        return {
            "fileName": self.file_name,
            "totalPages": self.total_pages,
            "results": [result.to_dict() for result in self.results],
            "overallStatus": self.overall_status.value,
            "processingTimeMs": self.processing_time_ms,
            "timestamp": self.timestamp.isoformat(),
        }
