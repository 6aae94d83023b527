"""Rule-based compliance checking of PDF documents with LLM providers."""

from document_checker.aggregator import aggregate
from document_checker.check import check_document
from document_checker.config import (
    CheckerConfig,
    ExtractorConfig,
    LLMConfig,
    OCRConfig,
    ProviderKind,
    load_config,
)
from document_checker.exceptions import (
    DocumentCheckerError,
    ExtractionError,
    InternalCheckError,
    ProviderError,
    ProviderUnreachableError,
    ResponseMalformedError,
    TooManyPagesError,
    ValidationFailedError,
)
from document_checker.extractor import PdfTextExtractor
from document_checker.handler import CheckHandler
from document_checker.models import (
    CheckReport,
    CheckRequest,
    ExtractedDocument,
    LLMInvocation,
    LLMVerdict,
    OverallStatus,
    RuleResult,
    RuleStatus,
)
from document_checker.prompts import PromptBuilder, build_system_prompt, build_user_prompt
from document_checker.providers import (
    AnthropicProvider,
    LLMProvider,
    OpenAIProvider,
    create_provider,
)
from document_checker.response_parser import parse_verdict
from document_checker.rule_checker import RuleChecker
from document_checker.validator import RequestValidator

__version__ = "0.1.0"

__all__ = [
    # High-level API
    "check_document",
    # Core classes
    "CheckHandler",
    "RequestValidator",
    "PdfTextExtractor",
    "PromptBuilder",
    "RuleChecker",
    "LLMProvider",
    "OpenAIProvider",
    "AnthropicProvider",
    # Functions
    "aggregate",
    "build_system_prompt",
    "build_user_prompt",
    "create_provider",
    "parse_verdict",
    # Data models
    "CheckRequest",
    "CheckReport",
    "ExtractedDocument",
    "LLMInvocation",
    "LLMVerdict",
    "RuleResult",
    "RuleStatus",
    "OverallStatus",
    # Configuration
    "CheckerConfig",
    "ExtractorConfig",
    "LLMConfig",
    "OCRConfig",
    "ProviderKind",
    "load_config",
    # Exceptions
    "DocumentCheckerError",
    "ValidationFailedError",
    "ExtractionError",
    "TooManyPagesError",
    "ProviderError",
    "ProviderUnreachableError",
    "ResponseMalformedError",
    "InternalCheckError",
]
