"""Configuration classes for document checker."""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from dotenv import load_dotenv


class ProviderKind(str, Enum):
    """Supported LLM provider payload styles."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"


DEFAULT_API_URLS = {
    ProviderKind.OPENAI: "https://api.openai.com/v1/chat/completions",
    ProviderKind.ANTHROPIC: "https://api.anthropic.com/v1/messages",
}

DEFAULT_MODELS = {
    ProviderKind.OPENAI: "gpt-4",
    ProviderKind.ANTHROPIC: "claude-sonnet-4-20250514",
}


@dataclass
class OCRConfig:
    """Configuration for the OCR fallback used on scanned PDFs.

    Examples:
        >>> # Default configuration
        >>> config = OCRConfig()

        >>> # Native text only, never shell out to Tesseract
        >>> config = OCRConfig(enabled=False)
    """

    enabled: bool = True
    """Run Tesseract when the native text layer looks empty or too thin."""

    tesseract_cmd: str = "tesseract"
    """Path to tesseract binary. Default: "tesseract" (assumes in PATH)."""

    languages: str = "eng"
    """OCR languages in Tesseract format (e.g., "eng", "eng+fra")."""

    dpi: int = 150
    """Image DPI for page rendering. Higher = better quality but slower."""

    psm_mode: int = 6
    """Page segmentation mode (0-13). Default: 6 (uniform block of text)."""

    max_workers: int = 3
    """Number of parallel workers for OCR processing."""

    min_chars: int = 500
    """Minimum native characters to skip OCR (only for files above min_file_size_bytes)."""

    min_chars_per_page: int = 150
    """Minimum average native characters per page to skip OCR."""

    min_file_size_bytes: int = 200_000
    """Small files with little text are assumed to be text-based PDFs."""


@dataclass
class ExtractorConfig:
    """Configuration for PDF text extraction."""

    ocr_config: OCRConfig = field(default_factory=OCRConfig)
    max_pages: int = 50
    output_format: str = "markdown"
    table_strategy: str = "lines_strict"
    fontsize_limit: int = 3
    force_text: bool = True


@dataclass
class LLMConfig:
    """Provider selection and generation settings.

    ``api_url`` and ``model`` fall back to the provider's defaults when empty.
    """

    provider: ProviderKind = ProviderKind.OPENAI
    api_key: str = field(default="", repr=False)
    api_url: str = ""
    model: str = ""
    max_tokens: int = 1000
    temperature: float = 0.3
    timeout_seconds: float = 60.0
    anthropic_version: str = "2023-06-01"

    def __post_init__(self):
        if not isinstance(self.provider, ProviderKind):
            # ValueError for anything but the supported providers
            self.provider = ProviderKind(str(self.provider).strip().lower())
        self.api_url = self.api_url or DEFAULT_API_URLS[self.provider]
        self.model = self.model or DEFAULT_MODELS[self.provider]

    @property
    def api_key_present(self) -> bool:
        return bool(self.api_key)


@dataclass
class CheckerConfig:
    """Top-level configuration for a rule check."""

    llm: LLMConfig = field(default_factory=LLMConfig)
    extractor: ExtractorConfig = field(default_factory=ExtractorConfig)
    max_file_size_mb: int = 10
    max_rules: int = 10
    max_rule_length: int = 500
    allowed_extensions: tuple[str, ...] = (".pdf",)
    truncation_threshold: int = 8000
    max_workers: int = 10
    """Upper bound on rules checked concurrently."""

    request_timeout_seconds: Optional[float] = None
    """Deadline for all rule checks of one request. None waits indefinitely."""

    log_level: str = "INFO"
    """Root logging level applied by setup_logging (DEBUG, INFO, WARNING, ERROR)."""

    @property
    def max_pages(self) -> int:
        return self.extractor.max_pages

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024


def _get_env(key: str, default: str = "") -> str:
    value = os.getenv(key, "").strip()
    return value or default


def _get_bool(key: str, default: bool) -> bool:
    value = _get_env(key)
    if not value:
        return default
    return value.lower() in ("1", "true", "yes", "on")


def _get_optional_float(key: str) -> Optional[float]:
    value = _get_env(key)
    return float(value) if value else None


def load_config(env_file: Optional[str] = None) -> CheckerConfig:
    """Build a CheckerConfig from environment variables.

    Values from a ``.env`` file are loaded first without overriding variables
    already present in the environment.

    Args:
        env_file: Optional path to a dotenv file. Defaults to ``./.env`` lookup.

    Returns:
        CheckerConfig populated from the environment

    Raises:
        ValueError: If LLM_PROVIDER names an unsupported provider or a
            numeric variable cannot be parsed
    """
    load_dotenv(env_file)

    llm = LLMConfig(
        provider=_get_env("LLM_PROVIDER", ProviderKind.OPENAI.value),
        api_key=_get_env("LLM_API_KEY"),
        api_url=_get_env("LLM_API_URL"),
        model=_get_env("LLM_MODEL"),
        max_tokens=int(_get_env("LLM_MAX_TOKENS", "1000")),
        temperature=float(_get_env("LLM_TEMPERATURE", "0.3")),
        timeout_seconds=float(_get_env("LLM_TIMEOUT_SECONDS", "60")),
    )
    extractor = ExtractorConfig(
        ocr_config=OCRConfig(
            enabled=_get_bool("CHECKER_OCR_ENABLED", True),
            tesseract_cmd=_get_env("TESSERACT_CMD", "tesseract"),
            languages=_get_env("CHECKER_OCR_LANGUAGES", "eng"),
        ),
        max_pages=int(_get_env("CHECKER_MAX_PAGES", "50")),
    )
    return CheckerConfig(
        llm=llm,
        extractor=extractor,
        max_file_size_mb=int(_get_env("CHECKER_MAX_FILE_SIZE_MB", "10")),
        max_rules=int(_get_env("CHECKER_MAX_RULES", "10")),
        max_rule_length=int(_get_env("CHECKER_MAX_RULE_LENGTH", "500")),
        truncation_threshold=int(_get_env("CHECKER_TRUNCATION_THRESHOLD", "8000")),
        max_workers=int(_get_env("CHECKER_MAX_WORKERS", "10")),
        request_timeout_seconds=_get_optional_float("CHECKER_REQUEST_TIMEOUT_SECONDS"),
        log_level=_get_env("LOG_LEVEL", "INFO").upper(),
    )
