"""High-level API for checking documents against rules."""

from pathlib import Path
from typing import Optional, Sequence, Union

from document_checker.config import CheckerConfig, load_config
from document_checker.handler import CheckHandler
from document_checker.logger import setup_logging
from document_checker.models import CheckReport, CheckRequest
from document_checker.providers import LLMProvider


def check_document(
    file_path: Optional[str] = None,
    file_bytes: Optional[bytes] = None,
    file_name: Optional[str] = None,
    rules: Optional[Union[str, Sequence[str]]] = None,
    config: Optional[CheckerConfig] = None,
    provider: Optional[LLMProvider] = None,
) -> CheckReport:
    """Check a PDF against natural-language rules.

    High-level convenience function that accepts either a file path or raw bytes.

    Args:
        file_path: Path to the PDF (alternative to file_bytes)
        file_bytes: Raw PDF bytes (alternative to file_path)
        file_name: Original filename (required if using file_bytes)
        rules: Rules to check, 1 to 10 non-blank strings. A single string is
            treated as one rule.
        config: Checker configuration. If None, loaded from the environment
            and logging is configured from its log_level.
        provider: LLM provider override, mainly for tests

    Returns:
        CheckReport with per-rule results and the overall status

    Raises:
        ValueError: If neither or both of file_path and file_bytes are given,
            the file does not exist, or file_name is missing for file_bytes
        ValidationFailedError: If the request is invalid
        ExtractionError: If the PDF cannot be processed
        InternalCheckError: On any uncategorized failure

    Examples:
        >>> report = check_document(
        ...     file_path="contract.pdf",
        ...     rules=["The document must mention at least one date"],
        ... )
        >>> print(report.overall_status)
    """
    if file_path and file_bytes:
        raise ValueError("Provide either file_path or file_bytes, not both")

    if not file_path and file_bytes is None:
        raise ValueError("Must provide either file_path or file_bytes")

    if file_path:
        path = Path(file_path)
        if not path.exists():
            raise ValueError(f"File not found: {file_path}")
        file_bytes = path.read_bytes()
        file_name = file_name or path.name

    if not file_name:
        raise ValueError("file_name is required when using file_bytes")

    if config is None:
        config = load_config()
        setup_logging(config.log_level)

    handler = CheckHandler(config=config, provider=provider)
    return handler.check(CheckRequest(document=file_bytes, file_name=file_name, rules=rules))
