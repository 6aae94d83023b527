"""Structural validation of check requests."""

from pathlib import Path
from typing import Optional

from document_checker.config import CheckerConfig
from document_checker.exceptions import ValidationFailedError
from document_checker.logger import get_logger
from document_checker.models import CheckRequest

logger = get_logger(__name__)


PDF_SIGNATURE = b"%PDF"

FILE_REQUIRED_MSG = "PDF file is required"
INVALID_FILE_TYPE_MSG = "Only PDF files are allowed"
RULES_REQUIRED_MSG = "At least one rule is required"
RULE_EMPTY_MSG = "Rule cannot be empty"
RULE_NOT_TEXT_MSG = "Rule must be text"


class RequestValidator:
    """Checks a request before any extraction or provider work runs."""

    def __init__(self, config: Optional[CheckerConfig] = None):
        self.config = config or CheckerConfig()

    def validate(self, request: CheckRequest) -> list[str]:
        """Collect every violation in the request.

        Returns:
            Violation messages, empty when the request is valid
        """
        violations = self._validate_document(request)
        violations.extend(self.validate_rules(request.rules))

        if violations:
            logger.warning(
                "Check request validation failed",
                extra_data={
                    "file_name": request.file_name,
                    "violation_count": len(violations),
                    "violations": "; ".join(violations),
                },
            )
        else:
            logger.debug(
                "Check request validated",
                extra_data={
                    "file_name": request.file_name,
                    "file_size_bytes": request.file_size_bytes,
                    "rule_count": len(request.rules),
                },
            )
        return violations

    def ensure_valid(self, request: CheckRequest) -> None:
        """Raise ValidationFailedError carrying all violations, if any."""
        violations = self.validate(request)
        if violations:
            raise ValidationFailedError(violations)

    def validate_rules(self, rules: Optional[tuple[str, ...]]) -> list[str]:
        if not rules:
            return [RULES_REQUIRED_MSG]

        errors = []
        for index, rule in enumerate(rules, start=1):
            if rule is not None and not isinstance(rule, str):
                errors.append(f"Rule {index}: {RULE_NOT_TEXT_MSG}")
                continue
            if not rule or not rule.strip():
                errors.append(f"Rule {index}: {RULE_EMPTY_MSG}")
            if rule and len(rule) > self.config.max_rule_length:
                errors.append(
                    f"Rule {index} is too long "
                    f"(max {self.config.max_rule_length} characters)"
                )

        if len(rules) > self.config.max_rules:
            errors.append(f"Maximum {self.config.max_rules} rules allowed")

        return errors

    def is_valid_extension(self, file_name: Optional[str]) -> bool:
        if not file_name or not file_name.strip():
            return False
        suffix = Path(file_name.strip()).suffix.lower()
        return suffix in {ext.lower() for ext in self.config.allowed_extensions}

    def is_valid_file_size(self, size_bytes: int) -> bool:
        return 0 < size_bytes <= self.config.max_file_size_bytes

    def _validate_document(self, request: CheckRequest) -> list[str]:
        if not request.document:
            return [FILE_REQUIRED_MSG]

        errors = []
        if not self.is_valid_extension(request.file_name):
            errors.append(INVALID_FILE_TYPE_MSG)
        if not self.is_valid_file_size(request.file_size_bytes):
            errors.append(
                "File size exceeds maximum limit "
                f"({self.config.max_file_size_mb} MB)"
            )

        if not errors and not request.document.startswith(PDF_SIGNATURE):
            # Parseability is decided by the extractor
            logger.warning(
                "Document does not start with a PDF signature",
                extra_data={
                    "file_name": request.file_name,
                    "leading_bytes": request.document[:8],
                },
            )
        return errors
