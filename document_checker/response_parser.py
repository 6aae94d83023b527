"""Decoding of provider completions into verdicts."""

import json
import re
from typing import Any

from document_checker.exceptions import ResponseMalformedError
from document_checker.logger import get_logger, shorten
from document_checker.models import LLMVerdict

logger = get_logger(__name__)

REQUIRED_KEYS = ("status", "evidence", "reasoning", "confidence")

# A completion wrapped in a single ```json ... ``` block
_CODE_FENCE = re.compile(r"^```[a-zA-Z]*\s*\n?(.*?)\n?\s*```$", re.DOTALL)


def parse_verdict(raw_text: str) -> LLMVerdict:
    """Parse the provider's raw completion into an LLMVerdict.

    Only the shape is checked here. Whether the confidence is in range or the
    status is PASS/FAIL is left to ``LLMVerdict.is_valid()``.

    Raises:
        ResponseMalformedError: If the text is not a JSON object with string
            status/evidence/reasoning and an integer confidence
    """
    if not isinstance(raw_text, str) or not raw_text.strip():
        raise _malformed("LLM response is empty", raw_text)

    try:
        data = json.loads(_strip_code_fence(raw_text))
    except json.JSONDecodeError as exc:
        raise _malformed(f"LLM response is not valid JSON: {exc.msg}", raw_text) from exc

    if not isinstance(data, dict):
        raise _malformed("LLM response is not a JSON object", raw_text)

    missing = [key for key in REQUIRED_KEYS if key not in data]
    if missing:
        raise _malformed(
            f"LLM response is missing keys: {', '.join(missing)}", raw_text
        )

    for key in ("status", "evidence", "reasoning"):
        if not isinstance(data[key], str):
            raise _malformed(f"LLM response field '{key}' must be a string", raw_text)

    return LLMVerdict(
        status=data["status"].strip().upper(),
        evidence=data["evidence"],
        reasoning=data["reasoning"],
        confidence=_as_int(data["confidence"], raw_text),
        raw_response=raw_text,
    )


def _strip_code_fence(text: str) -> str:
    text = text.strip()
    match = _CODE_FENCE.match(text)
    return match.group(1) if match else text


def _as_int(value: Any, raw_text: str) -> int:
    # bool is an int subclass but never a confidence
    if isinstance(value, bool):
        raise _malformed("LLM response field 'confidence' must be an integer", raw_text)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise _malformed("LLM response field 'confidence' must be an integer", raw_text)


def _malformed(message: str, raw_text: Any) -> ResponseMalformedError:
    logger.warning(
        "Failed to parse LLM response",
        extra_data={"reason": message, "raw_response": shorten(str(raw_text), 200)},
    )
    return ResponseMalformedError(message, raw_text=raw_text)
