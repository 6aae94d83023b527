# Test configuration and fixtures
import json
import threading
from typing import Callable, Optional, Union

import fitz  # PyMuPDF
import pytest

from document_checker.config import CheckerConfig, ExtractorConfig, LLMConfig, OCRConfig
from document_checker.models import ExtractedDocument, LLMInvocation


def make_pdf(pages: list[str]) -> bytes:
    """Build an in-memory PDF with one line of text per page."""
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        if text:
            page.insert_text((72, 72), text, fontsize=11)
    data = doc.tobytes()
    doc.close()
    return data


def verdict_json(status="PASS", evidence="quoted text", reasoning="because", confidence=90) -> str:
    return json.dumps(
        {
            "status": status,
            "evidence": evidence,
            "reasoning": reasoning,
            "confidence": confidence,
        }
    )


Scripted = Union[str, Exception, Callable[[LLMInvocation], str]]


class ScriptedProvider:
    """Stand-in provider answering per rule from a script.

    Script values are raw completion text, an exception to raise, or a
    callable receiving the invocation.
    """

    name = "scripted"

    def __init__(self, script: dict[str, Scripted], default: Optional[Scripted] = None):
        self.config = LLMConfig(api_key="test-key")
        self.script = script
        self.default = default
        self.invocations: list[LLMInvocation] = []
        self._lock = threading.Lock()

    def invoke(self, invocation: LLMInvocation) -> str:
        with self._lock:
            self.invocations.append(invocation)
        answer = self.script.get(invocation.rule, self.default)
        if answer is None:
            raise AssertionError(f"Unscripted rule: {invocation.rule}")
        if isinstance(answer, Exception):
            raise answer
        if callable(answer):
            return answer(invocation)
        return answer


class FakeExtractor:
    def __init__(self, text: str = "Sample document text", page_count: int = 1, error: Exception = None):
        self.text = text
        self.page_count = page_count
        self.error = error
        self.calls = 0

    def extract(self, file_bytes: bytes, file_name: str = "document.pdf") -> ExtractedDocument:
        self.calls += 1
        if self.error:
            raise self.error
        return ExtractedDocument(text=self.text, page_count=self.page_count)


class FakeResponse:
    def __init__(self, status_code: int = 200, body=None, text: Optional[str] = None):
        self.status_code = status_code
        self._body = body
        self.text = text if text is not None else json.dumps(body)

    def json(self):
        if self._body is None:
            return json.loads(self.text)
        return self._body


class FakeSession:
    """Records requests and replies with a canned response or raises."""

    def __init__(self, response: Union[FakeResponse, Exception]):
        self.response = response
        self.calls: list[dict] = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


@pytest.fixture
def checker_config():
    """Default limits with OCR disabled, so tests never shell out to Tesseract."""
    return CheckerConfig(
        llm=LLMConfig(api_key="test-key"),
        extractor=ExtractorConfig(ocr_config=OCRConfig(enabled=False), output_format="text"),
    )


@pytest.fixture
def sample_pdf():
    return make_pdf(
        [
            "Purpose: this agreement sets out the terms of service.",
            "Effective date: 1 January 2024. Termination requires 30 days notice.",
        ]
    )
