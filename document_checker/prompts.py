"""Prompt construction for rule checks."""

from typing import Optional

from document_checker.config import LLMConfig
from document_checker.models import LLMInvocation

DEFAULT_TRUNCATION_THRESHOLD = 8000
TRUNCATION_MARKER = "... [truncated]"

SYSTEM_PROMPT = """\
You are a document compliance checker. Your task is to analyze documents
and verify if they comply with specific rules.

For each rule, you must respond ONLY with a valid JSON object in this exact format:
{
    "status": "PASS" or "FAIL",
    "evidence": "A specific sentence or phrase from the document that supports your decision",
    "reasoning": "Brief explanation of why the rule passed or failed",
    "confidence": <number between 0-100>
}

Guidelines:
- Be precise and objective
- Use exact quotes from the document as evidence
- Confidence should reflect how certain you are about the decision
- If the rule is satisfied, status should be "PASS"
- If the rule is not satisfied, status should be "FAIL"
- Always provide clear reasoning
"""

USER_PROMPT_TEMPLATE = """\
Document to analyze:
---
{document}
---

Rule to check:
"{rule}"

Please analyze the document and respond with ONLY a JSON object as specified.
"""


def build_system_prompt() -> str:
    return SYSTEM_PROMPT


def truncate_document(text: str, limit: int = DEFAULT_TRUNCATION_THRESHOLD) -> str:
    """Hard character cutoff: keep the first ``limit`` characters plus a marker."""
    if len(text) > limit:
        return text[:limit] + TRUNCATION_MARKER
    return text


def build_user_prompt(
    text: str, rule: str, limit: int = DEFAULT_TRUNCATION_THRESHOLD
) -> str:
    return USER_PROMPT_TEMPLATE.format(
        document=truncate_document(text, limit), rule=rule
    )


class PromptBuilder:
    """Builds one LLMInvocation per (document, rule) pair."""

    def __init__(
        self,
        llm_config: Optional[LLMConfig] = None,
        truncation_threshold: int = DEFAULT_TRUNCATION_THRESHOLD,
    ):
        self.llm_config = llm_config or LLMConfig()
        self.truncation_threshold = truncation_threshold

    def build_invocation(self, document_text: str, rule: str) -> LLMInvocation:
        document_text = truncate_document(document_text, self.truncation_threshold)
        return LLMInvocation(
            model=self.llm_config.model,
            document_text=document_text,
            rule=rule,
            max_tokens=self.llm_config.max_tokens,
            temperature=self.llm_config.temperature,
            system_prompt=build_system_prompt(),
            user_prompt=build_user_prompt(
                document_text, rule, self.truncation_threshold
            ),
        )
