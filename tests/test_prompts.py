"""
Unit tests for prompt construction
"""

from document_checker.config import LLMConfig
from document_checker.prompts import (
    TRUNCATION_MARKER,
    PromptBuilder,
    build_system_prompt,
    build_user_prompt,
    truncate_document,
)


class TestTruncation:
    def test_8001_characters_truncated(self):
        text = "a" * 8000 + "b"
        assert truncate_document(text) == "a" * 8000 + TRUNCATION_MARKER

    def test_8000_characters_unchanged(self):
        text = "a" * 8000
        assert truncate_document(text) == text

    def test_truncation_is_idempotent(self):
        once = truncate_document("x" * 9000)
        assert truncate_document(once) == once

    def test_custom_threshold(self):
        assert truncate_document("abcdef", limit=3) == "abc" + TRUNCATION_MARKER


class TestPrompts:
    def test_system_prompt_requires_json_keys(self):
        prompt = build_system_prompt()
        for key in ("status", "evidence", "reasoning", "confidence"):
            assert f'"{key}"' in prompt

    def test_system_prompt_is_constant(self):
        assert build_system_prompt() == build_system_prompt()

    def test_user_prompt_embeds_document_and_rule(self):
        prompt = build_user_prompt("Effective date: 1 Jan 2024", "Must mention a date")

        assert "Effective date: 1 Jan 2024" in prompt
        assert '"Must mention a date"' in prompt

    def test_user_prompt_truncates_long_documents(self):
        prompt = build_user_prompt("z" * 8001, "rule")

        assert "z" * 8000 + TRUNCATION_MARKER in prompt
        assert "z" * 8001 not in prompt


class TestPromptBuilder:
    def test_build_invocation(self):
        config = LLMConfig(model="gpt-4o", max_tokens=321, temperature=0.1)
        invocation = PromptBuilder(config).build_invocation("doc text", "rule text")

        assert invocation.model == "gpt-4o"
        assert invocation.max_tokens == 321
        assert invocation.temperature == 0.1
        assert invocation.rule == "rule text"
        assert invocation.document_text == "doc text"
        assert invocation.system_prompt == build_system_prompt()
        assert invocation.user_prompt == build_user_prompt("doc text", "rule text")

    def test_invocations_differ_per_rule(self):
        builder = PromptBuilder(LLMConfig())
        first = builder.build_invocation("doc", "rule one")
        second = builder.build_invocation("doc", "rule two")

        assert first.user_prompt != second.user_prompt

    def test_invocation_uses_configured_threshold(self):
        invocation = PromptBuilder(LLMConfig(), truncation_threshold=10).build_invocation(
            "0123456789abc", "rule"
        )
        assert invocation.document_text == "0123456789" + TRUNCATION_MARKER
