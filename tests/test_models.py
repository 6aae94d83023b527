"""
Unit tests for data models and structured logging
"""

import logging

import pytest

from document_checker.logger import Timer, check_context, get_check_id, get_logger, shorten
from document_checker.models import (
    CheckReport,
    CheckRequest,
    LLMVerdict,
    OverallStatus,
    RuleResult,
    RuleStatus,
)


class TestModels:
    def test_request_rules_become_a_tuple(self):
        request = CheckRequest(document=b"%PDF", file_name="a.pdf", rules=["one", "two"])
        assert request.rules == ("one", "two")

    def test_single_string_rule_is_not_split(self):
        request = CheckRequest(document=b"%PDF", file_name="a.pdf", rules="Date")
        assert request.rules == ("Date",)

    def test_verdict_with_error_is_invalid(self):
        verdict = LLMVerdict("PASS", "e", "r", 90, error="provider failed")
        assert verdict.has_error()
        assert not verdict.is_valid()

    def test_verdict_missing_fields_is_invalid(self):
        assert not LLMVerdict("PASS", None, "r", 90).is_valid()

    @pytest.mark.parametrize(
        "confidence, level",
        [(95, "Very High"), (75, "High"), (60, "Medium"), (40, "Low"), (0, "Very Low")],
    )
    def test_confidence_level(self, confidence, level):
        result = RuleResult("r", RuleStatus.PASS, "e", "why", confidence)
        assert result.confidence_level == level

    def test_overall_status_is_derived(self):
        report = CheckReport(file_name="a.pdf", total_pages=1, results=[], processing_time_ms=3)
        assert report.overall_status is OverallStatus.NO_RESULTS

        report.results.append(RuleResult("r", RuleStatus.FAIL, "e", "why", 70))
        assert report.overall_status is OverallStatus.ALL_FAIL


class TestLogging:
    def test_check_id_is_appended(self, caplog):
        logger = get_logger("document_checker.tests")

        with caplog.at_level(logging.INFO, logger="document_checker.tests"):
            with check_context("abc-123") as check_id:
                logger.info("Checking", extra_data={"rule_count": 2})

        assert check_id == "abc-123"
        assert "Checking [rule_count=2, check_id=abc-123]" in caplog.text

    def test_check_context_is_reset(self):
        with check_context():
            assert get_check_id() is not None
        assert get_check_id() is None

    def test_shorten(self):
        assert shorten("short rule") == "short rule"
        assert len(shorten("x" * 500)) == 80
        assert shorten(None) == ""

    def test_timer(self):
        with Timer("noop") as timer:
            pass
        assert timer.get_elapsed_ms() >= 0
