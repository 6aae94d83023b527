"""
Unit tests for per-rule orchestration
"""

import threading
import time

import pytest

from conftest import ScriptedProvider, verdict_json
from document_checker.exceptions import ProviderError, ProviderUnreachableError
from document_checker.logger import check_context
from document_checker.models import RuleStatus
from document_checker.rule_checker import DEADLINE_EXCEEDED_MSG, NO_EVIDENCE, RuleChecker


class TestCheckRule:
    def test_pass_verdict_copied_verbatim(self):
        provider = ScriptedProvider(
            {"rule": verdict_json("PASS", "Effective date: 1 Jan", "Date present", 92)}
        )

        result = RuleChecker(provider).check_rule("doc", "rule")

        assert result.status is RuleStatus.PASS
        assert result.evidence == "Effective date: 1 Jan"
        assert result.reasoning == "Date present"
        assert result.confidence == 92
        assert result.rule == "rule"

    def test_fail_verdict(self):
        provider = ScriptedProvider({"rule": verdict_json("FAIL", confidence=60)})
        assert RuleChecker(provider).check_rule("doc", "rule").status is RuleStatus.FAIL

    def test_provider_unreachable_becomes_error(self):
        provider = ScriptedProvider({"rule": ProviderUnreachableError("openai API timed out after 60s")})

        result = RuleChecker(provider).check_rule("doc", "rule")

        assert result.status is RuleStatus.ERROR
        assert result.reasoning == "openai API timed out after 60s"
        assert result.evidence == NO_EVIDENCE
        assert result.confidence == 0

    def test_provider_error_becomes_error(self):
        provider = ScriptedProvider({"rule": ProviderError("openai API returned status: 500", 500)})
        assert RuleChecker(provider).check_rule("doc", "rule").status is RuleStatus.ERROR

    def test_malformed_response_becomes_error(self):
        provider = ScriptedProvider({"rule": "I think it passes"})

        result = RuleChecker(provider).check_rule("doc", "rule")

        assert result.status is RuleStatus.ERROR
        assert "not valid JSON" in result.reasoning
        assert result.evidence == NO_EVIDENCE

    def test_invalid_verdict_becomes_error(self):
        provider = ScriptedProvider({"rule": verdict_json("PASS", confidence=150)})

        result = RuleChecker(provider).check_rule("doc", "rule")

        assert result.status is RuleStatus.ERROR
        assert result.confidence == 0
        assert "150" in result.reasoning

    def test_unexpected_exception_propagates(self):
        provider = ScriptedProvider({"rule": RuntimeError("bug")})

        with pytest.raises(RuntimeError):
            RuleChecker(provider).check_rule("doc", "rule")


class TestCheckRules:
    def test_results_follow_input_order(self):
        """Later rules finish first, results still come back in input order"""

        def slow(delay, status):
            def answer(invocation):
                time.sleep(delay)
                return verdict_json(status)

            return answer

        provider = ScriptedProvider(
            {
                "first": slow(0.3, "PASS"),
                "second": slow(0.1, "FAIL"),
                "third": slow(0.0, "PASS"),
            }
        )

        results = RuleChecker(provider).check_rules("doc", ["first", "second", "third"])

        assert [r.rule for r in results] == ["first", "second", "third"]
        assert [r.status for r in results] == [RuleStatus.PASS, RuleStatus.FAIL, RuleStatus.PASS]

    def test_one_failure_does_not_affect_others(self):
        provider = ScriptedProvider(
            {
                "a": verdict_json("PASS"),
                "b": ProviderUnreachableError("timed out"),
                "c": verdict_json("FAIL"),
            }
        )

        results = RuleChecker(provider).check_rules("doc", ["a", "b", "c"])

        assert [r.status for r in results] == [RuleStatus.PASS, RuleStatus.ERROR, RuleStatus.FAIL]

    def test_empty_rules(self):
        assert RuleChecker(ScriptedProvider({})).check_rules("doc", []) == []

    def test_duplicate_rules_each_get_a_result(self):
        provider = ScriptedProvider({}, default=verdict_json("PASS"))

        results = RuleChecker(provider).check_rules("doc", ["same", "same"])

        assert len(results) == 2
        assert len(provider.invocations) == 2

    def test_fan_out_is_bounded(self):
        active = []
        peak = []
        lock = threading.Lock()

        def answer(invocation):
            with lock:
                active.append(1)
                peak.append(len(active))
            time.sleep(0.05)
            with lock:
                active.pop()
            return verdict_json("PASS")

        provider = ScriptedProvider({}, default=answer)

        results = RuleChecker(provider, max_workers=2).check_rules("doc", [f"r{i}" for i in range(6)])

        assert len(results) == 6
        assert max(peak) <= 2

    def test_deadline_returns_partial_results(self):
        release = threading.Event()

        def stuck(invocation):
            release.wait(5)
            return verdict_json("PASS")

        provider = ScriptedProvider({"fast": verdict_json("PASS"), "stuck": stuck})
        checker = RuleChecker(provider, timeout_seconds=0.2)

        try:
            results = checker.check_rules("doc", ["fast", "stuck"])
        finally:
            release.set()

        assert results[0].status is RuleStatus.PASS
        assert results[1].status is RuleStatus.ERROR
        assert results[1].reasoning == DEADLINE_EXCEEDED_MSG

    def test_deadline_abandons_in_flight_call(self):
        release = threading.Event()
        finished = threading.Event()

        def slow(invocation):
            release.wait(5)
            finished.set()
            return verdict_json("PASS")

        checker = RuleChecker(ScriptedProvider({"slow": slow}), timeout_seconds=0.1)

        started = time.monotonic()
        results = checker.check_rules("doc", ["slow"])
        elapsed = time.monotonic() - started

        assert results[0].reasoning == DEADLINE_EXCEEDED_MSG
        assert elapsed < 2
        assert not finished.is_set()

        release.set()
        assert finished.wait(5)

    def test_unexpected_exception_aborts_batch(self):
        provider = ScriptedProvider({"ok": verdict_json("PASS"), "bad": RuntimeError("bug")})

        with pytest.raises(RuntimeError):
            RuleChecker(provider).check_rules("doc", ["ok", "bad"])

    def test_check_id_reaches_worker_threads(self):
        seen = []

        def answer(invocation):
            from document_checker.logger import get_check_id

            seen.append(get_check_id())
            return verdict_json("PASS")

        provider = ScriptedProvider({}, default=answer)

        with check_context("check-123"):
            RuleChecker(provider).check_rules("doc", ["a", "b"])

        assert seen == ["check-123", "check-123"]
