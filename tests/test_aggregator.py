"""
Unit tests for overall status aggregation
"""

from document_checker.aggregator import aggregate
from document_checker.models import OverallStatus, RuleResult, RuleStatus


def result(status: RuleStatus) -> RuleResult:
    return RuleResult(rule="r", status=status, evidence="e", reasoning="why", confidence=80)


class TestAggregate:
    def test_empty(self):
        assert aggregate([]) is OverallStatus.NO_RESULTS

    def test_all_pass(self):
        assert aggregate(["PASS", "PASS"]) is OverallStatus.ALL_PASS

    def test_all_fail(self):
        assert aggregate(["FAIL", "FAIL"]) is OverallStatus.ALL_FAIL

    def test_mixed(self):
        assert aggregate(["PASS", "FAIL"]) is OverallStatus.PARTIAL_PASS

    def test_error_dominates(self):
        assert aggregate(["PASS", "ERROR", "FAIL"]) is OverallStatus.ERROR
        assert aggregate(["PASS", "PASS", "ERROR"]) is OverallStatus.ERROR
        assert aggregate(["ERROR"]) is OverallStatus.ERROR

    def test_order_does_not_matter(self):
        assert aggregate(["FAIL", "PASS", "PASS"]) is aggregate(["PASS", "PASS", "FAIL"])

    def test_accepts_rule_results(self):
        results = [result(RuleStatus.PASS), result(RuleStatus.PASS)]
        assert aggregate(results) is OverallStatus.ALL_PASS

    def test_accepts_enum_members(self):
        assert aggregate([RuleStatus.FAIL, RuleStatus.PASS]) is OverallStatus.PARTIAL_PASS
