"""Reduction of per-rule results into one overall status."""

from typing import Iterable, Union

from document_checker.models import OverallStatus, RuleResult, RuleStatus


def aggregate(results: Iterable[Union[RuleResult, RuleStatus, str]]) -> OverallStatus:
    """Combine per-rule outcomes into a single overall status.

    Evaluated in priority order: no results, any error, all passed,
    all failed, otherwise a partial pass. An ERROR anywhere dominates.

    Args:
        results: RuleResults, or bare statuses (enum members or their names)

    Returns:
        The overall status for the batch
    """
    statuses = [_status_of(item) for item in results]

    if not statuses:
        return OverallStatus.NO_RESULTS
    if RuleStatus.ERROR in statuses:
        return OverallStatus.ERROR
    if all(status is RuleStatus.PASS for status in statuses):
        return OverallStatus.ALL_PASS
    if all(status is RuleStatus.FAIL for status in statuses):
        return OverallStatus.ALL_FAIL
    return OverallStatus.PARTIAL_PASS


def _status_of(item: Union[RuleResult, RuleStatus, str]) -> RuleStatus:
    if isinstance(item, RuleResult):
        return item.status
    if isinstance(item, RuleStatus):
        return item
    return RuleStatus(item.upper())
