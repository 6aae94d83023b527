"""Per-rule orchestration: prompt, provider call, parsing, result assembly."""

import contextvars
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import Iterable, Optional

from document_checker.exceptions import ProviderError, ResponseMalformedError
from document_checker.logger import Timer, get_logger, shorten
from document_checker.models import RuleResult, RuleStatus
from document_checker.prompts import PromptBuilder
from document_checker.providers import LLMProvider
from document_checker.response_parser import parse_verdict

logger = get_logger(__name__)

NO_EVIDENCE = "No evidence available"
DEADLINE_EXCEEDED_MSG = "Rule check cancelled: request deadline exceeded"


class RuleChecker:
    """Checks rules against extracted text, one independent LLM call per rule.

    Provider and parsing failures become ERROR results and never stop the
    other rules. Anything else is a bug and propagates.
    """

    def __init__(
        self,
        provider: LLMProvider,
        prompt_builder: Optional[PromptBuilder] = None,
        max_workers: int = 10,
        timeout_seconds: Optional[float] = None,
    ):
        """Initialize rule checker.

        Args:
            provider: Provider used for every rule
            prompt_builder: Builds invocations. If None, uses provider's config.
            max_workers: Maximum rules checked concurrently
            timeout_seconds: Deadline for a whole batch. Unfinished rules are
                reported as ERROR once it passes; None waits for every rule.
                Provider calls already in flight are abandoned, not interrupted:
                they finish on their worker threads, and interpreter exit still
                waits for them (up to the LLM call timeout).
        """
        self.provider = provider
        self.prompt_builder = prompt_builder or PromptBuilder(provider.config)
        self.max_workers = max(1, max_workers)
        self.timeout_seconds = timeout_seconds

    def check_rule(self, document_text: str, rule: str) -> RuleResult:
        invocation = self.prompt_builder.build_invocation(document_text, rule)

        with Timer("rule_check") as timer:
            try:
                raw_text = self.provider.invoke(invocation)
                verdict = parse_verdict(raw_text)
            except (ProviderError, ResponseMalformedError) as exc:
                logger.error(
                    "Rule check failed",
                    extra_data={
                        "rule": shorten(rule),
                        "error_type": type(exc).__name__,
                        "error": str(exc),
                    },
                )
                return self._error_result(rule, str(exc))

        reason = verdict.invalid_reason()
        if reason is not None:
            logger.warning(
                "LLM returned an invalid verdict",
                extra_data={"rule": shorten(rule), "reason": reason},
            )
            return self._error_result(rule, reason)

        logger.info(
            "Rule check completed",
            extra_data={
                "rule": shorten(rule),
                "status": verdict.status,
                "confidence": verdict.confidence,
                "elapsed_ms": timer.get_elapsed_ms(),
            },
        )
        return RuleResult(
            rule=rule,
            status=RuleStatus(verdict.status),
            evidence=verdict.evidence,
            reasoning=verdict.reasoning,
            confidence=verdict.confidence,
        )

    def check_rules(self, document_text: str, rules: Iterable[str]) -> list[RuleResult]:
        """Check all rules concurrently, returning results in input order.

        When the deadline passes, queued rules are cancelled and in-flight
        calls keep running in the background. The deadline bounds how long
        this call blocks, not how long the process takes to shut down.
        """
        rules = list(rules)
        if not rules:
            return []

        results: list[Optional[RuleResult]] = [None] * len(rules)
        workers = min(self.max_workers, len(rules))

        logger.debug(
            "Starting rule checks",
            extra_data={
                "rule_count": len(rules),
                "max_workers": workers,
                "timeout_seconds": self.timeout_seconds,
            },
        )

        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="rule-check")
        try:
            # Each task gets its own context copy so the check ID reaches the logs
            future_to_index = {
                executor.submit(
                    contextvars.copy_context().run, self.check_rule, document_text, rule
                ): index
                for index, rule in enumerate(rules)
            }
            done, not_done = wait(
                future_to_index, timeout=self.timeout_seconds, return_when=FIRST_EXCEPTION
            )

            for future in done:
                results[future_to_index[future]] = future.result()

            for future in not_done:
                future.cancel()
                index = future_to_index[future]
                results[index] = self._error_result(rules[index], DEADLINE_EXCEEDED_MSG)

            if not_done:
                logger.warning(
                    "Request deadline exceeded, returning partial results",
                    extra_data={
                        "completed": len(done),
                        "cancelled": len(not_done),
                        "timeout_seconds": self.timeout_seconds,
                    },
                )
        finally:
            # In-flight provider calls are abandoned rather than awaited
            executor.shutdown(wait=False, cancel_futures=True)

        return results

    @staticmethod
    def _error_result(rule: str, message: str) -> RuleResult:
        return RuleResult(
            rule=rule,
            status=RuleStatus.ERROR,
            evidence=NO_EVIDENCE,
            reasoning=message,
            confidence=0,
        )
