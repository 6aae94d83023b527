"""HTTP clients for OpenAI-style and Anthropic-style chat APIs."""

from abc import ABC, abstractmethod
from typing import Any, Optional

import requests

from document_checker.config import LLMConfig, ProviderKind
from document_checker.exceptions import ProviderError, ProviderUnreachableError
from document_checker.logger import Timer, get_logger, shorten
from document_checker.models import LLMInvocation

logger = get_logger(__name__)


class LLMProvider(ABC):
    """Sends one invocation to a provider and returns its raw completion text."""

    name = "llm"

    def __init__(self, config: LLMConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or requests.Session()

        if not config.api_key_present:
            logger.warning(
                "LLM API key is missing. Provider calls will likely be rejected.",
                extra_data={"provider": self.name},
            )

    def invoke(self, invocation: LLMInvocation) -> str:
        """Call the provider for a single rule.

        Raises:
            ProviderUnreachableError: On network failures and timeouts
            ProviderError: On non-2xx statuses or a malformed response envelope
        """
        body = self._post(self.build_payload(invocation), self.build_headers())
        try:
            text = self.extract_text(body)
        except (KeyError, IndexError, TypeError) as exc:
            logger.error(
                "Unexpected response envelope from LLM provider",
                extra_data={"provider": self.name, "error": repr(exc)},
            )
            raise ProviderError(
                f"{self.name} response did not contain completion text"
            ) from exc

        if not isinstance(text, str):
            raise ProviderError(f"{self.name} completion text is not a string")
        return text

    @abstractmethod
    def build_headers(self) -> dict[str, str]: ...

    @abstractmethod
    def build_payload(self, invocation: LLMInvocation) -> dict[str, Any]: ...

    @abstractmethod
    def extract_text(self, body: Any) -> str: ...

    def _post(self, payload: dict[str, Any], headers: dict[str, str]) -> Any:
        url = self.config.api_url
        logger.debug(
            f"Calling {self.name} API",
            extra_data={"url": url, "model": payload.get("model")},
        )

        try:
            with Timer("llm_call") as timer:
                response = self.session.post(
                    url,
                    json=payload,
                    headers=headers,
                    timeout=self.config.timeout_seconds,
                )
        except requests.Timeout as exc:
            logger.error(
                f"{self.name} API timed out",
                extra_data={"url": url, "timeout_seconds": self.config.timeout_seconds},
            )
            raise ProviderUnreachableError(
                f"{self.name} API timed out after {self.config.timeout_seconds}s"
            ) from exc
        except requests.RequestException as exc:
            logger.error(
                f"Cannot reach {self.name} API",
                extra_data={"url": url, "error_type": type(exc).__name__, "error": str(exc)},
            )
            raise ProviderUnreachableError(f"Cannot reach {self.name} API: {exc}") from exc

        if not 200 <= response.status_code < 300:
            logger.error(
                f"{self.name} API returned an error status",
                extra_data={
                    "status_code": response.status_code,
                    "body": shorten(response.text, 200),
                    "elapsed_ms": timer.get_elapsed_ms(),
                },
            )
            raise ProviderError(
                f"{self.name} API returned status: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise ProviderError(
                f"{self.name} API returned invalid JSON",
                status_code=response.status_code,
            ) from exc

        logger.debug(
            f"{self.name} API call completed",
            extra_data={"status_code": response.status_code, "elapsed_ms": timer.get_elapsed_ms()},
        )
        return body


class OpenAIProvider(LLMProvider):
    """Chat Completions API (also fits OpenAI-compatible gateways)."""

    name = "openai"

    def build_headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.config.api_key}",
        }

    def build_payload(self, invocation: LLMInvocation) -> dict[str, Any]:
        return {
            "model": invocation.model,
            "max_tokens": invocation.max_tokens,
            "temperature": invocation.temperature,
            "messages": [
                {"role": "system", "content": invocation.system_prompt},
                {"role": "user", "content": invocation.user_prompt},
            ],
            "response_format": {"type": "json_object"},
        }

    def extract_text(self, body: Any) -> str:
        return body["choices"][0]["message"]["content"]


class AnthropicProvider(LLMProvider):
    """Messages API."""

    name = "anthropic"

    def build_headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-api-key": self.config.api_key,
            "anthropic-version": self.config.anthropic_version,
        }

    def build_payload(self, invocation: LLMInvocation) -> dict[str, Any]:
        return {
            "model": invocation.model,
            "max_tokens": invocation.max_tokens,
            "temperature": invocation.temperature,
            "system": invocation.system_prompt,
            "messages": [{"role": "user", "content": invocation.user_prompt}],
        }

    def extract_text(self, body: Any) -> str:
        return body["content"][0]["text"]


_PROVIDERS: dict[ProviderKind, type[LLMProvider]] = {
    ProviderKind.OPENAI: OpenAIProvider,
    ProviderKind.ANTHROPIC: AnthropicProvider,
}


def create_provider(
    config: LLMConfig, session: Optional[requests.Session] = None
) -> LLMProvider:
    """Select the provider variant once, from configuration."""
    provider_cls = _PROVIDERS[config.provider]

    logger.info(
        "Configured LLM provider",
        extra_data={"provider": provider_cls.name, "model": config.model, "url": config.api_url},
    )
    return provider_cls(config, session=session)
