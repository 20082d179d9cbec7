"""Base provider implementing the Template Method pattern.

All providers share the same algorithm for every task:
    generate_*() / review_code() → prompts.*_prompt()
                                 → _call_with_retry() → _call_api()   ← only this differs per provider
                                 → normalizer.parse_*()

Subclasses implement:
  - __init__: validate and store the SDK client (after calling super().__init__)
  - _call_api: make one raw API call with a single user message, return the text
  - optionally _is_rate_limit (SDK-specific throttling exceptions) and _close

Prompt construction, retry/backoff and response normalization live here so
they are defined once and inherited consistently by every backend.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from aigit_core import normalizer, prompts
from aigit_core.errors import ConfigurationError, DeadlineExceededError, ProviderError, RateLimitError
from aigit_core.models import (
    CommitMessage,
    CommitOptions,
    CommitRecord,
    PRAnalysis,
    PRDescription,
    ProviderConfig,
    ReviewOptions,
    ReviewResult,
    Summary,
    SummaryOptions,
)
from aigit_core.utils.deadline import Deadline

logger = logging.getLogger(__name__)

# Additional attempts after the first one, and the backoff unit in seconds.
_MAX_RETRIES = 3
_BASE_DELAY = 1.0

_RATE_LIMIT_MARKERS = ("429", "quota", "rate limit", "rate_limit", "too many requests")


class BaseProvider(ABC):
    NAME: str = "provider"
    MODEL: str = ""
    MAX_RETRIES: int = _MAX_RETRIES
    BASE_DELAY: float = _BASE_DELAY
    QUOTA_HINT: str = "Please try again later or check your provider quota."

    def __init__(self, config: ProviderConfig):
        if not config.api_key:
            raise ConfigurationError(f"{self.NAME} API key is not configured.")
        self.config = config
        self.model = config.model or self.MODEL
        self._closed = False

    # ------------------------------------------------------------------ #
    # Public interface                                                     #
    # ------------------------------------------------------------------ #

    def generate_commit_message(
        self, diff: str, options: CommitOptions, deadline: Deadline | None = None
    ) -> CommitMessage:
        prompt = prompts.commit_message_prompt(diff, options.type, options.scope, options.conventional)
        raw = self._call_with_retry(prompt, deadline)
        return normalizer.parse_commit_message(raw, options.conventional)

    def generate_summary(
        self, commits: list[CommitRecord], options: SummaryOptions, deadline: Deadline | None = None
    ) -> Summary:
        prompt = prompts.summary_prompt(commits, options.group_by_type, options.changelog)
        raw = self._call_with_retry(prompt, deadline)
        return normalizer.parse_summary(raw, commits, options)

    def review_code(self, diff: str, options: ReviewOptions, deadline: Deadline | None = None) -> ReviewResult:
        prompt = prompts.review_prompt(diff, options.focus_areas, options.security, options.performance)
        raw = self._call_with_retry(prompt, deadline)
        return normalizer.parse_review_response(raw)

    def generate_pr_description(self, analysis: PRAnalysis, deadline: Deadline | None = None) -> PRDescription:
        prompt = prompts.pr_description_prompt(analysis)
        raw = self._call_with_retry(prompt, deadline)
        return normalizer.parse_pr_description(raw)

    def close(self) -> None:
        """Release the SDK client. Safe to call more than once; never raises."""
        if self._closed:
            return
        self._closed = True
        try:
            self._close()
        except Exception as e:
            logger.warning("%s: error while closing client: %s", self.__class__.__name__, e)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------------ #
    # Abstract: implement in each provider                               #
    # ------------------------------------------------------------------ #

    @abstractmethod
    def _call_api(self, prompt: str, timeout: float | None) -> str:
        """Make a single API call and return the raw text response.

        Raise NoResponseError when the provider returns no candidates. Any
        other exception is classified by _call_with_retry.
        """

    def _is_rate_limit(self, error: Exception) -> bool:
        """Whether ``error`` signals throttling. Subclasses add SDK exception types."""
        status = getattr(error, "status_code", None) or getattr(error, "code", None)
        if status == 429:
            return True
        text = str(error).lower()
        return any(marker in text for marker in _RATE_LIMIT_MARKERS)

    def _close(self) -> None:
        """Release provider resources. Default is a no-op."""

    # ------------------------------------------------------------------ #
    # Shared implementations                                               #
    # ------------------------------------------------------------------ #

    def _call_with_retry(self, prompt: str, deadline: Deadline | None = None) -> str:
        """Call _call_api, retrying only rate-limit failures with exponential backoff.

        Attempt ``n`` (0-based) that hits a rate limit waits ``2**n * BASE_DELAY``
        seconds before the next one, for at most MAX_RETRIES extra attempts.
        Each attempt gets the deadline's remaining time as its timeout, and
        the backoff wait is cut short by the deadline.
        """
        deadline = deadline or Deadline(None)
        attempts = self.MAX_RETRIES + 1

        for attempt in range(attempts):
            deadline.check()
            try:
                raw = self._call_api(prompt, deadline.remaining())
            except ProviderError:
                raise
            except Exception as e:
                if deadline.expired:
                    raise DeadlineExceededError(f"{self.NAME} request timed out: {e}") from e
                if not self._is_rate_limit(e):
                    raise ProviderError(f"{self.NAME} API error: {e}") from e
                if attempt == attempts - 1:
                    logger.error("%s rate limit persisted after %d attempts: %s", self.NAME, attempts, e)
                    raise RateLimitError(
                        f"rate limit exceeded after {attempts} attempts", hint=self.QUOTA_HINT
                    ) from e
                delay = 2**attempt * self.BASE_DELAY
                logger.warning(
                    "Rate limit hit, retrying in %gs... (attempt %d/%d)",
                    delay,
                    attempt + 1,
                    attempts,
                )
                deadline.sleep(delay)
                continue

            logger.debug("%s raw response:\n%s", self.NAME, raw)
            return raw

        # Unreachable: the loop either returns or raises.
        raise RateLimitError(f"rate limit exceeded after {attempts} attempts", hint=self.QUOTA_HINT)
