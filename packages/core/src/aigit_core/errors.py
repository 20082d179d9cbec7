"""Error taxonomy shared by every aigit layer.

The CLI only ever needs to catch AigitError: ConfigurationError becomes a
usage error with remediation hints, everything else a one-line failure.
Parse problems in the normalizer never raise: malformed model output
degrades to a partial result.
"""

from __future__ import annotations


class AigitError(Exception):
    """Base class for all errors raised by aigit_core."""


class ConfigurationError(AigitError):
    """Missing or placeholder API key, unknown provider, or bad config key."""


class GitCommandError(AigitError):
    """A git subprocess exited non-zero."""

    def __init__(self, command: list[str], stderr: str, returncode: int | None = None):
        self.command = command
        self.stderr = stderr.strip()
        self.returncode = returncode
        detail = f": {self.stderr}" if self.stderr else ""
        super().__init__(f"{' '.join(command)} failed{detail}")


class ProviderError(AigitError):
    """Non-rate-limit failure talking to the LLM provider. Never retried."""


class RateLimitError(ProviderError):
    """Provider kept throttling us after every retry was spent."""

    def __init__(self, message: str, hint: str = ""):
        self.hint = hint
        super().__init__(f"{message}. {hint}" if hint else message)


class NoResponseError(ProviderError):
    """The provider answered with an empty candidate/choice list."""


class DeadlineExceededError(AigitError, TimeoutError):
    """The per-command deadline fired before the provider call completed."""
