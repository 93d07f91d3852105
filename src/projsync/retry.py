"""Linear backoff for GitHub secondary rate limits."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from projsync.github.client import describe_error
from projsync.github.exceptions import GitHubError

logger = logging.getLogger("projsync.retry")


@dataclass(frozen=True)
class RetryOutcome:
    """Result of one executed call.

    Attributes:
        ok: Whether the call eventually succeeded.
        value: Return value of the call when ok.
        attempts: Number of times the call was invoked.
        error: Message of the abandoning failure, if any.
        skipped: True when the ledger showed the call already completed.
    """

    ok: bool
    value: Any = None
    attempts: int = 0
    error: str | None = None
    skipped: bool = False


class CompletedLedger:
    """Fingerprints of calls that already succeeded during this run."""

    def __init__(self) -> None:
        self._done: set[str] = set()

    def __contains__(self, fingerprint: object) -> bool:
        return fingerprint in self._done

    def __len__(self) -> int:
        return len(self._done)

    def record(self, fingerprint: str) -> None:
        self._done.add(fingerprint)


class RetryExecutor:
    """Runs mutating calls, waiting out secondary rate limits.

    A GitHubError flagged as a secondary rate limit is retried after
    `initial_delay` seconds, then `initial_delay + increment`, and so on.
    With `max_attempts=None` there is no ceiling. Every other failure is
    logged and the call abandoned so the caller can move on.
    """

    def __init__(
        self,
        initial_delay: float = 60.0,
        increment: float = 60.0,
        max_attempts: int | None = None,
        sleep: Callable[[float], None] = time.sleep,
        ledger: CompletedLedger | None = None,
    ) -> None:
        self.initial_delay = initial_delay
        self.increment = increment
        self.max_attempts = max_attempts
        self.sleep = sleep
        self.ledger = ledger if ledger is not None else CompletedLedger()

    def run(
        self,
        call: Callable[[], Any],
        description: str,
        fingerprint: str | None = None,
    ) -> RetryOutcome:
        """Invoke `call` until it succeeds or fails with a non-retryable error.

        Args:
            call: Zero-argument callable; bind arguments with functools.partial
            description: Human-readable name of the operation for logs
            fingerprint: Stable key for the ledger; a call whose fingerprint
                already succeeded is not repeated

        Returns:
            RetryOutcome describing what happened
        """
        if fingerprint is not None and fingerprint in self.ledger:
            logger.info("Skipping %s (already completed)", description)
            return RetryOutcome(ok=True, skipped=True)

        delay = self.initial_delay
        attempt = 1
        while True:
            try:
                value = call()
            except GitHubError as e:
                if not e.is_secondary_rate_limit:
                    return self._abandon(description, e, attempt)
                if self.max_attempts is not None and attempt >= self.max_attempts:
                    logger.error(
                        "Giving up on %s after %d rate-limited attempt(s)", description, attempt
                    )
                    return RetryOutcome(ok=False, attempts=attempt, error=describe_error(e))
                logger.warning(
                    "Rate limit hit. Waiting %g seconds before retrying %s (attempt %d)...",
                    delay,
                    description,
                    attempt,
                )
                self.sleep(delay)
                delay += self.increment
                attempt += 1
            except Exception as e:
                return self._abandon(description, e, attempt)
            else:
                if fingerprint is not None:
                    self.ledger.record(fingerprint)
                return RetryOutcome(ok=True, value=value, attempts=attempt)

    def _abandon(self, description: str, error: Exception, attempt: int) -> RetryOutcome:
        message = describe_error(error)
        logger.error("Failed to %s: %s", description, message)
        return RetryOutcome(ok=False, attempts=attempt, error=message)
