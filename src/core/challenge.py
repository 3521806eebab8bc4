# core/challenge.py
"""
Proof-of-work challenge issued by LRCLIB before publishing.

The server hands out a (prefix, target) pair. A nonce solves it when
SHA-256(prefix + str(nonce)), read as a big-endian unsigned integer, is at
or below the target. Lower targets mean more attempts.
"""
from __future__ import annotations

import hashlib
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)

PROGRESS_INTERVAL = 10000
MAX_TARGET = "f" * 64


class ChallengeError(Exception):
    pass


class SolveCancelled(ChallengeError):
    pass


class SolveLimitReached(ChallengeError):
    pass


@dataclass(frozen=True)
class Challenge:
    prefix: str
    target: str  # hex digits

    @property
    def target_value(self) -> int:
        try:
            return int(self.target, 16)
        except (TypeError, ValueError):
            raise ChallengeError(f"Malformed challenge target: {self.target!r}") from None


@dataclass(frozen=True)
class SolveProgress:
    attempts: int
    nonce: int
    start_time: float


def challenge_digest(prefix: str, nonce: int) -> int:
    h = hashlib.sha256(f"{prefix}{nonce}".encode("utf-8")).digest()
    return int.from_bytes(h, "big")


def verify_nonce(challenge: Challenge, nonce: int) -> bool:
    return challenge_digest(challenge.prefix, nonce) <= challenge.target_value


def make_publish_token(challenge: Challenge, nonce: int) -> str:
    return f"{challenge.prefix}:{nonce}"


def solve_challenge(
    challenge: Challenge,
    on_progress: Optional[Callable[[SolveProgress], None]] = None,
    should_stop: Optional[Callable[[], bool]] = None,
    start_nonce: int = 0,
    progress_interval: int = PROGRESS_INTERVAL,
    max_attempts: Optional[int] = None,
) -> int:
    """
    Brute-force the challenge and return the first satisfying nonce.

    on_progress receives a snapshot every `progress_interval` attempts.
    should_stop is polled at the same cadence; when it returns True the
    search ends with SolveCancelled. The search is unbounded unless
    max_attempts is given, in which case SolveLimitReached is raised.
    """
    target = challenge.target_value
    prefix = challenge.prefix
    start_time = time.time()
    attempts = 0
    nonce = start_nonce

    logger.debug("Solving challenge prefix=%s target=%s", prefix, challenge.target)

    while True:
        attempts += 1
        if challenge_digest(prefix, nonce) <= target:
            logger.debug("Challenge solved after %d attempts (nonce=%d)", attempts, nonce)
            return nonce

        if max_attempts is not None and attempts >= max_attempts:
            raise SolveLimitReached(f"No solution found within {max_attempts} attempts")

        if attempts % progress_interval == 0:
            if should_stop and should_stop():
                raise SolveCancelled("Challenge solving was cancelled")
            if on_progress:
                on_progress(SolveProgress(attempts=attempts, nonce=nonce, start_time=start_time))

        nonce += 1
