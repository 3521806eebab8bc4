# ui/workers/challenge_solver.py
from __future__ import annotations

import logging
from concurrent.futures import Future
from typing import Callable, Optional

from PySide6.QtCore import QObject, QThread, Signal

from core.challenge import Challenge, SolveCancelled, SolveProgress, solve_challenge

logger = logging.getLogger(__name__)


class ChallengeSolverWorker(QThread):
    """
    Runs the proof-of-work search on its own thread. Talks to the caller
    only through signals: progress (0..n), then exactly one of solved/failed.
    Nothing is emitted once interruption has been requested.
    """
    progress = Signal(object)   # SolveProgress
    solved = Signal(object)     # nonce (Python int, may exceed 32 bits)
    failed = Signal(str)        # message

    def __init__(self, challenge: Challenge, max_attempts: Optional[int] = None, parent=None):
        super().__init__(parent)
        self.challenge = challenge
        self.max_attempts = max_attempts

    def _emit_progress(self, prog: SolveProgress) -> None:
        if not self.isInterruptionRequested():
            self.progress.emit(prog)

    def run(self):
        try:
            nonce = solve_challenge(
                self.challenge,
                on_progress=self._emit_progress,
                should_stop=self.isInterruptionRequested,
                max_attempts=self.max_attempts,
            )
        except SolveCancelled:
            logger.debug("Challenge solver cancelled")
            return
        except Exception as e:
            logger.exception("Challenge solver failed")
            if not self.isInterruptionRequested():
                self.failed.emit(f"Failed to solve challenge: {e}")
            return

        if not self.isInterruptionRequested():
            self.solved.emit(nonce)


class SolveHandle(QObject):
    """
    Caller-side handle of a running solve.

    - progress: signal stream of SolveProgress snapshots
    - result:   Future resolved with the nonce, or with an exception
    - solved / failed: terminal signals (exactly one, unless cancelled)
    - cancel(): stops the search; no further events are delivered
    """
    progress = Signal(object)
    solved = Signal(object)
    failed = Signal(str)

    def __init__(self, challenge: Challenge, max_attempts: Optional[int] = None, parent=None):
        super().__init__(parent)
        self.challenge = challenge
        self.result: Future = Future()
        self.last_progress: Optional[SolveProgress] = None
        self._cancelled = False

        self._worker = ChallengeSolverWorker(challenge, max_attempts, self)
        self._worker.progress.connect(self._on_progress)
        self._worker.solved.connect(self._on_solved)
        self._worker.failed.connect(self._on_failed)

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def is_running(self) -> bool:
        return self._worker.isRunning()

    def start(self) -> None:
        self._worker.start()

    def cancel(self) -> bool:
        """Returns False if the solve had already finished."""
        if self.result.done():
            return False
        self._cancelled = True
        self._worker.requestInterruption()
        self.result.cancel()
        return True

    def wait(self, timeout_ms: int = -1) -> bool:
        if timeout_ms < 0:
            return self._worker.wait()
        return self._worker.wait(timeout_ms)

    def _on_progress(self, prog: SolveProgress):
        if self._cancelled or self.result.done():
            return
        self.last_progress = prog
        self.progress.emit(prog)

    def _on_solved(self, nonce):
        if self._cancelled or self.result.done():
            return
        self.result.set_result(nonce)
        self.solved.emit(nonce)

    def _on_failed(self, message: str):
        if self._cancelled or self.result.done():
            return
        self.result.set_exception(RuntimeError(message))
        self.failed.emit(message)


def spawn_solver(
    challenge: Challenge,
    on_progress: Optional[Callable[[SolveProgress], None]] = None,
    max_attempts: Optional[int] = None,
    parent=None,
) -> SolveHandle:
    handle = SolveHandle(challenge, max_attempts=max_attempts, parent=parent)
    if on_progress is not None:
        handle.progress.connect(on_progress)
    handle.start()
    return handle
