"""
Parallel vanity search.

One worker process per CPU runs the full pipeline in a tight loop:

    entropy -> mnemonic -> seed -> BIP-44 key -> address -> score

Workers share exactly one value with the coordinator, the current best
score.  They read it every iteration and only send a candidate back when
it is at least as good, so almost nothing crosses the process boundary.
The coordinator is the single writer of both the shared threshold and the
best-so-far record, which keeps the score monotonic no matter how the
workers' reads interleave.
"""

from __future__ import annotations

import contextlib
import logging
import multiprocessing
import os
import queue
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from zeroseed_core.logging_config import setup_logging
from zeroseed_core.reporting import estimate_next_improvement, format_report
from zeroseed_core.scoring import ScoreRule
from zeroseed_core.wallet import (
    DEFAULT_DERIVATION_PATH,
    DerivationPath,
    InvalidDerivationError,
    entropy_to_mnemonic,
    generate_mnemonic,
    load_wordlist,
    mnemonic_to_address,
    to_checksum_address,
)

log = logging.getLogger("zeroseed.search")


@dataclass(frozen=True)
class Candidate:
    """One scored phrase/address pair sent from a worker."""
    phrase: str
    address: str          # 40 lowercase hex digits
    score: int
    worker_id: int = 0


@dataclass
class BestState:
    """Best candidate seen so far.  Only the coordinator mutates it."""
    best_score: int = 0
    best_phrase: str = ""
    best_address: str = ""
    time_to_find: float = 0.0       # seconds from search start to best_score
    discovered_at: float = 0.0      # wall-clock time of the last strict improvement


# ===================================================================
#  Worker side
# ===================================================================

def evaluate_candidate(
    rule: ScoreRule,
    path: DerivationPath,
    wordlist: list[str],
    entropy: Optional[bytes] = None,
    worker_id: int = 0,
) -> Candidate:
    """Run the whole derivation pipeline once and score the result."""
    if entropy is None:
        phrase = generate_mnemonic(128, wordlist)
    else:
        phrase = entropy_to_mnemonic(entropy, wordlist)
    address = mnemonic_to_address(phrase, path).hex()
    return Candidate(phrase=phrase, address=address, score=rule.score(address),
                     worker_id=worker_id)


def run_worker(
    worker_id: int,
    shared_best: Any,
    results: Any,
    stop_event: Any,
    rule: ScoreRule,
    path: DerivationPath | str = DEFAULT_DERIVATION_PATH,
    wordlist_path: Optional[str] = None,
    max_iterations: Optional[int] = None,
) -> int:
    """
    Generate and score candidates until *stop_event* is set.

    *shared_best* is anything with an int ``value`` attribute; *results*
    anything with ``put``.  A candidate is queued when its score is
    ``>= shared_best.value``.  *max_iterations* bounds the loop for tests.
    Returns the number of iterations run.
    """
    wordlist = load_wordlist(wordlist_path)
    if isinstance(path, str):
        path = DerivationPath.parse(path)

    iterations = 0
    while not stop_event.is_set():
        if max_iterations is not None and iterations >= max_iterations:
            break
        iterations += 1
        try:
            candidate = evaluate_candidate(rule, path, wordlist, worker_id=worker_id)
        except InvalidDerivationError as exc:
            log.debug("Worker %d discarded candidate: %s", worker_id, exc)
            continue
        if candidate.score >= shared_best.value:
            results.put(candidate)
    return iterations


def _worker_entry(log_settings: Optional[dict[str, Any]], *args: Any) -> None:
    # Spawned and forkserver children start with an unconfigured root logger.
    if log_settings is not None:
        setup_logging(**log_settings)
    # Ctrl-C reaches the whole process group; the parent handles shutdown.
    with contextlib.suppress(KeyboardInterrupt):
        run_worker(*args)


# ===================================================================
#  Coordinator side
# ===================================================================

class SearchCoordinator:
    """
    Owns the best-so-far state and the worker processes.

    Typical use::

        coordinator = SearchCoordinator(get_rule("leading-zero-bytes"))
        coordinator.search()        # blocks until stop_event is set
    """

    def __init__(
        self,
        rule: ScoreRule,
        workers: Optional[int] = None,
        path: DerivationPath | str = DEFAULT_DERIVATION_PATH,
        wordlist_path: Optional[str] = None,
        start_method: Optional[str] = None,
        clock: Callable[[], float] = time.monotonic,
        log_settings: Optional[dict[str, Any]] = None,
    ):
        if workers is not None and (not isinstance(workers, int) or workers < 1):
            raise ValueError(f"workers must be an integer of at least 1, got {workers!r}")
        self.rule = rule
        self.workers = workers or os.cpu_count() or 1
        self.path = DerivationPath.parse(path) if isinstance(path, str) else path
        self.wordlist_path = wordlist_path
        # Keyword arguments for setup_logging() in each worker process
        self.log_settings = log_settings

        self._ctx = multiprocessing.get_context(start_method)
        self.shared_best = self._ctx.Value("i", 0)
        self.results = self._ctx.Queue()
        self.stop_event = self._ctx.Event()

        self.state = BestState()
        self._state_lock = threading.Lock()
        self._clock = clock
        self._started_at = clock()
        self._processes: list[Any] = []
        # Set when every worker died without being asked to stop
        self.failed = False

        # Called with (candidate, report) after every accepted candidate
        self.on_improvement: Optional[Callable[[Candidate, str], None]] = None

    # ---- state ----

    def elapsed(self) -> float:
        return self._clock() - self._started_at

    def handle_candidate(self, candidate: Candidate) -> bool:
        """
        Apply a worker report to the best-so-far state.

        Returns False for reports that are no longer competitive (a worker
        read a stale threshold).  Ties replace the displayed phrase and
        address but leave the threshold alone.
        """
        with self._state_lock:
            state = self.state
            if candidate.score < state.best_score:
                log.debug(
                    "Dropped stale candidate from worker %d (score %d < %d)",
                    candidate.worker_id, candidate.score, state.best_score,
                )
                return False

            if candidate.score > state.best_score:
                state.best_score = candidate.score
                state.time_to_find = self.elapsed()
                state.discovered_at = time.time()
                with self.shared_best.get_lock():
                    self.shared_best.value = candidate.score
            state.best_phrase = candidate.phrase
            state.best_address = candidate.address
            report = self._build_report(candidate)

        log.info(
            "New best candidate\n%s", report,
            extra={"score": candidate.score, "address": candidate.address,
                   "worker_id": candidate.worker_id, "rule": self.rule.name},
        )
        if self.on_improvement is not None:
            self.on_improvement(candidate, report)
        return True

    def _build_report(self, candidate: Candidate) -> str:
        next_eta = None
        if self.state.best_score > 0:
            next_eta = estimate_next_improvement(
                self.state.time_to_find, self.rule.difficulty_base,
            )
        return format_report(
            score=candidate.score,
            rule_name=self.rule.name,
            address=to_checksum_address(candidate.address),
            phrase=candidate.phrase,
            elapsed=self.elapsed(),
            next_improvement=next_eta,
            worker_id=candidate.worker_id,
        )

    # ---- lifecycle ----

    def start(self) -> None:
        """Spawn one worker process per configured worker slot."""
        if self._processes:
            raise RuntimeError("Search already started")
        self._started_at = self._clock()
        for worker_id in range(self.workers):
            proc = self._ctx.Process(
                target=_worker_entry,
                args=(self.log_settings, worker_id, self.shared_best, self.results,
                      self.stop_event, self.rule, self.path, self.wordlist_path),
                name=f"zeroseed-worker-{worker_id}",
                daemon=True,
            )
            proc.start()
            self._processes.append(proc)
        log.info(
            "Search started | workers=%d | rule=%s | path=%s",
            self.workers, self.rule.name, self.path,
        )

    def run(self, poll_interval: float = 0.5) -> None:
        """Drain worker reports until the stop event is set."""
        while not self.stop_event.is_set():
            try:
                candidate = self.results.get(timeout=poll_interval)
            except queue.Empty:
                if self._processes and not any(p.is_alive() for p in self._processes):
                    log.error("All workers exited; stopping search")
                    self.failed = True
                    self.stop_event.set()
                continue
            self.handle_candidate(candidate)

    def stop(self, timeout: float = 5.0) -> None:
        """Signal workers to exit, then join or terminate them."""
        self.stop_event.set()
        deadline = time.monotonic() + timeout
        for proc in self._processes:
            # A worker cannot exit while its queued reports sit unread in the pipe.
            while proc.is_alive() and time.monotonic() < deadline:
                self._drain()
                proc.join(0.1)
            if proc.is_alive():
                log.warning("Worker %s did not exit; terminating", proc.name)
                proc.terminate()
                proc.join(1.0)
        self._processes.clear()
        # Unread reports must not block interpreter exit.
        self.results.cancel_join_thread()
        self.results.close()
        log.info(
            "Search stopped after %.1fs | best score=%d",
            self.elapsed(), self.state.best_score,
        )

    def _drain(self) -> None:
        while True:
            try:
                candidate = self.results.get_nowait()
            except queue.Empty:
                return
            self.handle_candidate(candidate)

    def search(self, poll_interval: float = 0.5) -> BestState:
        """start(), run() until stopped or interrupted, then stop()."""
        self.start()
        try:
            self.run(poll_interval)
        except KeyboardInterrupt:
            log.info("Interrupted")
        finally:
            self.stop()
        return self.state
