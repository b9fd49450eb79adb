"""
Scheduler - Create a task every ``interval`` seconds.

Ticks fire on a fixed grid measured from loop start (``start + k *
interval``), not from the end of the previous submission. The first tick
fires immediately. If a submission overruns one or more deadlines, the
next tick fires as soon as it returns and later ticks realign to the grid.
Ticks never overlap.

Errors from a tick are logged and discarded; only :meth:`Scheduler.stop`
(or ``max_ticks``) ends the loop.
"""

from __future__ import annotations

import enum
import logging
import math
import threading
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol

from .config import DEFAULT_INTERVAL
from .errors import ConfigError, SubmitError, TrappistError
from .names import generate_name

logger = logging.getLogger(__name__)

RECENT_NAMES = 100


class Submitter(Protocol):
    def submit(self, name: str) -> object: ...


class SchedulerState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"


@dataclass
class SchedulerStats:
    ticks: int = 0
    succeeded: int = 0
    failed: int = 0
    # Most recent names only; the loop may run indefinitely
    names: deque[str] = field(default_factory=lambda: deque(maxlen=RECENT_NAMES))


class Scheduler:
    def __init__(
        self,
        submitter: Submitter,
        *,
        interval: float = DEFAULT_INTERVAL,
        name_factory: Callable[[], str] = generate_name,
        clock: Callable[[], float] = time.monotonic,
        wait: Optional[Callable[[float], bool]] = None,
        stop_event: Optional[threading.Event] = None,
    ) -> None:
        if not (math.isfinite(interval) and interval > 0):
            raise ConfigError(f"Interval must be a positive finite number, got {interval}")
        self.submitter = submitter
        self.interval = interval
        self.name_factory = name_factory
        self.state = SchedulerState.IDLE
        self._clock = clock
        self._stop = stop_event or threading.Event()
        # wait(seconds) returns True when the loop should stop
        self._wait = wait or self._stop.wait

    def stop(self) -> None:
        """Ask the loop to exit; an in-flight submission is allowed to finish."""
        self._stop.set()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    def run(self, max_ticks: Optional[int] = None) -> SchedulerStats:
        """
        Run ticks until stopped or ``max_ticks`` ticks have completed.

        Returns:
            Counters for the ticks that ran
        """
        stats = SchedulerStats()
        start = self._clock()
        tick = 0
        logger.info("Creating a new task every %gs", self.interval)

        while not self._stop.is_set():
            if max_ticks is not None and stats.ticks >= max_ticks:
                break

            delay = start + tick * self.interval - self._clock()
            if delay > 0 and self._wait(delay):
                break
            if self._stop.is_set():
                break

            self._run_tick(stats)

            # Skip deadlines that passed while the submission was running
            elapsed = self._clock() - start
            tick = max(tick + 1, int(elapsed // self.interval))

        logger.info(
            "Scheduler stopped after %d ticks (%d succeeded, %d failed)",
            stats.ticks,
            stats.succeeded,
            stats.failed,
        )
        return stats

    def _run_tick(self, stats: SchedulerStats) -> None:
        name = self.name_factory()
        stats.ticks += 1
        stats.names.append(name)
        logger.info("Creating new task with name: %s", name)

        self.state = SchedulerState.RUNNING
        try:
            receipt = self.submitter.submit(name)
        except SubmitError as exc:
            stats.failed += 1
            tx_hash = getattr(exc, "tx_hash", None)
            if tx_hash:
                logger.warning("Task %s failed (tx %s): %s", name, tx_hash, exc)
            else:
                logger.warning("Task %s failed: %s", name, exc)
        except TrappistError as exc:
            stats.failed += 1
            logger.warning("Task %s failed: %s", name, exc)
        except Exception:
            stats.failed += 1
            logger.exception("Unexpected error while creating task %s", name)
        else:
            stats.succeeded += 1
            tx_hash = getattr(receipt, "tx_hash", receipt)
            logger.info("Transaction successful with tx: %s", tx_hash)
        finally:
            self.state = SchedulerState.IDLE
