from __future__ import annotations

import logging
import threading
from datetime import date
from typing import Callable, Optional

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.base import BaseScheduler

from ..common.datetime_utils import Clock, now_local
from ..core.constants import DAY_CYCLE_JOB_ID
from ..core.enums import CycleState
from ..core.exceptions import ValidationError
from ..students.repository import StudentRepository
from .scheduler import AbsenceScheduler

logger = logging.getLogger(__name__)

RolloverHook = Callable[[date], object]


class DayCycleController:
    """Drives the recurring "day" that resets every student's absence window.

    State machine: IDLE -> RUNNING on start(); RUNNING has a single self-transition (the
    restart) taken on every tick of one recurring interval job, or on a manual new day.
    shutdown() is the only exit and moves to STOPPED; once it returns no restart runs again.
    """

    def __init__(
        self,
        students: StudentRepository,
        absence_scheduler: AbsenceScheduler,
        jobs: BaseScheduler,
        *,
        day_duration_seconds: float,
        clock: Clock = now_local,
        on_rollover: Optional[RolloverHook] = None,
    ):
        self._students = students
        self._absence = absence_scheduler
        self._jobs = jobs
        self._day_seconds = float(day_duration_seconds)
        self._clock = clock
        self._on_rollover = on_rollover

        self._lock = threading.RLock()
        self._state = CycleState.IDLE
        self._cycles = 0

    @property
    def state(self) -> CycleState:
        return self._state

    @property
    def cycles_started(self) -> int:
        return self._cycles

    def start(self) -> None:
        with self._lock:
            if self._state != CycleState.IDLE:
                logger.warning("Day cycle start ignored (state=%s)", self._state.value)
                return
            logger.info("Starting day system")
            self._state = CycleState.RUNNING
            self._restart()
            self._schedule_ticks()

    def tick(self) -> None:
        """Scheduled end of day: snapshot the day, then re-arm everyone."""
        with self._lock:
            if self._state != CycleState.RUNNING:
                return
            logger.info("Day completed, starting new day")
            self._rollover()
            self._restart()

    def new_day(self) -> None:
        """Manual rollover; the next scheduled tick is pushed a full day away."""
        with self._lock:
            if self._state != CycleState.RUNNING:
                raise ValidationError(f"Day cycle is not running (state={self._state.value})")
            self._rollover()
            self._restart()
            self._schedule_ticks()

    def shutdown(self) -> None:
        with self._lock:
            if self._state == CycleState.STOPPED:
                return
            self._state = CycleState.STOPPED
            try:
                self._jobs.remove_job(DAY_CYCLE_JOB_ID)
            except JobLookupError:
                pass
            self._absence.cancel_all()
            logger.info("Day system stopped, all absence timers cancelled")

    def _schedule_ticks(self) -> None:
        self._jobs.add_job(
            self.tick,
            "interval",
            seconds=self._day_seconds,
            id=DAY_CYCLE_JOB_ID,
            replace_existing=True,
            coalesce=True,
            max_instances=1,
        )

    def _rollover(self) -> None:
        if not self._on_rollover:
            return
        try:
            self._on_rollover(self._clock().date())
        except Exception:
            logger.exception("Day rollover hook failed; continuing with new day")

    def _restart(self) -> None:
        # Roster edits wait until every timer of the new day is armed.
        with self._absence.roster_lock:
            self._absence.cancel_all()
            self._cycles += 1
            try:
                roster = self._students.list_all()
            except Exception:
                # Leave the day without timers; the next tick reloads the roster.
                logger.exception("Could not load roster for day %d", self._cycles)
                return
            for student in roster:
                self._absence.arm(student)
        logger.info("Day %d: started %d absence timers", self._cycles, len(roster))
