"""
Auto captain countdown.

When a draft starts without volunteers, a watcher counts down in the draft's
channel and assigns random captains once the deadline passes. The watcher
never holds the store lock across a tick: each tick it reads a fresh
snapshot and stops on its own when the draft it was started for has moved
on (cancelled, replaced, reset, or captains filled by hand).
"""

import asyncio
import inspect
import logging
import time
from enum import Enum
from typing import Any, Awaitable, Callable

from config import AUTO_CAPTAIN_DEADLINE_SECONDS, AUTO_CAPTAIN_TICK_SECONDS
from domain.models.draft import SessionSnapshot
from services.interfaces import IAnnouncer, IPersistedSessionReader
from services.result import Result
from utils import draft_messages

logger = logging.getLogger("pug_bot.services.auto_captain_watcher")

Resolver = Callable[[], "Result | Awaitable[Result]"]


class WatcherOutcome(Enum):
    """Why a watcher stopped."""

    SESSION_GONE = "session_gone"
    SESSION_REPLACED = "session_replaced"
    RESET = "reset"
    CAPTAINS_FILLED = "captains_filled"
    RESOLVED = "resolved"
    RESOLUTION_FAILED = "resolution_failed"


class AutoCaptainWatcher:
    """
    Countdown for one draft.

    Cancellation is cooperative: nothing stops a watcher from outside. A
    reset or a replacement draft changes the snapshot, and the watcher
    notices on its next tick.
    """

    def __init__(
        self,
        session_key: int | None,
        baseline: SessionSnapshot,
        *,
        reader: IPersistedSessionReader,
        announcer: IAnnouncer,
        resolver: Resolver,
        deadline_seconds: float = AUTO_CAPTAIN_DEADLINE_SECONDS,
        tick_seconds: float = AUTO_CAPTAIN_TICK_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """
        Args:
            session_key: Key the reader looks drafts up by (the guild ID)
            baseline: Snapshot taken when the watcher was spawned
            reader: Source of fresh snapshots
            announcer: Where the countdown is posted
            resolver: Assigns random captains; called at most once, and only if
                      the draft still matches the baseline just before the call
            deadline_seconds: Seconds to wait for volunteers
            tick_seconds: Seconds between snapshot checks
            clock: Monotonic clock (injectable for tests)
            sleep: Async sleep (injectable for tests)
        """
        self.session_key = session_key
        self.baseline = baseline
        self.reader = reader
        self.announcer = announcer
        self.resolver = resolver
        self.deadline_seconds = deadline_seconds
        self.tick_seconds = tick_seconds
        self.clock = clock
        self.sleep = sleep
        self.resolution_attempts = 0

    async def run(self) -> WatcherOutcome:
        """Count down, then resolve captains unless the draft moved on first."""
        started_at = self.clock()
        text = draft_messages.countdown(self.deadline_seconds)
        handle = await self._post(text)

        while True:
            await self.sleep(self.tick_seconds)
            elapsed = self.clock() - started_at
            text = draft_messages.countdown(self.deadline_seconds - elapsed)

            stop_reason = self._stop_reason(self.reader.fetch_current(self.session_key))
            if stop_reason is not None:
                logger.info(
                    f"Auto captain countdown for {self.baseline.thread_key} stopped: "
                    f"{stop_reason.value}"
                )
                await self._edit(handle, draft_messages.countdown_cancelled(text, stop_reason.value))
                return stop_reason

            if elapsed > self.deadline_seconds:
                break
            await self._edit(handle, text)

        return await self._resolve()

    def _stop_reason(self, snapshot: SessionSnapshot | None) -> WatcherOutcome | None:
        if snapshot is None:
            return WatcherOutcome.SESSION_GONE
        if snapshot.thread_key != self.baseline.thread_key:
            return WatcherOutcome.SESSION_REPLACED
        if snapshot.last_reset != self.baseline.last_reset:
            return WatcherOutcome.RESET
        if snapshot.open_captain_slots == 0:
            return WatcherOutcome.CAPTAINS_FILLED
        return None

    async def _resolve(self) -> WatcherOutcome:
        logger.info(f"Auto captain deadline passed for {self.baseline.thread_key}")
        notice = draft_messages.countdown_expired(self.deadline_seconds)
        handle = await self._post(notice)

        # The draft may have moved on while the notice was being posted
        stop_reason = self._stop_reason(self.reader.fetch_current(self.session_key))
        if stop_reason is not None:
            logger.info(
                f"Auto captain resolution for {self.baseline.thread_key} skipped: {stop_reason.value}"
            )
            await self._edit(handle, draft_messages.countdown_cancelled(notice, stop_reason.value))
            return stop_reason

        self.resolution_attempts += 1
        try:
            result = self.resolver()
            if inspect.isawaitable(result):
                result = await result
        except Exception:
            logger.exception(f"Random captain assignment raised for {self.baseline.thread_key}")
            await self._post(draft_messages.RANDOM_CAPTAIN_FAILURE)
            return WatcherOutcome.RESOLUTION_FAILED

        if not result.success:
            logger.warning(
                f"Random captain assignment failed for {self.baseline.thread_key}: "
                f"{result.error} ({result.error_code})"
            )
            await self._post(draft_messages.RANDOM_CAPTAIN_FAILURE)
            return WatcherOutcome.RESOLUTION_FAILED

        assignment = result.value
        await self._post(
            draft_messages.captains_announcement(
                assignment.outcome, assignment.blue_captain_id, assignment.red_captain_id
            )
        )
        return WatcherOutcome.RESOLVED

    async def _post(self, text: str) -> Any:
        try:
            return await self.announcer.post(text)
        except Exception as exc:
            logger.warning(f"Failed to post auto captain message: {exc}", exc_info=True)
            return None

    async def _edit(self, handle: Any, text: str) -> None:
        if handle is None:
            return
        try:
            await self.announcer.edit(handle, text)
        except Exception as exc:
            logger.warning(f"Failed to edit auto captain countdown: {exc}", exc_info=True)


def _log_task_failure(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error(f"Auto captain watcher {task.get_name()} crashed", exc_info=exc)


def spawn_auto_resolution_watcher(
    session_key: int | None,
    deadline_seconds: float = AUTO_CAPTAIN_DEADLINE_SECONDS,
    tick_seconds: float = AUTO_CAPTAIN_TICK_SECONDS,
    *,
    reader: IPersistedSessionReader,
    announcer: IAnnouncer,
    resolver: Resolver,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> "asyncio.Task[WatcherOutcome] | None":
    """
    Start a countdown for the current draft of `session_key`.

    The baseline snapshot is read before this returns, so a reset issued
    right after spawning is still noticed. Must be called with a running
    event loop.

    Returns:
        The watcher task, or None when there is no draft or no open captain slot
    """
    baseline = reader.fetch_current(session_key)
    if baseline is None:
        logger.debug(f"No draft for {session_key}, auto captain countdown not started")
        return None
    if baseline.open_captain_slots == 0:
        logger.debug(f"Captains already set for {baseline.thread_key}, countdown not started")
        return None

    watcher = AutoCaptainWatcher(
        session_key,
        baseline,
        reader=reader,
        announcer=announcer,
        resolver=resolver,
        deadline_seconds=deadline_seconds,
        tick_seconds=tick_seconds,
        clock=clock,
        sleep=sleep,
    )
    task = asyncio.create_task(watcher.run(), name=f"auto-captain-{baseline.thread_key}")
    task.add_done_callback(_log_task_failure)
    logger.info(f"Auto captain countdown started for {baseline.thread_key} ({deadline_seconds}s)")
    return task
