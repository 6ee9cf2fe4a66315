"""Search pipeline: owns the current search job and publishes its outcome.

Each submission mints a new token. A job's result is published only while its
token is still the latest one, so a slow search can never overwrite the state
of a newer one. Superseded jobs keep running until their requests finish; their
results are dropped.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Callable, List, Optional, Set

import structlog

from sparos.core.exceptions import ResolutionError
from .job_store import InMemoryJobStore
from .models import PipelineState, Resolution, SearchJob

if TYPE_CHECKING:
    from sparos.protocols import JobStore
    from .resolver import UserResolver

logger = structlog.get_logger(__name__)

UNKNOWN_ERROR_MESSAGE = "an unknown error occurred"

StateListener = Callable[[PipelineState], None]


class SearchPipeline:
    """Runs at most one visible search job at a time."""

    def __init__(
        self,
        resolver: "UserResolver",
        job_store: Optional["JobStore"] = None,
        on_state_change: Optional[StateListener] = None,
    ):
        """
        :param resolver: Resolver each job runs
        :param job_store: Where the in-flight job record is kept between restarts
        :param on_state_change: Called with a snapshot after every state change
        """
        self._resolver = resolver
        self._job_store = job_store if job_store is not None else InMemoryJobStore()
        self._listeners: List[StateListener] = []
        if on_state_change is not None:
            self._listeners.append(on_state_change)

        self._latest_token = 0
        self._state = PipelineState()
        self._tasks: Set[asyncio.Task] = set()

    @property
    def latest_token(self) -> int:
        return self._latest_token

    @property
    def state(self) -> PipelineState:
        """Snapshot of the published state."""
        return self._state.model_copy(deep=True)

    @property
    def job(self) -> Optional[SearchJob]:
        return self._state.job

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a state listener; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _update(self, **changes) -> None:
        self._state = self._state.model_copy(update=changes)
        snapshot = self.state
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Search state listener failed")

    def _is_current(self, token: int) -> bool:
        return token == self._latest_token

    def submit(self, query: str) -> asyncio.Task:
        """
        Start a search for ``query``, superseding any job in flight.

        Must be called from a running event loop. The returned task never
        raises; the outcome is only observable through the published state.
        """
        token = self._latest_token + 1
        self._latest_token = token

        job = SearchJob(query=query, token=token)
        self._job_store.save(job)
        self._update(running=True, error=None, job=job)
        logger.info("Search job submitted", query=query, token=token)

        task = asyncio.get_running_loop().create_task(
            self._run(query, token), name=f"search-job-{token}"
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run(self, query: str, token: int) -> None:
        try:
            resolution = await self._resolver.resolve(query)
        except ResolutionError as e:
            self._fail(token, e.message)
        except Exception:
            if self._is_current(token):
                logger.exception("Search job crashed", query=query, token=token)
            self._fail(token, UNKNOWN_ERROR_MESSAGE)
        else:
            self._succeed(token, resolution)

    def _succeed(self, token: int, resolution: Resolution) -> None:
        # No await between the token check and the update
        if not self._is_current(token):
            return
        self._job_store.clear()
        self._update(
            running=False,
            error=None,
            job=None,
            account=resolution.account,
            memberships=resolution.memberships,
        )
        logger.info(
            "Search job published account",
            token=token,
            membership_id=resolution.account.membership_id,
            source=resolution.account.source,
        )

    def _fail(self, token: int, message: str) -> None:
        if not self._is_current(token):
            return
        self._job_store.clear()
        self._update(
            running=False,
            error=message,
            job=None,
            account=None,
            memberships=None,
        )
        logger.info("Search job published error", token=token, error=message)

    def cancel(self) -> None:
        """Invalidate the current job without starting a new one.

        Requests already sent keep running; their results are discarded.
        """
        self._latest_token += 1
        self._job_store.clear()
        self._update(running=False, job=None)
        logger.info("Search job cancelled", latest_token=self._latest_token)

    def restore_job(self) -> Optional[asyncio.Task]:
        """Replay a job left over from a previous session, if any."""
        job = self._job_store.load()
        if job is None:
            return None
        logger.info("Restoring search job", query=job.query, previous_token=job.token)
        return self.submit(job.query)

    async def wait_idle(self) -> None:
        """Wait until every job task, stale or current, has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel outstanding job tasks; used on application shutdown."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
