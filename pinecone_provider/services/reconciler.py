"""
Drive index mutations to completion. The controller accepts create/configure/delete
immediately and converges later, so each mutation is followed by describe polls until
the index is ready (or, after delete, gone).

Polls are a fixed interval apart. The wait between polls ends early on the optional
deadline or stop signal, and task cancellation propagates as usual. Any error from the
mutating call or from describe ends the operation at once; nothing is retried or
rolled back.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from typing import cast

from pinecone_provider.config.logging import get_logger
from pinecone_provider.config.settings import Settings, get_settings
from pinecone_provider.models.controlplane import ConfigureIndexRequest, CreateIndexRequest, IndexDescription
from pinecone_provider.resources.controlplane.base import BaseControlPlaneClient

logger = get_logger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 5.0


class ReconciliationError(Exception):
    """The index did not reach the wanted state."""

    def __init__(self, message: str, index_name: str):
        super().__init__(message)
        self.index_name = index_name


class ConvergenceTimeoutError(ReconciliationError):
    """The deadline passed before the index converged."""


class ConvergenceCancelledError(ReconciliationError):
    """The stop signal was set while waiting between polls."""


@dataclass(frozen=True)
class PollPolicy:
    """How often to describe, and how long to keep trying (None = until converged)."""

    interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS
    timeout_seconds: float | None = None

    def __post_init__(self) -> None:
        if self.interval_seconds < 0:
            raise ValueError("interval_seconds must be >= 0")
        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0")

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "PollPolicy":
        s = settings or get_settings()
        return cls(interval_seconds=s.poll_interval_seconds, timeout_seconds=s.convergence_timeout_seconds)


def _is_ready(description: IndexDescription | None) -> bool:
    return description is not None and description.status.ready


def _is_absent(description: IndexDescription | None) -> bool:
    return description is None


class IndexReconciler:
    """Mutate-then-poll for one control-plane client."""

    def __init__(
        self,
        client: BaseControlPlaneClient,
        policy: PollPolicy | None = None,
        stop_event: asyncio.Event | None = None,
    ) -> None:
        self._client = client
        self._policy = policy or PollPolicy()
        self._stop_event = stop_event

    async def create(self, request: CreateIndexRequest) -> IndexDescription:
        """Create the index and return the first ready snapshot."""
        await self._client.create_index(request)
        return await self.wait_until_ready(request.name)

    async def configure(self, index_name: str, request: ConfigureIndexRequest) -> IndexDescription:
        """Apply replicas/pod_type and return the first ready snapshot afterwards."""
        await self._client.configure_index(index_name, request)
        return await self.wait_until_ready(index_name)

    async def delete(self, index_name: str) -> None:
        """Delete the index and return once describe no longer finds it."""
        await self._client.delete_index(index_name)
        await self.wait_until_absent(index_name)

    async def wait_until_ready(self, index_name: str) -> IndexDescription:
        description = await self._poll(index_name, _is_ready, "ready")
        return cast(IndexDescription, description)

    async def wait_until_absent(self, index_name: str) -> None:
        await self._poll(index_name, _is_absent, "deleted")

    async def _poll(
        self,
        index_name: str,
        converged: Callable[[IndexDescription | None], bool],
        goal: str,
    ) -> IndexDescription | None:
        loop = asyncio.get_running_loop()
        started = loop.time()
        deadline = None if self._policy.timeout_seconds is None else started + self._policy.timeout_seconds
        attempt = 0
        while True:
            attempt += 1
            description = await self._client.describe_index(index_name)
            if converged(description):
                logger.info(
                    "Index converged",
                    extra={
                        "index_name": index_name,
                        "goal": goal,
                        "polls": attempt,
                        "elapsed_seconds": round(loop.time() - started, 3),
                    },
                )
                return description

            logger.debug(
                "Index not converged yet",
                extra={
                    "index_name": index_name,
                    "goal": goal,
                    "poll": attempt,
                    "state": description.status.state if description is not None else "absent",
                },
            )
            delay = self._policy.interval_seconds
            if deadline is not None:
                remaining = deadline - loop.time()
                if remaining <= 0:
                    raise ConvergenceTimeoutError(
                        f"index {index_name!r} not {goal} after {self._policy.timeout_seconds}s ({attempt} polls)",
                        index_name=index_name,
                    )
                delay = min(delay, remaining)
            await self._wait(delay, index_name, goal)

    async def _wait(self, delay: float, index_name: str, goal: str) -> None:
        if self._stop_event is None:
            await asyncio.sleep(delay)
            return
        if not self._stop_event.is_set():
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=delay)
            except asyncio.TimeoutError:
                return
        raise ConvergenceCancelledError(
            f"stopped waiting for index {index_name!r} to be {goal}",
            index_name=index_name,
        )
