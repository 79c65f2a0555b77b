"""Progress reporting for authentication runs.

Two shapes of the same channel: a callback (``ProgressReporter``) and an
async-iterable FIFO (``ProgressChannel``) that closes after the last event.
"""

import asyncio
import inspect
import logging
from collections.abc import AsyncIterator, Awaitable, Callable

from grail_scanner.config.constants import TOOL_RESULT_PREVIEW_CHARS, ScanStatus
from grail_scanner.orchestrator.models import ScanProgress

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ScanProgress], Awaitable[None] | None]


class ProgressReporter:
    """Emit ``ScanProgress`` events to an optional callback (sync or async)."""

    def __init__(self, callback: ProgressCallback | None = None) -> None:
        self._callback = callback
        self.events: list[ScanProgress] = []

    async def report(
        self,
        status: ScanStatus,
        message: str,
        step: int,
        *,
        tool_name: str | None = None,
        tool_result: str | None = None,
    ) -> ScanProgress:
        """Build, record, and deliver one progress event.

        A failing callback is logged and does not abort the scan.
        """
        if tool_result is not None:
            tool_result = tool_result[:TOOL_RESULT_PREVIEW_CHARS]
        progress = ScanProgress(
            status=status,
            message=message,
            step=step,
            tool_name=tool_name,
            tool_result=tool_result,
        )
        self.events.append(progress)
        logger.info("[%s] step %d: %s", status.value, step, message)

        if self._callback is not None:
            try:
                outcome = self._callback(progress)
                if inspect.isawaitable(outcome):
                    await outcome
            except Exception:
                logger.warning("Progress callback failed for %s", status.value, exc_info=True)
        return progress


class ProgressChannel:
    """FIFO of progress events consumed with ``async for``.

    Iteration ends once the channel is closed and drained.
    """

    _CLOSED = object()

    def __init__(self) -> None:
        self._queue: asyncio.Queue[object] = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def publish(self, progress: ScanProgress) -> None:
        if self._closed:
            raise RuntimeError("Progress channel is closed")
        self._queue.put_nowait(progress)

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._queue.put_nowait(self._CLOSED)

    async def __aiter__(self) -> AsyncIterator[ScanProgress]:
        while True:
            item = await self._queue.get()
            if item is self._CLOSED:
                return
            yield item  # type: ignore[misc]
