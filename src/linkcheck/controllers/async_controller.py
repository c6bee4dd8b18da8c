import asyncio
import logging
from typing import Optional

logger = logging.getLogger(__name__)


class AsyncController:
    """
    Base class for controllers that run their work in a single asyncio task.

    Subclasses assign `_worker_task`; shutdown() cancels it when the run
    has to stop early (Ctrl+C, a failing caller).
    """

    def __init__(self):
        self._worker_task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._worker_task is not None and not self._worker_task.done()

    async def shutdown(self) -> bool:
        """
        Cancels the work task and waits until it has unwound.
        Returns True if there was anything to cancel.
        """
        if not self.is_running:
            return False

        task = self._worker_task
        task.cancel()
        # Outstanding probes are cancelled with it; their CancelledError ends here.
        await asyncio.gather(task, return_exceptions=True)
        logger.debug("%s: worker task cancelled.", type(self).__name__)
        return True
