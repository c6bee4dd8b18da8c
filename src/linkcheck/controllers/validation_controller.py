import asyncio
import logging
from typing import List, Optional, Protocol, Sequence

from linkcheck.controllers.async_controller import AsyncController
from linkcheck.managers.progress_manager import ProgressManager
from linkcheck.model import Document, Link, LinkState, ProbeResult, Report
from linkcheck.utils.run_timers import RunTimers

logger = logging.getLogger(__name__)


class Prober(Protocol):
    async def probe(self, url: str) -> ProbeResult: ...


class ValidationController(AsyncController):
    """
    Probes every link of every document concurrently and assembles the Report.

    Structure:
    1.  **Batch group:** one TaskGroup holding one task per document.
    2.  **Document group:** each document task opens its own TaskGroup with one
        task per link, and finalizes the document only after that group exits.
    3.  **Report:** assembled only after the batch group exits.

    The prober decides how many requests are actually in flight (semaphore);
    this controller only schedules them.
    """

    def __init__(self, prober: Prober, show_progress: bool = True):
        super().__init__()
        self.prober = prober
        self.show_progress = show_progress
        self.timer = RunTimers()
        self.progress_manager: Optional[ProgressManager] = None

    async def validate(self, documents: Sequence[Document], directories: Sequence[str]) -> Report:
        """
        Validates all documents and returns the aggregated report.
        Cancelling this coroutine cancels every outstanding probe.
        """
        documents = list(documents)
        total_links = sum(len(doc.links) for doc in documents)
        logger.info("Validating %d link(s) in %d document(s).", total_links, len(documents))

        self.timer.start()
        self.progress_manager = ProgressManager(
            total=total_links,
            desc="Checking links",
            unit="link",
            disable=not self.show_progress,
        )
        try:
            self._worker_task = asyncio.create_task(self._validate_all(documents))
            await self._worker_task
        finally:
            self.timer.stop()
            self.progress_manager.close()

        report = Report.assemble(list(directories), documents, elapsed_time=self.timer.duration)
        logger.info(
            "Validation finished in %s: %d broken link(s), %d invalid document(s).",
            self.timer.format(), len(report.broken_links), len(report.invalid_documents)
        )
        return report

    async def _validate_all(self, documents: List[Document]) -> None:
        async with asyncio.TaskGroup() as batch:
            for document in documents:
                batch.create_task(self._validate_document(document))

    async def _validate_document(self, document: Document) -> None:
        if document.links:
            async with asyncio.TaskGroup() as group:
                for link in document.links:
                    group.create_task(self._probe_link(link))

        document.finalize()
        if not document.is_valid:
            logger.info("%s: %d broken link(s).", document.path, len(document.broken_links))

    async def _probe_link(self, link: Link) -> None:
        try:
            result = await self.prober.probe(link.url)
        except Exception as e:
            # A failing probe must not take the other links of the batch down
            logger.error("Unexpected error probing %s: %s", link.url, e, exc_info=True)
            result = ProbeResult(url=link.url, state=LinkState.BROKEN, error=str(e) or type(e).__name__)

        link.resolve(result)
        if self.progress_manager:
            self.progress_manager.advance(broken=not link.is_working)
