# src/linkcheck/services/reachability_probe_service.py
import asyncio
import logging
import time
from typing import Optional

import aiohttp

from linkcheck.exceptions import ProbeFailed
from linkcheck.model import LinkState, ProbeResult, ProbeSettings

logger = logging.getLogger(__name__)


class ReachabilityProbeService:
    """
    Checks whether a single URL can be retrieved.
    Manages the aiohttp session, the global concurrency limit (semaphore)
    and the mapping of transport errors to a broken link.

    One attempt per call; a timed out or refused request is final.
    """

    def __init__(self, settings: ProbeSettings, user_agent: str):
        self.settings = settings
        self.user_agent = user_agent

        self.max_concurrency = settings.concurrency
        self.timeout = settings.timeout

        self.semaphore = asyncio.Semaphore(self.max_concurrency)
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def initialize(self):
        if not self.session or self.session.closed:
            timeout_obj = aiohttp.ClientTimeout(total=self.timeout)
            default_headers = {
                'Accept-Encoding': 'gzip, deflate',
                'User-Agent': self.user_agent
            }
            self.session = aiohttp.ClientSession(
                timeout=timeout_obj, headers=default_headers
            )
            logger.debug("ReachabilityProbeService: Session initialized (timeout=%ss, concurrency=%d).",
                         self.timeout, self.max_concurrency)

    async def close(self):
        if self.session and not self.session.closed:
            await self.session.close()
            logger.debug("ReachabilityProbeService: Session closed.")

    async def probe(self, url: str) -> ProbeResult:
        """
        Issues one GET request against the url and classifies the outcome.
        Never raises for network problems; those become a BROKEN result.
        """
        start_time = time.perf_counter()

        if not self.session or self.session.closed:
            await self.initialize()

        status_code: Optional[int] = None
        try:
            async with self.semaphore:
                status_code = await self._fetch_status(url)
            if status_code >= 400 and self.settings.http_errors_are_broken:
                raise ProbeFailed(url, f"HTTP {status_code}")
            result = ProbeResult(url=url, state=LinkState.WORKING, status_code=status_code)
        except ProbeFailed as e:
            result = ProbeResult(url=url, state=LinkState.BROKEN, status_code=status_code, error=e.reason)

        result.elapsed_time = round(time.perf_counter() - start_time, 4)
        logger.debug("Probed %s: %s (status=%s, %.3fs).", url, result.state.value, status_code, result.elapsed_time)
        return result

    async def _fetch_status(self, url: str) -> int:
        """Performs the request and returns the final status code (after redirects)."""
        try:
            async with self.session.get(url) as response:
                return response.status
        except asyncio.TimeoutError:
            raise ProbeFailed(url, f"Timed out after {self.timeout}s") from None
        except aiohttp.ClientError as e:
            raise ProbeFailed(url, str(e) or type(e).__name__) from e
        except ValueError as e:
            # Relative or otherwise malformed targets
            raise ProbeFailed(url, f"Invalid URL: {e}") from e
