# src/linkcheck/services/link_filter_service.py
import logging
from typing import Iterable, List

from linkcheck.model import FilterSettings

logger = logging.getLogger(__name__)


class LinkFilterService:
    """
    Removes targets that should never be probed: empty targets,
    vendor boilerplate links and (optionally) mailto links.
    Order is preserved and duplicates are kept, so every occurrence is checked.
    """

    def __init__(self, settings: FilterSettings):
        self.settings = settings

    def is_excluded(self, url: str) -> bool:
        if not url or not url.strip():
            return True
        if any(pattern in url for pattern in self.settings.excluded_patterns):
            return True
        if self.settings.exclude_mailto and url.strip().lower().startswith("mailto:"):
            return True
        return False

    def apply(self, urls: Iterable[str]) -> List[str]:
        kept = []
        dropped = 0
        for url in urls:
            if self.is_excluded(url):
                dropped += 1
                continue
            kept.append(url)

        if dropped:
            logger.debug("Link filter dropped %d of %d target(s).", dropped, dropped + len(kept))
        return kept
