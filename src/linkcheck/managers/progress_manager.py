# src/linkcheck/managers/progress_manager.py
import sys
from tqdm import tqdm
import logging

logger = logging.getLogger(__name__)


class ProgressManager:
    """
    Wraps the tqdm bar shown while links are being probed.
    The postfix keeps a running count of broken links.
    """

    def __init__(self, total: int, desc: str, unit: str = "link", disable: bool = False):
        self.broken = 0
        self.pbar = tqdm(
            total=max(total, 0),
            desc=desc,
            unit=f" {unit}",
            dynamic_ncols=True,
            smoothing=0.1,
            mininterval=0.5,
            postfix={"broken": 0},
            bar_format="{l_bar}{bar}| {n_fmt}/{total_fmt} [{elapsed}<{remaining}, {rate_fmt}] {postfix}",
            file=sys.stdout,
            disable=disable,
        )

    def advance(self, steps: int = 1, broken: bool = False):
        """Marks `steps` links as resolved."""
        if not self.pbar:
            return
        self.pbar.update(steps)
        if broken:
            self.broken += 1
            self.pbar.set_postfix({"broken": self.broken}, refresh=False)

    def close(self):
        if not self.pbar:
            return
        try:
            self.pbar.set_postfix({"broken": self.broken}, refresh=True)
            self.pbar.close()
            logger.debug("ProgressManager: Progress bar closed.")
        except Exception as e:
            logger.error(f"Error encountered while closing progress bar: {e}")
        finally:
            self.pbar = None
