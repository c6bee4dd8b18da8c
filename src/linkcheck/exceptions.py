"""Exception hierarchy for docaudit.

Per-document and per-link failures (``TraversalError``, ``ExtractionFailed``,
``ProbeFailed``) are recovered where they occur and turned into report data.
Only ``ReportWriteFailed`` and ``ConfigurationError`` end a run.
"""

from __future__ import annotations

from typing import Optional


class DocAuditError(Exception):
    """Base exception for all docaudit errors."""


class TraversalError(DocAuditError):
    """Raised when a single filesystem entry cannot be read during a scan."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot traverse '{path}': {reason}")


class ExtractionFailed(DocAuditError):
    """Raised when a document archive or its relationship manifest is unreadable."""

    def __init__(self, reason: str, path: Optional[str] = None) -> None:
        self.path = path
        self.reason = reason
        where = f" '{path}'" if path else ""
        super().__init__(f"Could not extract hyperlinks from document{where}: {reason}")


class ProbeFailed(DocAuditError):
    """Raised inside the prober when a network-level check fails for one URL."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Probe failed for {url}: {reason}")


class ReportWriteFailed(DocAuditError):
    """Raised when the report artifact cannot be created or written."""


class ConfigurationError(DocAuditError):
    """Raised when settings cannot be loaded or fail validation."""


class LinkAlreadyResolved(DocAuditError, RuntimeError):
    """Raised when a link's reachability state is written a second time."""
