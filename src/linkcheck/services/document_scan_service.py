# src/linkcheck/services/document_scan_service.py
import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional

from linkcheck.exceptions import ExtractionFailed, TraversalError
from linkcheck.model import Document, DocumentKind, ScanSettings
from linkcheck.services.link_extract_service import LinkExtractService
from linkcheck.services.link_filter_service import LinkFilterService

logger = logging.getLogger(__name__)


class DocumentScanService:
    """
    Walks a directory tree and turns every supported office file into a
    Document holding its filtered, not yet probed, links.

    Unreadable entries never abort the scan:
    - directories that cannot be listed are logged and skipped;
    - documents that cannot be parsed are kept with zero links and an
      extraction_error, so they still show up in the report.
    """

    def __init__(self, settings: ScanSettings, extractor: LinkExtractService, link_filter: LinkFilterService):
        self.settings = settings
        self.extractor = extractor
        self.link_filter = link_filter
        self.traversal_errors: List[TraversalError] = []

    def scan_many(self, roots: Iterable[str]) -> List[Document]:
        documents: List[Document] = []
        for root in roots:
            documents.extend(self.scan(root))
        return documents

    def scan(self, root: str) -> List[Document]:
        if not os.path.isdir(root):
            self._record_traversal_error(TraversalError(root, "not a directory or does not exist"))
            return []

        documents: List[Document] = []

        def on_error(err: OSError) -> None:
            self._record_traversal_error(TraversalError(err.filename or root, err.strerror or str(err)))

        for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
            # Sorted in place so os.walk descends in a stable order
            dirnames.sort()
            for filename in sorted(filenames):
                kind = self._qualify(filename)
                if kind is None:
                    continue
                documents.append(self.load_document(os.path.join(dirpath, filename), kind))

        logger.info("Found %d document(s) under '%s'.", len(documents), root)
        return documents

    def load_document(self, path: str, kind: DocumentKind) -> Document:
        """Reads one container and attaches its filtered links."""
        document = Document(path=path, kind=kind)
        try:
            content = Path(path).read_bytes()
        except OSError as e:
            self._record_extraction_error(document, ExtractionFailed(e.strerror or str(e), path))
            return document

        try:
            raw_urls = self.extractor.extract(content, kind)
        except ExtractionFailed as e:
            self._record_extraction_error(document, ExtractionFailed(e.reason, path))
            return document

        for url in self.link_filter.apply(raw_urls):
            document.add_link(url)

        logger.debug("%s: %d hyperlink(s) found, %d kept after filtering.", path, len(raw_urls), len(document.links))
        return document

    def _qualify(self, filename: str) -> Optional[DocumentKind]:
        if self.settings.skip_lock_files and filename.startswith("~$"):
            return None
        return DocumentKind.from_path(filename)

    def _record_traversal_error(self, error: TraversalError) -> None:
        self.traversal_errors.append(error)
        logger.warning("Skipping entry: %s", error)

    @staticmethod
    def _record_extraction_error(document: Document, error: ExtractionFailed) -> None:
        document.extraction_error = error.reason
        logger.warning("%s. The document is reported without links.", error)
