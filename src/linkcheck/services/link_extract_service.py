# src/linkcheck/services/link_extract_service.py
import io
import logging
import re
import zipfile
import zlib
from html import unescape
from typing import Dict, List, Pattern

from linkcheck.exceptions import ExtractionFailed
from linkcheck.model import DocumentKind, ScanSettings

logger = logging.getLogger(__name__)


class LinkExtractService:
    """
    Reads the hyperlink targets out of an office container.

    Hyperlinks are not stored in the document body itself but in the
    relationship manifest(s) of the container, e.g. 'word/_rels/document.xml.rels'.
    Each relationship of the hyperlink type carries the external URL as its Target.
    """

    def __init__(self, settings: ScanSettings):
        self.settings = settings

        # Compiled once per service instance
        self._manifest_patterns: Dict[DocumentKind, Pattern[str]] = {
            kind: re.compile(pattern) for kind, pattern in settings.manifest_patterns.items()
        }
        self._hyperlink_pattern = re.compile(
            r'Type="' + re.escape(settings.hyperlink_type) + r'"\s+Target="(?P<url>[^"]*)"'
        )

    def is_manifest_entry(self, entry_name: str, kind: DocumentKind) -> bool:
        pattern = self._manifest_patterns.get(kind)
        return bool(pattern and pattern.fullmatch(entry_name))

    def extract(self, content: bytes, kind: DocumentKind) -> List[str]:
        """
        Returns all raw hyperlink targets of the document, in document order.

        Raises:
            ExtractionFailed: If the archive or a manifest entry cannot be read.
        """
        manifests = self._read_manifests(content, kind)
        urls: List[str] = []
        for manifest in manifests:
            urls.extend(self.extract_from_manifest(manifest))
        return urls

    def extract_from_manifest(self, manifest: str) -> List[str]:
        """Finds every hyperlink relationship record in one manifest text."""
        return [unescape(match.group("url")) for match in self._hyperlink_pattern.finditer(manifest)]

    def _read_manifests(self, content: bytes, kind: DocumentKind) -> List[str]:
        manifests: List[str] = []
        try:
            with zipfile.ZipFile(io.BytesIO(content)) as container:
                for entry in container.infolist():
                    if not self.is_manifest_entry(entry.filename, kind):
                        continue
                    with container.open(entry) as reader:
                        manifests.append(reader.read().decode("utf-8"))
        except (zipfile.BadZipFile, zlib.error, OSError, KeyError, RuntimeError, UnicodeDecodeError, EOFError) as e:
            raise ExtractionFailed(str(e) or type(e).__name__) from e

        if not manifests:
            logger.debug("No relationship manifest found for kind %s.", kind.value)
        return manifests
