# src/linkcheck/model.py (Core Layer)
import logging
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, List, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from linkcheck.exceptions import LinkAlreadyResolved

logger = logging.getLogger(__name__)


class DocumentKind(str, Enum):
    """Supported office containers, keyed by file extension."""
    DOCX = ".docx"
    PPTX = ".pptx"

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> Optional["DocumentKind"]:
        suffix = Path(path).suffix.lower()
        for kind in cls:
            if kind.value == suffix:
                return kind
        return None


class LinkState(str, Enum):
    UNKNOWN = "unknown"
    WORKING = "working"
    BROKEN = "broken"


class ProbeResult(BaseModel):
    url: str
    state: LinkState
    status_code: Optional[int] = None
    error: Optional[str] = None
    elapsed_time: float = 0.0


class Link(BaseModel):
    url: str
    # Back-reference to the owning document (by path only)
    document_path: str
    state: LinkState = LinkState.UNKNOWN
    status_code: Optional[int] = None
    error: Optional[str] = None

    @property
    def is_working(self) -> bool:
        return self.state is LinkState.WORKING

    @property
    def is_resolved(self) -> bool:
        return self.state is not LinkState.UNKNOWN

    def resolve(self, result: ProbeResult) -> None:
        """
        Stores the outcome of the single probe for this link.
        A link is written exactly once; a second write raises LinkAlreadyResolved.
        """
        if self.is_resolved:
            raise LinkAlreadyResolved(f"Link {self.url} in {self.document_path} is already {self.state.value}.")
        if result.state is LinkState.UNKNOWN:
            raise ValueError("A probe result must be either working or broken.")
        self.status_code = result.status_code
        self.error = result.error
        self.state = result.state


class Document(BaseModel):
    path: str
    kind: DocumentKind
    is_valid: Optional[bool] = None
    links: List[Link] = Field(default_factory=list)
    # Set when the container could not be read; the document then has no links
    extraction_error: Optional[str] = None

    @property
    def broken_links(self) -> List[Link]:
        return [link for link in self.links if link.state is LinkState.BROKEN]

    @property
    def is_finalized(self) -> bool:
        return self.is_valid is not None

    def add_link(self, url: str) -> Link:
        link = Link(url=url, document_path=self.path)
        self.links.append(link)
        return link

    def finalize(self) -> bool:
        """
        Computes document validity once every link has been probed.
        """
        pending = [link.url for link in self.links if not link.is_resolved]
        if pending:
            raise RuntimeError(
                f"Document {self.path} cannot be finalized, {len(pending)} link(s) unresolved."
            )
        self.is_valid = all(link.is_working for link in self.links)
        return self.is_valid


class Report(BaseModel):
    """
    Result of one validation run, consumed by the renderer and exporter.
    Build it with Report.assemble() so the validity invariant always holds.
    """
    directories: List[str]
    documents: List[Document]
    broken_links: List[Link]
    all_valid: bool
    generated_at: datetime = Field(default_factory=datetime.now)
    elapsed_time: float = 0.0

    @classmethod
    def assemble(cls, directories: List[str], documents: List[Document], elapsed_time: float = 0.0) -> "Report":
        unfinished = [doc.path for doc in documents if not doc.is_finalized]
        if unfinished:
            raise RuntimeError(f"Report requested before {len(unfinished)} document(s) were validated.")

        broken = [link for doc in documents for link in doc.broken_links]
        all_valid = all(doc.is_valid for doc in documents)
        if all_valid != (not broken):
            # Documents were finalized before their links changed
            raise RuntimeError("Document validity disagrees with link states.")

        return cls(
            directories=list(directories),
            documents=list(documents),
            broken_links=broken,
            all_valid=all_valid,
            elapsed_time=elapsed_time,
        )

    @property
    def generated_at_display(self) -> str:
        return self.generated_at.strftime("%Y-%m-%d %H:%M:%S")

    @property
    def link_count(self) -> int:
        return sum(len(doc.links) for doc in self.documents)

    @property
    def invalid_documents(self) -> List[Document]:
        return [doc for doc in self.documents if not doc.is_valid]

    @property
    def documents_with_errors(self) -> List[Document]:
        return [doc for doc in self.documents if doc.extraction_error]


HYPERLINK_RELATIONSHIP_TYPE = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/hyperlink"


class ScanSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Internal path of the relationship manifest(s), per document kind
    manifest_patterns: Dict[DocumentKind, str] = Field(default_factory=lambda: {
        DocumentKind.DOCX: r"word/_rels/document\.xml\.rels",
        DocumentKind.PPTX: r"ppt/slides/_rels/[^/]+\.xml\.rels",
    })
    hyperlink_type: str = HYPERLINK_RELATIONSHIP_TYPE
    skip_lock_files: bool = True


class FilterSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    excluded_patterns: Tuple[str, ...] = ("http://office.microsoft.com",)
    exclude_mailto: bool = True


class ProbeSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    timeout: float = Field(default=5.0, gt=0)
    concurrency: int = Field(default=50, ge=1)
    http_errors_are_broken: bool = True
    chrome_version: str = "120.0.0.0"
