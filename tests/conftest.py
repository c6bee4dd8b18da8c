# tests/conftest.py
import zipfile
from pathlib import Path
from typing import Iterable, List, Sequence
from xml.sax.saxutils import quoteattr

import pytest

from linkcheck.model import HYPERLINK_RELATIONSHIP_TYPE

STYLES_TYPE = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/styles"
SLIDE_LAYOUT_TYPE = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/slideLayout"


def build_rels_xml(urls: Iterable[str], other_type: str = STYLES_TYPE) -> str:
    """A relationship manifest as Word/PowerPoint write it."""
    rows = [f'<Relationship Id="rId1" Type="{other_type}" Target="styles.xml"/>']
    for index, url in enumerate(urls, start=2):
        rows.append(
            f'<Relationship Id="rId{index}" Type="{HYPERLINK_RELATIONSHIP_TYPE}" '
            f'Target={quoteattr(url)} TargetMode="External"/>'
        )
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
        '<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">'
        + "".join(rows)
        + "</Relationships>"
    )


def write_docx(path: Path, urls: Sequence[str]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as zf:
        zf.writestr("[Content_Types].xml", "<Types/>")
        zf.writestr("word/document.xml", "<w:document/>")
        zf.writestr("word/_rels/document.xml.rels", build_rels_xml(urls))
    return path


def write_pptx(path: Path, slides: Sequence[Sequence[str]]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as zf:
        zf.writestr("[Content_Types].xml", "<Types/>")
        zf.writestr("ppt/presentation.xml", "<p:presentation/>")
        for number, urls in enumerate(slides, start=1):
            zf.writestr(f"ppt/slides/slide{number}.xml", "<p:sld/>")
            zf.writestr(f"ppt/slides/_rels/slide{number}.xml.rels", build_rels_xml(urls, SLIDE_LAYOUT_TYPE))
    return path


@pytest.fixture
def docx_factory(tmp_path):
    """Creates a .docx under tmp_path containing the given hyperlink targets."""
    def _make(name: str, urls: List[str]) -> Path:
        return write_docx(tmp_path / name, urls)
    return _make


@pytest.fixture
def pptx_factory(tmp_path):
    """Creates a .pptx under tmp_path; one list of targets per slide."""
    def _make(name: str, slides: List[List[str]]) -> Path:
        return write_pptx(tmp_path / name, slides)
    return _make
