# tests/core/test_link_extraction.py
import io
import zipfile

import pytest

from linkcheck.exceptions import ExtractionFailed
from linkcheck.model import DocumentKind, ScanSettings
from linkcheck.services.link_extract_service import LinkExtractService
from conftest import build_rels_xml


@pytest.fixture
def extractor():
    return LinkExtractService(ScanSettings())


def test_extracts_docx_hyperlinks_in_document_order(extractor, docx_factory):
    path = docx_factory("links.docx", ["https://example.com/a", "http://example.org/b", "https://example.com/a"])
    urls = extractor.extract(path.read_bytes(), DocumentKind.DOCX)
    assert urls == ["https://example.com/a", "http://example.org/b", "https://example.com/a"]


def test_ignores_non_hyperlink_relationships(extractor, docx_factory):
    path = docx_factory("nolinks.docx", [])
    assert extractor.extract(path.read_bytes(), DocumentKind.DOCX) == []


def test_extracts_from_every_pptx_slide(extractor, pptx_factory):
    path = pptx_factory("deck.pptx", [["https://one.example"], [], ["https://three.example", "https://four.example"]])
    urls = extractor.extract(path.read_bytes(), DocumentKind.PPTX)
    assert urls == ["https://one.example", "https://three.example", "https://four.example"]


def test_docx_pattern_does_not_match_pptx_manifests(extractor, pptx_factory):
    path = pptx_factory("deck.pptx", [["https://one.example"]])
    assert extractor.extract(path.read_bytes(), DocumentKind.DOCX) == []


def test_missing_manifest_is_not_an_error(extractor):
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        zf.writestr("word/document.xml", "<w:document/>")
    assert extractor.extract(buffer.getvalue(), DocumentKind.DOCX) == []


def test_empty_targets_are_captured(extractor, docx_factory):
    path = docx_factory("empty.docx", ["", "https://example.com"])
    assert extractor.extract(path.read_bytes(), DocumentKind.DOCX) == ["", "https://example.com"]


def test_xml_entities_are_unescaped(extractor, docx_factory):
    path = docx_factory("query.docx", ["https://example.com/search?q=a&page=2"])
    assert extractor.extract(path.read_bytes(), DocumentKind.DOCX) == ["https://example.com/search?q=a&page=2"]


def test_corrupt_archive_raises_extraction_failed(extractor):
    with pytest.raises(ExtractionFailed):
        extractor.extract(b"this is not a zip file", DocumentKind.DOCX)


def test_truncated_archive_raises_extraction_failed(extractor, docx_factory):
    content = docx_factory("cut.docx", ["https://example.com"]).read_bytes()
    with pytest.raises(ExtractionFailed):
        extractor.extract(content[: len(content) // 2], DocumentKind.DOCX)


def test_extraction_is_deterministic(extractor, pptx_factory):
    content = pptx_factory("deck.pptx", [["https://a.example", "https://b.example"], ["https://c.example"]]).read_bytes()
    first = extractor.extract(content, DocumentKind.PPTX)
    for _ in range(5):
        assert extractor.extract(content, DocumentKind.PPTX) == first


def test_extract_from_manifest_text(extractor):
    manifest = build_rels_xml(["https://x.example/1", "mailto:someone@example.com"])
    assert extractor.extract_from_manifest(manifest) == ["https://x.example/1", "mailto:someone@example.com"]


def test_manifest_entry_matching(extractor):
    assert extractor.is_manifest_entry("word/_rels/document.xml.rels", DocumentKind.DOCX)
    assert not extractor.is_manifest_entry("word/_rels/footnotes.xml.rels", DocumentKind.DOCX)
    assert extractor.is_manifest_entry("ppt/slides/_rels/slide12.xml.rels", DocumentKind.PPTX)
    assert not extractor.is_manifest_entry("ppt/slideLayouts/_rels/slideLayout1.xml.rels", DocumentKind.PPTX)
