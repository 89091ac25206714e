import pytest

from docchat.core.parse.pdf_parser import PDFTextExtractor, looks_like_pdf
from docchat.tests.create_sample_pdf import build_pdf

def test_extracts_one_segment_per_page_with_page_numbers():
    data = build_pdf(["Revenue was $5M in 2023.", "Costs were $3M."])

    segments = PDFTextExtractor().extract(data)

    assert [s.page_number for s in segments] == [1, 2]
    assert "Revenue was $5M in 2023." in segments[0].text
    assert "Costs were $3M." in segments[1].text

def test_blank_pages_are_skipped():
    data = build_pdf(["Intro", "", "Appendix"])

    segments = PDFTextExtractor().extract(data)

    assert [s.page_number for s in segments] == [1, 3]

def test_non_pdf_bytes_are_rejected():
    with pytest.raises(ValueError):
        PDFTextExtractor().extract(b"hello, I am a text file")

def test_magic_byte_check():
    assert looks_like_pdf(b"%PDF-1.7\n...")
    assert looks_like_pdf(b"\n  %PDF-1.4")
    assert not looks_like_pdf(b"PK\x03\x04 zip archive")
    assert not looks_like_pdf(b"")
