import logging
import fitz  # PyMuPDF
from typing import List
from docchat.core.parse.base import TextExtractor
from docchat.models.chunk import ExtractedSegment

logger = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF-"

def looks_like_pdf(data: bytes) -> bool:
    return data[:1024].lstrip().startswith(PDF_MAGIC)

class PDFTextExtractor(TextExtractor):
    """
    Single-pass PDF text extraction with PyMuPDF.
    Emits one segment per page that carries text; page numbers are 1-based.
    """

    def extract(self, document: bytes) -> List[ExtractedSegment]:
        if not looks_like_pdf(document):
            raise ValueError("Document is not a PDF")

        segments = []
        with fitz.open(stream=document, filetype="pdf") as doc:
            for page_num, page in enumerate(doc):
                text = page.get_text("text").strip()
                if not text:
                    continue
                segments.append(ExtractedSegment(text=text, page_number=page_num + 1))

            logger.info(f"Extracted {len(segments)} non-empty pages out of {doc.page_count}")
        return segments
