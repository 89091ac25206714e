from typing import List
from docchat.models.chunk import ExtractedSegment, DocumentChunk
from docchat.config.settings import settings

class Chunker:
    """
    Recursive separator splitting of page-tagged segments.
    - A chunk never spans two pages, so every chunk keeps its page number.
    - Pages shorter than chunk_size pass through untouched.
    - Longer pages are split on the coarsest separator that works,
      then merged back into windows of at most chunk_size characters with overlap.
    """

    def __init__(self, chunk_size: int = None, chunk_overlap: int = None, separators: List[str] = None):
        config = settings.chunking
        self.chunk_size = chunk_size or config.chunk_size
        self.chunk_overlap = config.chunk_overlap if chunk_overlap is None else chunk_overlap
        self.separators = separators or config.separators
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError("chunk_overlap must be smaller than chunk_size")

    def chunk_document(self, doc_id: str, segments: List[ExtractedSegment]) -> List[DocumentChunk]:
        chunks = []
        for segment in segments:
            for text in self.split_text(segment.text):
                chunks.append(DocumentChunk(
                    text=text,
                    page_number=segment.page_number,
                    source_document_id=doc_id,
                    chunk_index=len(chunks)
                ))
        return chunks

    def split_text(self, text: str) -> List[str]:
        text = text.strip()
        if not text:
            return []
        if len(text) <= self.chunk_size:
            return [text]
        pieces = self._split_recursive(text, self.separators)
        return self._merge(pieces)

    def _split_recursive(self, text: str, separators: List[str]) -> List[str]:
        if len(text) <= self.chunk_size:
            return [text]
        if not separators:
            # Hard cut as a last resort
            return [text[i:i + self.chunk_size] for i in range(0, len(text), self.chunk_size)]

        sep, rest = separators[0], separators[1:]
        if sep not in text:
            return self._split_recursive(text, rest)

        parts = text.split(sep)
        pieces = []
        for i, part in enumerate(parts):
            # Keep the separator attached so merged text reads naturally
            piece = part + sep if i < len(parts) - 1 else part
            if not piece:
                continue
            pieces.extend(self._split_recursive(piece, rest))
        return pieces

    def _merge(self, pieces: List[str]) -> List[str]:
        chunks = []
        window: List[str] = []
        window_len = 0

        for piece in pieces:
            if window and window_len + len(piece) > self.chunk_size:
                chunks.append("".join(window).strip())
                # Drop from the front until only the overlap tail remains
                while window and (window_len > self.chunk_overlap or window_len + len(piece) > self.chunk_size):
                    window_len -= len(window[0])
                    window.pop(0)
            window.append(piece)
            window_len += len(piece)

        if window:
            chunks.append("".join(window).strip())
        return [c for c in chunks if c]
