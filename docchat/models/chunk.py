from typing import Any
from pydantic import BaseModel, Field

class ExtractedSegment(BaseModel):
    text: str
    page_number: int | None = None   # extractors may not know the page

class DocumentChunk(BaseModel):
    text: str
    page_number: int | None = None
    source_document_id: str
    chunk_index: int                 # absolute position in document

class IndexRecord(BaseModel):
    vector: list[float]
    text: str
    metadata: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_chunk(cls, chunk: DocumentChunk, vector: list[float]) -> "IndexRecord":
        return cls(
            vector=vector,
            text=chunk.text,
            metadata={
                "page_number": chunk.page_number,
                "source_document_id": chunk.source_document_id,
                "chunk_index": chunk.chunk_index,
            }
        )
