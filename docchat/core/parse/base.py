from abc import ABC, abstractmethod
from typing import List
from docchat.models.chunk import ExtractedSegment

class TextExtractor(ABC):
    @abstractmethod
    def extract(self, document: bytes) -> List[ExtractedSegment]:
        """Turns raw document bytes into ordered, page-tagged text segments."""
        pass
