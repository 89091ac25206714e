from docchat.models.query import RetrievedChunk

SYSTEM_PROMPT = """
YOU ARE AN AI ASSISTANT WHO HELPS RESOLVE QUERIES BASED ON THE CONTEXT AVAILABLE TO YOU FROM A PDF FILE WITH THE CONTENT AND PAGE NUMBER.
ONLY ANSWER BASED ON THE AVAILABLE CONTEXT FROM THE FILE.
IF THE CONTEXT DOES NOT CONTAIN THE ANSWER, SAY THAT IT IS NOT FOUND IN THE DOCUMENT.

CONTEXT:
{context}
"""

UNKNOWN_PAGE = "unknown"

class PromptBuilder:
    @staticmethod
    def build_context(chunks: list[RetrievedChunk]) -> str:
        """
        Concatenates retrieved chunks in rank order, each tagged with its page number.
        Returns an empty string when nothing was retrieved.
        """
        parts = []
        for i, chunk in enumerate(sorted(chunks, key=lambda c: c.rank), 1):
            page = chunk.page_number if chunk.page_number is not None else UNKNOWN_PAGE
            parts.append(f"[Chunk {i}]\nPage: {page}\n{chunk.text}")
        return "\n\n".join(parts)

    @staticmethod
    def build_system_instruction(context: str) -> str:
        return SYSTEM_PROMPT.format(context=context).strip()
