import logging
from docchat.core.embed.base import EmbeddingService
from docchat.core.errors import InputError, EmbeddingFailed, CompletionFailed, NotFoundError, UpstreamError
from docchat.core.generate.base import CompletionService
from docchat.core.generate.prompt_builder import PromptBuilder
from docchat.models.query import AnswerResult
from docchat.storage.base import VectorIndex

logger = logging.getLogger(__name__)

TOP_K = 3

class AnsweringPipeline:
    """
    Answers a question against one completed collection.
    Sequence: check collection -> embed query -> retrieve top-3 -> build prompt -> complete

    Exactly one embedding call and one completion call per query; errors
    propagate to the caller untouched by retries.
    """

    def __init__(self,
                 vector_index: VectorIndex,
                 embedder: EmbeddingService,
                 llm: CompletionService):
        self.vector_index = vector_index
        self.embedder = embedder
        self.llm = llm
        self.prompt_builder = PromptBuilder()

    def answer(self, query: str, collection_name: str) -> AnswerResult:
        if not query or not query.strip():
            raise InputError("Missing query")
        if not collection_name or not collection_name.strip():
            raise InputError("Missing collectionName")

        logger.info(f"Answering on {collection_name}: '{query}'")

        # 1. The collection must exist before anything is spent on it
        try:
            self.vector_index.ensure_exists(collection_name)
        except (NotFoundError, UpstreamError):
            raise
        except Exception as e:
            raise UpstreamError(str(e) or type(e).__name__) from e

        # 2. Embed the query
        try:
            query_vector = self.embedder.embed_query(query)
        except Exception as e:
            raise EmbeddingFailed(str(e) or type(e).__name__) from e

        # 3. Retrieve
        try:
            chunks = self.vector_index.retrieve(collection_name, query_vector, TOP_K)
        except (NotFoundError, UpstreamError):
            raise
        except Exception as e:
            raise UpstreamError(str(e) or type(e).__name__) from e
        logger.info(f"Found {len(chunks)} relevant chunks in {collection_name}")

        # 4. Prompt
        context = self.prompt_builder.build_context(chunks)
        system_instruction = self.prompt_builder.build_system_instruction(context)

        # 5. Completion
        try:
            answer = self.llm.complete(system_instruction, query)
        except Exception as e:
            raise CompletionFailed(str(e) or type(e).__name__) from e

        return AnswerResult(
            query=query,
            collection_name=collection_name,
            answer=answer,
            chunks=chunks
        )
