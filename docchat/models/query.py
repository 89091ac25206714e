from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

class ChatRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    query: str | None = None
    collection_name: str | None = None

class ChatResponse(BaseModel):
    response: str

class RetrievedChunk(BaseModel):
    rank: int                        # 1-based similarity rank
    text: str
    page_number: int | None = None
    score: float

class AnswerResult(BaseModel):
    query: str
    collection_name: str
    answer: str
    chunks: list[RetrievedChunk]
