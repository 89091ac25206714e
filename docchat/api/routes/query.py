import logging
from fastapi import APIRouter, Depends, HTTPException

from docchat.api.routes.ingest import get_services
from docchat.api.services import Services
from docchat.core.errors import InputError, NotFoundError, UpstreamError
from docchat.models.query import ChatRequest, ChatResponse

router = APIRouter()
logger = logging.getLogger(__name__)

@router.post("/chat", response_model=ChatResponse, summary="Ask a question about an indexed PDF")
def chat(
    request_data: ChatRequest,
    services: Services = Depends(get_services)
):
    """
    Plain def: FastAPI runs it in the threadpool, so slow embedding and
    completion calls never hold up other requests or ingestion.
    """
    try:
        result = services.answering.answer(request_data.query, request_data.collection_name)
        return ChatResponse(response=result.answer)

    except InputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail={"error": "Collection not found", "details": str(e)})
    except UpstreamError as e:
        logger.error(f"Chat failed at {e.stage}: {e}")
        raise HTTPException(status_code=502, detail={"error": "Failed to process chat request", "details": str(e)})
    except Exception as e:
        logger.exception("Chat pipeline execution failed.")
        raise HTTPException(status_code=500, detail={"error": "Failed to process chat request", "details": str(e)})
