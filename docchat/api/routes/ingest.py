import logging
import uuid
from fastapi import APIRouter, UploadFile, File, Depends, HTTPException, Request

from docchat.api.services import Services
from docchat.core.errors import JobNotFound
from docchat.core.parse.pdf_parser import looks_like_pdf
from docchat.models.job import JobStatusResponse, UploadResponse

router = APIRouter()
logger = logging.getLogger(__name__)

def get_services(request: Request) -> Services:
    return request.app.state.services

def _is_pdf_upload(file: UploadFile) -> bool:
    return file.content_type == "application/pdf" or (file.filename or "").lower().endswith(".pdf")

@router.post("/upload", response_model=UploadResponse, summary="Upload a PDF and start indexing it")
async def upload_pdf(
    pdf: UploadFile | None = File(None),
    services: Services = Depends(get_services)
):
    """
    1. Validates the upload (present, PDF content type or extension, PDF magic bytes).
    2. Saves the bytes via FileStore and creates a pending job.
    3. Hands ingestion to the worker and returns without waiting for it.
    """
    if pdf is None:
        raise HTTPException(status_code=400, detail="No file uploaded")

    try:
        if not _is_pdf_upload(pdf):
            raise HTTPException(status_code=400, detail="Only PDF files are allowed")

        file_bytes = await pdf.read()
        if not looks_like_pdf(file_bytes):
            raise HTTPException(status_code=400, detail="Only PDF files are allowed")

        job_id = str(uuid.uuid4())
        saved_path = services.file_store.save_upload(job_id, pdf.filename, file_bytes)
        job = services.jobs.create(job_id=job_id, source_file=pdf.filename)

        logger.info(f"Upload '{pdf.filename}' accepted as job {job.id}")
        try:
            services.worker.submit(job.id, saved_path, job.collection_name)
        except Exception as e:
            # Nothing else will ever move the job out of pending
            services.jobs.fail(job.id, str(e) or type(e).__name__)
            raise

        return UploadResponse(job_id=job.id, collection_name=job.collection_name)

    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Upload failed for {pdf.filename}")
        raise HTTPException(status_code=500, detail="Upload failed")

    finally:
        await pdf.close()

@router.get("/status/{job_id}", response_model=JobStatusResponse,
            response_model_exclude_none=True, summary="Get the indexing status of an upload")
def get_status(job_id: str, services: Services = Depends(get_services)):
    try:
        return services.status.get(job_id)
    except JobNotFound:
        raise HTTPException(status_code=404, detail="Job not found")
