import logging
import os
import time
from typing import Any, Callable, Optional
import httpx
from docchat.core.errors import DocChatError, InputError, NotFoundError, UpstreamError
from docchat.models.job import JobStatus, JobStatusResponse, UploadResponse

logger = logging.getLogger(__name__)

class IndexingTimeout(DocChatError):
    """The poller gave up. The server-side job keeps running."""

class IngestionFailedError(DocChatError):
    def __init__(self, status: JobStatusResponse):
        self.status = status
        super().__init__(status.error or "PDF indexing failed")

class DocChatClient:
    """
    HTTP client for the docchat API.
    wait_until_indexed() polls at a fixed interval for a fixed number of
    attempts (1s x 60 by default); running out is a client-side failure only.
    """

    def __init__(self,
                 base_url: str = "http://localhost:3001",
                 poll_interval: float = 1.0,
                 max_attempts: int = 60,
                 http_client: Optional[httpx.Client] = None,
                 sleep: Callable[[float], None] = time.sleep):
        self.poll_interval = poll_interval
        self.max_attempts = max_attempts
        self._client = http_client or httpx.Client(base_url=base_url, timeout=60.0)
        self._sleep = sleep

    def close(self):
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _request(self, method: str, url: str, **kwargs) -> Any:
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise UpstreamError(f"Request to {url} failed: {e}") from e

        if response.is_success:
            return response.json()

        detail = _detail(response)
        if response.status_code == 400:
            raise InputError(detail)
        if response.status_code == 404:
            raise NotFoundError(detail)
        raise UpstreamError(f"{response.status_code}: {detail}")

    def health(self) -> dict:
        return self._request("GET", "/api/health")

    def upload(self, file_path: str) -> UploadResponse:
        with open(file_path, "rb") as f:
            return self.upload_bytes(f.read(), os.path.basename(file_path))

    def upload_bytes(self, data: bytes, filename: str) -> UploadResponse:
        files = {"pdf": (filename, data, "application/pdf")}
        return UploadResponse.model_validate(self._request("POST", "/api/upload", files=files))

    def get_status(self, job_id: str) -> JobStatusResponse:
        return JobStatusResponse.model_validate(self._request("GET", f"/api/status/{job_id}"))

    def wait_until_indexed(self, job_id: str) -> JobStatusResponse:
        for attempt in range(1, self.max_attempts + 1):
            status = self.get_status(job_id)
            logger.debug(f"[{job_id}] poll {attempt}/{self.max_attempts}: {status.status.value} {status.progress}%")

            if status.status == JobStatus.completed:
                return status
            if status.status == JobStatus.failed:
                raise IngestionFailedError(status)

            if attempt < self.max_attempts:
                self._sleep(self.poll_interval)

        raise IndexingTimeout(f"Indexing timeout for job {job_id} after {self.max_attempts} polls")

    def chat(self, query: str, collection_name: str) -> str:
        body = {"query": query, "collectionName": collection_name}
        return self._request("POST", "/api/chat", json=body)["response"]

def _detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if not isinstance(body, dict):
        return response.text
    detail = body.get("detail", response.text)
    if isinstance(detail, dict):
        return detail.get("details") or detail.get("error") or str(detail)
    return str(detail)
