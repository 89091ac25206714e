"""
End-to-end scenarios over the real HTTP app and the polling client,
with PyMuPDF extraction and an in-process Qdrant. Only the embedding model
and the LLM are replaced by deterministic fakes.
"""
import time
import pytest
from fastapi.testclient import TestClient
from qdrant_client import QdrantClient

from docchat.api.main import create_app
from docchat.api.services import assemble_services
from docchat.client.api_client import DocChatClient, IngestionFailedError
from docchat.core.errors import NotFoundError
from docchat.core.parse.pdf_parser import PDFTextExtractor
from docchat.storage.qdrant_store import QdrantVectorIndex
from docchat.tests.create_sample_pdf import build_pdf
from docchat.tests.fakes import (
    BagOfWordsEmbedder, EchoCompletionService, FailingExtractor,
    MemoryFileStore, RecordingJobStore
)

def make_stack(extractor=None):
    llm = EchoCompletionService()
    store = RecordingJobStore()
    services = assemble_services(
        extractor=extractor or PDFTextExtractor(),
        embedder=BagOfWordsEmbedder(dim=64),
        vector_index=QdrantVectorIndex(client=QdrantClient(":memory:"), vector_dim=64),
        llm=llm,
        file_store=MemoryFileStore(),
        job_store=store,
        max_workers=2
    )
    return services, llm, store

@pytest.fixture
def stack():
    services, llm, store = make_stack()
    with TestClient(create_app(services)) as http:
        client = DocChatClient(http_client=http, poll_interval=0.01, max_attempts=500, sleep=time.sleep)
        yield client, services, llm, store

def test_scenario_a_upload_poll_and_ask(stack):
    client, _, llm, store = stack

    upload = client.upload_bytes(build_pdf(["Revenue was $5M in 2023."]), "report.pdf")
    first = store.history[upload.job_id][0]
    assert (first.status.value, first.progress) == ("pending", 0)

    status = client.wait_until_indexed(upload.job_id)
    assert status.progress == 100
    assert store.progress_of(upload.job_id) == [0, 10, 40, 60, 100]

    answer = client.chat("What was the revenue?", upload.collection_name)
    assert "5M" in answer
    assert len(llm.calls) == 1

def test_scenario_b_extraction_failure_surfaces_through_polling():
    services, _, _ = make_stack(extractor=FailingExtractor("Invalid PDF structure"))
    with TestClient(create_app(services)) as http:
        client = DocChatClient(http_client=http, poll_interval=0.01, max_attempts=500, sleep=time.sleep)
        upload = client.upload_bytes(build_pdf(["whatever"]), "broken.pdf")

        with pytest.raises(IngestionFailedError) as exc:
            client.wait_until_indexed(upload.job_id)

    assert exc.value.status.error == "Invalid PDF structure"

def test_scenario_c_unknown_collection(stack):
    client, _, llm, _ = stack

    with pytest.raises(NotFoundError):
        client.chat("What was the revenue?", "pdf-unknown")
    assert llm.calls == []

def test_query_before_completion_is_rejected(stack):
    client, services, llm, _ = stack
    job = services.jobs.create()

    with pytest.raises(NotFoundError):
        client.chat("What was the revenue?", job.collection_name)
    assert llm.calls == []

def test_scenario_d_two_concurrent_uploads(stack):
    client, _, _, store = stack

    a = client.upload_bytes(build_pdf(["Revenue was $5M in 2023."]), "a.pdf")
    b = client.upload_bytes(build_pdf(["Headcount reached 40 people."]), "b.pdf")

    assert a.job_id != b.job_id
    assert a.collection_name != b.collection_name
    client.wait_until_indexed(a.job_id)
    client.wait_until_indexed(b.job_id)
    for job_id in (a.job_id, b.job_id):
        assert store.progress_of(job_id) == [0, 10, 40, 60, 100]

    assert "5M" in client.chat("What was the revenue?", a.collection_name)
    assert "5M" not in client.chat("What was the revenue?", b.collection_name)

def test_terminal_status_is_stable(stack):
    client, _, _, _ = stack
    upload = client.upload_bytes(build_pdf(["Revenue was $5M in 2023."]), "report.pdf")
    client.wait_until_indexed(upload.job_id)

    snapshots = [client.get_status(upload.job_id).model_dump() for _ in range(3)]
    assert snapshots[0] == snapshots[1] == snapshots[2]
