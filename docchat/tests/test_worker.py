import threading
import pytest

from docchat.core.chunk.chunker import Chunker
from docchat.core.jobs.manager import JobManager
from docchat.core.pipeline.ingestion import IngestionPipeline
from docchat.core.pipeline.worker import IngestionWorker
from docchat.models.job import JobStatus
from docchat.tests.fakes import (
    BagOfWordsEmbedder, BlockingExtractor, FailingExtractor, FixedTextExtractor,
    InMemoryVectorIndex, MemoryFileStore, RecordingJobStore
)

def make_worker(extractor, index=None, max_workers=4):
    store = RecordingJobStore()
    jobs = JobManager(store)
    files = MemoryFileStore()
    pipeline = IngestionPipeline(
        jobs=jobs,
        extractor=extractor,
        embedder=BagOfWordsEmbedder(),
        vector_index=index or InMemoryVectorIndex(),
        file_store=files,
        chunker=Chunker(chunk_size=200, chunk_overlap=20)
    )
    return IngestionWorker(pipeline, max_workers=max_workers), jobs, store, files

def test_submit_returns_before_ingestion_finishes():
    extractor = BlockingExtractor([("Revenue was $5M in 2023.", 1)])
    worker, jobs, _, files = make_worker(extractor)
    job = jobs.create()
    path = files.save_upload(job.id, "a.pdf", b"%PDF-")

    future = worker.submit(job.id, path, job.collection_name)
    assert extractor.entered.wait(timeout=5)

    in_flight = jobs.get(job.id)
    assert in_flight.status == JobStatus.processing
    assert in_flight.progress == 10
    assert not future.done()

    extractor.release()
    final = future.result(timeout=5)
    assert final.status == JobStatus.completed
    assert jobs.get(job.id).progress == 100
    worker.shutdown()

def test_wait_blocks_until_job_finishes():
    extractor = BlockingExtractor([("text", 1)])
    worker, jobs, _, files = make_worker(extractor)
    job = jobs.create()
    path = files.save_upload(job.id, "a.pdf", b"%PDF-")
    worker.submit(job.id, path, job.collection_name)
    extractor.entered.wait(timeout=5)

    threading.Timer(0.05, extractor.release).start()
    final = worker.wait(job.id, timeout=5)

    assert final is None or final.status == JobStatus.completed
    assert jobs.get(job.id).status == JobStatus.completed
    assert worker.wait("unknown") is None
    worker.shutdown()

def test_failures_never_escape_the_worker():
    worker, jobs, _, files = make_worker(FailingExtractor("Invalid PDF structure"))
    job = jobs.create()
    path = files.save_upload(job.id, "bad.pdf", b"%PDF-")

    final = worker.submit(job.id, path, job.collection_name).result(timeout=5)

    assert final.status == JobStatus.failed
    assert final.error == "Invalid PDF structure"
    worker.shutdown()

def test_concurrent_jobs_are_independent():
    index = InMemoryVectorIndex()
    worker, jobs, store, files = make_worker(
        FixedTextExtractor([("Revenue was $5M in 2023.", 1), ("Costs were $3M.", 2)]), index=index
    )

    submitted = []
    for name in ("a.pdf", "b.pdf"):
        job = jobs.create(source_file=name)
        path = files.save_upload(job.id, name, b"%PDF-")
        submitted.append((job, worker.submit(job.id, path, job.collection_name)))

    for job, future in submitted:
        assert future.result(timeout=5).status == JobStatus.completed

    (job_a, _), (job_b, _) = submitted
    assert job_a.id != job_b.id
    assert job_a.collection_name != job_b.collection_name
    for job in (job_a, job_b):
        assert store.progress_of(job.id) == [0, 10, 40, 60, 100]
        assert len(index.collections[job.collection_name]) == 2
        assert {r.metadata["source_document_id"] for r in index.collections[job.collection_name]} == {job.id}
    worker.shutdown()

@pytest.mark.parametrize("count", [8])
def test_many_concurrent_jobs_each_reach_one_terminal_state(count):
    worker, jobs, store, files = make_worker(FixedTextExtractor([("x y z", 1)]), max_workers=3)
    futures = []
    for i in range(count):
        job = jobs.create()
        path = files.save_upload(job.id, f"{i}.pdf", b"%PDF-")
        futures.append(worker.submit(job.id, path, job.collection_name))

    results = [f.result(timeout=10) for f in futures]

    assert all(r.status == JobStatus.completed for r in results)
    for r in results:
        assert store.progress_of(r.id) == sorted(store.progress_of(r.id))
    worker.shutdown()
