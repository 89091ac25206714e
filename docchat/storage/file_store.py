import os
from docchat.storage.base import FileStore

class LocalFileStore(FileStore):
    """
    Implements FileStore using the local disk.
    Uploads are kept as <job_id>-<original name> so concurrent uploads never collide.
    """

    def __init__(self, uploads_path: str = "./data/uploads"):
        self.uploads_path = uploads_path
        os.makedirs(self.uploads_path, exist_ok=True)

    def save_upload(self, job_id: str, filename: str, file_bytes: bytes) -> str:
        safe_name = os.path.basename(filename or "document.pdf")
        path = os.path.join(self.uploads_path, f"{job_id}-{safe_name}")
        with open(path, "wb") as f:
            f.write(file_bytes)
        return path

    def read(self, path: str) -> bytes:
        with open(path, "rb") as f:
            return f.read()
