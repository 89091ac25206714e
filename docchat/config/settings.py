from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import BaseModel
import yaml
import os

class ChunkingConfig(BaseModel):
    chunk_size: int = 1000                # max characters per chunk
    chunk_overlap: int = 200
    separators: list[str] = ["\n\n", "\n", ". ", " "]

class EmbeddingConfig(BaseModel):
    model_name: str = "BAAI/bge-small-en-v1.5"
    batch_size: int = 32
    vector_dim: int = 384
    query_prefix: str = "Represent this sentence for searching relevant passages: "
    normalise: bool = True

class QdrantConfig(BaseModel):
    mode: str = "local"                   # "local" | "remote" | "memory"
    local_path: str = "./data/qdrant_store"
    url: str = ""
    collection_prefix: str = "pdf-"

class LLMConfig(BaseModel):
    base_url: str = "https://generativelanguage.googleapis.com/v1beta/openai"
    model: str = "gemini-2.5-flash"
    max_tokens: int = 1024
    temperature: float = 0.1
    timeout: float = 60.0

class WorkerConfig(BaseModel):
    max_workers: int = 4

class StorageConfig(BaseModel):
    uploads_path: str = "./data/uploads"

class ServerConfig(BaseModel):
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]

class AppSettings(BaseSettings):
    chunking: ChunkingConfig = ChunkingConfig()
    embedding: EmbeddingConfig = EmbeddingConfig()
    qdrant: QdrantConfig = QdrantConfig()
    llm: LLMConfig = LLMConfig()
    worker: WorkerConfig = WorkerConfig()
    storage: StorageConfig = StorageConfig()
    server: ServerConfig = ServerConfig()
    llm_api_key: str = ""
    qdrant_url: str = ""
    qdrant_api_key: str = ""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

def load_settings(config_path: str = "docchat/config/config.yaml") -> AppSettings:
    """Loads settings from config.yaml and applies env overrides."""

    paths_to_try = [
        config_path,
        "config.yaml",
        "config/config.yaml",
        os.path.join(os.path.dirname(__file__), "config.yaml")
    ]

    yaml_data = {}
    for path in paths_to_try:
        if os.path.exists(path):
            with open(path, "r", encoding="utf-8") as f:
                yaml_data = yaml.safe_load(f) or {}
            break

    # Sections come from yaml; secrets and the Qdrant URL from env / .env
    return AppSettings(
        chunking=ChunkingConfig(**yaml_data.get("chunking", {})),
        embedding=EmbeddingConfig(**yaml_data.get("embedding", {})),
        qdrant=QdrantConfig(**yaml_data.get("qdrant", {})),
        llm=LLMConfig(**yaml_data.get("llm", {})),
        worker=WorkerConfig(**yaml_data.get("worker", {})),
        storage=StorageConfig(**yaml_data.get("storage", {})),
        server=ServerConfig(**yaml_data.get("server", {}))
    )

# Global settings instance
settings = load_settings()
