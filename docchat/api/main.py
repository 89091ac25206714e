import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from docchat.api.services import Services, build_default_services
from docchat.config.settings import settings

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

def create_app(services: Optional[Services] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # --- Startup: wire pipelines once per process ---
        logger.info("Initializing docchat services...")
        app.state.services = services or build_default_services()
        logger.info("Initialization complete. All systems ready.")

        yield

        # --- Shutdown: in-flight ingestions are abandoned, not awaited ---
        logger.info("Shutting down docchat...")
        app.state.services.worker.shutdown(wait=False)

    app = FastAPI(
        title="docchat API",
        description="Upload a PDF, index it in the background, then chat with it",
        version="1.0.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from docchat.api.routes import ingest, query

    @app.get("/api/health", tags=["System"])
    def health_check():
        return {"status": "ok", "message": "Server is running"}

    app.include_router(ingest.router, prefix="/api", tags=["Ingestion"])
    app.include_router(query.router, prefix="/api", tags=["Chat"])

    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=3001)
