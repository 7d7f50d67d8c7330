"""
HTTP entry point: health, chat and FAQ moderation.
Run with: uvicorn navi.api.main:app
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware

from .schemas import HealthResponse
from .chat import router as chat_router, get_pipeline
from .faqs import router as faqs_router
from ..core import config
from ..core.db import init_db, health_check
from ..core.pipeline import AnsweringPipeline
from ..core.errors import StoreUnavailable
from ..util.logging import logger


async def load_startup_corpus(pipeline: AnsweringPipeline) -> int:
    """Embed CORPUS_PATH into the pipeline's store when it is not persisted."""
    if not config.CORPUS_PATH or config.VECTOR_PROVIDER == "sqlite":
        return 0

    from ..vector.corpus import read_corpus_file, embed_records

    records = read_corpus_file(config.CORPUS_PATH)
    report = await embed_records(records, pipeline.retriever.embedder)
    pipeline.retriever.vector_store.batch_add(report.entries)
    logger.info(f"Loaded {len(report.entries)} corpus entries from {config.CORPUS_PATH}")
    return len(report.entries)


@asynccontextmanager
async def lifespan(app: FastAPI):
    issues = config.validate_config()
    for issue in issues:
        logger.warning(f"Configuration issue: {issue}")

    init_db()
    if config.CHAT_API_ENABLED and config.CORPUS_PATH:
        await load_startup_corpus(app.dependency_overrides.get(get_pipeline, get_pipeline)())
    yield


# Initialize the FastAPI application
app = FastAPI(
    title="Navi API",
    version=config.VERSION,
    description="Category-scoped retrieval-augmented campus assistant",
    docs_url="/docs" if config.debug_enabled() else None,
    redoc_url="/redoc" if config.debug_enabled() else None,
    lifespan=lifespan,
)

# Allow the mobile and web clients
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", response_model=HealthResponse)
async def health_check_endpoint(pipeline: AnsweringPipeline = Depends(get_pipeline)):
    """Check system health."""
    db_health = health_check()
    try:
        entry_count = pipeline.retriever.vector_store.count()
        store_health = True
    except StoreUnavailable:
        entry_count = 0
        store_health = False
    generator_healthy = await pipeline.generator.check_health()

    if db_health and store_health and generator_healthy:
        status = "healthy"
    elif db_health or store_health:
        status = "degraded"
    else:
        status = "unhealthy"

    return HealthResponse(
        status=status,
        version=config.VERSION,
        db_health=db_health,
        vector_provider=config.VECTOR_PROVIDER,
        embed_provider=config.EMBED_PROVIDER,
        entry_count=entry_count,
        generator_healthy=generator_healthy,
    )


if config.CHAT_API_ENABLED:
    app.include_router(chat_router)

if config.FAQ_API_ENABLED:
    app.include_router(faqs_router)
