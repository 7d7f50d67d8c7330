"""
Environment-driven configuration and component factories.
"""

import os

# Database path configuration (FAQ queue and persisted corpus)
DB_PATH = os.getenv("DB_PATH", "./data/navi.db")

# Vector store and embedding configuration
VECTOR_PROVIDER = os.getenv("VECTOR_PROVIDER", "memory")  # memory|sqlite|faiss
EMBED_PROVIDER = os.getenv("EMBED_PROVIDER", "hash")  # hash|sentence_transformers|ollama
EMBED_MODEL_NAME = os.getenv("EMBED_MODEL_NAME", "all-mpnet-base-v2")
OLLAMA_EMBED_MODEL = os.getenv("OLLAMA_EMBED_MODEL", "nomic-embed-text")
EMBED_DIMENSION = int(os.getenv("EMBED_DIMENSION", "0"))  # 0 = learn from the first vector
CORPUS_PATH = os.getenv("CORPUS_PATH")  # JSON corpus loaded at API startup into a memory/faiss store

# Retrieval tuning
SIMILARITY_THRESHOLD = float(os.getenv("SIMILARITY_THRESHOLD", "0.2"))
RETRIEVAL_TOP_K = int(os.getenv("RETRIEVAL_TOP_K", "3"))

# Generation configuration
GENERATOR_PROVIDER = os.getenv("GENERATOR_PROVIDER", "ollama")  # ollama|mock
OLLAMA_MODEL = os.getenv("OLLAMA_MODEL", "llama3.2:latest")
OLLAMA_HOST = os.getenv("OLLAMA_HOST")
ASSISTANT_NAME = os.getenv("ASSISTANT_NAME", "Navi")

# Suspension point timeouts
EMBED_TIMEOUT_SEC = float(os.getenv("EMBED_TIMEOUT_SEC", "10"))
GENERATION_TIMEOUT_SEC = float(os.getenv("GENERATION_TIMEOUT_SEC", "30"))

# Transport retry (wraps embedder and generator, never the pipeline)
RETRY_ENABLED = os.getenv("RETRY_ENABLED", "false").lower() == "true"
RETRY_MAX_ATTEMPTS = int(os.getenv("RETRY_MAX_ATTEMPTS", "3"))
RETRY_INITIAL_DELAY_MS = float(os.getenv("RETRY_INITIAL_DELAY_MS", "250"))
RETRY_MAX_DELAY_MS = float(os.getenv("RETRY_MAX_DELAY_MS", "2000"))

# API surface
CHAT_API_ENABLED = os.getenv("CHAT_API_ENABLED", "true").lower() == "true"
FAQ_API_ENABLED = os.getenv("FAQ_API_ENABLED", "true").lower() == "true"

VERSION = "1.0.0"


def get_vector_store():
    """Get configured vector store implementation."""
    if VECTOR_PROVIDER == "sqlite":
        from navi.vector.sqlite_store import SqliteVectorStore
        return SqliteVectorStore(DB_PATH)
    elif VECTOR_PROVIDER == "faiss":
        from navi.vector.faiss_store import FaissVectorStore
        return FaissVectorStore(dimension=EMBED_DIMENSION or None)
    else:
        from navi.vector.index import SimpleInMemoryVectorStore
        return SimpleInMemoryVectorStore(dimension=EMBED_DIMENSION or None)


def get_embedding_provider():
    """Get configured embedding provider implementation, wrapped for retry when enabled."""
    if EMBED_PROVIDER == "sentence_transformers":
        from navi.vector.embeddings import SentenceTransformerEmbedding
        provider = SentenceTransformerEmbedding(EMBED_MODEL_NAME, expected_dimension=EMBED_DIMENSION or None)
    elif EMBED_PROVIDER == "ollama":
        from navi.vector.embeddings import OllamaEmbedding
        provider = OllamaEmbedding(OLLAMA_EMBED_MODEL, host=OLLAMA_HOST, expected_dimension=EMBED_DIMENSION or None)
    else:
        from navi.vector.embeddings import DeterministicHashEmbedding
        provider = DeterministicHashEmbedding(dimension=EMBED_DIMENSION or 384)

    if RETRY_ENABLED:
        from navi.llm.retry import RetryingEmbedder
        provider = RetryingEmbedder(provider, get_retry_config())
    return provider


def get_generator():
    """Get configured generator implementation, wrapped for retry when enabled."""
    if GENERATOR_PROVIDER == "mock":
        from navi.llm.mock_generator import MockGenerator
        generator = MockGenerator()
    else:
        from navi.llm.ollama_generator import OllamaGenerator
        generator = OllamaGenerator(OLLAMA_MODEL, host=OLLAMA_HOST)

    if RETRY_ENABLED:
        from navi.llm.retry import RetryingGenerator
        generator = RetryingGenerator(generator, get_retry_config())
    return generator


def get_retry_config():
    from navi.llm.retry import RetryConfig
    return RetryConfig(
        max_attempts=RETRY_MAX_ATTEMPTS,
        initial_delay_ms=RETRY_INITIAL_DELAY_MS,
        max_delay_ms=RETRY_MAX_DELAY_MS,
    )


def build_pipeline(vector_store=None, embedder=None, generator=None):
    """Assemble an AnsweringPipeline from configuration; explicit arguments win."""
    from navi.core.pipeline import AnsweringPipeline
    from navi.core.retriever import Retriever

    retriever = Retriever(
        embedder=embedder if embedder is not None else get_embedding_provider(),
        vector_store=vector_store if vector_store is not None else get_vector_store(),
        threshold=SIMILARITY_THRESHOLD,
        top_k=RETRIEVAL_TOP_K,
        embed_timeout=EMBED_TIMEOUT_SEC,
    )
    return AnsweringPipeline(
        retriever=retriever,
        generator=generator if generator is not None else get_generator(),
        generation_timeout=GENERATION_TIMEOUT_SEC,
        assistant_name=ASSISTANT_NAME,
    )


def debug_enabled():
    """Check if debug mode is enabled."""
    return os.getenv("DEBUG", "true").lower() == "true"


def validate_config():
    """Validate configuration and return any issues."""
    issues = []

    if VECTOR_PROVIDER not in ["memory", "sqlite", "faiss"]:
        issues.append(f"Invalid VECTOR_PROVIDER: {VECTOR_PROVIDER}")

    if EMBED_PROVIDER not in ["hash", "sentence_transformers", "ollama"]:
        issues.append(f"Invalid EMBED_PROVIDER: {EMBED_PROVIDER}")

    if GENERATOR_PROVIDER not in ["ollama", "mock"]:
        issues.append(f"Invalid GENERATOR_PROVIDER: {GENERATOR_PROVIDER}")

    if not -1.0 <= SIMILARITY_THRESHOLD <= 1.0:
        issues.append("SIMILARITY_THRESHOLD must be within [-1, 1]")

    if RETRIEVAL_TOP_K < 1:
        issues.append("RETRIEVAL_TOP_K must be >= 1")

    if EMBED_TIMEOUT_SEC <= 0 or GENERATION_TIMEOUT_SEC <= 0:
        issues.append("EMBED_TIMEOUT_SEC and GENERATION_TIMEOUT_SEC must be > 0")

    if RETRY_MAX_ATTEMPTS < 1:
        issues.append("RETRY_MAX_ATTEMPTS must be >= 1")

    return issues
