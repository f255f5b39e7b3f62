from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):

    # Generation backends; an empty credential leaves the backend unconfigured
    openai_api_key: str = ""
    anthropic_api_key: str = ""
    google_ai_api_key: str = ""
    ollama_base_url: str = ""

    openai_model: str = "gpt-4-turbo-preview"
    anthropic_model: str = "claude-3-5-sonnet-20241022"
    gemini_model: str = "gemini-1.5-pro"
    ollama_model: str = "qwen2.5:7b"

    generation_timeout: float = 60.0
    generation_temperature: float = 0.7
    generation_max_tokens: int = 2000

    # Embeddings
    embedding_provider: str = "openai"  # "openai" | "sentence-transformers"
    embedding_model: str = "text-embedding-3-large"
    embedding_dimensions: Optional[int] = 1536
    embedding_timeout: float = 30.0
    local_embedding_model: str = "sentence-transformers/all-MiniLM-L6-v2"

    # Vector store
    vector_store: str = "chroma"  # "chroma" | "memory"
    chroma_host: str = "localhost"
    chroma_port: int = 8001
    chroma_collection: str = "document_chunks"
    vector_store_timeout: float = 30.0
    upsert_batch_size: int = 100

    # Chunking
    chunk_target_tokens: int = 500
    chunk_overlap_tokens: int = 50
    chunk_min_tokens: int = 0

    # Retrieval
    rag_top_k: int = 5
    rag_min_score: float = 0.3
    rag_use_hybrid: bool = True
    rag_semantic_weight: float = 0.7
    rag_keyword_weight: float = 0.3
    rag_fallback_ratio: float = 0.5
    rag_fallback_thresholds: list[float] = [0.1, 0.05]
    rag_fallback_top_n: int = 3

    # Ingestion
    docs_path: str = "./docs"
    ingest_workers: int = 2

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
