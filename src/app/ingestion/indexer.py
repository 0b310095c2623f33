"""
Embedding generation and hosted vector store persistence.

Segments are embedded and written as rows into the `arxiv_embeddings`
table of a hosted store (Supabase/pgvector by default, or a hosted Chroma
server). The returned handle can be used by downstream callers for
similarity search; the pipeline itself never reads the rows back.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from urllib.parse import urlparse

import chromadb
from langchain_chroma import Chroma
from langchain_community.vectorstores import SupabaseVectorStore
from langchain_community.vectorstores.utils import filter_complex_metadata
from langchain_core.documents import Document
from langchain_core.embeddings import Embeddings
from langchain_core.vectorstores import VectorStore
from supabase import create_client

from src.app.config import (
    ARXIV_EMBEDDINGS_TABLE,
    MATCH_DOCUMENTS_QUERY,
    VECTOR_STORE_PROVIDERS,
    Settings,
)
from src.app.errors import ConfigurationError, ExtractionServiceError
from src.app.logger import get_logger
from src.app.utils import timer, get_embedding_model

logger = get_logger(__name__)


@dataclass
class ArxivVectorStore:
    """Handle on the stored embeddings, bound to their embedding function."""
    vector_store: VectorStore
    table_name: str = ARXIV_EMBEDDINGS_TABLE
    query_name: str = MATCH_DOCUMENTS_QUERY

    def similarity_search(self, query: str, k: int = 4) -> list[Document]:
        return self.vector_store.similarity_search(query, k=k)


class VectorStoreBackend(ABC):
    """Somewhere to write segment/embedding rows."""

    @abstractmethod
    def store(self, documents: list[Document], embeddings: Embeddings) -> VectorStore:
        """Embed `documents` and persist them, returning the store."""


class SupabaseBackend(VectorStoreBackend):
    """Supabase (pgvector) table queried through a server-side function."""

    def __init__(self, url: str, key: str,
                 table_name: str = ARXIV_EMBEDDINGS_TABLE,
                 query_name: str = MATCH_DOCUMENTS_QUERY):
        self.url = url
        self.key = key
        self.table_name = table_name
        self.query_name = query_name

    def store(self, documents, embeddings):
        client = create_client(self.url, self.key)
        return SupabaseVectorStore.from_documents(
            documents,
            embeddings,
            client=client,
            table_name=self.table_name,
            query_name=self.query_name,
        )


class ChromaBackend(VectorStoreBackend):
    """Collection on a hosted Chroma server."""

    def __init__(self, host: str, api_key: str, collection_name: str = ARXIV_EMBEDDINGS_TABLE):
        self.host = host
        self.api_key = api_key
        self.collection_name = collection_name

    def _client(self):
        # Hosts without a scheme are plain http
        parsed = urlparse(self.host if "://" in self.host else f"http://{self.host}")
        ssl = parsed.scheme == "https"
        return chromadb.HttpClient(
            host=parsed.hostname,
            port=parsed.port or (443 if ssl else 8000),
            ssl=ssl,
            headers={"x-chroma-token": self.api_key},
        )

    def store(self, documents, embeddings):
        # Chroma only accepts scalar metadata values
        return Chroma.from_documents(
            documents=filter_complex_metadata(documents),
            embedding=embeddings,
            client=self._client(),
            collection_name=self.collection_name,
            collection_metadata={"hnsw:space": "cosine"},
        )


def get_backend(settings: Settings) -> VectorStoreBackend:
    """
    Build the vector store backend selected in settings.

    Raises:
        ConfigurationError: If the provider is unknown or its endpoint or
            credential is missing. Checked before any network call.
    """
    provider = settings.vector_store_provider

    if provider == "supabase":
        if not settings.supabase_url or not settings.supabase_private_key:
            raise ConfigurationError(
                "Supabase credentials not found (SUPABASE_URL, SUPABASE_PRIVATE_KEY)"
            )
        return SupabaseBackend(settings.supabase_url, settings.supabase_private_key)

    if provider == "chroma":
        if not settings.chroma_host or not settings.chroma_api_key:
            raise ConfigurationError(
                "Chroma credentials not found (CHROMA_HOST, CHROMA_API_KEY)"
            )
        return ChromaBackend(settings.chroma_host, settings.chroma_api_key)

    raise ConfigurationError(
        f"Unknown vector store provider {provider!r}, expected one of {VECTOR_STORE_PROVIDERS}"
    )


@timer
def create_vector_store(
    documents: list[Document],
    settings: Settings,
    backend: VectorStoreBackend | None = None,
    embeddings: Embeddings | None = None,
) -> ArxivVectorStore:
    """
    Embed segments and store them in the hosted vector store.

    Args:
        documents: Segments to persist.
        settings: Runtime settings, used to pick the backend when none is given.
        backend: Backend override.
        embeddings: Embedding function override. Defaults to Gemini embeddings.

    Returns:
        ArxivVectorStore handle for later similarity queries.
    """
    if backend is None:
        backend = get_backend(settings)
    if embeddings is None:
        embeddings = get_embedding_model()

    logger.info(f"🔮 Embedding {len(documents)} segments into '{ARXIV_EMBEDDINGS_TABLE}'...")
    try:
        vector_store = backend.store(documents, embeddings)
    except Exception as e:
        raise ExtractionServiceError(f"Vector store write failed: {e}") from e

    logger.info(f"✅ Stored {len(documents)} embeddings")
    return ArxivVectorStore(vector_store)
