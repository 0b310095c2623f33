"""
Centralized configuration for the arXiv paper notes pipeline.

Fixed values live here as module constants. Anything that comes from the
environment is read once into a `Settings` object which is then handed to
each component.
"""
import os
import tempfile
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

# --- Google Gemini ---
LLM_MODEL = "gemini-2.0-flash"
LLM_TEMPERATURE = 0

# --- Groq ---
GROQ_MODEL = "meta-llama/llama-4-scout-17b-16e-instruct"

# --- Pricing (USD per 1M tokens) ---
GEMINI_PRICING = {
    "input": 0.10,
    "output": 0.40
}

GROQ_PRICING = {
    "input": 0.11,
    "output": 0.34
}

LLM_PROVIDERS = ("gemini", "groq")

# --- Embeddings ---
EMBEDDING_MODEL = "models/gemini-embedding-001"

# --- Extraction (Unstructured API) ---
UNSTRUCTURED_API_URL = "https://api.unstructuredapp.io/general/v0/general"
EXTRACTION_STRATEGY = "hi_res"

# --- Vector store ---
VECTOR_STORE_PROVIDERS = ("supabase", "chroma")
ARXIV_EMBEDDINGS_TABLE = "arxiv_embeddings"
MATCH_DOCUMENTS_QUERY = "match_documents"


@dataclass(frozen=True)
class Settings:
    """Runtime configuration, built once at process start."""
    unstructured_api_key: str | None = None
    unstructured_api_url: str = UNSTRUCTURED_API_URL
    llm_provider: str = "gemini"
    vector_store_provider: str = "supabase"
    supabase_url: str | None = None
    supabase_private_key: str | None = None
    chroma_host: str | None = None
    chroma_api_key: str | None = None
    pdf_tmp_dir: str = tempfile.gettempdir()

    @classmethod
    def from_env(cls, environ=None) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read from. Defaults to `os.environ`.

        Returns:
            A frozen Settings instance.
        """
        env = os.environ if environ is None else environ
        return cls(
            unstructured_api_key=env.get("UNSTRUCTURED_API_KEY") or None,
            unstructured_api_url=env.get("UNSTRUCTURED_API_URL", UNSTRUCTURED_API_URL),
            llm_provider=env.get("LLM_PROVIDER", "gemini").lower(),
            vector_store_provider=env.get("VECTOR_STORE_PROVIDER", "supabase").lower(),
            supabase_url=env.get("SUPABASE_URL") or None,
            supabase_private_key=env.get("SUPABASE_PRIVATE_KEY") or None,
            chroma_host=env.get("CHROMA_HOST") or None,
            chroma_api_key=env.get("CHROMA_API_KEY") or None,
            pdf_tmp_dir=env.get("PDF_TMP_DIR") or tempfile.gettempdir(),
        )
