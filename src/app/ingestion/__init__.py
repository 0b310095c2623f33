"""Ingestion package — fetch, trim, extract, and index paper PDFs."""

from src.app.ingestion.fetcher import load_pdf_from_url, validate_source_url
from src.app.ingestion.pages import delete_pages, count_pages
from src.app.ingestion.parser import convert_pdf_to_documents, temporary_pdf
from src.app.ingestion.indexer import create_vector_store, get_backend, ArxivVectorStore
from src.app.ingestion.pipeline import ArxivPaperPipeline, PipelineState, run_ingestion_pipeline

__all__ = [
    "load_pdf_from_url",
    "validate_source_url",
    "delete_pages",
    "count_pages",
    "convert_pdf_to_documents",
    "temporary_pdf",
    "create_vector_store",
    "get_backend",
    "ArxivVectorStore",
    "ArxivPaperPipeline",
    "PipelineState",
    "run_ingestion_pipeline",
]
