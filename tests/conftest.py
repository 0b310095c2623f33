"""
Shared fixtures and test doubles.

Nothing here talks to the network: the LLM, the extraction service and the
vector store are all replaced with deterministic stand-ins.
"""
import io

import pytest
from langchain_core.embeddings import DeterministicFakeEmbedding
from langchain_core.vectorstores import InMemoryVectorStore
from pypdf import PdfReader, PdfWriter

from src.app.config import Settings
from src.app.generation.notes import NoteModel
from src.app.ingestion.indexer import VectorStoreBackend


def make_pdf(num_pages: int) -> bytes:
    """Build a PDF of blank pages; page i (1-based) is 100 + i points wide."""
    writer = PdfWriter()
    for i in range(1, num_pages + 1):
        writer.add_blank_page(width=100 + i, height=200)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def original_page_numbers(pdf: bytes) -> list[int]:
    """Recover the original page numbers of a PDF built by `make_pdf`."""
    reader = PdfReader(io.BytesIO(pdf))
    return [round(float(page.mediabox.width)) - 100 for page in reader.pages]


class StubNoteModel(NoteModel):
    """Returns a canned response and records every prompt it receives."""

    def __init__(self, response):
        self.response = response
        self.prompts = []

    def complete(self, prompt, schema):
        self.prompts.append(prompt)
        return self.response


class InMemoryBackend(VectorStoreBackend):
    """Keeps rows in a process-local store instead of a hosted database."""

    def __init__(self):
        self.stored = []

    def store(self, documents, embeddings):
        self.stored.extend(documents)
        return InMemoryVectorStore.from_documents(documents, embeddings)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        unstructured_api_key="test-unstructured-key",
        pdf_tmp_dir=str(tmp_path / "pdfs"),
        supabase_url="https://example.supabase.co",
        supabase_private_key="test-supabase-key",
    )


@pytest.fixture
def fake_embeddings():
    return DeterministicFakeEmbedding(size=16)


@pytest.fixture
def one_note_model():
    return StubNoteModel({
        "notes": [
            {
                "subject": "What does the paper propose?",
                "note": "A retrieval-aware fine-tuning method for API calls.",
                "page_numbers": [1],
            }
        ]
    })
