"""
Ingestion pipeline orchestrator.

Chains together: fetch → delete pages → extract → generate notes → (store).
"""
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from langchain_core.documents import Document
from langchain_core.embeddings import Embeddings

from src.app.config import Settings
from src.app.generation.notes import ArxivPaperNote, LangChainNoteModel, NoteModel, generate_notes
from src.app.ingestion.fetcher import load_pdf_from_url, validate_source_url
from src.app.ingestion.indexer import ArxivVectorStore, VectorStoreBackend, create_vector_store, get_backend
from src.app.ingestion.pages import delete_pages
from src.app.ingestion.parser import convert_pdf_to_documents
from src.app.logger import get_logger
from src.app.utils import timer

logger = get_logger(__name__)


class PipelineState(Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    EDITING = "editing"
    EXTRACTING = "extracting"
    GENERATING = "generating"
    STORING = "storing"
    DONE = "done"
    FAILED = "failed"


@dataclass
class PipelineResult:
    """Artifacts of a successful run."""
    name: str
    paper_url: str
    documents: list[Document]
    notes: list[ArxivPaperNote]
    vector_store: ArxivVectorStore | None = None

    @property
    def segment_count(self) -> int:
        return len(self.documents)

    @property
    def note_count(self) -> int:
        return len(self.notes)


@dataclass
class ArxivPaperPipeline:
    """
    Runs one paper through the pipeline, tracking which stage it is in.

    Stages run strictly in order and each consumes the previous stage's
    output. Any failure moves the pipeline to FAILED and the exception is
    re-raised unchanged; there is no partial result. Each call to `run`
    starts again from IDLE with a fresh history.
    """
    settings: Settings
    note_model: NoteModel | None = None
    backend: VectorStoreBackend | None = None
    embeddings: Embeddings | None = None
    state: PipelineState = PipelineState.IDLE
    history: list[PipelineState] = field(default_factory=lambda: [PipelineState.IDLE])

    def _advance(self, state: PipelineState) -> None:
        logger.info(f"➡️ {self.state.name} -> {state.name}")
        self.state = state
        self.history.append(state)

    @timer
    def run(
        self,
        paper_url: str,
        name: str,
        pages_to_delete: Sequence[int] | None = None,
        store_embeddings: bool = False,
    ) -> PipelineResult:
        """
        Fetch a paper, optionally strip pages, extract it and take notes.

        Args:
            paper_url: URL of the PDF. Must end in ``.pdf``.
            name: Label for the paper, stored in segment metadata.
            pages_to_delete: Strictly ascending 1-based pages to drop.
            store_embeddings: Also embed the segments into the vector store.

        Returns:
            PipelineResult with the segments and notes.
        """
        logger.info("🚀 Starting arXiv Notes Pipeline")
        logger.info("=" * 50)

        self.state = PipelineState.IDLE
        self.history = [PipelineState.IDLE]

        try:
            # Store credentials are checked before any paid call is made
            if store_embeddings and self.backend is None:
                self.backend = get_backend(self.settings)

            self._advance(PipelineState.FETCHING)
            validate_source_url(paper_url)
            pdf = load_pdf_from_url(paper_url)

            if pages_to_delete:
                self._advance(PipelineState.EDITING)
                pdf = delete_pages(pdf, pages_to_delete)

            self._advance(PipelineState.EXTRACTING)
            documents = convert_pdf_to_documents(
                pdf, self.settings, name=name, paper_url=paper_url
            )

            self._advance(PipelineState.GENERATING)
            if self.note_model is None:
                self.note_model = LangChainNoteModel.from_settings(self.settings)
            notes = generate_notes(documents, self.note_model)

            vector_store = None
            if store_embeddings:
                self._advance(PipelineState.STORING)
                vector_store = create_vector_store(
                    documents,
                    self.settings,
                    backend=self.backend,
                    embeddings=self.embeddings,
                )
        except Exception as e:
            self._advance(PipelineState.FAILED)
            logger.error(f"❌ Pipeline failed: {type(e).__name__}: {e}")
            raise

        self._advance(PipelineState.DONE)
        logger.info("=" * 50)
        logger.info(f"🎉 {name}: {len(documents)} segments, {len(notes)} notes")

        return PipelineResult(
            name=name,
            paper_url=paper_url,
            documents=documents,
            notes=notes,
            vector_store=vector_store,
        )


def run_ingestion_pipeline(
    paper_url: str,
    name: str,
    pages_to_delete: Sequence[int] | None = None,
    store_embeddings: bool = False,
    settings: Settings | None = None,
) -> PipelineResult:
    """
    Run the pipeline once with settings read from the environment.

    Args:
        paper_url: URL of the PDF.
        name: Label for the paper.
        pages_to_delete: Strictly ascending 1-based pages to drop.
        store_embeddings: Also persist embeddings to the vector store.
        settings: Pre-built settings. Defaults to `Settings.from_env()`.

    Returns:
        PipelineResult of the run.
    """
    if settings is None:
        settings = Settings.from_env()
    return ArxivPaperPipeline(settings).run(
        paper_url, name, pages_to_delete=pages_to_delete, store_embeddings=store_embeddings
    )
