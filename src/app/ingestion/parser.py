"""
PDF extraction through the hosted Unstructured API.

The PDF buffer is written to a short-lived temp file, partitioned remotely
with the hi_res strategy, and the resulting elements are returned as
LangChain Documents.
"""
import os
import uuid
from contextlib import contextmanager

from langchain_core.documents import Document
from unstructured.partition.api import partition_via_api

from src.app.config import EXTRACTION_STRATEGY, Settings
from src.app.errors import ConfigurationError, ExtractionServiceError
from src.app.logger import get_logger
from src.app.utils import timer

logger = get_logger(__name__)


@contextmanager
def temporary_pdf(pdf: bytes, directory: str):
    """
    Write `pdf` to a uniquely named file and remove it on exit.

    The name is a fresh random token per call, so concurrent runs sharing
    a directory never collide.

    Yields:
        Path of the temp file.
    """
    os.makedirs(directory, exist_ok=True)
    path = os.path.join(directory, f"{uuid.uuid4().hex}.pdf")
    try:
        with open(path, "wb") as f:
            f.write(pdf)
        yield path
    finally:
        if os.path.exists(path):
            os.remove(path)


def elements_to_documents(elements, name: str | None = None, paper_url: str | None = None) -> list[Document]:
    """
    Convert unstructured elements into Documents, keeping their order.

    Elements with no text are dropped.
    """
    documents = []
    for element in elements:
        text = str(element).strip()
        if not text:
            continue
        metadata = element.metadata.to_dict()
        metadata["category"] = getattr(element, "category", type(element).__name__)
        if name is not None:
            metadata["source"] = name
        if paper_url is not None:
            metadata["paper_url"] = paper_url
        documents.append(Document(page_content=text, metadata=metadata))
    return documents


@timer
def convert_pdf_to_documents(
    pdf: bytes,
    settings: Settings,
    name: str | None = None,
    paper_url: str | None = None,
) -> list[Document]:
    """
    Extract structured segments from a PDF buffer.

    Args:
        pdf: PDF bytes.
        settings: Runtime settings; must carry an Unstructured API key.
        name: Paper label stored as `source` in each segment's metadata.
        paper_url: Original URL, stored as `paper_url` in the metadata.

    Returns:
        List of Documents in the order the service returned them.

    Raises:
        ConfigurationError: If no API key is configured. Nothing is written
            to disk in that case.
        ExtractionServiceError: If the remote call fails.
    """
    if not settings.unstructured_api_key:
        raise ConfigurationError("Unstructured API key not found (UNSTRUCTURED_API_KEY)")

    with temporary_pdf(pdf, settings.pdf_tmp_dir) as path:
        logger.info(f"📃 Partitioning document via Unstructured API ({EXTRACTION_STRATEGY})")
        try:
            elements = partition_via_api(
                filename=path,
                api_key=settings.unstructured_api_key,
                api_url=settings.unstructured_api_url,
                strategy=EXTRACTION_STRATEGY,
            )
        except Exception as e:
            raise ExtractionServiceError(f"Unstructured extraction failed: {e}") from e

    documents = elements_to_documents(elements, name=name, paper_url=paper_url)
    logger.info(f"✅ Extracted {len(documents)} segments from {len(elements)} elements")
    return documents
