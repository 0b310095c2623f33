"""
Remove unwanted pages (cover sheets, appendices, references) from a PDF.
"""
import io
from collections.abc import Sequence

from pypdf import PdfReader, PdfWriter

from src.app.errors import PageIndexError
from src.app.logger import get_logger

logger = get_logger(__name__)


def count_pages(pdf: bytes) -> int:
    """Return the number of pages in a PDF buffer."""
    return len(PdfReader(io.BytesIO(pdf)).pages)


def _check_selector(pages_to_delete: Sequence[int]) -> None:
    previous = 0
    for page_num in pages_to_delete:
        if isinstance(page_num, bool) or not isinstance(page_num, int):
            raise PageIndexError(f"Page numbers must be integers, got {page_num!r}")
        if page_num <= previous:
            raise PageIndexError(
                "Pages to delete must be positive and strictly ascending, "
                f"got {list(pages_to_delete)}"
            )
        previous = page_num


def delete_pages(pdf: bytes, pages_to_delete: Sequence[int]) -> bytes:
    """
    Return a copy of `pdf` without the given pages.

    Page numbers are 1-based and refer to the original document. Every
    removal shifts the later pages down by one, so the n-th removal
    (counting from 1) deletes position ``page_num - n``.

    Args:
        pdf: Original PDF bytes. Left untouched.
        pages_to_delete: Strictly ascending 1-based page numbers.

    Returns:
        New PDF bytes.

    Raises:
        PageIndexError: If the selector is not strictly ascending, or a
            page number is beyond the end of the document.
    """
    if not pages_to_delete:
        return pdf

    _check_selector(pages_to_delete)

    writer = PdfWriter(clone_from=PdfReader(io.BytesIO(pdf)))
    original_count = len(writer.pages)

    num_to_offset_by = 1
    for page_num in pages_to_delete:
        position = page_num - num_to_offset_by
        if not 0 <= position < len(writer.pages):
            raise PageIndexError(
                f"Cannot delete page {page_num}: document has {original_count} pages"
            )
        del writer.pages[position]
        num_to_offset_by += 1

    buffer = io.BytesIO()
    writer.write(buffer)

    logger.info(
        f"✂️ Deleted {len(pages_to_delete)} page(s): "
        f"{original_count} -> {len(writer.pages)} pages"
    )
    return buffer.getvalue()
