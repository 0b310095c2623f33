"""
Download a paper PDF from a URL.
"""
from urllib.parse import urlparse

import requests

from src.app.errors import NetworkError, SourceValidationError
from src.app.logger import get_logger
from src.app.utils import timer

logger = get_logger(__name__)

PDF_SUFFIX = ".pdf"


def validate_source_url(url: str) -> str:
    """
    Check that a URL points at a PDF before anything is downloaded.

    Only the path component is inspected, case-insensitively. This is
    looser than a plain ``url.endswith(".pdf")``: ``paper.PDF`` and
    ``paper.pdf?download=1`` are both accepted.

    Raises:
        SourceValidationError: If the URL path does not end in ``.pdf``.
    """
    path = urlparse(url or "").path
    if not path.lower().endswith(PDF_SUFFIX):
        raise SourceValidationError(f"Not a pdf file: {url!r}")
    return url


@timer
def load_pdf_from_url(url: str, timeout: float | None = None) -> bytes:
    """
    Fetch the raw bytes of a PDF.

    Args:
        url: Location of the PDF. Must end in ``.pdf``.
        timeout: Passed straight through to `requests`; None waits forever.

    Returns:
        The response body.

    Raises:
        SourceValidationError: If the URL is not a PDF URL.
        NetworkError: On connection failures, timeouts or non-2xx responses.
    """
    validate_source_url(url)

    logger.info(f"🌐 Downloading PDF: {url}")
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise NetworkError(f"Failed to fetch {url}: {e}") from e

    pdf = response.content
    logger.info(f"✅ Downloaded {len(pdf)} bytes")
    return pdf
