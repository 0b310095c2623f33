"""
Command-line entry point.

Usage:
  python -m src.app.main https://arxiv.org/pdf/2305.15334.pdf --name gorilla
  python -m src.app.main <url> --name <label> --pages-to-delete 1 12 13 --store
"""
import argparse
import json
import os
import sys

from src.app.config import Settings
from src.app.ingestion.pipeline import ArxivPaperPipeline, PipelineResult
from src.app.logger import get_logger

logger = get_logger(__name__)


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Take notes on an arXiv paper")
    parser.add_argument("paper_url", help="URL of the paper PDF (must end in .pdf)")
    parser.add_argument("--name", required=True, help="Label for the paper")
    parser.add_argument(
        "--pages-to-delete",
        type=int,
        nargs="*",
        default=None,
        help="1-based pages to remove, in ascending order",
    )
    parser.add_argument("--store", action="store_true", help="Also store embeddings in the vector store")
    parser.add_argument("--output", help="Write the notes to this JSON file")
    return parser.parse_args(argv)


def notes_to_json(result: PipelineResult) -> str:
    return json.dumps(
        {
            "name": result.name,
            "paper_url": result.paper_url,
            "segment_count": result.segment_count,
            "notes": [note.model_dump() for note in result.notes],
        },
        indent=2,
    )


def write_notes(result: PipelineResult, path: str) -> None:
    """Write the notes of a run to a JSON file, creating parent dirs."""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w") as f:
        f.write(notes_to_json(result))
    logger.info(f"💾 Notes written to {path}")


def main(argv: list[str] | None = None, settings: Settings | None = None) -> PipelineResult:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    if settings is None:
        settings = Settings.from_env()

    result = ArxivPaperPipeline(settings).run(
        args.paper_url,
        args.name,
        pages_to_delete=args.pages_to_delete,
        store_embeddings=args.store,
    )

    print(notes_to_json(result))
    if args.output:
        write_notes(result, args.output)
    return result


def cli() -> None:
    main()


if __name__ == "__main__":
    cli()
