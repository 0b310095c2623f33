"""Generation package — structured note taking with an LLM."""

from src.app.generation.notes import (
    ArxivPaperNote,
    ArxivPaperNotes,
    NoteModel,
    LangChainNoteModel,
    generate_notes,
)
from src.app.generation.prompts import NOTES_SYSTEM_PROMPT

__all__ = [
    "ArxivPaperNote",
    "ArxivPaperNotes",
    "NoteModel",
    "LangChainNoteModel",
    "generate_notes",
    "NOTES_SYSTEM_PROMPT",
]
