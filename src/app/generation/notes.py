"""
Note generator — turns the extracted paper text into structured notes
with a single LLM call.

The chat model is reached through the small `NoteModel` interface so the
pipeline never depends on a concrete provider client.
"""
import json
from abc import ABC, abstractmethod

from langchain_core.documents import Document
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_core.utils.function_calling import convert_to_openai_tool
from pydantic import BaseModel, Field, ValidationError

from src.app.config import Settings
from src.app.errors import ExtractionServiceError, ResponseParseError
from src.app.generation.prompts import NOTES_SYSTEM_PROMPT
from src.app.logger import get_logger
from src.app.utils import timer, get_llm, log_token_usage

logger = get_logger(__name__)


class ArxivPaperNote(BaseModel):
    """A single note taken from a paper."""
    subject: str = Field(description="The question or topic this note answers.")
    note: str = Field(description="The note content.")
    page_numbers: list[int] = Field(
        default_factory=list,
        description="Pages of the paper the note was taken from.",
    )


class ArxivPaperNotes(BaseModel):
    """Format the notes extracted from an academic paper."""
    notes: list[ArxivPaperNote] = Field(description="Notes extracted from the paper.")


class NoteModel(ABC):
    """A language model that answers a prompt with data matching a schema."""

    @abstractmethod
    def complete(self, prompt: str, schema: type[BaseModel]) -> dict:
        """Return the raw structured response for `prompt`."""


def _strip_code_fences(raw: str) -> str:
    raw = raw.strip()
    if raw.startswith("```"):
        raw = raw.split("\n", 1)[-1]  # remove first line (```json)
        raw = raw.rsplit("```", 1)[0]  # remove closing ```
        raw = raw.strip()
    return raw


class LangChainNoteModel(NoteModel):
    """`NoteModel` backed by a LangChain chat model with a forced tool call."""

    def __init__(self, llm, provider: str = "gemini"):
        self.llm = llm
        self.provider = provider

    @classmethod
    def from_settings(cls, settings: Settings) -> "LangChainNoteModel":
        return cls(get_llm(settings), provider=settings.llm_provider)

    def complete(self, prompt: str, schema: type[BaseModel]) -> dict:
        tool_name = convert_to_openai_tool(schema)["function"]["name"]
        llm = self.llm.bind_tools([schema], tool_choice=tool_name)

        messages = [
            SystemMessage(content=NOTES_SYSTEM_PROMPT),
            HumanMessage(content=prompt),
        ]

        try:
            response = llm.invoke(messages)
        except Exception as e:
            raise ExtractionServiceError(f"LLM request failed: {e}") from e
        log_token_usage(response, self.provider)

        for tool_call in getattr(response, "tool_calls", None) or []:
            if tool_call.get("name") == tool_name:
                return tool_call.get("args", {})

        # Some providers answer in plain text despite the forced tool
        raw = _strip_code_fences(response.content if isinstance(response.content, str) else "")
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise ResponseParseError(f"LLM response is not valid JSON: {e}") from e


@timer
def generate_notes(documents: list[Document], model: NoteModel) -> list[ArxivPaperNote]:
    """
    Generate notes for a paper from its extracted segments.

    The segment texts are joined in order and sent as one prompt; nothing is
    truncated or chunked locally. Exactly one model call is made, even for an
    empty document list.

    Args:
        documents: Segments from one extraction call.
        model: The note model to query.

    Returns:
        Parsed list of ArxivPaperNote.

    Raises:
        ResponseParseError: If the response does not match the note schema.
        ExtractionServiceError: If the model call itself fails.
    """
    text = "\n".join(doc.page_content for doc in documents)

    logger.info(f"📝 Generating notes from {len(documents)} segments ({len(text)} chars)")
    raw = model.complete(text, ArxivPaperNotes)

    try:
        parsed = ArxivPaperNotes.model_validate(raw)
    except ValidationError as e:
        raise ResponseParseError(f"LLM response does not match the note schema: {e}") from e

    logger.info(f"✅ Generated {len(parsed.notes)} note(s)")
    return parsed.notes
