"""
Unit tests for note generation.

Tests verify that segments are joined into a single prompt, that exactly one
model call is issued, and that responses are validated against the note
schema. The LangChain-backed model is tested with a mocked chat model.

Run with:  python -m pytest tests/test_notes.py -v
"""
import json

import pytest
from unittest.mock import patch, MagicMock
from langchain_core.documents import Document
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from conftest import StubNoteModel


NOTE = {
    "subject": "What is APIBench?",
    "note": "A dataset of HuggingFace, TorchHub and TensorHub APIs.",
    "page_numbers": [3, 4],
}


# =====================================================================
# generate_notes with a stub model
# =====================================================================

class TestGenerateNotes:
    """Test generate_notes() against a deterministic stub model."""

    def test_segments_joined_in_order(self):
        from src.app.generation.notes import generate_notes
        model = StubNoteModel({"notes": [NOTE]})
        docs = [
            Document(page_content="Abstract", metadata={"page_number": 1}),
            Document(page_content="Introduction", metadata={"page_number": 1}),
            Document(page_content="Results", metadata={"page_number": 5}),
        ]

        notes = generate_notes(docs, model)

        assert model.prompts == ["Abstract\nIntroduction\nResults"]
        assert len(notes) == 1
        assert notes[0].subject == "What is APIBench?"
        assert notes[0].page_numbers == [3, 4]

    def test_empty_segments_still_one_call(self):
        from src.app.generation.notes import generate_notes
        model = StubNoteModel({"notes": [NOTE, NOTE]})

        notes = generate_notes([], model)

        assert model.prompts == [""]
        assert len(notes) == 2

    def test_empty_response_list(self):
        from src.app.generation.notes import generate_notes
        model = StubNoteModel({"notes": []})
        notes = generate_notes([Document(page_content="text")], model)
        assert notes == []

    def test_page_numbers_optional(self):
        from src.app.generation.notes import generate_notes
        model = StubNoteModel({"notes": [{"subject": "Method", "note": "Retriever-aware training."}]})
        notes = generate_notes([], model)
        assert notes[0].page_numbers == []

    @pytest.mark.parametrize("response", [
        {"notes": [{"note": "missing subject"}]},
        {"notes": "not a list"},
        {"summary": "wrong key"},
        None,
        [NOTE],
    ])
    def test_schema_mismatch_raises(self, response):
        from src.app.errors import ResponseParseError
        from src.app.generation.notes import generate_notes
        with pytest.raises(ResponseParseError):
            generate_notes([], StubNoteModel(response))


# =====================================================================
# LangChainNoteModel with a mocked chat model
# =====================================================================

class TestLangChainNoteModel:
    """Test the LangChain-backed NoteModel without calling a provider."""

    def _llm_returning(self, response):
        llm = MagicMock()
        llm.bind_tools.return_value.invoke.return_value = response
        return llm

    def test_returns_tool_call_args(self):
        from src.app.generation.notes import ArxivPaperNotes, LangChainNoteModel
        response = AIMessage(
            content="",
            tool_calls=[{"name": "ArxivPaperNotes", "args": {"notes": [NOTE]}, "id": "call_1"}],
        )
        llm = self._llm_returning(response)

        result = LangChainNoteModel(llm).complete("paper text", ArxivPaperNotes)

        assert result == {"notes": [NOTE]}
        _, kwargs = llm.bind_tools.call_args
        assert kwargs["tool_choice"] == "ArxivPaperNotes"

    def test_sends_system_prompt_and_text(self):
        from src.app.generation.notes import ArxivPaperNotes, LangChainNoteModel
        from src.app.generation.prompts import NOTES_SYSTEM_PROMPT
        response = AIMessage(
            content="",
            tool_calls=[{"name": "ArxivPaperNotes", "args": {"notes": []}, "id": "call_1"}],
        )
        llm = self._llm_returning(response)

        LangChainNoteModel(llm).complete("full paper text", ArxivPaperNotes)

        messages = llm.bind_tools.return_value.invoke.call_args.args[0]
        assert isinstance(messages[0], SystemMessage)
        assert messages[0].content == NOTES_SYSTEM_PROMPT
        assert isinstance(messages[1], HumanMessage)
        assert messages[1].content == "full paper text"
        llm.bind_tools.return_value.invoke.assert_called_once()

    def test_markdown_fenced_json_fallback(self):
        from src.app.generation.notes import ArxivPaperNotes, LangChainNoteModel
        content = "```json\n" + json.dumps({"notes": [NOTE]}) + "\n```"
        llm = self._llm_returning(AIMessage(content=content))

        result = LangChainNoteModel(llm).complete("text", ArxivPaperNotes)

        assert result == {"notes": [NOTE]}

    def test_plain_text_response_raises_parse_error(self):
        from src.app.errors import ResponseParseError
        from src.app.generation.notes import ArxivPaperNotes, LangChainNoteModel
        llm = self._llm_returning(AIMessage(content="Here are some notes about the paper!"))

        with pytest.raises(ResponseParseError):
            LangChainNoteModel(llm).complete("text", ArxivPaperNotes)

    def test_provider_failure_raises_service_error(self):
        from src.app.errors import ExtractionServiceError
        from src.app.generation.notes import ArxivPaperNotes, LangChainNoteModel
        llm = MagicMock()
        llm.bind_tools.return_value.invoke.side_effect = RuntimeError("context length exceeded")

        with pytest.raises(ExtractionServiceError) as exc_info:
            LangChainNoteModel(llm).complete("x" * 10, ArxivPaperNotes)
        assert "context length exceeded" in str(exc_info.value)

    @patch("src.app.generation.notes.get_llm")
    def test_from_settings_uses_configured_llm(self, mock_get_llm):
        from src.app.config import Settings
        from src.app.generation.notes import LangChainNoteModel
        settings = Settings(llm_provider="groq")

        model = LangChainNoteModel.from_settings(settings)

        mock_get_llm.assert_called_once_with(settings)
        assert model.llm is mock_get_llm.return_value
        assert model.provider == "groq"


# =====================================================================
# get_llm provider selection
# =====================================================================

class TestGetLlm:
    """Test provider selection without constructing real clients."""

    @patch("src.app.utils.ChatGoogleGenerativeAI")
    def test_gemini_default(self, mock_gemini):
        from src.app.config import Settings, LLM_MODEL
        from src.app.utils import get_llm
        get_llm(Settings())
        mock_gemini.assert_called_once_with(model=LLM_MODEL, temperature=0)

    @patch("src.app.utils.ChatGroq")
    def test_groq(self, mock_groq):
        from src.app.config import Settings, GROQ_MODEL
        from src.app.utils import get_llm
        get_llm(Settings(llm_provider="groq"))
        mock_groq.assert_called_once_with(model=GROQ_MODEL, temperature=0)

    def test_unknown_provider(self):
        from src.app.config import Settings
        from src.app.errors import ConfigurationError
        from src.app.utils import get_llm
        with pytest.raises(ConfigurationError):
            get_llm(Settings(llm_provider="openai"))
