import sys
import os
from unittest.mock import Mock, patch

import httpx
import openai
import pytest

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from transcript_formatter.config import settings
from transcript_formatter.core.errors import FormatterError
from transcript_formatter.models.transcript import ExtractionFailure, ExtractionSuccess
from transcript_formatter.services.formatter import DEFAULT_MODELS, TranscriptFormatter
from transcript_formatter.services.messages import MessageHandler, handle_message, is_video_location
from transcript_formatter import cli


def fake_client(content=" Formatted text \n"):
    client = Mock()
    client.chat.completions.create.return_value = Mock(choices=[Mock(message=Mock(content=content))])
    return client


def test_formatter_builds_prompt():
    client = fake_client()
    result = TranscriptFormatter(model="llama3-8b-8192", client=client).format("raw words", "Make bullets")
    assert result == "Formatted text"
    kwargs = client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "llama3-8b-8192"
    assert kwargs["max_tokens"] == settings.LLM_MAX_TOKENS
    user = kwargs["messages"][1]["content"]
    assert user.startswith("Make bullets")
    assert "Here is the transcript:\nraw words" in user

def test_formatter_default_instructions():
    client = fake_client()
    TranscriptFormatter(client=client).format("raw words", "   ")
    user = client.chat.completions.create.call_args.kwargs["messages"][1]["content"]
    assert user.startswith(settings.FORMAT_INSTRUCTIONS)

def test_formatter_requires_transcript():
    with pytest.raises(FormatterError, match="No transcript to format"):
        TranscriptFormatter(client=fake_client()).format("")

def test_formatter_requires_api_key(monkeypatch):
    monkeypatch.setattr(settings, "LLM_API_KEY", None)
    with pytest.raises(FormatterError, match="API key"):
        TranscriptFormatter()

def test_list_models_falls_back_to_defaults():
    client = Mock()
    client.models.list.side_effect = openai.APIConnectionError(request=httpx.Request("GET", "https://api.groq.com/openai/v1/models"))
    assert TranscriptFormatter(client=client).list_models() == DEFAULT_MODELS

def test_list_models_from_api():
    client = Mock()
    client.models.list.return_value = [Mock(id="llama-3.3-70b-versatile")]
    assert TranscriptFormatter(client=client).list_models() == [
        {"id": "llama-3.3-70b-versatile", "name": "llama-3.3-70b-versatile"}
    ]


def test_is_video_location():
    assert is_video_location("https://www.youtube.com/watch?v=dQw4w9WgXcQ")
    assert is_video_location("https://youtu.be/dQw4w9WgXcQ")
    assert is_video_location("dQw4w9WgXcQ")
    assert not is_video_location("https://www.youtube.com/feed/subscriptions")

def test_extract_message_success():
    service = Mock()
    service.extract.return_value = ExtractionSuccess(transcript="Hi there", video_id="dQw4w9WgXcQ", strategy="dom")
    reply = MessageHandler(service=service).handle({"action": "extractTranscript", "url": "dQw4w9WgXcQ"})
    assert reply == {"success": True, "transcript": "Hi there"}
    service.extract.assert_called_once_with("dQw4w9WgXcQ", settings.TRANSCRIPT_LANG)

def test_extract_message_failure():
    service = Mock()
    service.extract.return_value = ExtractionFailure(kind="NoSegmentsFound", error="No transcript segments found")
    reply = MessageHandler(service=service).handle({"action": "extractTranscript", "url": "dQw4w9WgXcQ", "lang": "de"})
    assert reply == {"success": False, "error": "No transcript segments found"}
    service.extract.assert_called_once_with("dQw4w9WgXcQ", "de")

def test_extract_message_rejects_other_pages():
    service = Mock()
    reply = MessageHandler(service=service).handle({"action": "extractTranscript", "url": "https://www.youtube.com/"})
    assert reply == {"success": False, "error": "Please navigate to a YouTube video page"}
    service.extract.assert_not_called()

def test_format_message():
    factory = Mock(return_value=TranscriptFormatter(client=fake_client("# Title")))
    reply = MessageHandler(service=Mock(), formatter_factory=factory).handle({
        "action": "formatTranscript",
        "transcript": "raw",
        "apiKey": "gsk_test",
        "formatInstructions": "",
        "model": "llama3-70b-8192",
    })
    assert reply == {"success": True, "formattedText": "# Title"}
    factory.assert_called_once_with(api_key="gsk_test", model="llama3-70b-8192")

def test_format_message_errors_are_replies():
    factory = Mock(side_effect=FormatterError("Please enter your API key"))
    reply = MessageHandler(service=Mock(), formatter_factory=factory).handle({"action": "formatTranscript", "transcript": "raw"})
    assert reply == {"success": False, "error": "Please enter your API key"}

def test_list_models_message_without_key():
    reply = MessageHandler(service=Mock()).handle({"action": "listModels"})
    assert reply == {"success": True, "models": DEFAULT_MODELS}

def test_unknown_action():
    reply = handle_message({"action": "dance"}, MessageHandler(service=Mock()))
    assert reply == {"success": False, "error": "Unknown action: dance"}


def test_cli_saves_transcript(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "OUTPUT_DIR", str(tmp_path))
    outcome = ExtractionSuccess(transcript="Hello world", video_id="dQw4w9WgXcQ", strategy="structured")
    with patch("transcript_formatter.cli.TranscriptService") as service_cls:
        service_cls.return_value.extract.return_value = outcome
        assert cli.main(["https://youtu.be/dQw4w9WgXcQ", "--lang", "en"]) == 0
    assert (tmp_path / "dQw4w9WgXcQ" / "transcript.txt").read_text(encoding="utf-8") == "Hello world"

def test_cli_failure_exit_code():
    outcome = ExtractionFailure(kind="TranscriptNotAvailable", error="Transcript not available for this video")
    with patch("transcript_formatter.cli.TranscriptService") as service_cls:
        service_cls.return_value.extract.return_value = outcome
        assert cli.main(["dQw4w9WgXcQ", "--no-save"]) == 1
