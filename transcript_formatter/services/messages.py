from typing import Any, Callable, Dict, Optional
from transcript_formatter.config import settings
from transcript_formatter.core.errors import FormatterError
from transcript_formatter.services.formatter import DEFAULT_MODELS, TranscriptFormatter
from transcript_formatter.services.transcript_service import TranscriptService
from transcript_formatter.utils.logger import logger

def is_video_location(location: str) -> bool:
    location = (location or "").strip()
    return len(location) == 11 or "youtube.com/watch" in location or "youtu.be/" in location

class MessageHandler:
    """Answers `{"action": ...}` requests with `{"success": ...}` replies."""

    def __init__(self, service: Optional[TranscriptService] = None,
                 formatter_factory: Callable[..., TranscriptFormatter] = TranscriptFormatter):
        self.service = service or TranscriptService()
        self.formatter_factory = formatter_factory
        self.actions = {
            "extractTranscript": self.extract_transcript,
            "formatTranscript": self.format_transcript,
            "listModels": self.list_models,
        }

    def handle(self, request: Dict[str, Any]) -> Dict[str, Any]:
        action = request.get("action")
        handler = self.actions.get(action)
        if handler is None:
            return {"success": False, "error": f"Unknown action: {action}"}
        return handler(request)

    def extract_transcript(self, request: Dict[str, Any]) -> Dict[str, Any]:
        url = request.get("url") or ""
        if not is_video_location(url):
            return {"success": False, "error": "Please navigate to a YouTube video page"}
        outcome = self.service.extract(url, request.get("lang") or settings.TRANSCRIPT_LANG)
        if outcome.success:
            return {"success": True, "transcript": outcome.transcript}
        return {"success": False, "error": outcome.error}

    def format_transcript(self, request: Dict[str, Any]) -> Dict[str, Any]:
        try:
            formatter = self.formatter_factory(api_key=request.get("apiKey"), model=request.get("model"))
            text = formatter.format(request.get("transcript") or "", request.get("formatInstructions"))
        except FormatterError as e:
            logger.error(f"Error formatting transcript: {e}")
            return {"success": False, "error": str(e)}
        return {"success": True, "formattedText": text}

    def list_models(self, request: Dict[str, Any]) -> Dict[str, Any]:
        if not request.get("apiKey"):
            return {"success": True, "models": list(DEFAULT_MODELS)}
        formatter = self.formatter_factory(api_key=request.get("apiKey"))
        return {"success": True, "models": formatter.list_models()}

def handle_message(request: Dict[str, Any], handler: Optional[MessageHandler] = None) -> Dict[str, Any]:
    return (handler or MessageHandler()).handle(request)
