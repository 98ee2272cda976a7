from abc import ABC, abstractmethod
from typing import Optional
from transcript_formatter.core.errors import TranscriptError, TranscriptFetchError
from transcript_formatter.models.transcript import ExtractionFailure, ExtractionOutcome, ExtractionSuccess
from transcript_formatter.utils.logger import logger

class ExtractionStrategy(ABC):
    """One way of turning a video id into transcript text."""
    name = "strategy"

    @abstractmethod
    def fetch_text(self, video_id: str, lang: Optional[str] = None) -> str:
        """Return the transcript text or raise a TranscriptError."""
        pass

    def run(self, video_id: str, lang: Optional[str] = None) -> ExtractionOutcome:
        try:
            text = self.fetch_text(video_id, lang)
        except TranscriptError as e:
            return ExtractionFailure(kind=e.kind, error=str(e), video_id=e.video_id or video_id)
        except Exception as e:
            logger.exception(f"Unexpected error in {self.name} extraction: {e}")
            err = TranscriptFetchError(str(e), video_id)
            return ExtractionFailure(kind=err.kind, error=str(err), video_id=video_id)
        return ExtractionSuccess(transcript=text.strip(), video_id=video_id, strategy=self.name)
