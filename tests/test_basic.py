import sys
import os

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from transcript_formatter.models.transcript import ExtractionFailure, ExtractionSuccess
from transcript_formatter.services.transcript_service import TranscriptService
from transcript_formatter.core.strategy import ExtractionStrategy
from transcript_formatter.core.errors import TranscriptError, TranscriptFetchError

def test_imports():
    print("Imports successful")

def test_default_strategy_order():
    service = TranscriptService()
    assert [s.name for s in service.strategies] == ["structured", "dom"]
    assert all(isinstance(s, ExtractionStrategy) for s in service.strategies)

def test_outcome_wire_shape():
    assert ExtractionSuccess(transcript="Hi").model_dump()["success"] is True
    failure = ExtractionFailure(kind="NoSegmentsFound", error="No transcript segments found")
    assert failure.model_dump()["success"] is False

def test_error_messages_are_prefixed():
    err = TranscriptFetchError("boom", "dQw4w9WgXcQ")
    assert isinstance(err, TranscriptError)
    assert str(err) == "[YoutubeTranscript] boom"
    assert err.kind == "TranscriptFetchError"
    assert err.video_id == "dQw4w9WgXcQ"

if __name__ == "__main__":
    test_imports()
    test_default_strategy_order()
