from typing import List, Literal, Optional, Union
from pydantic import BaseModel

class CaptionTrack(BaseModel):
    language_code: str
    fetch_url: str

class CaptionCue(BaseModel):
    start: float
    duration: float
    text: str

class ExtractionSuccess(BaseModel):
    success: Literal[True] = True
    transcript: str
    video_id: Optional[str] = None
    strategy: Optional[str] = None

class ExtractionFailure(BaseModel):
    success: Literal[False] = False
    kind: str
    error: str
    video_id: Optional[str] = None

ExtractionOutcome = Union[ExtractionSuccess, ExtractionFailure]

def language_codes(tracks: List[CaptionTrack]) -> List[str]:
    return [t.language_code for t in tracks]
