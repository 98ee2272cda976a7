from typing import List, Optional

class TranscriptError(Exception):
    """Base class for every classified transcript extraction failure."""
    kind = "TranscriptError"

    def __init__(self, message: str, video_id: Optional[str] = None):
        super().__init__(f"[YoutubeTranscript] {message}")
        self.video_id = video_id

class UnresolvableVideoId(TranscriptError):
    kind = "UnresolvableVideoId"

    def __init__(self, value: str):
        super().__init__("Impossible to retrieve YouTube video ID.")
        self.value = value

class TooManyRequests(TranscriptError):
    kind = "TooManyRequests"

    def __init__(self, video_id: Optional[str] = None):
        super().__init__(
            "YouTube is receiving too many requests from this IP and now requires solving a captcha to continue",
            video_id
        )

class VideoUnavailable(TranscriptError):
    kind = "VideoUnavailable"

    def __init__(self, video_id: str):
        super().__init__(f"The video is no longer available ({video_id})", video_id)

class CaptionsDisabled(TranscriptError):
    kind = "CaptionsDisabled"

    def __init__(self, video_id: str):
        super().__init__(f"Transcript is disabled on this video ({video_id})", video_id)

class NoTranscriptAvailable(TranscriptError):
    kind = "NoTranscriptAvailable"

    def __init__(self, video_id: str):
        super().__init__(f"No transcripts are available for this video ({video_id})", video_id)

class LanguageNotAvailable(TranscriptError):
    kind = "LanguageNotAvailable"

    def __init__(self, lang: str, available: List[str], video_id: Optional[str] = None):
        super().__init__(
            f"No transcripts are available in {lang} this video ({video_id}). "
            f"Available languages: {', '.join(available)}",
            video_id
        )
        self.lang = lang
        self.available = list(available)

class TranscriptNotAvailable(TranscriptError):
    kind = "TranscriptNotAvailable"

    def __init__(self, video_id: Optional[str] = None):
        super().__init__("Transcript not available for this video", video_id)

class TranscriptPanelMissing(TranscriptError):
    kind = "TranscriptPanelMissing"

    def __init__(self, video_id: Optional[str] = None):
        super().__init__("Could not find transcript panel", video_id)

class NoSegmentsFound(TranscriptError):
    kind = "NoSegmentsFound"

    def __init__(self, video_id: Optional[str] = None):
        super().__init__("No transcript segments found", video_id)

class TranscriptFetchError(TranscriptError):
    """Unexpected network, parse or browser failure."""
    kind = "TranscriptFetchError"

class FormatterError(Exception):
    pass
