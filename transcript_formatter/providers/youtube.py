import json
import re
import requests
from abc import ABC, abstractmethod
from typing import Dict, List, Optional
from transcript_formatter.core.errors import (
    CaptionsDisabled,
    LanguageNotAvailable,
    NoTranscriptAvailable,
    TooManyRequests,
    TranscriptFetchError,
    UnresolvableVideoId,
    VideoUnavailable,
)
from transcript_formatter.core.strategy import ExtractionStrategy
from transcript_formatter.models.transcript import CaptionCue, CaptionTrack, language_codes
from transcript_formatter.utils.logger import logger
from transcript_formatter.config import settings

RE_YOUTUBE = re.compile(
    r"(?:youtube\.com/(?:[^/]+/.+/|(?:v|e(?:mbed)?)/|.*[?&]v=)|youtu\.be/)([^\"&?/\s]{11})",
    re.IGNORECASE
)
RE_XML_TRANSCRIPT = re.compile(r'<text start="([^"]*)" dur="([^"]*)">([^<]*)</text>')

CAPTIONS_MARKER = '"captions":'
VIDEO_DETAILS_MARKER = ',"videoDetails'
CAPTCHA_MARKER = 'class="g-recaptcha"'
PLAYABILITY_MARKER = '"playabilityStatus":'


def resolve_video_id(value: str) -> str:
    # 11 characters is taken as an id as-is; no format check beyond length.
    if len(value) == 11:
        return value
    m = RE_YOUTUBE.search(value)
    if m:
        return m.group(1)
    raise UnresolvableVideoId(value)


def build_headers(lang: Optional[str] = None) -> Dict[str, str]:
    headers = {"User-Agent": settings.USER_AGENT}
    if lang:
        headers["Accept-Language"] = lang
    return headers


def watch_url(video_id: str) -> str:
    return settings.WATCH_URL.format(video_id=video_id)


class ManifestExtractor(ABC):
    """Turns a raw watch page into a caption manifest or a classified failure."""

    @abstractmethod
    def extract(self, page: str, video_id: str) -> List[CaptionTrack]:
        pass


class MarkerManifestExtractor(ManifestExtractor):
    """
    Slices the player response out of the page between the `"captions":`
    and `,"videoDetails` markers. The page has no stable API, so this is only
    as good as the markup YouTube currently serves.
    """

    def extract(self, page: str, video_id: str) -> List[CaptionTrack]:
        parts = page.split(CAPTIONS_MARKER)
        if len(parts) <= 1:
            if CAPTCHA_MARKER in page:
                raise TooManyRequests(video_id)
            if PLAYABILITY_MARKER not in page:
                raise VideoUnavailable(video_id)
            raise CaptionsDisabled(video_id)

        raw = parts[1].split(VIDEO_DETAILS_MARKER)[0].replace("\n", "", 1)
        try:
            data = json.loads(raw)
        except ValueError:
            logger.debug(f"Could not parse captions JSON for {video_id}")
            data = None

        renderer = data.get("playerCaptionsTracklistRenderer") if isinstance(data, dict) else None
        if not isinstance(renderer, dict):
            raise CaptionsDisabled(video_id)

        tracks: List[CaptionTrack] = []
        seen = set()
        for item in renderer.get("captionTracks") or []:
            if not isinstance(item, dict):
                continue
            code = item.get("languageCode")
            url = item.get("baseUrl")
            if not isinstance(code, str) or not isinstance(url, str) or not code or not url or code in seen:
                continue
            seen.add(code)
            tracks.append(CaptionTrack(language_code=code, fetch_url=url))

        if not tracks:
            raise NoTranscriptAvailable(video_id)
        return tracks


def select_track(tracks: List[CaptionTrack], preferred_lang: Optional[str] = None,
                 video_id: Optional[str] = None) -> CaptionTrack:
    if not preferred_lang:
        return tracks[0]
    for track in tracks:
        if track.language_code == preferred_lang:
            return track
    raise LanguageNotAvailable(preferred_lang, language_codes(tracks), video_id)


class CaptionManifestFetcher:
    def __init__(self, extractor: Optional[ManifestExtractor] = None):
        self.extractor = extractor or MarkerManifestExtractor()

    def fetch_page(self, video_id: str, preferred_lang: Optional[str] = None) -> str:
        url = watch_url(video_id)
        try:
            resp = requests.get(url, headers=build_headers(preferred_lang), timeout=settings.REQUEST_TIMEOUT)
        except requests.exceptions.RequestException as e:
            raise TranscriptFetchError(f"Failed to fetch watch page: {e}", video_id) from e
        return resp.text

    def fetch_manifest(self, video_id: str, preferred_lang: Optional[str] = None) -> List[CaptionTrack]:
        page = self.fetch_page(video_id, preferred_lang)
        tracks = self.extractor.extract(page, video_id)
        logger.debug(f"Caption tracks for {video_id}: {language_codes(tracks)}")
        if preferred_lang:
            # Raises LanguageNotAvailable when the language is missing.
            select_track(tracks, preferred_lang, video_id)
        return tracks


class TranscriptXmlFetcher:
    def fetch_cues(self, track: CaptionTrack, preferred_lang: Optional[str] = None,
                   video_id: Optional[str] = None) -> List[CaptionCue]:
        try:
            resp = requests.get(track.fetch_url, headers=build_headers(preferred_lang), timeout=settings.REQUEST_TIMEOUT)
        except requests.exceptions.RequestException as e:
            raise TranscriptFetchError(f"Failed to fetch timed text: {e}", video_id) from e
        if not resp.ok:
            logger.debug(f"Timed text request returned HTTP {resp.status_code}")
            raise NoTranscriptAvailable(video_id)
        return self.parse(resp.text)

    def parse(self, body: str) -> List[CaptionCue]:
        cues = []
        for start, dur, text in RE_XML_TRANSCRIPT.findall(body):
            try:
                cues.append(CaptionCue(start=float(start or 0), duration=float(dur or 0), text=text))
            except ValueError:
                cues.append(CaptionCue(start=0.0, duration=0.0, text=text))
        return cues


def join_cues(cues: List[CaptionCue]) -> str:
    return " ".join(c.text for c in cues).strip()


class StructuredCaptionStrategy(ExtractionStrategy):
    """Embedded-JSON manifest followed by the timed-text XML endpoint."""
    name = "structured"

    def __init__(self, manifest_fetcher: Optional[CaptionManifestFetcher] = None,
                 xml_fetcher: Optional[TranscriptXmlFetcher] = None):
        self.manifest_fetcher = manifest_fetcher or CaptionManifestFetcher()
        self.xml_fetcher = xml_fetcher or TranscriptXmlFetcher()

    def fetch_text(self, video_id: str, lang: Optional[str] = None) -> str:
        tracks = self.manifest_fetcher.fetch_manifest(video_id, lang)
        track = select_track(tracks, lang, video_id)
        logger.info(f"Fetching '{track.language_code}' captions for {video_id}...")
        cues = self.xml_fetcher.fetch_cues(track, lang, video_id)
        if not cues:
            logger.warning(f"Caption track '{track.language_code}' for {video_id} is empty.")
        return join_cues(cues)
