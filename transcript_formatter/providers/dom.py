"""
DOM fallback for transcript extraction.

When the caption manifest or timed-text endpoint cannot be used, the
transcript is read from the rendered watch page instead:

- locate a "Show transcript" control through an ordered table of probes
- open the transcript engagement panel and wait for it to render
- concatenate the text of every rendered segment

Timing is not recoverable on this path, only the text.
"""

from dataclasses import dataclass
from typing import Any, Optional
from playwright.sync_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeoutError, sync_playwright
from transcript_formatter.core.errors import (
    NoSegmentsFound,
    TranscriptFetchError,
    TranscriptNotAvailable,
    TranscriptPanelMissing,
)
from transcript_formatter.core.strategy import ExtractionStrategy
from transcript_formatter.providers.youtube import watch_url
from transcript_formatter.utils.logger import logger
from transcript_formatter.config import settings

TRANSCRIPT_KEYWORD = "transcript"
TRANSCRIPT_PANEL = "ytd-transcript-renderer"
TRANSCRIPT_ENGAGEMENT_PANEL = 'ytd-engagement-panel-section-list-renderer[data-panel-identifier="transcript"]'
TRANSCRIPT_SEGMENT = "ytd-transcript-segment-renderer"
SEGMENT_TEXT = ".segment-text"
WATCH_READY_SELECTOR = "ytd-watch-metadata"
WATCH_READY_TIMEOUT_MS = 15000


@dataclass(frozen=True)
class ControlProbe:
    """
    One attempt at finding the transcript control.

    `opener` is clicked first (a menu that has to be expanded), `scope`
    restricts the search to a container, and `match_text` scans every match
    of `selector` for the word "transcript" instead of taking the first one.
    """
    description: str
    selector: str
    match_text: bool = False
    opener: Optional[str] = None
    scope: Optional[str] = None


DIRECT_SELECTORS = [
    'button[aria-label="Show transcript"]',
    'button.ytp-button[aria-label*="transcript"]',
    'button[data-tooltip-target-id="transcript"]',
    '.ytp-menuitem[aria-label*="transcript" i]',
    '.ytp-menuitem[aria-label*="Transcript" i]',
    'tp-yt-paper-item[aria-label*="transcript"]',
    'yt-formatted-string[aria-label*="transcript"]',
]

TEXT_MATCH_SELECTORS = [
    "ytd-menu-service-item-renderer",
    "tp-yt-paper-item",
    '.ytp-panel-menu [role="menuitem"]',
    "button",
]

CONTROL_PROBES = (
    [ControlProbe(f"direct selector {s}", s) for s in DIRECT_SELECTORS]
    + [ControlProbe(f"text scan of {s}", s, match_text=True) for s in TEXT_MATCH_SELECTORS]
    + [
        ControlProbe(
            "player more-options menu",
            '.ytp-panel-menu [role="menuitem"]',
            match_text=True,
            opener="button.ytp-more-button",
        ),
        ControlProbe(
            "three-dot actions menu",
            "ytd-menu-service-item-renderer, tp-yt-paper-listbox ytd-menu-service-item-renderer",
            match_text=True,
            opener="ytd-menu-renderer yt-icon-button, ytd-menu-renderer #button",
        ),
        ControlProbe(
            "open engagement panel",
            "button, yt-formatted-string",
            match_text=True,
            scope="#engagement-panel-container, ytd-engagement-panel-section-list-renderer",
        ),
    ]
)


def _mentions_transcript(element: Any) -> bool:
    text = element.text_content()
    return bool(text) and TRANSCRIPT_KEYWORD in text.lower()


class DomFallbackExtractor:
    def __init__(self, probes=None, panel_settle_ms: Optional[int] = None, menu_settle_ms: Optional[int] = None):
        self.probes = list(CONTROL_PROBES if probes is None else probes)
        self.panel_settle_ms = settings.PANEL_SETTLE_MS if panel_settle_ms is None else panel_settle_ms
        self.menu_settle_ms = settings.MENU_SETTLE_MS if menu_settle_ms is None else menu_settle_ms

    def run_probe(self, page: Any, probe: ControlProbe) -> Optional[Any]:
        if probe.opener:
            opener = page.query_selector(probe.opener)
            if opener is None:
                return None
            opener.click()
            page.wait_for_timeout(self.menu_settle_ms)

        root = page
        if probe.scope:
            root = page.query_selector(probe.scope)
            if root is None:
                return None

        if not probe.match_text:
            return root.query_selector(probe.selector)
        for element in root.query_selector_all(probe.selector):
            if _mentions_transcript(element):
                return element
        return None

    def find_control(self, page: Any) -> Optional[Any]:
        for probe in self.probes:
            try:
                element = self.run_probe(page, probe)
            except PlaywrightError as e:
                logger.debug(f"Probe '{probe.description}' failed: {e}")
                continue
            if element is not None:
                logger.debug(f"Transcript control found via {probe.description}")
                return element
        return None

    def is_panel_open(self, page: Any) -> bool:
        return (
            page.query_selector(TRANSCRIPT_PANEL) is not None
            or page.query_selector(TRANSCRIPT_ENGAGEMENT_PANEL) is not None
        )

    def open_panel(self, page: Any, control: Any):
        if self.is_panel_open(page):
            return
        control.click()
        # Single fixed wait for the panel to render, no polling.
        page.wait_for_timeout(self.panel_settle_ms)

    def scrape_segments(self, page: Any, video_id: Optional[str] = None) -> str:
        panel = page.query_selector(TRANSCRIPT_PANEL)
        if panel is None:
            raise TranscriptPanelMissing(video_id)

        segments = panel.query_selector_all(TRANSCRIPT_SEGMENT)
        if not segments:
            raise NoSegmentsFound(video_id)

        transcript = ""
        for segment in segments:
            text_el = segment.query_selector(SEGMENT_TEXT)
            if text_el is None:
                continue
            transcript += (text_el.text_content() or "").strip() + " "
        return transcript.strip()

    def extract(self, page: Any, video_id: Optional[str] = None) -> str:
        control = self.find_control(page)
        if control is None:
            raise TranscriptNotAvailable(video_id)
        self.open_panel(page, control)
        return self.scrape_segments(page, video_id)


class BrowserPageStrategy(ExtractionStrategy):
    """
    Runs the DOM fallback against a live page.

    With `page` given the caller's session is reused as-is; otherwise a
    headless Chromium is launched for the watch page and closed afterwards.
    """
    name = "dom"

    def __init__(self, extractor: Optional[DomFallbackExtractor] = None, page: Any = None):
        self.extractor = extractor or DomFallbackExtractor()
        self.page = page

    def wait_for_watch_page(self, page: Any):
        # Player and menus are custom elements rendered after DOMContentLoaded.
        try:
            page.wait_for_selector(WATCH_READY_SELECTOR, timeout=WATCH_READY_TIMEOUT_MS)
        except PlaywrightTimeoutError:
            logger.warning("Watch page metadata did not render in time, probing anyway")

    def fetch_text(self, video_id: str, lang: Optional[str] = None) -> str:
        if self.page is not None:
            try:
                return self.extractor.extract(self.page, video_id)
            except PlaywrightError as e:
                raise TranscriptFetchError(f"Browser page interaction failed: {e}", video_id) from e

        try:
            with sync_playwright() as p:
                browser = p.chromium.launch(
                    headless=settings.BROWSER_HEADLESS,
                    args=["--no-sandbox", "--disable-dev-shm-usage"]
                )
                try:
                    context = browser.new_context(
                        user_agent=settings.USER_AGENT,
                        locale=lang or settings.TRANSCRIPT_LANG
                    )
                    page = context.new_page()
                    url = watch_url(video_id)
                    if lang:
                        url = f"{url}&hl={lang}"
                    logger.info(f"Opening {url} in headless browser...")
                    page.goto(url, wait_until="domcontentloaded", timeout=settings.REQUEST_TIMEOUT * 1000)
                    self.wait_for_watch_page(page)
                    return self.extractor.extract(page, video_id)
                finally:
                    browser.close()
        except PlaywrightError as e:
            raise TranscriptFetchError(f"Browser session failed: {e}", video_id) from e
