from typing import List, Optional
from transcript_formatter.core.errors import UnresolvableVideoId
from transcript_formatter.core.strategy import ExtractionStrategy
from transcript_formatter.models.transcript import ExtractionFailure, ExtractionOutcome
from transcript_formatter.providers.dom import BrowserPageStrategy
from transcript_formatter.providers.youtube import StructuredCaptionStrategy, resolve_video_id
from transcript_formatter.utils.logger import logger

class TranscriptService:
    """
    Resolves a video and runs the extraction strategies in order.

    The first success wins. Failures of earlier strategies are only logged;
    when every strategy fails the last one's failure is reported.
    """

    def __init__(self, strategies: Optional[List[ExtractionStrategy]] = None):
        if strategies is None:
            strategies = [StructuredCaptionStrategy(), BrowserPageStrategy()]
        if not strategies:
            raise ValueError("TranscriptService needs at least one extraction strategy")
        self.strategies = strategies

    def extract(self, location: str, lang: Optional[str] = "en") -> ExtractionOutcome:
        try:
            video_id = resolve_video_id(location.strip())
        except UnresolvableVideoId as e:
            logger.error(f"{e} ({location})")
            return ExtractionFailure(kind=e.kind, error=str(e))

        outcome = None
        for i, strategy in enumerate(self.strategies):
            logger.info(f"Extracting transcript for {video_id} via {strategy.name}...")
            outcome = strategy.run(video_id, lang)
            if outcome.success:
                return outcome
            if i < len(self.strategies) - 1:
                logger.warning(f"{strategy.name} extraction failed ({outcome.kind}): {outcome.error}. Trying next strategy...")
            else:
                logger.error(f"{strategy.name} extraction failed ({outcome.kind}): {outcome.error}")
        return outcome
