from transcript_formatter.services.transcript_service import TranscriptService
from transcript_formatter.utils.logger import logger

if __name__ == "__main__":
    url = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
    outcome = TranscriptService().extract(url, "en")
    if not outcome.success:
        logger.error(f"Transcript fetch failed ({outcome.kind}): {outcome.error}")
        raise SystemExit(1)
    print("strategy:", outcome.strategy)
    print("characters:", len(outcome.transcript))
    print(outcome.transcript[:500])
