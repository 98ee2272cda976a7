import logging
from rich.logging import RichHandler
from transcript_formatter.config import settings

def setup_logger(name: str = "transcript_formatter") -> logging.Logger:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)]
    )
    return logging.getLogger(name)

logger = setup_logger()
