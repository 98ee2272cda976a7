from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional

class Settings(BaseSettings):
    # LLM Configuration (transcript formatting)
    LLM_API_KEY: Optional[str] = None
    LLM_BASE_URL: str = "https://api.groq.com/openai/v1"
    LLM_MODEL: str = "llama3-70b-8192"
    LLM_TEMPERATURE: float = 0.7
    LLM_MAX_TOKENS: int = 4000
    FORMAT_INSTRUCTIONS: str = (
        "Format this YouTube transcript into a well-structured, readable format. "
        "Correct any obvious transcription errors."
    )

    # Transcript Extraction
    TRANSCRIPT_LANG: str = "en"
    WATCH_URL: str = "https://www.youtube.com/watch?v={video_id}"
    USER_AGENT: str = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_4) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/85.0.4183.83 Safari/537.36,gzip(gfe)"
    )
    REQUEST_TIMEOUT: float = 30.0

    # DOM Fallback (milliseconds)
    PANEL_SETTLE_MS: int = 1500
    MENU_SETTLE_MS: int = 500
    BROWSER_HEADLESS: bool = True

    # System Settings
    LOG_LEVEL: str = "INFO"
    MAX_RETRIES: int = 3

    # Paths
    OUTPUT_DIR: str = "outputs"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

settings = Settings()
