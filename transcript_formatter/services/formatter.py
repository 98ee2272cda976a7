import os
from typing import Dict, List, Optional
import openai
from jinja2 import Environment, FileSystemLoader
from openai import OpenAI
from transcript_formatter.config import settings
from transcript_formatter.core.errors import FormatterError
from transcript_formatter.utils.retry import api_retry
from transcript_formatter.utils.logger import logger

PROMPTS_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "prompts")

SYSTEM_PROMPT = "You are a helpful assistant that formats YouTube video transcripts."

DEFAULT_MODELS = [
    {"id": "gemma2-9b-it", "name": "Gemma2 9b IT 70B (8K)"},
    {"id": "llama-3.3-70b-versatile", "name": "LLaMA 3.3 70B Versatile (128K)"},
    {"id": "llama-3.1-8b-instant", "name": "LLaMA 3.1 8B Instant (128K)"},
    {"id": "llama-guard-3-8b", "name": "LLaMA Guard 3 (8K)"},
    {"id": "llama3-70b-8192", "name": "LLaMA 3 70B (8K)"},
    {"id": "llama3-8b-8192", "name": "LLaMA 3 8B (8K)"},
]

class TranscriptFormatter:
    """Sends raw transcript text and free-form instructions to a chat-completions API."""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None, client: Optional[OpenAI] = None):
        self.model = model or settings.LLM_MODEL
        api_key = api_key or settings.LLM_API_KEY
        if client is None:
            if not api_key:
                raise FormatterError("Please enter your API key")
            client = OpenAI(api_key=api_key, base_url=settings.LLM_BASE_URL)
        self.client = client
        self.env = Environment(loader=FileSystemLoader(PROMPTS_DIR))
        self.format_template = self.env.get_template("format.jinja2")

    @api_retry()
    def _call_llm(self, prompt: str) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt}
            ],
            temperature=settings.LLM_TEMPERATURE,
            max_tokens=settings.LLM_MAX_TOKENS
        )
        return response.choices[0].message.content

    def format(self, transcript: str, instructions: Optional[str] = None) -> str:
        if not transcript:
            raise FormatterError("No transcript to format")
        prompt = self.format_template.render(
            instructions=(instructions or "").strip() or settings.FORMAT_INSTRUCTIONS,
            transcript=transcript
        )
        logger.info(f"Formatting transcript with {self.model}...")
        try:
            content = self._call_llm(prompt)
        except openai.APIStatusError as e:
            raise FormatterError(f"API request failed with status {e.status_code}: {e.message}") from e
        except openai.OpenAIError as e:
            raise FormatterError(str(e)) from e
        return (content or "").strip()

    def list_models(self) -> List[Dict[str, str]]:
        try:
            models = [{"id": m.id, "name": m.id} for m in self.client.models.list()]
        except openai.OpenAIError as e:
            logger.warning(f"Failed to fetch models ({e}). Using default list.")
            return list(DEFAULT_MODELS)
        return models or list(DEFAULT_MODELS)
