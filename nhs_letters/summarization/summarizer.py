"""AI-powered NHS letter summarizer."""

from pathlib import Path

from nhs_letters.logging.logger import Log
from nhs_letters.summarization.base import BaseSummarizer
from nhs_letters.summarization.client_base import BaseSummarizationClient
from nhs_letters.summarization.exceptions import SummarizationError
from nhs_letters.summarization.prompt_loader import load_prompt_template, load_system_prompt


class Summarizer(BaseSummarizer):
    """Summarizes letter bodies through a chat-completion provider."""

    def __init__(
        self,
        *,
        client: BaseSummarizationClient,
        model: str,
        temperature: float = 0.3,
        max_tokens: int = 300,
        prompt_template_path: Path | None = None,
        system_prompt_path: Path | None = None,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(1.0, temperature))
        self._max_tokens = max_tokens
        self._prompt_template = load_prompt_template(prompt_template_path)
        self._system_prompt = load_system_prompt(system_prompt_path)

    def summarize(self, text: str) -> str:
        """Return a short summary of the letter body."""
        prompt = self._prompt_template.replace("{letter_body}", text)
        Log.debug(f"Summarization prompt:\n{prompt}")

        content = self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            system_prompt=self._system_prompt,
            user_prompt=prompt,
            max_tokens=self._max_tokens,
        )
        summary = (content or "").strip()
        if not summary:
            raise SummarizationError("AI returned empty response")

        Log.info(f"Summary generated: {summary[:100]}...")
        return summary
