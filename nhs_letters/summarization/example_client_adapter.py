"""Offline summarization client.

Returns a canned summary without any network calls, for local development
and tests.
"""

from typing import ClassVar

from nhs_letters.summarization.client_base import BaseSummarizationClient


class ExampleClientAdapter(BaseSummarizationClient):
    """Adapter that echoes a fixed summary followed by the letter's opening."""

    SUMMARY_PREFIX: ClassVar[str] = "Example summary:"
    PREVIEW_CHARS: ClassVar[int] = 80

    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int,
    ) -> str:
        _ = model, temperature, system_prompt, max_tokens
        preview = " ".join(user_prompt.split())[: self.PREVIEW_CHARS]
        return f"{self.SUMMARY_PREFIX} {preview}"
