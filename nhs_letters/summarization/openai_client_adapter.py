import httpx
import openai

from nhs_letters.logging.logger import Log
from nhs_letters.summarization.client_base import BaseSummarizationClient
from nhs_letters.summarization.exceptions import SummarizationError, SummarizationNetworkError


class OpenAIClientAdapter(BaseSummarizationClient):
    """Summarization client for OpenAI and any server speaking its chat API.

    Transport failures and provider-side errors are raised as
    SummarizationNetworkError so the event batch is retried. A rejected API
    key is a configuration problem and is raised as SummarizationError.
    """

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
        )

    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int,
    ) -> str | None:
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]
        try:
            response = self._client.chat.completions.create(
                model=model,
                messages=messages,  # type: ignore[arg-type]
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except openai.AuthenticationError as exc:
            raise SummarizationError(f"AI provider rejected the API key: {exc}") from exc
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise SummarizationNetworkError(f"AI provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise SummarizationNetworkError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise SummarizationError("AI returned no choices")
        choice = response.choices[0]
        if choice.finish_reason == "length":
            Log.warning(f"Summary from {model} was cut off at {max_tokens} tokens")
        return choice.message.content
