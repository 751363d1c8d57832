import threading
from typing import ClassVar

from nhs_letters.config.settings import Settings
from nhs_letters.logging.logger import Log
from nhs_letters.summarization.base import BaseSummarizer
from nhs_letters.summarization.example_client_adapter import ExampleClientAdapter
from nhs_letters.summarization.openai_client_adapter import OpenAIClientAdapter
from nhs_letters.summarization.summarizer import Summarizer

_summarizer: BaseSummarizer | None = None
_summarizer_lock = threading.Lock()


class SummarizerFactory:
    """Creates the configured summarizer."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseSummarizer:
        """Create a configured summarizer from application settings."""
        provider = settings.summarization_provider.lower()
        if provider == "example":
            return Summarizer(client=ExampleClientAdapter(), model="example")
        client = OpenAIClientAdapter(
            api_key=cls._resolve_api_key(provider, settings),
            timeout_seconds=cls._resolve_timeout_seconds(provider, settings),
            base_url=cls._resolve_base_url(provider, settings),
        )
        return Summarizer(
            client=client,
            model=cls._resolve_model_name(provider, settings),
            temperature=settings.summarization_temperature,
            max_tokens=settings.summarization_max_tokens,
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return None
        if provider == "openai_compatible":
            url = settings.summarization_openai_compatible_base_url.strip()
            if not url:
                raise ValueError(
                    "summarization_openai_compatible_base_url is required for "
                    "summarization_provider=openai_compatible"
                )
            return url
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return default_base_url
        supported = [
            "example",
            "openai",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]
        raise ValueError(
            f"Unknown summarization provider '{provider}'. Choose from: {supported}"
        )

    @classmethod
    def _resolve_api_key(cls, provider: str, settings: Settings) -> str:
        key_map = {
            "openai": settings.summarization_openai_api_key,
            "openai_compatible": settings.summarization_openai_compatible_api_key,
            "openrouter": settings.summarization_openrouter_api_key,
            "groq": settings.summarization_groq_api_key,
            "ollama": settings.summarization_ollama_api_key,
        }
        return key_map.get(provider, "") or ""

    @classmethod
    def _resolve_model_name(cls, provider: str, settings: Settings) -> str:
        key_map = {
            "openai": settings.summarization_openai_model_name,
            "openai_compatible": settings.summarization_openai_compatible_model_name,
            "openrouter": settings.summarization_openrouter_model_name,
            "groq": settings.summarization_groq_model_name,
            "ollama": settings.summarization_ollama_model_name,
        }
        return key_map.get(provider, "") or ""

    @classmethod
    def _resolve_timeout_seconds(cls, provider: str, settings: Settings) -> int:
        if provider == "openai_compatible":
            return settings.summarization_openai_compatible_timeout_seconds
        return settings.summarization_openai_timeout_seconds


def get_summarizer(settings: Settings) -> BaseSummarizer:
    """Return the process-wide summarizer, creating it on first use."""
    global _summarizer  # noqa: PLW0603
    if _summarizer is None:
        with _summarizer_lock:
            if _summarizer is None:
                _summarizer = SummarizerFactory.create(settings)
                Log.info(
                    f"Summarizer initialized for provider {settings.summarization_provider}"
                )
    return _summarizer


def reset_summarizer() -> None:
    """Drop the cached summarizer so the next call rebuilds it."""
    global _summarizer  # noqa: PLW0603
    with _summarizer_lock:
        _summarizer = None
