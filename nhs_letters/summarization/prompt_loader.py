from pathlib import Path

from nhs_letters.summarization.exceptions import SummarizationError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


def _load(path: Path, what: str) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SummarizationError(f"Failed to load {what}: {exc}") from exc


def load_system_prompt(path: Path | None = None) -> str:
    """Load the summarizer's system prompt.

    Defaults to the bundled system_prompt.txt.

    Raises:
        SummarizationError: if the file cannot be read.
    """
    return _load(path or _DEFAULT_PROMPT_DIR / "system_prompt.txt", "system prompt").strip()


def load_prompt_template(path: Path | None = None) -> str:
    """Load the user prompt template; it must contain a {letter_body} placeholder.

    Defaults to the bundled summary_prompt.txt.

    Raises:
        SummarizationError: if the file cannot be read or lacks the placeholder.
    """
    template = _load(path or _DEFAULT_PROMPT_DIR / "summary_prompt.txt", "prompt template")
    if "{letter_body}" not in template:
        raise SummarizationError("Prompt template must contain {letter_body}")
    return template
