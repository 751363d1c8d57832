from nhs_letters.summarization.base import BaseSummarizer
from nhs_letters.summarization.factory import SummarizerFactory, get_summarizer, reset_summarizer
from nhs_letters.summarization.summarizer import Summarizer

__all__ = [
    "BaseSummarizer",
    "Summarizer",
    "SummarizerFactory",
    "get_summarizer",
    "reset_summarizer",
]
