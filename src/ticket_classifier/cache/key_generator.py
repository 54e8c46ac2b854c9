"""
Semantic cache key derivation.

Tickets that differ only in case, punctuation, dates, times, numbers or
stop words normalize to the same text and therefore share one cache entry.
"""

import hashlib
import re

from ticket_classifier.models.input_models import TicketRecord


CACHE_KEY_PREFIX = "classification"

STOPWORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by",
    "i", "you", "he", "she", "it", "we", "they", "this", "that", "these", "those",
    "is", "am", "are", "was", "were", "be", "been", "being", "have", "has", "had",
    "do", "does", "did", "will", "would", "could", "should", "may", "might", "must",
    "can", "wont", "dont", "doesnt", "didnt", "isnt", "arent", "wasnt",
})

_PUNCTUATION = re.compile(r"[^\w\s]")
_DATES = re.compile(r"\d{4}-\d{2}-\d{2}")
_TIMES = re.compile(r"\d{2}:\d{2}(:\d{2})?")
_NUMBERS = re.compile(r"\d+")


def normalize_text(text: str) -> str:
    """
    Normalize ticket text for semantic comparison.

    Steps: lowercase, strip punctuation, strip YYYY-MM-DD dates, HH:MM[:SS]
    times and remaining digit runs, drop stop words, collapse whitespace.
    """
    normalized = text.lower()
    normalized = _PUNCTUATION.sub("", normalized)
    normalized = _DATES.sub("", normalized)
    normalized = _TIMES.sub("", normalized)
    normalized = _NUMBERS.sub("", normalized)

    words = [word for word in normalized.split() if word not in STOPWORDS]
    return " ".join(words)


def generate_key(record: TicketRecord) -> str:
    """classification:<sha256 of normalized summary + description>"""
    normalized = normalize_text(f"{record.summary} {record.description}")
    digest = hashlib.sha256(normalized.encode("utf-8")).hexdigest()
    return f"{CACHE_KEY_PREFIX}:{digest}"
