"""
Prompt injection guard for ticket text.

Ticket fields are untrusted user input that ends up inside the prompt. The
guard normalizes them (control characters, whitespace, length) and flags
text that looks like an attempt to override the classification instructions.
Flagged tickets are still classified; the flag only drives logging.
"""

import re
from dataclasses import dataclass

import structlog

from ticket_classifier.models.input_models import TicketRecord


logger = structlog.get_logger(__name__)

DEFAULT_MAX_FIELD_LENGTH = 10000

SUSPICIOUS_PATTERNS = [
    re.compile(p, re.IGNORECASE)
    for p in (
        r"ignore\s+(previous|all|above|prior)\s+(instructions?|rules?|prompts?)",
        r"disregard\s+(previous|all|above|prior)",
        r"forget\s+(previous|all|above|everything)",
        r"system\s*:\s*",
        r"assistant\s*:\s*",
        r"\[INST\]",
        r"<<SYS>>",
        r"<\|im_start\|>",
        r"respond\s+(with|only)\s+(json)?",
        r"output\s+only",
        r"you\s+(must|should|are)\s+now",
        r"new\s+instructions?",
        r"override\s+instructions?",
        r"instead\s+of\s+classifying",
        r"ignore.*instructions?",
    )
]

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class SanitizedTicket:
    """Prompt-ready ticket fields plus the injection flag."""

    issue_key: str
    summary: str
    description: str
    reporter: str
    suspicious: bool = False


class PromptInjectionGuard:
    """Sanitize ticket fields and detect prompt injection attempts."""

    def __init__(self, max_field_length: int = DEFAULT_MAX_FIELD_LENGTH):
        self.max_field_length = max_field_length

    def detect_injection(self, text: str) -> bool:
        return any(pattern.search(text) for pattern in SUSPICIOUS_PATTERNS)

    def sanitize(self, text: str) -> str:
        """
        Strip control characters, collapse whitespace, and cap the length.

        The cap bounds the prompt size against token exhaustion.
        """
        text = _CONTROL_CHARS.sub("", text)
        text = _WHITESPACE.sub(" ", text)
        if len(text) > self.max_field_length:
            text = text[:self.max_field_length]
        return text.strip()

    def sanitize_record(self, record: TicketRecord) -> SanitizedTicket:
        """
        Sanitize the free-text fields of a record and flag injection attempts.

        Detection runs on the raw text so that sanitizing cannot hide a pattern.
        """
        suspicious = False
        for field_name in ("summary", "description"):
            raw = getattr(record, field_name)
            if raw and self.detect_injection(raw):
                suspicious = True
                logger.warning(
                    "Prompt injection attempt detected",
                    issue_key=record.issue_key,
                    field=field_name,
                    preview=raw[:100]
                )

        return SanitizedTicket(
            issue_key=self.sanitize(record.issue_key) or "unknown",
            summary=self.sanitize(record.summary),
            description=self.sanitize(record.description),
            reporter=self.sanitize(record.reporter),
            suspicious=suspicious,
        )
