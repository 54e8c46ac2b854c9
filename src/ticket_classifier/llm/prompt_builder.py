"""
Prompt builders for classification requests.

Responsible for:
- Running ticket fields through the injection guard
- Rendering the selected Jinja2 template variant (verbose or optimized)

The variant is chosen once, at construction; the engine only sees
PromptBuilder.build(record) -> str.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import structlog
from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ticket_classifier.config import Settings
from ticket_classifier.llm.prompt_guard import PromptInjectionGuard
from ticket_classifier.models.enums import CategoryEnum, LevelEnum, SentimentEnum
from ticket_classifier.models.input_models import TicketRecord


logger = structlog.get_logger(__name__)

DEFAULT_TEMPLATES_DIR = Path(__file__).parent / "templates"

PROMPT_TEMPLATES = {
    "verbose": "verbose_prompt.txt",
    "optimized": "optimized_prompt.txt",
}


class PromptBuilder(ABC):
    """Turns a ticket record into the complete prompt text."""

    @abstractmethod
    def build(self, record: TicketRecord) -> str:
        pass


class TemplatePromptBuilder(PromptBuilder):
    """
    Render a ticket into one of the packaged prompt templates.

    Handles:
    - Template loading (Jinja2, strict undefined variables)
    - Field sanitization and injection flagging (PromptInjectionGuard)
    - Closed label sets injected from the enums
    """

    def __init__(
        self,
        variant: str = "optimized",
        guard: Optional[PromptInjectionGuard] = None,
        templates_dir: Path = DEFAULT_TEMPLATES_DIR,
    ):
        """
        Initialize prompt builder.

        Args:
            variant: "optimized" (short) or "verbose" (full security preamble)
            guard: Injection guard (default: PromptInjectionGuard())
            templates_dir: Directory containing prompt templates

        Raises:
            ValueError: Unknown variant
        """
        if variant not in PROMPT_TEMPLATES:
            raise ValueError(
                f"Unknown prompt variant '{variant}', expected one of {sorted(PROMPT_TEMPLATES)}"
            )

        self.variant = variant
        self.guard = guard or PromptInjectionGuard()

        self.jinja_env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=False,  # Prompts, not HTML
            undefined=StrictUndefined,
            keep_trailing_newline=False,
        )
        self.template = self.jinja_env.get_template(PROMPT_TEMPLATES[variant])

        logger.info("Loaded prompt template", variant=variant, templates_dir=str(templates_dir))

    def build(self, record: TicketRecord) -> str:
        ticket = self.guard.sanitize_record(record)
        if ticket.suspicious:
            logger.warning(
                "Building prompt with sanitized suspicious content",
                issue_key=ticket.issue_key,
                variant=self.variant
            )

        return self.template.render(
            issue_key=ticket.issue_key,
            summary=ticket.summary,
            description=ticket.description,
            reporter=ticket.reporter,
            categories=[c.value for c in CategoryEnum],
            sentiments=[s.value for s in SentimentEnum],
            levels=[lv.value for lv in reversed(list(LevelEnum))],
        ).strip()


def create_prompt_builder(settings: Settings) -> PromptBuilder:
    """Build the prompt variant selected by AI_PROMPT_VERSION."""
    return TemplatePromptBuilder(
        variant=settings.AI_PROMPT_VERSION,
        guard=PromptInjectionGuard(max_field_length=settings.PROMPT_MAX_FIELD_LENGTH),
    )
