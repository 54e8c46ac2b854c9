"""
LLM client abstraction and implementations.

Components:
- BaseLLMClient: Abstract base class for transport adapters
- OpenRouterClient: Adapter for the OpenRouter chat-completions API
- ModelClient: One model, one prompt, one InvocationOutcome
- PromptBuilder / TemplatePromptBuilder: Ticket -> prompt text
- PromptInjectionGuard: Ticket field sanitization
- exceptions: LLM-specific exceptions
"""

from ticket_classifier.llm.base_client import BaseLLMClient
from ticket_classifier.llm.openrouter_client import OpenRouterClient
from ticket_classifier.llm.model_client import ModelClient
from ticket_classifier.llm.prompt_builder import (
    PromptBuilder,
    TemplatePromptBuilder,
    create_prompt_builder,
)
from ticket_classifier.llm.prompt_guard import PromptInjectionGuard
from ticket_classifier.llm.exceptions import (
    LLMClientError,
    LLMModelNotAvailableError,
    LLMRateLimitError,
    LLMTimeoutError,
    LLMTransportError,
)

__all__ = [
    "BaseLLMClient",
    "OpenRouterClient",
    "ModelClient",
    "PromptBuilder",
    "TemplatePromptBuilder",
    "create_prompt_builder",
    "PromptInjectionGuard",
    "LLMClientError",
    "LLMTransportError",
    "LLMTimeoutError",
    "LLMModelNotAvailableError",
    "LLMRateLimitError",
]
