"""
Pure catalog filtering and ranking.

Catalog entries are raw dicts as published by GET /models:

{
    "id": "qwen/qwen3-coder:free",
    "name": "Qwen3 Coder (free)",
    "context_length": 262144,
    "architecture": {"modality": "text->text"},
    "pricing": {"prompt": "0", "completion": "0", "requests": "0"},
    "top_provider": {"max_completion_tokens": 8192}
}
"""

import math
from typing import Any, Iterable, Optional

import structlog
from pydantic import ValidationError as PydanticValidationError

from ticket_classifier.models.llm_models import ModelDescriptor


logger = structlog.get_logger(__name__)

FREE_SUFFIX = ":free"
CHAT_MODALITY = "text->text"
INACTIVE_PROMPT_PRICE = "-1"
MAX_POPULARITY_SCORE = 100


def _to_float(value: Any, default: float = 0.0) -> float:
    """Numeric catalog field; non-numeric and non-finite values fall back to default."""
    if value is None:
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def _section(model: dict, name: str) -> dict:
    section = model.get(name)
    return section if isinstance(section, dict) else {}


def is_free_model(model: dict) -> bool:
    """Free tier: ':free' id suffix, or zero prompt and completion prices."""
    if str(model.get("id", "")).endswith(FREE_SUFFIX):
        return True

    pricing = _section(model, "pricing")
    if not pricing:
        return False
    prompt = _to_float(pricing.get("prompt"), default=1.0)
    completion = _to_float(pricing.get("completion"), default=1.0)
    return prompt == 0.0 and completion == 0.0


def is_chat_model(model: dict) -> bool:
    """Text-to-text only; entries without a modality pass."""
    modality = _section(model, "architecture").get("modality")
    return modality is None or modality == CHAT_MODALITY


def is_active(model: dict) -> bool:
    if model.get("active") is False:
        return False
    prompt_price = _section(model, "pricing").get("prompt")
    return str(prompt_price) != INACTIVE_PROMPT_PRICE


def ranking_score(model: dict) -> int:
    """
    context_length / 1000 + max_completion_tokens / 100 + popularity.

    Popularity is pricing.requests / 10000 capped at 100, counted only when
    the catalog publishes it.
    """
    score = _to_float(model.get("context_length")) / 1000
    score += _to_float(_section(model, "top_provider").get("max_completion_tokens")) / 100

    requests = _section(model, "pricing").get("requests")
    if requests is not None:
        score += min(_to_float(requests) / 10000, MAX_POPULARITY_SCORE)

    return int(score)


def to_descriptor(model: dict) -> ModelDescriptor:
    name = model.get("name")
    return ModelDescriptor(
        id=model["id"],
        display_name=name if isinstance(name, str) and name else model["id"],
        ranking_score=max(0, ranking_score(model)),
        context_length=max(0, int(_to_float(model.get("context_length")))),
    )


def filter_and_rank(
    models: Iterable[Any],
    min_ranking: int = 50,
    max_models: int = 10,
) -> list[ModelDescriptor]:
    """
    Keep free, chat-capable, active models scoring at least min_ranking.

    Returns:
        Descriptors sorted by ranking score, highest first (ties keep catalog
        order), truncated to max_models
    """
    candidates: list[ModelDescriptor] = []
    skipped = 0

    for model in models:
        if not isinstance(model, dict) or not isinstance(model.get("id"), str) or not model["id"]:
            skipped += 1
            continue
        if not (is_free_model(model) and is_chat_model(model) and is_active(model)):
            continue

        try:
            descriptor = to_descriptor(model)
        except (ValueError, OverflowError, PydanticValidationError):
            skipped += 1
            continue
        if descriptor.ranking_score < min_ranking:
            continue
        candidates.append(descriptor)

    if skipped:
        logger.warning("Skipped malformed catalog entries", count=skipped)

    # sorted() is stable, also with reverse=True
    ranked = sorted(candidates, key=lambda d: d.ranking_score, reverse=True)
    return ranked[:max_models]


def best_model_id(descriptors: list[ModelDescriptor]) -> Optional[str]:
    return descriptors[0].id if descriptors else None
