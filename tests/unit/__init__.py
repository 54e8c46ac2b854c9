"""
Unit tests for the ticket classifier.

Test individual components in isolation:
- Cache (key normalization, stores, semantic cache, metrics)
- Concurrency (rate-limit governor, wave executor)
- Discovery (catalog ranking, cached discovery service)
- LLM layer (OpenRouter client, model client, prompt builder, injection guard)
- Validation stages (each stage with positive/negative cases)
- Classification engine (fallback tiers, ordering, deadlines)
- API routes (FastAPI TestClient with dependency overrides)
"""
