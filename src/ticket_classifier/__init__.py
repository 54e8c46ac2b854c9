"""
Resilient ticket classification dispatch engine.

Classifies batches of support tickets against a rate-limited, multi-model
inference backend (OpenRouter-compatible) and always returns one ordered
classification per input:
- Static model roster with fallback to auto-discovered free models
- Adaptive concurrency driven by throttle signals
- Wave-based bounded-parallel dispatch with serial fallback
- Semantic cache keyed on normalized ticket text
- Synthetic placeholder when every model fails

Architecture: asyncio engine + httpx client + Redis/in-memory cache + FastAPI surface
"""

__version__ = "0.1.0"
