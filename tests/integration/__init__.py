"""
Integration tests for the ticket classifier.

Test components together or against real external services:
- Redis cache store (real Redis, skipped when unreachable)
- Full pipeline (record -> prompt -> mock backend -> validation -> classification)
- API endpoints (FastAPI TestClient with a mocked backend)
"""
