"""
Test fixtures for the ticket classifier.

Contains sample data for testing:
- openrouter_models.json: GET /models catalog with free, paid, vision,
  retired, low-ranking and malformed entries
"""
