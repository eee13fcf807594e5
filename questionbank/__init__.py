"""Domain-scoped question bank with difficulty-balanced sampling and Gemini backfill."""

__version__ = "0.1.0"
