import logging
from typing import Optional
from questionbank import config
from questionbank.services.generator import GeminiItemGenerator

logger = logging.getLogger(__name__)

_generator: Optional[GeminiItemGenerator] = None


def get_generator() -> Optional[GeminiItemGenerator]:
    """Shared Gemini generator, or None when no API key is configured."""
    global _generator
    if not config.GEMINI_API_KEY:
        return None
    if _generator is None:
        logger.info("Initializing Gemini generator with model %s", config.GEMINI_MODEL)
        _generator = GeminiItemGenerator(config.GEMINI_API_KEY)
    return _generator
