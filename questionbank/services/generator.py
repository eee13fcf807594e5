"""Gemini-backed item generator with retry, backoff and a strict-JSON fallback."""

import asyncio
import logging
import random
from typing import Awaitable, Callable, Optional

from google import genai
from google.genai import types

from questionbank import config
from questionbank.errors import (
    GenerationError,
    MalformedOutputError,
    QuotaExhaustedError,
    RateLimitedError,
    TransientGeneratorError,
)
from questionbank.services.normalizer import parse_candidates
from questionbank.services.review import REVIEW_RESPONSE_SCHEMA, REVIEW_SYSTEM_INSTRUCTION, build_review_prompt
from questionbank.services.tiers import Difficulty

logger = logging.getLogger(__name__)

_QUOTA_MARKERS = ("payment required", "insufficient_quota", "billing account", "out of credits", "not enough credits")
_RATE_LIMIT_MARKERS = ("429", "rate limit", "resource exhausted", "resource_exhausted", "too many requests")
_TRANSIENT_MARKERS = ("503", "500", "502", "504", "unavailable", "overloaded", "timed out", "timeout", "connection")

STRICT_JSON_SUFFIX = """
Return ONLY valid JSON (no markdown, no commentary): an object with a single key
"{list_key}" whose value is an array of items with the fields described above.
"""


def classify_generator_error(e: Exception) -> GenerationError:
    """Map a raw client exception onto one of the generator error kinds."""
    if isinstance(e, GenerationError):
        return e
    status_code = getattr(e, "status_code", None) or getattr(e, "code", None)
    error_str = str(e).lower()

    # Checked before rate limits: some gateways send exhausted credits as 429.
    if status_code == 402 or any(marker in error_str for marker in _QUOTA_MARKERS):
        return QuotaExhaustedError(str(e)[:200], cause=e)
    if status_code == 429 or any(marker in error_str for marker in _RATE_LIMIT_MARKERS):
        return RateLimitedError(str(e)[:200], cause=e)
    if isinstance(e, (TimeoutError, ConnectionError, asyncio.TimeoutError)):
        return TransientGeneratorError(str(e)[:200] or type(e).__name__, cause=e)
    if isinstance(status_code, int) and status_code >= 500:
        return TransientGeneratorError(str(e)[:200], cause=e)
    if any(marker in error_str for marker in _TRANSIENT_MARKERS):
        return TransientGeneratorError(str(e)[:200], cause=e)
    return GenerationError(str(e)[:200], cause=e)


def backoff_delay(attempt: int, initial_delay: float, max_delay: float, rng=random) -> float:
    """Exponential delay for ``attempt`` (0-based), capped, plus up to one initial delay of jitter."""
    return min(initial_delay * (2 ** attempt), max_delay) + rng.uniform(0, initial_delay)


async def call_with_retry(
    call: Callable[[], Awaitable],
    max_attempts: Optional[int] = None,
    initial_delay: Optional[float] = None,
    max_delay: Optional[float] = None,
    sleep: Callable[[float], Awaitable] = asyncio.sleep,
    rng=random,
):
    """
    Await ``call()`` retrying rate limits and transient failures.

    Args:
        call: Zero-argument callable returning an awaitable generator request
        max_attempts: Total attempts before giving up
        initial_delay: Delay in seconds before the first retry, doubled per attempt
        max_delay: Cap for the exponential part of the delay
        sleep: Awaitable sleep, injectable for tests

    Returns:
        Whatever ``call()`` resolves to

    Raises:
        QuotaExhaustedError: immediately, never retried
        RateLimitedError / TransientGeneratorError: once attempts are used up
        GenerationError: for errors that are not worth retrying
    """
    max_attempts = max_attempts or config.GENERATION_MAX_ATTEMPTS
    initial_delay = config.GENERATION_INITIAL_DELAY if initial_delay is None else initial_delay
    max_delay = config.GENERATION_MAX_DELAY if max_delay is None else max_delay

    for attempt in range(max_attempts):
        try:
            return await call()
        except Exception as e:
            error = classify_generator_error(e)
            retryable = isinstance(error, (RateLimitedError, TransientGeneratorError))
            if not retryable or attempt == max_attempts - 1:
                if retryable:
                    logger.warning("Generator still failing after %d attempts: %s", max_attempts, error)
                if error is e:
                    raise
                raise error from e

            delay = backoff_delay(attempt, initial_delay, max_delay, rng)
            logger.info(
                "Generator %s, retrying in %.1fs (attempt %d/%d)",
                error.condition, delay, attempt + 1, max_attempts,
            )
            await sleep(delay)


class GeminiItemGenerator:
    """Generates raw item candidates for a catalog entry through the Gemini API."""

    def __init__(self, api_key: str, model: Optional[str] = None, client=None, sleep=asyncio.sleep):
        self.model = model or config.GEMINI_MODEL
        self.client = client or genai.Client(api_key=api_key)
        self._sleep = sleep

    async def _request(self, contents: str, generation_config: types.GenerateContentConfig):
        return await call_with_retry(
            lambda: asyncio.to_thread(
                self.client.models.generate_content,
                model=self.model,
                contents=contents,
                config=generation_config,
            ),
            sleep=self._sleep,
        )

    async def generate(self, entry, domain: str, difficulty: Difficulty, count: int) -> list[dict]:
        """Return up to ``count`` raw candidates; rate limit and quota errors propagate."""
        prompt = entry.build_prompt(domain, difficulty, count)
        structured = types.GenerateContentConfig(
            system_instruction=entry.system_instruction,
            response_mime_type="application/json",
            response_schema=entry.response_schema,
            temperature=0.8,
        )
        response = await self._request(prompt, structured)
        try:
            candidates = parse_candidates(response.text or "", entry.list_key)
        except MalformedOutputError as e:
            logger.warning("Structured %s output for %s unusable (%s), retrying with strict JSON prompt",
                           entry.kind.value, domain, e)
            strict = types.GenerateContentConfig(
                system_instruction=entry.system_instruction + " Always respond with valid JSON only, no markdown.",
                temperature=0.7,
            )
            response = await self._request(prompt + STRICT_JSON_SUFFIX.format(list_key=entry.list_key), strict)
            candidates = parse_candidates(response.text or "", entry.list_key)
        return candidates[:count]

    async def review(
        self,
        question: str,
        expected_points: list,
        answer: str,
        domain: str,
        candidate_name: Optional[str] = None,
    ) -> dict:
        """Return the raw review object for one interview answer."""
        generation_config = types.GenerateContentConfig(
            system_instruction=REVIEW_SYSTEM_INSTRUCTION.format(domain=domain),
            response_mime_type="application/json",
            response_schema=REVIEW_RESPONSE_SCHEMA,
            temperature=0.7,
        )
        prompt = build_review_prompt(question, expected_points, answer, candidate_name)
        response = await self._request(prompt, generation_config)
        candidates = parse_candidates(response.text or "", "review")
        if not candidates:
            raise MalformedOutputError("Review response had no JSON object")
        return candidates[0]
