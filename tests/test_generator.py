import asyncio
import random
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from questionbank.errors import (
    GenerationError,
    MalformedOutputError,
    QuotaExhaustedError,
    RateLimitedError,
    TransientGeneratorError,
)
from questionbank.services.catalog import get_entry
from questionbank.services.generator import (
    GeminiItemGenerator,
    backoff_delay,
    call_with_retry,
    classify_generator_error,
)
from questionbank.services.tiers import Difficulty


class ApiError(Exception):
    def __init__(self, message, code=None):
        super().__init__(message)
        self.code = code


class Recorder:
    def __init__(self):
        self.delays = []

    async def __call__(self, seconds):
        self.delays.append(seconds)


@pytest.mark.parametrize(
    "error, expected",
    [
        (ApiError("Too Many Requests", code=429), RateLimitedError),
        (
            ApiError("429 RESOURCE_EXHAUSTED. You exceeded your current quota, please check your plan and billing details."),
            RateLimitedError,
        ),
        (ApiError("Payment required", code=402), QuotaExhaustedError),
        (ApiError("insufficient_quota: out of credits"), QuotaExhaustedError),
        (ApiError("503 UNAVAILABLE. The model is overloaded."), TransientGeneratorError),
        (ApiError("server error", code=500), TransientGeneratorError),
        (TimeoutError(), TransientGeneratorError),
    ],
)
def test_classify_generator_error(error, expected):
    classified = classify_generator_error(error)
    assert type(classified) is expected
    assert classified.cause is error


def test_classify_unknown_error_is_plain_generation_error():
    classified = classify_generator_error(ValueError("bad argument"))
    assert type(classified) is GenerationError
    assert not classified.terminal


def test_classify_passes_through_generation_errors():
    error = MalformedOutputError("junk")
    assert classify_generator_error(error) is error


def test_backoff_delay_is_capped():
    rng = random.Random(1)
    assert 2.0 <= backoff_delay(0, 2.0, 10.0, rng) <= 4.0
    assert 4.0 <= backoff_delay(1, 2.0, 10.0, rng) <= 6.0
    assert 10.0 <= backoff_delay(8, 2.0, 10.0, rng) <= 12.0


def test_call_with_retry_recovers_from_rate_limits():
    sleep = Recorder()
    attempts = []

    async def call():
        attempts.append(1)
        if len(attempts) < 3:
            raise ApiError("rate limit", code=429)
        return "ok"

    result = asyncio.run(call_with_retry(call, max_attempts=5, initial_delay=1.0, max_delay=10.0, sleep=sleep))

    assert result == "ok"
    assert len(attempts) == 3
    assert len(sleep.delays) == 2
    assert 1.0 <= sleep.delays[0] <= 2.0
    assert 2.0 <= sleep.delays[1] <= 3.0


def test_call_with_retry_gives_up_after_max_attempts():
    sleep = Recorder()
    original = ApiError("429 Too Many Requests")

    async def call():
        raise original

    with pytest.raises(RateLimitedError) as excinfo:
        asyncio.run(call_with_retry(call, max_attempts=3, initial_delay=1.0, max_delay=10.0, sleep=sleep))

    assert excinfo.value.__cause__ is original
    assert len(sleep.delays) == 2


def test_call_with_retry_never_retries_quota():
    sleep = Recorder()
    attempts = []

    async def call():
        attempts.append(1)
        raise ApiError("Payment required", code=402)

    with pytest.raises(QuotaExhaustedError):
        asyncio.run(call_with_retry(call, max_attempts=5, sleep=sleep))

    assert len(attempts) == 1
    assert sleep.delays == []


def test_call_with_retry_reraises_generation_errors_unchanged():
    error = MalformedOutputError("junk")

    async def call():
        raise error

    with pytest.raises(MalformedOutputError) as excinfo:
        asyncio.run(call_with_retry(call, max_attempts=3, sleep=Recorder()))
    assert excinfo.value is error


def _client(*texts):
    client = MagicMock()
    client.models.generate_content.side_effect = [SimpleNamespace(text=t) for t in texts]
    return client


def test_gemini_generator_structured_output():
    client = _client(
        '{"questions": [{"question": "a"}, {"question": "b"}, {"question": "c"}]}'
    )
    generator = GeminiItemGenerator("key", model="test-model", client=client, sleep=Recorder())

    candidates = asyncio.run(generator.generate(get_entry("mcq"), "DevOps", Difficulty.EASY, 2))

    assert candidates == [{"question": "a"}, {"question": "b"}]
    kwargs = client.models.generate_content.call_args.kwargs
    assert kwargs["model"] == "test-model"
    assert "DevOps" in kwargs["contents"]
    assert kwargs["config"].response_mime_type == "application/json"
    assert kwargs["config"].response_schema is not None


def test_gemini_generator_falls_back_to_strict_prompt():
    client = _client("Sorry, I cannot do that.", '```json\n{"problems": [{"title": "t"}]}\n```')
    generator = GeminiItemGenerator("key", client=client, sleep=Recorder())

    candidates = asyncio.run(generator.generate(get_entry("coding"), "Algorithms", Difficulty.HARD, 3))

    assert candidates == [{"title": "t"}]
    assert client.models.generate_content.call_count == 2
    retry = client.models.generate_content.call_args.kwargs
    assert retry["config"].response_schema is None
    assert '"problems"' in retry["contents"]


def test_gemini_generator_malformed_twice_raises():
    client = _client("nope", "still nope")
    generator = GeminiItemGenerator("key", client=client, sleep=Recorder())

    with pytest.raises(MalformedOutputError):
        asyncio.run(generator.generate(get_entry("mcq"), "DevOps", Difficulty.EASY, 2))


def test_gemini_generator_propagates_rate_limit(monkeypatch):
    from questionbank import config

    monkeypatch.setattr(config, "GENERATION_MAX_ATTEMPTS", 2)
    client = MagicMock()
    client.models.generate_content.side_effect = ApiError("Too Many Requests", code=429)
    sleep = Recorder()
    generator = GeminiItemGenerator("key", client=client, sleep=sleep)

    with pytest.raises(RateLimitedError):
        asyncio.run(generator.generate(get_entry("interview"), "DevOps", Difficulty.MEDIUM, 5))

    assert client.models.generate_content.call_count == 2
    assert len(sleep.delays) == 1


def test_gemini_generator_review():
    client = _client('{"score": 71, "strengths": ["Concise"], "improvements": [], "feedback": "Good."}')
    generator = GeminiItemGenerator("key", client=client, sleep=Recorder())

    raw = asyncio.run(
        generator.review("What is a pod?", ["Smallest unit", "Shared network"], "A group of containers.", "DevOps")
    )

    assert raw["score"] == 71
    kwargs = client.models.generate_content.call_args.kwargs
    assert "Smallest unit, Shared network" in kwargs["contents"]
    assert kwargs["config"].response_mime_type == "application/json"


def test_gemini_generator_review_without_json():
    generator = GeminiItemGenerator("key", client=_client("I cannot grade this."), sleep=Recorder())

    with pytest.raises(MalformedOutputError):
        asyncio.run(generator.review("q", ["p"], "an answer here", "DevOps"))
