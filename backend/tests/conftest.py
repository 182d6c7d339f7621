"""Shared test fakes and fixtures."""

import httpx
import pytest

from services.fetcher import RetryPolicy
from services.pipeline.base import TextGenerator
from services.pipeline.resources import PipelineResources
from services.rate_limiter import TokenBucketRateLimiter


class FakeGenerator(TextGenerator):
    """Returns a canned reply (or raises) and records every prompt."""

    def __init__(self, reply: str = "", error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: list[tuple[str, str]] = []

    async def generate(self, user_id: str, prompt: str) -> str:
        self.calls.append((user_id, prompt))
        if self.error is not None:
            raise self.error
        return self.reply


class RecordingSleep:
    """Stands in for asyncio.sleep without waiting."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class RecordingHandler:
    """httpx.MockTransport handler replaying a list of outcomes.

    Each outcome is an ``httpx.Response`` or an exception class to raise;
    the last outcome repeats once the list is exhausted.
    """

    def __init__(self, *outcomes) -> None:
        self.outcomes = list(outcomes)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        index = min(len(self.requests), len(self.outcomes)) - 1
        outcome = self.outcomes[index]
        if isinstance(outcome, type) and issubclass(outcome, Exception):
            raise outcome("simulated failure", request=request)
        return outcome


def html_response(body: str, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, text=body, headers={"Content-Type": "text/html"})


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def make_resources(recording_sleep):
    """Build PipelineResources around a mock transport and a fake generator."""

    def _make(handler=None, generator: TextGenerator | None = None, **overrides) -> PipelineResources:
        handler = handler or RecordingHandler(html_response("<html></html>"))
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler), follow_redirects=True)
        return PipelineResources(
            http_client=client,
            rate_limiter=TokenBucketRateLimiter(capacity=5, refill_rate=1.0, sleep=recording_sleep),
            generator=generator or FakeGenerator(),
            retry_policy=overrides.pop("retry_policy", RetryPolicy(max_attempts=3, base_delay=2.0)),
            sleep=recording_sleep,
            **overrides,
        )

    return _make
