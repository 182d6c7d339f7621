"""Process-wide handles shared by every extraction run.

Built once at startup, passed explicitly into each run and closed with
``shutdown()`` at exit.
"""

import asyncio
import logging
from dataclasses import dataclass, field

import httpx

from config import Settings
from services.fetcher import RetryPolicy, Sleep, build_http_client
from services.gemini_client import GeminiTextGenerator, SettingsCredentialStore
from services.pipeline.base import TextGenerator
from services.rate_limiter import TokenBucketRateLimiter

logger = logging.getLogger(__name__)


@dataclass
class PipelineResources:
    http_client: httpx.AsyncClient
    rate_limiter: TokenBucketRateLimiter
    generator: TextGenerator
    retry_policy: RetryPolicy = field(default_factory=RetryPolicy)
    max_content_length: int = 100_000
    min_text_length: int = 50
    sleep: Sleep = asyncio.sleep

    @classmethod
    def from_settings(cls, settings: Settings) -> "PipelineResources":
        credentials = SettingsCredentialStore(
            user_api_keys=settings.user_api_keys,
            default_api_key=settings.gemini_api_key,
        )
        return cls(
            http_client=build_http_client(
                timeout=settings.fetch_timeout_seconds,
                max_redirects=settings.fetch_max_redirects,
            ),
            rate_limiter=TokenBucketRateLimiter(
                capacity=settings.rate_limit_capacity,
                refill_rate=settings.rate_limit_refill_per_second,
            ),
            generator=GeminiTextGenerator(
                credentials,
                model=settings.gemini_model,
                temperature=settings.gemini_temperature,
                max_output_tokens=settings.gemini_max_output_tokens,
            ),
            retry_policy=RetryPolicy(
                max_attempts=settings.fetch_max_attempts,
                base_delay=settings.fetch_base_delay_seconds,
            ),
            max_content_length=settings.max_content_length,
            min_text_length=settings.min_text_length,
        )

    async def shutdown(self) -> None:
        logger.info("Shutting down extraction pipeline resources")
        self.rate_limiter.shutdown()
        await self.generator.aclose()
        await self.http_client.aclose()
