"""Extraction orchestrator: wires the pipeline stages together.

Flow (one pass, no retries across stages):
    url ─ fetch_html ─ reduce_html ─┐
                                    ├─ build prompt ─ rate limit ─ generate
    raw text ─ truncate_text ───────┘
        ─ parse_json_object ─ validate_extraction ─ ensure_complete
        → ExtractedJobData
"""

import logging

from models.schemas.extracted_job import ExtractedJobData
from services import html_reducer, prompt_builder
from services.errors import InputTooShortError
from services.fetcher import fetch_html
from services.pipeline.base import Stage, StageTracker
from services.pipeline.resources import PipelineResources
from services.response_parser import parse_json_object
from services.validator import ensure_complete, validate_extraction

logger = logging.getLogger(__name__)


async def _invoke_and_validate(
    prompt: str,
    user_id: str,
    resources: PipelineResources,
    tracker: StageTracker,
    from_text: bool,
) -> ExtractedJobData:
    tracker.advance(Stage.INVOKING)
    await resources.rate_limiter.acquire()
    response_text = await resources.generator.generate(user_id, prompt)
    logger.info("%s: received extraction response (%d chars)", tracker.label, len(response_text))

    tracker.advance(Stage.PARSING)
    parsed = parse_json_object(response_text)

    tracker.advance(Stage.VALIDATING)
    data = ensure_complete(validate_extraction(parsed), from_text=from_text)

    tracker.advance(Stage.SUCCEEDED)
    return data


async def extract_from_url(url: str, user_id: str, resources: PipelineResources) -> ExtractedJobData:
    """Fetch a job posting page and extract its fields."""
    tracker = StageTracker(f"extract_from_url({url})")
    try:
        tracker.advance(Stage.FETCHING)
        html = await fetch_html(
            url, resources.http_client, resources.retry_policy, sleep=resources.sleep
        )

        tracker.advance(Stage.REDUCING)
        cleaned = html_reducer.reduce_html(html, resources.max_content_length)

        tracker.advance(Stage.PROMPTING)
        prompt = prompt_builder.build_url_prompt(cleaned)

        return await _invoke_and_validate(prompt, user_id, resources, tracker, from_text=False)
    except Exception as e:
        tracker.fail(f"{type(e).__name__}: {e}")
        logger.warning("%s failed during %s: %s", tracker.label, tracker.history[-2].value, e)
        raise


async def extract_from_text(raw_text: str, user_id: str, resources: PipelineResources) -> ExtractedJobData:
    """Extract job fields from text the user pasted."""
    if not raw_text or len(raw_text.strip()) < resources.min_text_length:
        raise InputTooShortError(
            "Please paste more job description text. The content seems too short."
        )

    tracker = StageTracker("extract_from_text")
    logger.info("Extracting job data from pasted text (%d chars)", len(raw_text))
    try:
        tracker.advance(Stage.REDUCING)
        text = html_reducer.truncate_text(raw_text, resources.max_content_length)

        tracker.advance(Stage.PROMPTING)
        prompt = prompt_builder.build_text_prompt(text)

        return await _invoke_and_validate(prompt, user_id, resources, tracker, from_text=True)
    except Exception as e:
        tracker.fail(f"{type(e).__name__}: {e}")
        logger.warning("%s failed during %s: %s", tracker.label, tracker.history[-2].value, e)
        raise
