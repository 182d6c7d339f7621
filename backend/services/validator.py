"""Field checks and repairs for decoded model output."""

import logging
from typing import Any

from models.schemas.extracted_job import ExtractedJobData, KeyDetail
from services.errors import ExtractionIncompleteError, ValidationError

logger = logging.getLogger(__name__)

REQUIRED_STRING_FIELDS = ("jobTitle", "companyName", "language")
OPTIONAL_STRING_FIELDS = ("location", "salary", "jobPrerequisites")


def fallback_description(company_name: str | None, notes: Any = None) -> str:
    """Stand-in description for replies with a null ``jobDescriptionText``."""
    if isinstance(notes, str) and notes.strip():
        return f"Job details: {notes.strip()}"
    return (
        f"Job posting at {company_name or 'the company'}. "
        "Please refer to the original job posting for full details."
    )


def _optional_str(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _key_details(value: Any) -> list[KeyDetail] | None:
    if not isinstance(value, list):
        return None
    details = [
        KeyDetail(key=item["key"], value=item["value"])
        for item in value
        if isinstance(item, dict)
        and isinstance(item.get("key"), str)
        and isinstance(item.get("value"), str)
    ]
    return details or None


def validate_extraction(parsed: Any) -> ExtractedJobData:
    """Check required field types and build the result.

    A null ``jobDescriptionText`` is replaced by :func:`fallback_description`.
    """
    if not isinstance(parsed, dict):
        raise ValidationError("AI response was not a JSON object.")

    missing = [f for f in REQUIRED_STRING_FIELDS if not isinstance(parsed.get(f), str)]
    description = parsed.get("jobDescriptionText")
    if description is not None and not isinstance(description, str):
        missing.append("jobDescriptionText")
    if missing:
        logger.warning("Parsed reply missing essential fields %s: %s", missing, parsed)
        raise ValidationError(
            "AI response structure validation failed. Missing required fields: "
            + ", ".join(missing)
        )

    if description is None:
        logger.warning("AI returned null for jobDescriptionText, using fallback description")
        description = fallback_description(parsed["companyName"], parsed.get("notes"))

    return ExtractedJobData(
        job_title=parsed["jobTitle"].strip(),
        company_name=parsed["companyName"].strip(),
        job_description_text=description.strip(),
        language=parsed["language"].strip().lower(),
        location=_optional_str(parsed.get("location")),
        salary=_optional_str(parsed.get("salary")),
        key_details=_key_details(parsed.get("keyDetails")),
        job_prerequisites=_optional_str(parsed.get("jobPrerequisites")),
        notes=None,
    )


def ensure_complete(data: ExtractedJobData, from_text: bool = False) -> ExtractedJobData:
    """Final gate: all four essential fields must be present."""
    missing = [
        name
        for name, value in (
            ("jobTitle", data.job_title),
            ("companyName", data.company_name),
            ("jobDescriptionText", data.job_description_text),
            ("language", data.language),
        )
        if not value
    ]
    if missing:
        logger.warning("AI failed to extract essential fields %s: %s", missing, data)
        if from_text:
            raise ExtractionIncompleteError(
                "Could not extract all essential job details from the pasted text. "
                "Please paste more complete job information."
            )
        raise ExtractionIncompleteError(
            "AI could not extract all essential job details from the page. "
            "Try pasting the job description text instead."
        )
    return data
