"""Structured job posting produced by the extraction pipeline."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class KeyDetail(BaseModel):
    """A single highlight such as ``Contract: Full-time``."""
    model_config = ConfigDict(frozen=True)

    key: str
    value: str


class ExtractedJobData(BaseModel):
    """Job posting fields recovered from a page or pasted text.

    Serialized with camelCase keys (``jobTitle``, ``companyName``, ...), the
    same keys the model is asked to produce.

    ``job_description_text`` may be a synthesized fallback rather than text
    excerpted from the posting.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    job_title: str | None = None
    company_name: str | None = None
    job_description_text: str | None = None
    language: str | None = None  # ISO 639-1, e.g. "en", "de"
    location: str | None = None
    salary: str | None = None
    key_details: list[KeyDetail] | None = None
    job_prerequisites: str | None = None  # always English
    notes: str | None = None
