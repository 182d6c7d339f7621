"""Pydantic contracts shared by the extraction pipeline and the API."""

from models.schemas.extracted_job import ExtractedJobData, KeyDetail

__all__ = [
    "ExtractedJobData",
    "KeyDetail",
]
