"""Shared dependencies for API routes."""

from fastapi import Request

from services.pipeline.resources import PipelineResources


def get_pipeline_resources(request: Request) -> PipelineResources:
    return request.app.state.resources
