"""Pipeline configuration, job definitions, and event dispatch."""

from __future__ import annotations

from .config import (
    DEFAULT_ORG,
    DEFAULT_REGISTRY,
    PipelineConfig,
    PipelineContext,
    ProjectSecrets,
    load_project_secrets,
)
from .dispatcher import EDGE_VERSION, PipelineDispatcher, register_pipeline
from .errors import ConfigError
from .jobs import PUBLISH_JOB_NAME, TEST_JOB_NAME, build_publish_job, build_test_job
from .registry import EventHandler, EventRegistry

__all__ = [
    "DEFAULT_ORG",
    "DEFAULT_REGISTRY",
    "EDGE_VERSION",
    "PUBLISH_JOB_NAME",
    "TEST_JOB_NAME",
    "ConfigError",
    "EventHandler",
    "EventRegistry",
    "PipelineConfig",
    "PipelineContext",
    "PipelineDispatcher",
    "ProjectSecrets",
    "build_publish_job",
    "build_test_job",
    "load_project_secrets",
    "register_pipeline",
]
