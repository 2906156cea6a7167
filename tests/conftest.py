"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import pytest

from gantry.pipeline.config import PipelineConfig, PipelineContext, ProjectSecrets
from tests.helpers.fakes import FakeJobRunner, FakeLogger, FakeNotifier


@pytest.fixture
def call_log() -> list[str]:
    """Return a list shared by the runner and notifier to record ordering."""
    return []


@pytest.fixture
def runner(call_log: list[str]) -> FakeJobRunner:
    """Provide a job runner that succeeds and records every job."""
    return FakeJobRunner(events=call_log)


@pytest.fixture
def notifier(call_log: list[str]) -> FakeNotifier:
    """Provide a notifier that records every send."""
    return FakeNotifier(events=call_log)


@pytest.fixture
def pipeline_context() -> PipelineContext:
    """Provide the default pipeline context with registry credentials."""
    return PipelineContext(
        secrets=ProjectSecrets(username="robot", password="s3cret"),
        config=PipelineConfig(),
    )


@pytest.fixture
def fake_logger() -> FakeLogger:
    """Provide a logger that records calls instead of emitting them."""
    return FakeLogger()
