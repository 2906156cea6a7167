"""Job specifications and the runners that execute them."""

from __future__ import annotations

from .docker import DEFAULT_MOUNT_PATH, DockerJobRunner
from .errors import (
    ExecutableNotFoundError,
    JobError,
    JobLogsUnavailableError,
    WorkFailedError,
)
from .models import JobResult, JobSpec
from .protocol import JobRunner

__all__ = [
    "DEFAULT_MOUNT_PATH",
    "DockerJobRunner",
    "ExecutableNotFoundError",
    "JobError",
    "JobLogsUnavailableError",
    "JobResult",
    "JobRunner",
    "JobSpec",
    "WorkFailedError",
]
