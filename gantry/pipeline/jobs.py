"""The pipeline's job definitions."""

from __future__ import annotations

import typing as typ

from gantry.jobs.models import JobSpec

if typ.TYPE_CHECKING:
    from .config import PipelineConfig, ProjectSecrets

TEST_JOB_NAME = "tests"
PUBLISH_JOB_NAME = "build-and-publish-images"

# Seconds allowed for dockerd to come up inside the dind container.
_DOCKERD_STARTUP_WAIT = 20


def build_test_job(config: PipelineConfig) -> JobSpec:
    """Return the job running vendoring checks, lint and unit tests."""
    return JobSpec(
        name=TEST_JOB_NAME,
        image=config.test_image,
        mount_path=config.project_path,
        env={"SKIP_DOCKER": "true"},
        tasks=[
            f"cd {config.project_path}",
            "make verify-vendored-code lint test",
        ],
    )


def build_publish_job(
    secrets: ProjectSecrets,
    version: str,
    *,
    config: PipelineConfig,
) -> JobSpec:
    """Return the job building and pushing every image.

    An empty ``version`` lets the Makefile pick its floating edge tag.
    """
    registry = secrets.registry
    return JobSpec(
        name=PUBLISH_JOB_NAME,
        image=config.publish_image,
        privileged=True,
        tasks=[
            "apk add --update --no-cache make git",
            "dockerd-entrypoint.sh &",
            f"sleep {_DOCKERD_STARTUP_WAIT}",
            "cd /src",
            f"docker login {registry} -u {secrets.username} -p {secrets.password}",
            (
                f"DOCKER_REGISTRY={registry} DOCKER_ORG={secrets.org} "
                f"VERSION={version} make build-all-images push-all-images"
            ),
            f"docker logout {registry}",
        ],
    )
