"""Command-line entry points for Gantry.

Usage:
    gantry dispatch event.json                  # Run the pipeline for an event
    gantry dispatch - --project-file proj.yaml  # Read the event from stdin
    gantry check-run                            # Post a check run from CHECK_*

Environment variables:
    GANTRY_LOG_LEVEL            - Log level (default: INFO)
    GANTRY_MAIN_BRANCH          - Branch that publishes edge images
    GANTRY_DOCKERHUB_*          - Registry secrets when no project file is given
    CHECK_*, GITHUB_BASE_URL    - Check-run tool settings
"""

from __future__ import annotations

import asyncio
import enum
import sys
import typing as typ
from pathlib import Path

from cyclopts import App, Parameter

from gantry import __version__
from gantry.checks.check_run import CheckRunSettings
from gantry.checks.errors import CheckRunConfigError
from gantry.checks.notifier import ChecksApiNotifier, JobNotifier
from gantry.checks.tool import ExitCode, run_check_run
from gantry.errors import GantryError
from gantry.events.models import Event, decode_event
from gantry.jobs.docker import DockerJobRunner
from gantry.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_exception,
    log_info,
    log_warning,
)
from gantry.pipeline.config import (
    PipelineConfig,
    PipelineContext,
    ProjectSecrets,
    load_project_secrets,
)
from gantry.pipeline.dispatcher import register_pipeline
from gantry.pipeline.registry import EventRegistry

if typ.TYPE_CHECKING:
    from gantry.checks.notifier import Notifier
    from gantry.jobs.protocol import JobRunner

logger = get_logger(__name__)

app = App(
    name="gantry",
    help="Brigade pipeline for the GitHub app: tests, images and check runs",
    version=__version__,
)


class NotifierKind(enum.StrEnum):
    """How check-run notifications are delivered."""

    JOB = "job"
    API = "api"


def _setup_logging(log_level: str) -> None:
    normalized, invalid = configure_logging(log_level)
    if invalid:
        log_warning(
            logger,
            "Invalid GANTRY_LOG_LEVEL %r, falling back to %s",
            log_level,
            normalized,
        )


def _read_event(event_file: str) -> Event:
    if event_file == "-":
        return decode_event(sys.stdin.buffer.read())
    return decode_event(Path(event_file).read_bytes())


def build_context(project_file: Path | None = None) -> PipelineContext:
    """Assemble the dispatch context from the environment and project file."""
    secrets = (
        load_project_secrets(project_file)
        if project_file is not None
        else ProjectSecrets.from_env()
    )
    return PipelineContext(secrets=secrets, config=PipelineConfig.from_env())


def build_notifier(
    kind: NotifierKind, runner: JobRunner, config: PipelineConfig
) -> Notifier:
    """Return the notifier for ``kind``."""
    if kind is NotifierKind.API:
        return ChecksApiNotifier()
    return JobNotifier(runner, image=config.check_run_image)


async def dispatch_event(
    event: Event,
    context: PipelineContext,
    *,
    runner: JobRunner,
    notifier: Notifier,
) -> object | None:
    """Register the pipeline on a fresh registry and dispatch ``event``."""
    registry = EventRegistry()
    register_pipeline(registry, runner=runner, notifier=notifier)
    return await registry.dispatch(event, context)


@app.command
def dispatch(
    event_file: str,
    *,
    project_file: Path | None = None,
    source_dir: Path | None = None,
    notifier: NotifierKind = NotifierKind.JOB,
    log_level: typ.Annotated[str, Parameter(env_var="GANTRY_LOG_LEVEL")] = "INFO",
) -> int:
    """Run the pipeline for one Brigade event.

    Args:
        event_file: Path to the event JSON, or ``-`` to read stdin.
        project_file: YAML project file holding a ``secrets`` map.
        source_dir: Checkout mounted into every job.
        notifier: Deliver check runs as jobs or through the API.
        log_level: Log level name.

    Returns:
        Exit code (0 for success, 1 when the event could not be handled).

    """
    _setup_logging(log_level)
    try:
        event = _read_event(event_file)
        context = build_context(project_file)
    except (GantryError, OSError) as exc:
        log_error(logger, "Cannot dispatch %s: %s", event_file, exc)
        return 1

    runner = DockerJobRunner(source_dir=source_dir)
    try:
        asyncio.run(
            dispatch_event(
                event,
                context,
                runner=runner,
                notifier=build_notifier(notifier, runner, context.config),
            )
        )
    except GantryError as exc:
        log_exception(logger, f"{event.type} failed: {exc}", exc)
        return 1
    log_info(logger, "Finished %s for build %s", event.type, event.build_id)
    return 0


@app.command
def check_run(
    *,
    log_level: typ.Annotated[str, Parameter(env_var="GANTRY_LOG_LEVEL")] = "INFO",
) -> int:
    """Create a GitHub check run from the ``CHECK_*`` environment.

    Args:
        log_level: Log level name.

    Returns:
        Exit code as documented in :mod:`gantry.checks.tool`.

    """
    _setup_logging(log_level)
    try:
        settings = CheckRunSettings.from_env()
    except CheckRunConfigError as exc:
        log_error(logger, "Error: %s", exc)
        return int(ExitCode.INVALID)
    return int(asyncio.run(run_check_run(settings)))


def main() -> int:
    """Entry point for the ``gantry`` console script."""
    return app()


if __name__ == "__main__":
    sys.exit(main())
