"""Event handlers deciding which jobs run for each event.

The rules, per event type:

- ``exec``: run the test job and return its result. Failures propagate.
- ``push`` to a ``refs/tags/vX.Y.Z`` tag: build and publish images tagged
  with that version.
- ``push`` to the main branch: run the tests, then build and publish edge
  images only if they passed.
- check-suite and check-run requests: run the tests wrapped in check-run
  notifications, except on the main branch, which the push path covers.

Push and check handlers log failures instead of raising them, so one broken
build never fails the event as a whole.
"""

from __future__ import annotations

import typing as typ

from gantry.checks.models import Notification
from gantry.checks.wrap import WrapOutcome, notification_wrap
from gantry.errors import GantryError
from gantry.events.models import CHECK_REQUEST_EVENTS, EventType
from gantry.events.refs import branch_ref, is_main_branch, release_version
from gantry.logging import get_logger, log_exception, log_info, log_warning

from .jobs import TEST_JOB_NAME, build_publish_job, build_test_job

if typ.TYPE_CHECKING:
    from gantry.checks.notifier import Notifier
    from gantry.events.models import Event
    from gantry.jobs.models import JobResult
    from gantry.jobs.protocol import JobRunner

    from .config import PipelineContext
    from .registry import EventRegistry

logger = get_logger(__name__)

EDGE_VERSION = ""


class PipelineDispatcher:
    """The pipeline's event handlers, bound to a runner and a notifier."""

    def __init__(self, *, runner: JobRunner, notifier: Notifier) -> None:
        """Run jobs through ``runner`` and report checks through ``notifier``."""
        self._runner = runner
        self._notifier = notifier

    def register(self, registry: EventRegistry) -> None:
        """Bind every handler to its event types on ``registry``."""
        registry.register(EventType.EXEC, self.on_exec)
        registry.register(EventType.PUSH, self.on_push)
        for event_type in CHECK_REQUEST_EVENTS:
            registry.register(event_type, self.on_check_requested)

    async def on_exec(self, event: Event, context: PipelineContext) -> JobResult:
        """Run the test job without check-run reporting."""
        del event
        return await self._runner.run(build_test_job(context.config))

    async def on_push(
        self, event: Event, context: PipelineContext
    ) -> list[JobResult]:
        """Publish release or edge images for a push.

        Returns the results of the jobs that completed.
        """
        ref = event.revision.ref
        completed: list[JobResult] = []

        version = release_version(ref)
        if version is not None:
            log_info(logger, "Publishing release %s from %s", version, ref)
            try:
                completed.append(await self._publish(context, version))
            except GantryError as exc:
                log_exception(logger, f"release {version} failed: {exc}", exc)

        if ref == branch_ref(context.config.main_branch):
            log_info(logger, "Testing %s before publishing edge images", ref)
            try:
                completed.append(
                    await self._runner.run(build_test_job(context.config))
                )
                completed.append(await self._publish(context, EDGE_VERSION))
            except GantryError as exc:
                log_exception(logger, f"edge build for {ref} failed: {exc}", exc)

        return completed

    async def on_check_requested(
        self, event: Event, context: PipelineContext
    ) -> WrapOutcome | None:
        """Run the reported test job for a check request off the main branch."""
        ref = event.revision.ref
        if is_main_branch(ref, context.config.main_branch):
            log_info(logger, "Skipping check suite for %s; push tests cover it", ref)
            return None
        try:
            outcome = await self.run_tests(event, context)
        except GantryError as exc:
            log_exception(logger, f"check run for {ref} failed: {exc}", exc)
            return None
        if outcome.error is not None:
            log_warning(logger, "Tests for %s did not pass: %s", ref, outcome.error)
        return outcome

    async def run_tests(self, event: Event, context: PipelineContext) -> WrapOutcome:
        """Run the test job between check-run notifications."""
        log_info(logger, "Check requested for %s", event.revision.ref)
        note = Notification.for_event(
            TEST_JOB_NAME,
            event,
            details_url_template=context.config.details_url_template,
        )
        note.conclusion = None
        note.title = "Run Tests"
        note.summary = f"Running the test targets for {event.revision.commit}"
        note.text = "This test will ensure build, linting and tests all pass."
        return await notification_wrap(
            build_test_job(context.config),
            note,
            runner=self._runner,
            notifier=self._notifier,
            text_limit=context.config.check_text_limit,
        )

    async def _publish(self, context: PipelineContext, version: str) -> JobResult:
        job = build_publish_job(context.secrets, version, config=context.config)
        return await self._runner.run(job)


def register_pipeline(
    registry: EventRegistry,
    *,
    runner: JobRunner,
    notifier: Notifier,
) -> PipelineDispatcher:
    """Create the pipeline's handlers and register them on ``registry``."""
    dispatcher = PipelineDispatcher(runner=runner, notifier=notifier)
    dispatcher.register(registry)
    return dispatcher
