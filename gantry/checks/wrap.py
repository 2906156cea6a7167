"""Bracket a job between a start and an end check-run notification."""

from __future__ import annotations

import dataclasses
import typing as typ

from gantry.errors import GantryError
from gantry.jobs.errors import JobLogsUnavailableError
from gantry.logging import get_logger, log_error, log_info, log_warning

from .errors import DoubleFailureError, NotifyFailedError
from .models import MAX_CHECK_TEXT, Conclusion

if typ.TYPE_CHECKING:
    from gantry.jobs.models import JobSpec
    from gantry.jobs.protocol import JobRunner

    from .models import Notification
    from .notifier import Notifier

logger = get_logger(__name__)

LOGS_UNAVAILABLE = "(logs unavailable)"


@dataclasses.dataclass(frozen=True, slots=True)
class WrapOutcome:
    """What happened to a wrapped job and its closing notification.

    Attributes
    ----------
    notification
        The notification in its final state.
    acknowledgement
        Transport result of the closing send; ``None`` if that send failed.
    error
        ``None`` when the job passed, the runner's error (usually a
        :class:`~gantry.jobs.errors.WorkFailedError`) when the job failed but
        was reported, or a :class:`DoubleFailureError` when the failure
        report could not be sent either.

    """

    notification: Notification
    acknowledgement: object | None = None
    error: GantryError | None = None

    @property
    def succeeded(self) -> bool:
        """Return True when the job passed and its result was reported."""
        return self.error is None

    @property
    def work_error(self) -> GantryError | None:
        """Return the job failure, however it was reported."""
        if isinstance(self.error, DoubleFailureError):
            return self.error.work_error
        return self.error


async def _fetch_logs(runner: JobRunner, job: JobSpec) -> str:
    try:
        return await runner.fetch_logs(job)
    except JobLogsUnavailableError as exc:
        log_warning(logger, "Logs for %s are unavailable: %s", job.name, exc)
        return LOGS_UNAVAILABLE


async def notification_wrap(
    job: JobSpec,
    note: Notification,
    *,
    runner: JobRunner,
    notifier: Notifier,
    text_limit: int = MAX_CHECK_TEXT,
) -> WrapOutcome:
    """Run ``job`` between two sends of ``note``.

    The opening send must succeed before the job is started; its
    :class:`NotifyFailedError` propagates unchanged. Once the job has
    settled, exactly one closing send reports the conclusion. Failures after
    the opening send are returned on the outcome rather than raised: any
    :class:`~gantry.errors.GantryError` from the runner (a
    :class:`~gantry.jobs.errors.WorkFailedError`, or an error that kept the
    job from starting) is reported as a failure, and a job failure whose
    report also failed becomes a :class:`DoubleFailureError`, which keeps
    both errors.

    Parameters
    ----------
    job
        The job to run.
    note
        Notification for the check; mutated in place.
    runner
        Runs ``job`` and supplies its logs.
    notifier
        Delivers ``note``.
    text_limit
        Upper bound on the check-run text, log included.

    Returns
    -------
    WrapOutcome
        The final notification, closing acknowledgement and any error.

    Raises
    ------
    NotifyFailedError
        If the opening notification cannot be sent, or the closing
        notification after a successful job cannot be sent.

    """
    await notifier.send(note)

    try:
        await runner.run(job)
    except GantryError as work_error:
        log = await _fetch_logs(runner, job)
        note.mark_failed(job.name, log, work_error, limit=text_limit)
        try:
            acknowledgement = await notifier.send(note)
        except NotifyFailedError as notify_error:
            log_error(logger, "failed to send notification: %s", notify_error)
            log_error(logger, "original error: %s", work_error)
            return WrapOutcome(
                notification=note,
                error=DoubleFailureError(notify_error, work_error),
            )
        log_info(logger, "Reported failure of %s as %s", job.name, note.name)
        return WrapOutcome(
            notification=note,
            acknowledgement=acknowledgement,
            error=work_error,
        )

    log = await _fetch_logs(runner, job)
    note.mark_passed(job.name, log, limit=text_limit)
    acknowledgement = await notifier.send(note)
    log_info(logger, "Reported %s of %s as %s", Conclusion.SUCCESS, job.name, note.name)
    return WrapOutcome(notification=note, acknowledgement=acknowledgement)
