"""JobRunner protocol for submitting jobs to an execution platform."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from gantry.jobs.models import JobResult, JobSpec


@typ.runtime_checkable
class JobRunner(typ.Protocol):
    """Capability for running jobs and reading their output.

    The pipeline only ever awaits one job at a time per event, so
    implementations need not guard against concurrent runs of the same spec.

    Examples
    --------
    >>> from gantry.jobs import DockerJobRunner, JobRunner
    >>> isinstance(DockerJobRunner(), JobRunner)
    True

    """

    async def run(self, spec: JobSpec) -> JobResult:
        """Run ``spec`` to completion.

        Raises
        ------
        WorkFailedError
            If the job could not be started or did not succeed.

        """
        ...

    async def fetch_logs(self, spec: JobSpec) -> str:
        """Return the output recorded for the most recent run of ``spec``.

        Raises
        ------
        JobLogsUnavailableError
            If the runner holds no logs for the job.

        """
        ...
