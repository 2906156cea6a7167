"""Errors raised by job runners."""

from __future__ import annotations

from gantry.errors import GantryError

# Characters of job output echoed into an error message.
_OUTPUT_PREVIEW_LIMIT = 500


class JobError(GantryError):
    """Base class for job runner errors."""


class WorkFailedError(JobError):
    """Raised when a submitted job does not complete successfully.

    Attributes
    ----------
    job_name
        Name of the job that failed.
    exit_code
        Process exit status, when the job ran at all.
    output
        Combined job output captured before the failure.

    """

    def __init__(
        self,
        message: str,
        *,
        job_name: str,
        exit_code: int | None = None,
        output: str = "",
    ) -> None:
        """Initialise with the failing job's name, exit status and output."""
        self.job_name = job_name
        self.exit_code = exit_code
        self.output = output
        super().__init__(message)

    @classmethod
    def exit_status(
        cls, job_name: str, exit_code: int, *, output: str = ""
    ) -> WorkFailedError:
        """Return an error for a job that exited non-zero."""
        message = f"job {job_name!r} exited with status {exit_code}"
        tail = output.strip()[-_OUTPUT_PREVIEW_LIMIT:]
        if tail:
            message = f"{message}: {tail}"
        return cls(message, job_name=job_name, exit_code=exit_code, output=output)

    @classmethod
    def not_started(cls, job_name: str, detail: str) -> WorkFailedError:
        """Return an error for a job the runner could not start."""
        return cls(f"job {job_name!r} could not be started: {detail}", job_name=job_name)


class JobLogsUnavailableError(JobError):
    """Raised when no logs are recorded for a job."""

    @classmethod
    def missing(cls, job_name: str) -> JobLogsUnavailableError:
        """Return an error for a job that never ran on this runner."""
        return cls(f"no logs recorded for job {job_name!r}")


class ExecutableNotFoundError(JobError):
    """Raised when a required CLI tool is not on PATH."""

    @classmethod
    def named(cls, name: str) -> ExecutableNotFoundError:
        """Return an error naming the missing executable."""
        return cls(f"Required executable '{name}' not found in PATH")
