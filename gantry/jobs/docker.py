"""Run pipeline jobs as local Docker containers.

This runner stands in for the Brigade worker when the pipeline is driven from
the command line. Each job becomes one ``docker run --rm`` invocation whose
combined stdout and stderr is kept in memory for :meth:`fetch_logs`. Only the
latest run of each job name is kept, so a runner lives for one dispatch and
holds at most one log per distinct job name.

Examples
--------
Run the test job against a checkout:

    runner = DockerJobRunner(source_dir=Path("."))
    result = await runner.run(build_test_job(PipelineConfig()))

"""

from __future__ import annotations

import asyncio
import shutil
import typing as typ

from gantry.logging import get_logger, log_debug, log_info

from .errors import ExecutableNotFoundError, JobLogsUnavailableError, WorkFailedError
from .models import JobResult, JobSpec

if typ.TYPE_CHECKING:
    from pathlib import Path

logger = get_logger(__name__)

DEFAULT_MOUNT_PATH = "/src"


class DockerJobRunner:
    """:class:`~gantry.jobs.protocol.JobRunner` backed by the Docker CLI."""

    def __init__(
        self,
        *,
        source_dir: Path | None = None,
        docker: str = "docker",
        default_mount_path: str = DEFAULT_MOUNT_PATH,
    ) -> None:
        """Configure the runner.

        Parameters
        ----------
        source_dir
            Host directory mounted into every job. ``None`` runs jobs without
            a source mount.
        docker
            Docker executable name or path.
        default_mount_path
            Mount point used when a job does not set ``mount_path``.

        """
        self._source_dir = source_dir
        self._docker = docker
        self._default_mount_path = default_mount_path
        self._logs: dict[str, str] = {}

    def build_command(self, spec: JobSpec) -> list[str]:
        """Return the ``docker run`` argument vector for ``spec``."""
        command = [self._docker, "run", "--rm"]
        if spec.privileged:
            command.append("--privileged")
        if spec.image_force_pull:
            command.extend(["--pull", "always"])
        if self._source_dir is not None:
            mount_path = spec.mount_path or self._default_mount_path
            command.extend(["-v", f"{self._source_dir.resolve()}:{mount_path}"])
        for key, value in sorted(spec.env.items()):
            command.extend(["-e", f"{key}={value}"])
        command.append(spec.image)
        if spec.tasks:
            command.extend(["sh", "-ec", spec.script()])
        return command

    async def run(self, spec: JobSpec) -> JobResult:
        """Run ``spec`` in a fresh container and wait for it to exit.

        Raises
        ------
        ExecutableNotFoundError
            If the Docker CLI is not installed.
        WorkFailedError
            If the container cannot be started or exits non-zero.

        """
        if shutil.which(self._docker) is None:
            raise ExecutableNotFoundError.named(self._docker)

        self._logs.pop(spec.name, None)
        command = self.build_command(spec)
        log_info(logger, "Starting job %s (image=%s)", spec.name, spec.image)
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except OSError as exc:
            raise WorkFailedError.not_started(spec.name, str(exc)) from exc

        raw_output, _ = await process.communicate()
        output = raw_output.decode("utf-8", errors="replace")
        self._logs[spec.name] = output
        exit_code = process.returncode if process.returncode is not None else -1
        log_debug(logger, "Job %s exited with status %d", spec.name, exit_code)

        if exit_code != 0:
            raise WorkFailedError.exit_status(spec.name, exit_code, output=output)
        return JobResult(name=spec.name, exit_code=exit_code, output=output)

    async def fetch_logs(self, spec: JobSpec) -> str:
        """Return the output captured for the last run of ``spec``."""
        try:
            return self._logs[spec.name]
        except KeyError:
            raise JobLogsUnavailableError.missing(spec.name) from None
