"""Job specifications and results."""

from __future__ import annotations

import dataclasses


@dataclasses.dataclass(slots=True)
class JobSpec:
    """A containerised unit of work submitted to a :class:`JobRunner`.

    Attributes
    ----------
    name
        Job name; runners key logs by it.
    image
        Container image to run.
    tasks
        Shell commands run in order inside the container. The job fails at
        the first failing command.
    env
        Environment variables set in the container.
    mount_path
        Where the project source is mounted. ``None`` lets the runner use its
        default location.
    privileged
        Run the container privileged (needed for Docker-in-Docker).
    image_force_pull
        Pull the image before every run instead of reusing a cached copy.

    """

    name: str
    image: str
    tasks: list[str] = dataclasses.field(default_factory=list)
    env: dict[str, str] = dataclasses.field(default_factory=dict)
    mount_path: str | None = None
    privileged: bool = False
    image_force_pull: bool = False

    def script(self) -> str:
        """Return the tasks as a single newline-separated shell script."""
        return "\n".join(self.tasks)


@dataclasses.dataclass(frozen=True, slots=True)
class JobResult:
    """Outcome of a job that completed successfully."""

    name: str
    exit_code: int = 0
    output: str = ""

    def __str__(self) -> str:
        """Render as the job's output, as Brigade does for job results."""
        return self.output
