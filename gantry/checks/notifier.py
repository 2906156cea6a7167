"""Notifier protocol and its transports.

Two transports ship with Gantry:

- :class:`JobNotifier` runs the check-run image as a job, the way the Brigade
  worker reports checks. The job reads the ``CHECK_*`` environment.
- :class:`ChecksApiNotifier` posts the check run straight to GitHub, for
  hosts where starting a container per notification is not worthwhile.

Both advance the notification's send counter exactly once per send, before
the transport is tried, so a failed attempt never shares a number with a
later one.
"""

from __future__ import annotations

import typing as typ

import httpx

from gantry.errors import GantryError
from gantry.jobs.models import JobResult, JobSpec
from gantry.logging import get_logger, log_debug

from .check_run import (
    DEFAULT_GITHUB_BASE_URL,
    CheckRunResponse,
    CheckRunSettings,
    decode_payload,
    resolve_target,
)
from .client import CheckRunClient, CheckRunClientConfig
from .errors import NotifyFailedError

if typ.TYPE_CHECKING:
    from gantry.jobs.protocol import JobRunner

    from .models import Notification

logger = get_logger(__name__)

DEFAULT_CHECK_RUN_IMAGE = "brigadecore/brigade-github-check-run:latest"


@typ.runtime_checkable
class Notifier(typ.Protocol):
    """Capability for delivering a notification's current state."""

    async def send(self, note: Notification) -> object:
        """Deliver ``note`` and return the transport's acknowledgement.

        Raises
        ------
        NotifyFailedError
            If the notification could not be delivered.

        """
        ...


class JobNotifier:
    """Deliver notifications by running the check-run image as a job."""

    def __init__(
        self,
        runner: JobRunner,
        *,
        image: str = DEFAULT_CHECK_RUN_IMAGE,
    ) -> None:
        """Send notifications through ``runner`` using ``image``."""
        self._runner = runner
        self._image = image

    def build_job(self, note: Notification) -> JobSpec:
        """Advance ``note``'s counter and return the job for this send."""
        return JobSpec(
            name=note.next_job_name(),
            image=self._image,
            env=note.to_env(),
            image_force_pull=True,
        )

    async def send(self, note: Notification) -> JobResult:
        """Run the notification job and return its result."""
        job = self.build_job(note)
        log_debug(logger, "Sending notification %s", job.name)
        try:
            return await self._runner.run(job)
        except GantryError as exc:
            raise NotifyFailedError.from_error(note.name, note.count, exc) from exc


class ChecksApiNotifier:
    """Deliver notifications by calling the GitHub check-runs API directly."""

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_GITHUB_BASE_URL,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Post to ``base_url``, optionally through a shared HTTP client."""
        self._base_url = base_url
        self._http_client = http_client

    async def send(self, note: Notification) -> CheckRunResponse:
        """Create a check run reflecting ``note``'s current state."""
        note.next_job_name()
        try:
            return await self._post(note)
        except GantryError as exc:
            raise NotifyFailedError.from_error(note.name, note.count, exc) from exc

    async def _post(self, note: Notification) -> CheckRunResponse:
        env = note.to_env()
        settings = CheckRunSettings.from_env(env)
        payload = decode_payload(settings.payload)
        target = resolve_target(payload)
        client = CheckRunClient(
            CheckRunClientConfig(token=payload.token, base_url=self._base_url),
            http_client=self._http_client,
        )
        try:
            return await client.create_run(
                target.owner, target.repo, settings.to_check_run(target)
            )
        finally:
            await client.aclose()
