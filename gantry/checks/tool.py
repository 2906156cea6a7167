"""The check-run tool run inside notification jobs.

Exit codes
----------
- ``0``: the check run was created
- ``1``: invalid input, or GitHub rejected the request
- ``2``: the payload did not identify a repository and commit
- ``3``: no GitHub client could be built from the payload
"""

from __future__ import annotations

import enum
import typing as typ

import msgspec

from gantry.logging import get_logger, log_error, log_info

from .check_run import decode_payload, resolve_target
from .client import CheckRunClient, CheckRunClientConfig
from .errors import (
    CheckRunAPIError,
    CheckRunConfigError,
    CheckRunPayloadError,
    CheckRunRepositoryError,
)

if typ.TYPE_CHECKING:
    import httpx

    from .check_run import CheckRunSettings

logger = get_logger(__name__)


class ExitCode(enum.IntEnum):
    """Process exit statuses of the check-run tool."""

    OK = 0
    INVALID = 1
    PAYLOAD_DATA = 2
    CLIENT = 3


async def run_check_run(
    settings: CheckRunSettings,
    *,
    http_client: httpx.AsyncClient | None = None,
    out: typ.Callable[[str], None] = print,
) -> ExitCode:
    """Post the check run described by ``settings``.

    The created check run is written to ``out`` as JSON on success.
    """
    try:
        payload = decode_payload(settings.payload)
    except CheckRunPayloadError as exc:
        log_error(logger, "Error: %s", exc)
        return ExitCode.INVALID

    try:
        target = resolve_target(payload)
    except CheckRunRepositoryError as exc:
        log_error(logger, "Error: %s", exc)
        return ExitCode.INVALID
    except CheckRunPayloadError as exc:
        log_error(logger, "Error processing data: %s", exc)
        return ExitCode.PAYLOAD_DATA

    try:
        client = CheckRunClient(
            CheckRunClientConfig(token=payload.token, base_url=settings.base_url),
            http_client=http_client,
        )
    except CheckRunConfigError as exc:
        log_error(logger, "Error: %s", exc)
        return ExitCode.CLIENT

    run = settings.to_check_run(target)
    try:
        response = await client.create_run(target.owner, target.repo, run)
    except CheckRunAPIError as exc:
        log_error(logger, "Error: %s (got %s)", exc, exc.body)
        return ExitCode.INVALID
    finally:
        await client.aclose()

    log_info(
        logger,
        "Created check run %s on %s/%s@%s (status=%s)",
        settings.name,
        target.owner,
        target.repo,
        target.commit,
        run.status,
    )
    out(msgspec.json.encode(response).decode("utf-8"))
    return ExitCode.OK
