"""Check-run notifications: the model, its transports, and the job wrapper."""

from __future__ import annotations

from .check_run import (
    CheckRun,
    CheckRunAction,
    CheckRunOutput,
    CheckRunResponse,
    CheckRunSettings,
    CheckTarget,
    WebhookPayload,
    decode_payload,
    resolve_target,
)
from .client import CheckRunClient, CheckRunClientConfig
from .errors import (
    CheckError,
    CheckRunAPIError,
    CheckRunConfigError,
    CheckRunPayloadError,
    CheckRunRepositoryError,
    DoubleFailureError,
    NotifyFailedError,
)
from .models import MAX_CHECK_TEXT, Conclusion, Notification, truncate_tail
from .notifier import (
    DEFAULT_CHECK_RUN_IMAGE,
    ChecksApiNotifier,
    JobNotifier,
    Notifier,
)
from .tool import ExitCode, run_check_run
from .wrap import WrapOutcome, notification_wrap

__all__ = [
    "DEFAULT_CHECK_RUN_IMAGE",
    "MAX_CHECK_TEXT",
    "CheckError",
    "CheckRun",
    "CheckRunAPIError",
    "CheckRunAction",
    "CheckRunClient",
    "CheckRunClientConfig",
    "CheckRunConfigError",
    "CheckRunOutput",
    "CheckRunPayloadError",
    "CheckRunRepositoryError",
    "CheckRunResponse",
    "CheckRunSettings",
    "CheckTarget",
    "ChecksApiNotifier",
    "Conclusion",
    "DoubleFailureError",
    "ExitCode",
    "JobNotifier",
    "Notification",
    "Notifier",
    "NotifyFailedError",
    "WebhookPayload",
    "WrapOutcome",
    "decode_payload",
    "notification_wrap",
    "resolve_target",
    "run_check_run",
    "truncate_tail",
]
