"""Check-run documents and the settings that produce them.

The notification job runs Gantry's ``check-run`` command with the
``CHECK_*`` environment written by :meth:`Notification.to_env`. This module
turns that environment and the forwarded webhook payload into a GitHub
check-run request.

Environment
-----------
- ``CHECK_PAYLOAD``: Brigade webhook payload (JSON, required)
- ``CHECK_NAME``: check name (default ``Brigade``)
- ``CHECK_TITLE``: output title (default ``Running Check``)
- ``CHECK_SUMMARY``, ``CHECK_TEXT``: output summary and body; when
  ``CHECK_TEXT`` is unset the body is read from ``/check-run/text``
- ``CHECK_CONCLUSION``: terminal state; empty means in progress
- ``CHECK_DETAILS_URL``, ``CHECK_EXTERNAL_ID``
- ``CHECK_STARTED_AT``: RFC 3339 start time (default now)
- ``CHECK_ACTIONS``: JSON list of ``{label, description, identifier}``
- ``GITHUB_BASE_URL``: GitHub Enterprise API endpoint
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses
import datetime as dt
import os
import typing as typ
from pathlib import Path

import msgspec

from .errors import (
    CheckRunConfigError,
    CheckRunPayloadError,
    CheckRunRepositoryError,
)

DEFAULT_CHECK_NAME = "Brigade"
DEFAULT_CHECK_TITLE = "Running Check"
DEFAULT_GITHUB_BASE_URL = "https://api.github.com/"
DEFAULT_TEXT_PATH = Path("/check-run/text")

STATUS_IN_PROGRESS = "in_progress"
STATUS_COMPLETED = "completed"


class WebhookPayload(msgspec.Struct, kw_only=True):
    """The webhook envelope the Brigade GitHub gateway forwards."""

    type: str = ""
    token: str = ""
    body: dict[str, typ.Any] = msgspec.field(default_factory=dict)
    commit: str = ""
    branch: str = ""


class _Repository(msgspec.Struct, kw_only=True):
    full_name: str = ""


class _CheckSuite(msgspec.Struct, kw_only=True):
    head_sha: str | None = None
    head_branch: str | None = None


class _CheckRunDetail(msgspec.Struct, kw_only=True):
    check_suite: _CheckSuite = msgspec.field(default_factory=_CheckSuite)


class _CheckRunEvent(msgspec.Struct, kw_only=True):
    repository: _Repository = msgspec.field(default_factory=_Repository)
    check_run: _CheckRunDetail = msgspec.field(default_factory=_CheckRunDetail)


class _CheckSuiteEvent(msgspec.Struct, kw_only=True):
    repository: _Repository = msgspec.field(default_factory=_Repository)
    check_suite: _CheckSuite = msgspec.field(default_factory=_CheckSuite)


class _IssueCommentEvent(msgspec.Struct, kw_only=True):
    repository: _Repository = msgspec.field(default_factory=_Repository)


class CheckRunAction(msgspec.Struct, kw_only=True, frozen=True):
    """A button GitHub shows on the check run."""

    label: str
    description: str
    identifier: str


class CheckRunOutput(msgspec.Struct, kw_only=True, frozen=True):
    """Title, summary and body of a check run."""

    title: str
    summary: str = ""
    text: str = ""


class CheckRun(msgspec.Struct, kw_only=True, frozen=True, omit_defaults=True):
    """Request body for ``POST /repos/{owner}/{repo}/check-runs``."""

    name: str
    head_sha: str
    status: str
    output: CheckRunOutput
    head_branch: str = ""
    details_url: str = ""
    external_id: str = ""
    started_at: str = ""
    conclusion: str = ""
    completed_at: str = ""
    actions: list[CheckRunAction] | None = None


class CheckRunResponse(msgspec.Struct, kw_only=True, frozen=True):
    """Fields Gantry reads back from a created check run."""

    id: int = 0
    status: str = ""
    conclusion: str | None = None
    html_url: str = ""


@dataclasses.dataclass(frozen=True, slots=True)
class CheckTarget:
    """The repository and commit a check run is attached to."""

    owner: str
    repo: str
    commit: str
    branch: str


def decode_payload(raw: str | bytes) -> WebhookPayload:
    """Decode the forwarded webhook payload.

    Raises
    ------
    CheckRunPayloadError
        If ``raw`` is not a JSON object of the expected shape.

    """
    try:
        return msgspec.json.decode(raw, type=WebhookPayload)
    except msgspec.DecodeError as exc:
        raise CheckRunPayloadError.invalid_json(str(exc)) from exc


T = typ.TypeVar("T")


def _convert_body(body: dict[str, typ.Any], event_type: type[T]) -> T:
    try:
        return msgspec.convert(body, type=event_type)
    except msgspec.ValidationError as exc:
        raise CheckRunPayloadError.invalid_json(str(exc)) from exc


def _split_full_name(full_name: str) -> tuple[str, str]:
    parts = full_name.split("/")
    if len(parts) != 2 or not all(parts):  # noqa: PLR2004 - owner/name
        raise CheckRunRepositoryError.invalid(full_name)
    return parts[0], parts[1]


def resolve_target(payload: WebhookPayload) -> CheckTarget:
    """Work out which repository, commit and branch ``payload`` is about.

    ``check_run`` and ``check_suite`` webhooks carry the head commit in their
    body. ``issue_comment`` webhooks do not, so the gateway adds ``commit``
    and ``branch`` to the envelope.

    Raises
    ------
    CheckRunPayloadError
        For unsupported webhook types or missing commit data.
    CheckRunRepositoryError
        For a repository name not shaped ``owner/name``.

    """
    if payload.type == "check_run":
        run_event = _convert_body(payload.body, _CheckRunEvent)
        full_name = run_event.repository.full_name
        suite = run_event.check_run.check_suite
        commit = suite.head_sha or ""
        branch = suite.head_branch or ""
    elif payload.type == "check_suite":
        suite_event = _convert_body(payload.body, _CheckSuiteEvent)
        full_name = suite_event.repository.full_name
        commit = suite_event.check_suite.head_sha or ""
        branch = suite_event.check_suite.head_branch or ""
    elif payload.type == "issue_comment":
        comment_event = _convert_body(payload.body, _IssueCommentEvent)
        full_name = comment_event.repository.full_name
        commit = payload.commit
        if not commit:
            raise CheckRunPayloadError.empty_field("commit")
        branch = payload.branch
        if not branch:
            raise CheckRunPayloadError.empty_field("branch")
    else:
        raise CheckRunPayloadError.unknown_type(payload.type)

    owner, repo = _split_full_name(full_name)
    return CheckTarget(owner=owner, repo=repo, commit=commit, branch=branch)


def format_timestamp(moment: dt.datetime) -> str:
    """Format ``moment`` the way GitHub expects check-run timestamps."""
    return moment.astimezone(dt.UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


def _parse_actions(raw: str) -> list[CheckRunAction] | None:
    if not raw:
        return None
    try:
        return msgspec.json.decode(raw, type=list[CheckRunAction])
    except msgspec.DecodeError as exc:
        raise CheckRunConfigError.invalid_actions(str(exc)) from exc


def _read_text(
    environ: cabc.Mapping[str, str], text_path: Path, default: str = ""
) -> str:
    if "CHECK_TEXT" in environ:
        return environ["CHECK_TEXT"]
    try:
        content = text_path.read_text(encoding="utf-8")
    except OSError:
        return default
    return content or default


@dataclasses.dataclass(frozen=True, slots=True)
class CheckRunSettings:
    """Everything needed to post one check run."""

    payload: str
    name: str = DEFAULT_CHECK_NAME
    title: str = DEFAULT_CHECK_TITLE
    summary: str = ""
    text: str = ""
    conclusion: str = ""
    details_url: str = ""
    external_id: str = ""
    started_at: str = ""
    actions: list[CheckRunAction] | None = None
    base_url: str = DEFAULT_GITHUB_BASE_URL

    @classmethod
    def from_env(
        cls,
        environ: cabc.Mapping[str, str] | None = None,
        *,
        text_path: Path = DEFAULT_TEXT_PATH,
        now: dt.datetime | None = None,
    ) -> CheckRunSettings:
        """Read the check-run settings from ``CHECK_*`` variables.

        Raises
        ------
        CheckRunConfigError
            If ``CHECK_ACTIONS`` is set but is not a valid action list.

        """
        env = os.environ if environ is None else environ
        started = now or dt.datetime.now(dt.UTC)
        return cls(
            payload=env.get("CHECK_PAYLOAD", ""),
            name=env.get("CHECK_NAME", DEFAULT_CHECK_NAME),
            title=env.get("CHECK_TITLE", DEFAULT_CHECK_TITLE),
            summary=env.get("CHECK_SUMMARY", ""),
            text=_read_text(env, text_path),
            conclusion=env.get("CHECK_CONCLUSION", ""),
            details_url=env.get("CHECK_DETAILS_URL", ""),
            external_id=env.get("CHECK_EXTERNAL_ID", ""),
            started_at=env.get("CHECK_STARTED_AT", format_timestamp(started)),
            actions=_parse_actions(env.get("CHECK_ACTIONS", "")),
            base_url=env.get("GITHUB_BASE_URL", "") or DEFAULT_GITHUB_BASE_URL,
        )

    def to_check_run(
        self, target: CheckTarget, *, now: dt.datetime | None = None
    ) -> CheckRun:
        """Build the request body for ``target``.

        A non-empty conclusion completes the check run at ``now``.
        """
        completed_at = ""
        status = STATUS_IN_PROGRESS
        if self.conclusion:
            status = STATUS_COMPLETED
            completed_at = format_timestamp(now or dt.datetime.now(dt.UTC))
        return CheckRun(
            name=self.name,
            head_sha=target.commit,
            head_branch=target.branch,
            status=status,
            conclusion=self.conclusion,
            started_at=self.started_at,
            completed_at=completed_at,
            details_url=self.details_url,
            external_id=self.external_id,
            output=CheckRunOutput(
                title=self.title,
                summary=self.summary,
                text=self.text,
            ),
            actions=self.actions,
        )
