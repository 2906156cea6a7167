"""Unit tests for check-run payload resolution and settings."""

from __future__ import annotations

import datetime as dt
import typing as typ

import msgspec
import pytest

from gantry.checks import (
    CheckRunAction,
    CheckRunConfigError,
    CheckRunPayloadError,
    CheckRunRepositoryError,
    CheckRunSettings,
    CheckTarget,
    decode_payload,
    resolve_target,
)
from gantry.checks.check_run import format_timestamp
from tests.helpers.event_builders import check_suite_body, webhook_payload

if typ.TYPE_CHECKING:
    from pathlib import Path

_NOW = dt.datetime(2024, 5, 1, 12, 30, 5, tzinfo=dt.UTC)


class TestResolveTarget:
    """Tests for resolve_target."""

    def test_check_suite(self) -> None:
        """check_suite bodies carry the head commit and branch."""
        payload = decode_payload(webhook_payload())

        assert resolve_target(payload) == CheckTarget(
            owner="brigadecore",
            repo="brigade-github-app",
            commit="9a0c1f2",
            branch="feature-x",
        )

    def test_check_run(self) -> None:
        """check_run bodies nest the suite under check_run."""
        body = {
            "repository": {"full_name": "octo/app"},
            "check_run": {
                "check_suite": {"head_sha": "abc123", "head_branch": "fix"}
            },
        }

        target = resolve_target(decode_payload(webhook_payload("check_run", body)))

        assert target == CheckTarget(
            owner="octo", repo="app", commit="abc123", branch="fix"
        )

    def test_issue_comment_uses_envelope_commit(self) -> None:
        """issue_comment payloads take commit and branch from the envelope."""
        raw = webhook_payload(
            "issue_comment",
            {"repository": {"full_name": "octo/app"}},
            commit="def456",
            branch="topic",
        )

        target = resolve_target(decode_payload(raw))

        assert (target.commit, target.branch) == ("def456", "topic")

    @pytest.mark.parametrize(
        ("extra", "field"),
        [({"branch": "topic"}, "commit"), ({"commit": "def456"}, "branch")],
    )
    def test_issue_comment_requires_commit_and_branch(
        self, extra: dict[str, str], field: str
    ) -> None:
        """Missing envelope fields are payload data errors."""
        raw = webhook_payload(
            "issue_comment", {"repository": {"full_name": "octo/app"}}, **extra
        )

        with pytest.raises(CheckRunPayloadError, match=f"{field} empty"):
            resolve_target(decode_payload(raw))

    def test_unknown_type(self) -> None:
        """Other webhook types cannot be reported on."""
        with pytest.raises(CheckRunPayloadError, match="unknown payload type"):
            resolve_target(decode_payload(webhook_payload("pull_request", {})))

    @pytest.mark.parametrize("full_name", ["", "octo", "octo/app/extra", "/app"])
    def test_bad_repository_name(self, full_name: str) -> None:
        """Repository names must be owner/name."""
        raw = webhook_payload(body=check_suite_body(full_name=full_name))

        with pytest.raises(CheckRunRepositoryError):
            resolve_target(decode_payload(raw))


def test_decode_payload_rejects_invalid_json() -> None:
    """Payloads that are not JSON objects are rejected."""
    with pytest.raises(CheckRunPayloadError, match="could not parse payload"):
        decode_payload("{nope")


def test_format_timestamp_is_utc_seconds() -> None:
    """Timestamps are rendered in UTC with a Z suffix."""
    offset = dt.timezone(dt.timedelta(hours=2))

    assert format_timestamp(_NOW.astimezone(offset)) == "2024-05-01T12:30:05Z"


class TestCheckRunSettings:
    """Tests for CheckRunSettings."""

    def test_defaults(self, tmp_path: Path) -> None:
        """Unset variables take the tool's defaults."""
        settings = CheckRunSettings.from_env(
            {"CHECK_PAYLOAD": "{}"}, text_path=tmp_path / "missing", now=_NOW
        )

        assert settings.name == "Brigade"
        assert settings.title == "Running Check"
        assert settings.text == ""
        assert settings.started_at == "2024-05-01T12:30:05Z"
        assert settings.actions is None
        assert settings.base_url == "https://api.github.com/"

    def test_text_file_used_when_check_text_unset(self, tmp_path: Path) -> None:
        """The text body falls back to the mounted text file."""
        text_file = tmp_path / "text"
        text_file.write_text("from file", encoding="utf-8")

        settings = CheckRunSettings.from_env({}, text_path=text_file)

        assert settings.text == "from file"

    def test_check_text_wins_over_file(self, tmp_path: Path) -> None:
        """An explicit CHECK_TEXT, even empty, beats the text file."""
        text_file = tmp_path / "text"
        text_file.write_text("from file", encoding="utf-8")

        settings = CheckRunSettings.from_env({"CHECK_TEXT": ""}, text_path=text_file)

        assert settings.text == ""

    def test_enterprise_url_and_actions(self) -> None:
        """The GitHub Enterprise API URL and actions are read from the env."""
        actions = [{"label": "Rerun", "description": "Run again", "identifier": "r"}]

        settings = CheckRunSettings.from_env(
            {
                "CHECK_TEXT": "",
                "CHECK_ACTIONS": msgspec.json.encode(actions).decode(),
                "GITHUB_BASE_URL": "https://ghe.example/api/v3/",
            }
        )

        assert settings.actions == [
            CheckRunAction(label="Rerun", description="Run again", identifier="r")
        ]
        assert settings.base_url == "https://ghe.example/api/v3/"

    def test_invalid_actions(self) -> None:
        """Unparsable actions are a configuration error."""
        with pytest.raises(CheckRunConfigError):
            CheckRunSettings.from_env({"CHECK_TEXT": "", "CHECK_ACTIONS": "[{"})

    def test_running_check_run(self) -> None:
        """Without a conclusion the check run is in progress."""
        settings = CheckRunSettings(payload="{}", started_at="2024-05-01T00:00:00Z")
        target = CheckTarget(owner="o", repo="r", commit="abc", branch="b")

        run = settings.to_check_run(target, now=_NOW)

        assert run.status == "in_progress"
        assert run.completed_at == ""
        assert b"conclusion" not in msgspec.json.encode(run)

    def test_completed_check_run(self) -> None:
        """A conclusion completes the check run at the given time."""
        settings = CheckRunSettings(payload="{}", conclusion="failure", title="T")
        target = CheckTarget(owner="o", repo="r", commit="abc", branch="b")

        run = settings.to_check_run(target, now=_NOW)

        assert run.status == "completed"
        assert run.conclusion == "failure"
        assert run.completed_at == "2024-05-01T12:30:05Z"
        assert (run.head_sha, run.head_branch) == ("abc", "b")
        assert run.output.title == "T"
