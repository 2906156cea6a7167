"""Unit tests for the check-run tool's exit codes."""

from __future__ import annotations

import httpx
import pytest

from gantry.checks import CheckRunSettings, ExitCode, run_check_run
from tests.helpers.event_builders import check_suite_body, webhook_payload


def _settings(payload: str, **overrides: str) -> CheckRunSettings:
    return CheckRunSettings(
        payload=payload, base_url="https://ghe.example/api/", **overrides
    )


def _http(response: httpx.Response) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(lambda _req: response))


@pytest.mark.asyncio
async def test_success_prints_created_run() -> None:
    """A created check run exits 0 and is echoed as JSON."""
    printed: list[str] = []
    http_client = _http(httpx.Response(201, json={"id": 5, "status": "completed"}))

    code = await run_check_run(
        _settings(webhook_payload(), conclusion="success"),
        http_client=http_client,
        out=printed.append,
    )
    await http_client.aclose()

    assert code is ExitCode.OK
    assert '"id":5' in printed[0]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("payload", "expected"),
    [
        ("{not json", ExitCode.INVALID),
        (
            webhook_payload(body=check_suite_body(full_name="no-slash")),
            ExitCode.INVALID,
        ),
        (webhook_payload("pull_request", {}), ExitCode.PAYLOAD_DATA),
        (
            webhook_payload(
                "issue_comment", {"repository": {"full_name": "octo/app"}}
            ),
            ExitCode.PAYLOAD_DATA,
        ),
    ],
    ids=["invalid-json", "bad-repository", "unknown-type", "missing-commit"],
)
async def test_payload_problems(payload: str, expected: ExitCode) -> None:
    """Payload problems are classified before any request is made."""
    code = await run_check_run(_settings(payload), out=lambda _line: None)

    assert code is expected


@pytest.mark.asyncio
async def test_empty_token_is_a_client_error() -> None:
    """No installation token means no client can be built."""
    payload = webhook_payload(token="")

    code = await run_check_run(_settings(payload), out=lambda _line: None)

    assert code is ExitCode.CLIENT


@pytest.mark.asyncio
async def test_api_rejection_is_invalid() -> None:
    """GitHub refusing the check run exits 1."""
    http_client = _http(httpx.Response(422, text="Validation Failed"))

    code = await run_check_run(
        _settings(webhook_payload()), http_client=http_client, out=lambda _l: None
    )
    await http_client.aclose()

    assert code is ExitCode.INVALID


@pytest.mark.asyncio
async def test_enterprise_base_url_receives_the_request() -> None:
    """GITHUB_BASE_URL is the only endpoint used; an upload URL is ignored."""
    seen: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json={"id": 9})

    settings = CheckRunSettings.from_env(
        {
            "CHECK_PAYLOAD": webhook_payload(),
            "CHECK_TEXT": "",
            "GITHUB_BASE_URL": "https://ghe.example/api/v3/",
            "GITHUB_UPLOAD_URL": "https://ghe.example/api/uploads/",
        }
    )
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(_handler))

    code = await run_check_run(settings, http_client=http_client, out=lambda _l: None)
    await http_client.aclose()

    assert code is ExitCode.OK
    assert [str(request.url) for request in seen] == [
        "https://ghe.example/api/v3/repos/brigadecore/brigade-github-app/check-runs"
    ]
