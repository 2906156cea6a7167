"""HTTP client for creating GitHub check runs."""

from __future__ import annotations

import dataclasses

import httpx
import msgspec

from .check_run import DEFAULT_GITHUB_BASE_URL, CheckRun, CheckRunResponse
from .errors import CheckRunAPIError, CheckRunConfigError

# Check runs were a preview API when this header was required; GitHub still
# honours it and it keeps Enterprise installations on older releases working.
CHECKS_ACCEPT_HEADER = "application/vnd.github.antiope-preview+json"

_HTTP_ERROR_STATUS_THRESHOLD = 400


@dataclasses.dataclass(frozen=True, slots=True)
class CheckRunClientConfig:
    """Connection settings for :class:`CheckRunClient`."""

    token: str
    base_url: str = DEFAULT_GITHUB_BASE_URL
    timeout_s: float = 20.0
    user_agent: str = "gantry/0.1"


class CheckRunClient:
    """Create check runs with a GitHub App installation token."""

    def __init__(
        self,
        config: CheckRunClientConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the client, creating an HTTP client when none is given."""
        if not config.token.strip():
            raise CheckRunConfigError.empty_token()

        self._config = config
        self._base_url = config.base_url.rstrip("/") + "/"
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=config.timeout_s)

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def create_run(self, owner: str, repo: str, run: CheckRun) -> CheckRunResponse:
        """Create ``run`` on ``owner/repo`` and return GitHub's view of it.

        Raises
        ------
        CheckRunAPIError
            On transport failures, non-2xx responses, or undecodable bodies.

        """
        url = f"{self._base_url}repos/{owner}/{repo}/check-runs"
        try:
            response = await self._client.post(
                url,
                content=msgspec.json.encode(run),
                headers={
                    "Authorization": f"token {self._config.token}",
                    "User-Agent": self._config.user_agent,
                    "Accept": CHECKS_ACCEPT_HEADER,
                    "Content-Type": "application/json",
                },
            )
        except httpx.HTTPError as exc:
            raise CheckRunAPIError.network_error(str(exc)) from exc

        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise CheckRunAPIError.http_error(response.status_code, response.text)

        try:
            return msgspec.json.decode(response.content, type=CheckRunResponse)
        except msgspec.DecodeError as exc:
            raise CheckRunAPIError.invalid_response(str(exc)) from exc
