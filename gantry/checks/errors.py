"""Errors raised while reporting check runs."""

from __future__ import annotations

from gantry.errors import GantryError

# Response body characters echoed into API error messages.
_BODY_PREVIEW_LIMIT = 200


class CheckError(GantryError):
    """Base class for check reporting errors."""


class NotifyFailedError(CheckError):
    """Raised when a check notification could not be delivered.

    Attributes
    ----------
    notification_name
        Name of the check the notification belongs to.
    attempt
        Send counter value of the failed attempt.

    """

    def __init__(
        self,
        message: str,
        *,
        notification_name: str = "",
        attempt: int = 0,
    ) -> None:
        """Initialise with the check name and attempt number."""
        self.notification_name = notification_name
        self.attempt = attempt
        super().__init__(message)

    @classmethod
    def from_error(
        cls, notification_name: str, attempt: int, error: BaseException
    ) -> NotifyFailedError:
        """Return an error wrapping the transport's own failure."""
        message = (
            f"failed to send notification {notification_name!r} "
            f"(attempt {attempt}): {error}"
        )
        return cls(message, notification_name=notification_name, attempt=attempt)


class DoubleFailureError(NotifyFailedError):
    """Both the wrapped job and its failure notification failed.

    The notification failure is the primary error. The job failure is kept
    on :attr:`work_error` so it is never lost.
    """

    def __init__(
        self,
        notify_error: NotifyFailedError,
        work_error: GantryError,
    ) -> None:
        """Pair the notification failure with the job failure it reported."""
        self.notify_error = notify_error
        self.work_error = work_error
        super().__init__(
            f"{notify_error} (original error: {work_error})",
            notification_name=notify_error.notification_name,
            attempt=notify_error.attempt,
        )


class CheckRunPayloadError(CheckError):
    """Raised when a webhook payload cannot identify the commit to report on."""

    @classmethod
    def invalid_json(cls, detail: str) -> CheckRunPayloadError:
        """Return an error for a payload that is not valid JSON."""
        return cls(f"could not parse payload: {detail}")

    @classmethod
    def unknown_type(cls, payload_type: str) -> CheckRunPayloadError:
        """Return an error for an unsupported webhook type."""
        return cls(f"unknown payload type {payload_type}")

    @classmethod
    def empty_field(cls, field: str) -> CheckRunPayloadError:
        """Return an error for a required field left empty."""
        return cls(f"{field} empty")


class CheckRunRepositoryError(CheckRunPayloadError):
    """Raised when the payload names a repository not shaped ``owner/name``."""

    @classmethod
    def invalid(cls, full_name: str) -> CheckRunRepositoryError:
        """Return an error quoting the rejected repository name."""
        return cls(
            "CheckSuite.Repository.FullName is required "
            f"in owner/name form (got {full_name!r})"
        )


class CheckRunAPIError(CheckError):
    """Raised when GitHub rejects or never answers a check-run request."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: str = "",
    ) -> None:
        """Initialise with the HTTP status and response body, when known."""
        self.status_code = status_code
        self.body = body
        super().__init__(message)

    @classmethod
    def http_error(cls, status_code: int, body: str) -> CheckRunAPIError:
        """Return an error for a non-2xx response."""
        preview = body[:_BODY_PREVIEW_LIMIT]
        return cls(
            f"GitHub check-runs HTTP {status_code}: {preview}",
            status_code=status_code,
            body=body,
        )

    @classmethod
    def network_error(cls, detail: str) -> CheckRunAPIError:
        """Return an error for a transport failure."""
        return cls(f"GitHub check-runs network error: {detail}")

    @classmethod
    def invalid_response(cls, detail: str) -> CheckRunAPIError:
        """Return an error for a response body that does not decode."""
        return cls(f"GitHub check-runs response could not be decoded: {detail}")


class CheckRunConfigError(CheckError):
    """Raised when the check-run tool is misconfigured."""

    @classmethod
    def invalid_actions(cls, detail: str) -> CheckRunConfigError:
        """Return an error for unparsable ``CHECK_ACTIONS``."""
        return cls(f"could not parse actions: {detail}")

    @classmethod
    def empty_token(cls) -> CheckRunConfigError:
        """Return an error for a payload without an installation token."""
        return cls("GitHub installation token must be non-empty")
