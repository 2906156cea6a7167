"""Git ref matching for release tags and the main branch."""

from __future__ import annotations

import re

RELEASE_TAG_PATTERN = re.compile(r"^refs/tags/(v[0-9]+(?:\.[0-9]+)*(?:-.+)?)$")

_BRANCH_PREFIX = "refs/heads/"


def release_version(ref: str) -> str | None:
    """Return the version carried by a semantic-version tag ref.

    The first capture group is returned verbatim, leading ``v`` included:

    >>> release_version("refs/tags/v1.2.3-rc1")
    'v1.2.3-rc1'
    >>> release_version("refs/tags/release-1") is None
    True

    """
    match = RELEASE_TAG_PATTERN.match(ref)
    if match is None:
        return None
    return match.group(1)


def branch_ref(branch: str) -> str:
    """Return the fully-qualified ref for ``branch``."""
    if branch.startswith(_BRANCH_PREFIX):
        return branch
    return f"{_BRANCH_PREFIX}{branch}"


def is_main_branch(ref: str, main_branch: str) -> bool:
    """Return True when ``ref`` names the main branch.

    Check-suite events have carried both the short branch name and the full
    ref over time, so both spellings are accepted.
    """
    return ref in {main_branch, branch_ref(main_branch)}
