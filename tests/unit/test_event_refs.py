"""Unit tests for release-tag and main-branch ref matching."""

from __future__ import annotations

import pytest

from gantry.events.refs import branch_ref, is_main_branch, release_version


@pytest.mark.parametrize(
    ("ref", "expected"),
    [
        ("refs/tags/v1.2.3", "v1.2.3"),
        ("refs/tags/v1.2.3-rc1", "v1.2.3-rc1"),
        ("refs/tags/v2", "v2"),
        ("refs/tags/v0.10.0-alpha.1+build", "v0.10.0-alpha.1+build"),
    ],
)
def test_release_version_returns_tag_verbatim(ref: str, expected: str) -> None:
    """Semantic-version tags yield the tag name, leading v included."""
    assert release_version(ref) == expected


@pytest.mark.parametrize(
    "ref",
    [
        "refs/tags/release-1",
        "refs/tags/1.2.3",
        "refs/tags/v",
        "refs/heads/v1.2.3",
        "refs/heads/master",
        "",
    ],
)
def test_release_version_rejects_other_refs(ref: str) -> None:
    """Anything that is not a vN tag is not a release."""
    assert release_version(ref) is None


def test_branch_ref_qualifies_short_names() -> None:
    """Short branch names gain the refs/heads/ prefix exactly once."""
    assert branch_ref("master") == "refs/heads/master"
    assert branch_ref("refs/heads/master") == "refs/heads/master"


@pytest.mark.parametrize(
    ("ref", "expected"),
    [
        ("master", True),
        ("refs/heads/master", True),
        ("refs/heads/feature-x", False),
        ("feature-x", False),
        ("refs/heads/master-2", False),
    ],
)
def test_is_main_branch_accepts_both_spellings(ref: str, expected: bool) -> None:
    """The main branch matches in short and fully-qualified form."""
    assert is_main_branch(ref, "master") is expected
