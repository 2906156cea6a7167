"""Pipeline configuration and project secrets.

Usage
-----
Defaults reproduce the Brigade GitHub app's own pipeline:

>>> config = PipelineConfig()
>>> config.main_branch
'master'
>>> config.project_path
'/go/src/github.com/brigadecore/brigade-github-app'

Secrets fall back to Docker Hub and the ``brigadecore`` organisation:

>>> ProjectSecrets.from_mapping({}).registry
'docker.io'

"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import os
import typing as typ
from pathlib import Path

import msgspec
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from gantry.checks.models import MAX_CHECK_TEXT
from gantry.checks.notifier import DEFAULT_CHECK_RUN_IMAGE

from .errors import ConfigError

DEFAULT_REGISTRY = "docker.io"
DEFAULT_ORG = "brigadecore"
DEFAULT_DETAILS_URL_TEMPLATE = "https://brigadecore.github.io/kashti/builds/{build_id}"

YAML_VERSION = (1, 2)


def _env_text(environ: cabc.Mapping[str, str], name: str, default: str) -> str:
    raw = environ.get(name, "")
    return raw.strip() or default


def _env_positive_int(environ: cabc.Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name, "")
    if not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError.not_positive_int(name, raw) from exc
    if value < 1:
        raise ConfigError.not_positive_int(name, raw)
    return value


@dc.dataclass(frozen=True, slots=True)
class PipelineConfig:
    """Settings that shape the jobs the pipeline builds.

    Attributes
    ----------
    main_branch
        Branch whose pushes publish edge images. Check-suite events on it
        are skipped because the push path already tests it.
    test_image
        Go toolchain image the test job runs in.
    gopath
        ``GOPATH`` inside the test image.
    project_org, project_name
        Import path components; the source is mounted beneath ``gopath``.
    publish_image
        Docker-in-Docker image that builds and pushes release images.
    check_run_image
        Image of the check-run tool used by job-shaped notifications.
    details_url_template
        Check run details link; ``{build_id}`` is substituted.
    check_text_limit
        Maximum length of check-run text.

    """

    main_branch: str = "master"
    test_image: str = "quay.io/deis/lightweight-docker-go:v0.6.0"
    gopath: str = "/go"
    project_org: str = "brigadecore"
    project_name: str = "brigade-github-app"
    publish_image: str = "docker:stable-dind"
    check_run_image: str = DEFAULT_CHECK_RUN_IMAGE
    details_url_template: str = DEFAULT_DETAILS_URL_TEMPLATE
    check_text_limit: int = MAX_CHECK_TEXT

    @property
    def project_path(self) -> str:
        """Return where the project source sits inside the test image."""
        return f"{self.gopath}/src/github.com/{self.project_org}/{self.project_name}"

    @classmethod
    def from_env(cls, environ: cabc.Mapping[str, str] | None = None) -> PipelineConfig:
        """Create configuration from ``GANTRY_*`` environment variables.

        Reads ``GANTRY_MAIN_BRANCH``, ``GANTRY_TEST_IMAGE``,
        ``GANTRY_PUBLISH_IMAGE``, ``GANTRY_CHECK_RUN_IMAGE``,
        ``GANTRY_DETAILS_URL_TEMPLATE`` and ``GANTRY_CHECK_TEXT_LIMIT``.
        Blank values keep the defaults.

        Raises
        ------
        ConfigError
            If ``GANTRY_CHECK_TEXT_LIMIT`` is not a positive integer.

        """
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            main_branch=_env_text(env, "GANTRY_MAIN_BRANCH", defaults.main_branch),
            test_image=_env_text(env, "GANTRY_TEST_IMAGE", defaults.test_image),
            publish_image=_env_text(
                env, "GANTRY_PUBLISH_IMAGE", defaults.publish_image
            ),
            check_run_image=_env_text(
                env, "GANTRY_CHECK_RUN_IMAGE", defaults.check_run_image
            ),
            details_url_template=_env_text(
                env, "GANTRY_DETAILS_URL_TEMPLATE", defaults.details_url_template
            ),
            check_text_limit=_env_positive_int(
                env, "GANTRY_CHECK_TEXT_LIMIT", defaults.check_text_limit
            ),
        )


@dc.dataclass(frozen=True, slots=True)
class ProjectSecrets:
    """Registry credentials configured on the Brigade project."""

    registry: str = DEFAULT_REGISTRY
    org: str = DEFAULT_ORG
    username: str = ""
    password: str = dc.field(default="", repr=False)

    @classmethod
    def from_mapping(cls, secrets: cabc.Mapping[str, typ.Any]) -> ProjectSecrets:
        """Read Brigade-style camel-cased secrets, applying defaults.

        Missing and empty values both fall back to the defaults, matching how
        Brigade scripts treat unset secrets.
        """

        def _get(key: str, default: str = "") -> str:
            value = secrets.get(key)
            return str(value) if value else default

        return cls(
            registry=_get("dockerhubRegistry", DEFAULT_REGISTRY),
            org=_get("dockerhubOrg", DEFAULT_ORG),
            username=_get("dockerhubUsername"),
            password=_get("dockerhubPassword"),
        )

    @classmethod
    def from_env(cls, environ: cabc.Mapping[str, str] | None = None) -> ProjectSecrets:
        """Read secrets from ``GANTRY_DOCKERHUB_*`` environment variables."""
        env = os.environ if environ is None else environ
        return cls.from_mapping(
            {
                "dockerhubRegistry": env.get("GANTRY_DOCKERHUB_REGISTRY", ""),
                "dockerhubOrg": env.get("GANTRY_DOCKERHUB_ORG", ""),
                "dockerhubUsername": env.get("GANTRY_DOCKERHUB_USERNAME", ""),
                "dockerhubPassword": env.get("GANTRY_DOCKERHUB_PASSWORD", ""),
            }
        )


class _ProjectFile(msgspec.Struct, kw_only=True):
    """The subset of a Brigade project definition Gantry reads."""

    secrets: dict[str, str | int | None] = msgspec.field(default_factory=dict)


def _yaml() -> YAML:
    yaml = YAML(typ="safe")
    yaml.version = YAML_VERSION
    yaml.allow_duplicate_keys = False
    return yaml


def load_project_secrets(path: Path | str) -> ProjectSecrets:
    """Load secrets from a YAML project file with a top-level ``secrets`` map.

    Raises
    ------
    ConfigError
        If the file cannot be read or parsed, or ``secrets`` is malformed.

    """
    path_obj = Path(path)
    try:
        loaded = _yaml().load(path_obj.read_text(encoding="utf-8"))
    except (OSError, YAMLError) as exc:
        raise ConfigError.unreadable_project(str(path_obj), str(exc)) from exc

    if loaded is None:
        return ProjectSecrets()

    try:
        project = msgspec.convert(loaded, type=_ProjectFile)
    except msgspec.ValidationError as exc:
        raise ConfigError.unreadable_project(str(path_obj), str(exc)) from exc
    return ProjectSecrets.from_mapping(project.secrets)


@dc.dataclass(frozen=True, slots=True)
class PipelineContext:
    """Per-dispatch context handed to every event handler."""

    secrets: ProjectSecrets = dc.field(default_factory=ProjectSecrets)
    config: PipelineConfig = dc.field(default_factory=PipelineConfig)
