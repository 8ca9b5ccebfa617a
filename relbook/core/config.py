"""Typed configuration loading.

`relbook.toml` is optional; every field falls back to the values the
platform-mesh release pipeline uses.

    [registry]
    org = "platform-mesh"
    repository = "ghcr.io/platform-mesh"
    product = "platform-mesh"

    [github]
    release_repo = "platform-mesh/ocm"
    workflow_file = ".github/workflows/ocm.yaml"
    release_title = "Platform Mesh OCM Component"

    [changelog]
    workers = 4
    third_party = ["traefik", "cert-manager"]
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_int, get_list, get_str, get_table

__all__ = [
    "ChangelogConfig",
    "Config",
    "ConfigError",
    "GitHubConfig",
    "RegistryConfig",
    "CONFIG_FILENAME",
    "DEFAULT_THIRD_PARTY",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILENAME = "relbook.toml"

DEFAULT_ORG = "platform-mesh"
DEFAULT_REGISTRY = "ghcr.io/platform-mesh"
DEFAULT_PRODUCT = "platform-mesh"
DEFAULT_RELEASE_REPO = "platform-mesh/ocm"
DEFAULT_WORKFLOW_FILE = ".github/workflows/ocm.yaml"
DEFAULT_RELEASE_TITLE = "Platform Mesh OCM Component"

# Components shipped in the product but not built by its own pipeline.
DEFAULT_THIRD_PARTY: tuple[str, ...] = (
    "cert-manager",
    "crossplane",
    "etcd-druid",
    "gateway-api",
    "kcp-operator",
    "openfga",
    "traefik",
)


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class RegistryConfig:
    """Where component descriptors live."""

    org: str = DEFAULT_ORG
    repository: str = DEFAULT_REGISTRY
    product: str = DEFAULT_PRODUCT

    def component_name(self, component: str) -> str:
        return f"github.com/{self.org}/{component}"


@dataclass(frozen=True, slots=True)
class GitHubConfig:
    release_repo: str = DEFAULT_RELEASE_REPO
    workflow_file: str = DEFAULT_WORKFLOW_FILE
    release_title: str = DEFAULT_RELEASE_TITLE


@dataclass(frozen=True, slots=True)
class ChangelogConfig:
    workers: int = 1
    third_party: frozenset[str] = frozenset(DEFAULT_THIRD_PARTY)


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    registry: RegistryConfig = field(default_factory=RegistryConfig)
    github: GitHubConfig = field(default_factory=GitHubConfig)
    changelog: ChangelogConfig = field(default_factory=ChangelogConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        registry: StrDict = get_table(data, "registry") or {}
        github: StrDict = get_table(data, "github") or {}
        changelog: StrDict = get_table(data, "changelog") or {}

        workers = get_int(changelog, "workers")
        if workers is None:
            workers = 1
        if workers < 1:
            raise ValueError(f"changelog.workers must be >= 1, got {workers}")

        third_party = frozenset(DEFAULT_THIRD_PARTY)
        raw_tp = get_list(changelog, "third_party")
        if raw_tp is not None:
            if not all(isinstance(x, str) for x in raw_tp):
                raise TypeError("changelog.third_party must be a list of strings")
            third_party = frozenset(str(x) for x in raw_tp)

        return cls(
            registry=RegistryConfig(
                org=get_str(registry, "org") or DEFAULT_ORG,
                repository=get_str(registry, "repository") or DEFAULT_REGISTRY,
                product=get_str(registry, "product") or DEFAULT_PRODUCT,
            ),
            github=GitHubConfig(
                release_repo=get_str(github, "release_repo") or DEFAULT_RELEASE_REPO,
                workflow_file=get_str(github, "workflow_file") or DEFAULT_WORKFLOW_FILE,
                release_title=get_str(github, "release_title") or DEFAULT_RELEASE_TITLE,
            ),
            changelog=ChangelogConfig(workers=workers, third_party=third_party),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        data_obj: object = tomllib.loads(path.read_bytes().decode("utf-8"))
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Config root must be a TOML table", path=path))
    return Ok(data)


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path) -> Result[Config, ConfigError]:
    """Like `load_config`, but a missing file yields the defaults.

    A file that exists but is broken is still an error.
    """
    if not path.exists():
        return Ok(Config())
    return load_config(path)
