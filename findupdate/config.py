"""Configuration loading for findupdate.

Two kinds of files are read here, both TOML:

**Settings** (how findupdate runs). Looked up in this order:

1. Explicit path from ``--config`` or ``FINDUPDATE_CONFIG``
2. ``findupdate.toml`` in the current directory (``[findupdate]`` table)
3. ``pyproject.toml`` with a ``[tool.findupdate]`` table

Example (``findupdate.toml``)::

    [findupdate]
    jobs = 8
    timeout = 20
    comply = true
    token_env = "GH_TOKEN"

**Package lists** (what to check). One table per package; every key except
``current`` becomes that package's checker config::

    [packages.lmms]
    type = "anitya"
    id = 1832
    current = "1.2.2"

    [packages.ciel]
    type = "github"
    repo = "AOSC-Dev/ciel-rs"
    sort_version = true
"""

from __future__ import annotations

import tomli as tomllib
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional
from dataclasses import dataclass, field

from findupdate.core.runner import PackageCheck
from findupdate.exceptions import ConfigError
from findupdate.utils.logger import get_logger
from findupdate.constants import (
    DEFAULT_COMPLY,
    DEFAULT_TIMEOUT,
    DEFAULT_TOKEN_ENV,
    GITHUB_TOKEN_KEY,
)

logger = get_logger("config")


@dataclass
class FindUpdateSettings:
    """Parsed and validated findupdate settings.

    Attributes:
        jobs: Worker threads; ``None`` means one per CPU.
        timeout: HTTP timeout in seconds.
        comply: Rewrite found versions in the AOSC versioning style.
        token_env: Environment variable holding the GitHub token.
        source_path: Path to the loaded settings file, if any.
    """

    jobs: Optional[int] = None
    timeout: float = DEFAULT_TIMEOUT
    comply: bool = DEFAULT_COMPLY
    token_env: str = DEFAULT_TOKEN_ENV

    # Metadata (not a user-facing option)
    source_path: Optional[Path] = field(default=None, repr=False)

    def to_log_dict(self) -> Dict[str, Any]:
        """Return settings as a dictionary for debug logging."""
        return {
            "jobs": self.jobs,
            "timeout": self.timeout,
            "comply": self.comply,
            "token_env": self.token_env,
        }


# ---------------------------------------------------------------------------
# Settings discovery
# ---------------------------------------------------------------------------


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Find the settings file to load.

    Raises:
        ConfigError: An explicit path was given but does not exist.
    """
    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        logger.debug("Using explicit config: %s", resolved)
        return resolved

    cwd = Path.cwd()

    findupdate_toml = cwd / "findupdate.toml"
    if findupdate_toml.is_file():
        logger.debug("Found findupdate.toml: %s", findupdate_toml)
        return findupdate_toml

    pyproject_toml = cwd / "pyproject.toml"
    if pyproject_toml.is_file() and _pyproject_has_section(pyproject_toml):
        logger.debug("Found [tool.findupdate] in pyproject.toml: %s", pyproject_toml)
        return pyproject_toml

    logger.debug("No configuration file found")
    return None


def _pyproject_has_section(path: Path) -> bool:
    """Return True if ``path`` parses and has a ``[tool.findupdate]`` table."""
    try:
        raw = _read_toml(path)
    except ConfigError:
        return False
    return "findupdate" in raw.get("tool", {})


def load_config(config_path: Optional[Path] = None) -> FindUpdateSettings:
    """Load settings, falling back to defaults when no file is found.

    Raises:
        ConfigError: The file cannot be parsed, has unknown keys, or
            invalid values.
    """
    resolved = discover_config_file(config_path)

    if resolved is None:
        return FindUpdateSettings()

    logger.info("Loading configuration from %s", resolved)
    raw = _read_toml(resolved)

    if resolved.name == "pyproject.toml":
        section = raw.get("tool", {}).get("findupdate", {})
    else:
        section = raw.get("findupdate", {})

    settings = _parse_section(section, config_path=str(resolved))
    settings.source_path = resolved

    logger.debug("Loaded configuration: %s", settings.to_log_dict())
    return settings


def _read_toml(path: Path) -> Dict[str, Any]:
    """Read and parse a TOML file.

    Raises:
        ConfigError: File cannot be read or is not valid TOML.
    """
    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc


def _parse_section(
    section: Mapping[str, Any],
    *,
    config_path: str,
) -> FindUpdateSettings:
    """Validate a ``[findupdate]`` table.

    Raises:
        ConfigError: Unknown keys or values of the wrong type.
    """
    settings = FindUpdateSettings()

    unknown = set(section) - {"jobs", "timeout", "comply", "token_env"}
    if unknown:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown))}",
            config_path=config_path,
        )

    if "jobs" in section:
        val = section["jobs"]
        if isinstance(val, bool) or not isinstance(val, int) or val < 1:
            raise ConfigError(
                f"jobs must be a positive integer, got {val!r}",
                config_path=config_path,
                option="jobs",
            )
        settings.jobs = val

    if "timeout" in section:
        val = section["timeout"]
        if isinstance(val, bool) or not isinstance(val, (int, float)) or val <= 0:
            raise ConfigError(
                f"timeout must be a positive number, got {val!r}",
                config_path=config_path,
                option="timeout",
            )
        settings.timeout = float(val)

    if "comply" in section:
        val = section["comply"]
        if not isinstance(val, bool):
            raise ConfigError(
                f"comply must be a boolean, got {type(val).__name__}",
                config_path=config_path,
                option="comply",
            )
        settings.comply = val

    if "token_env" in section:
        val = section["token_env"]
        if not isinstance(val, str) or not val:
            raise ConfigError(
                "token_env must be a non-empty string",
                config_path=config_path,
                option="token_env",
            )
        settings.token_env = val

    return settings


# ---------------------------------------------------------------------------
# Checker configs
# ---------------------------------------------------------------------------


def _stringify(key: str, value: Any, *, config_path: Optional[str] = None) -> str:
    """Convert a TOML scalar into the string form checkers expect."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise ConfigError(
        f"Option '{key}' must be a string, number or boolean",
        config_path=config_path,
        option=key,
    )


def build_config(
    options: Mapping[str, Any],
    *,
    github_token: Optional[str] = None,
    config_path: Optional[str] = None,
) -> Mapping[str, str]:
    """Build a read-only checker config from raw options.

    ``github_token`` is added under the token key unless ``options``
    already carries one.
    """
    config = {
        key: _stringify(key, value, config_path=config_path)
        for key, value in options.items()
    }
    if github_token and GITHUB_TOKEN_KEY not in config:
        config[GITHUB_TOKEN_KEY] = github_token
    return MappingProxyType(config)


def parse_options(pairs: Iterable[str]) -> Dict[str, str]:
    """Parse ``key=value`` strings into a dictionary.

    Raises:
        ConfigError: An item has no ``=`` or an empty key.
    """
    options: Dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ConfigError(f"Expected key=value, got {pair!r}")
        options[key] = value
    return options


def load_packages(
    path: Path,
    *,
    github_token: Optional[str] = None,
) -> List[PackageCheck]:
    """Read a package list file.

    Raises:
        ConfigError: The file is unreadable or a package entry is malformed.
    """
    raw = _read_toml(path)
    packages = raw.get("packages")
    if not isinstance(packages, dict) or not packages:
        raise ConfigError(
            "Package list has no [packages.<name>] tables",
            config_path=str(path),
        )

    checks: List[PackageCheck] = []
    for name, entry in packages.items():
        if not isinstance(entry, dict):
            raise ConfigError(
                f"Package '{name}' must be a table",
                config_path=str(path),
                option=name,
            )

        options = dict(entry)
        current = options.pop("current", None)
        checks.append(
            PackageCheck(
                name=name,
                config=build_config(
                    options,
                    github_token=github_token,
                    config_path=str(path),
                ),
                current=_stringify("current", current) if current is not None else None,
            )
        )

    logger.debug("Loaded %d packages from %s", len(checks), path)
    return checks
