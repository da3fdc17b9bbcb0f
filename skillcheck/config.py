"""Configuration management for skillcheck.toml."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli
import tomli_w

from skillcheck.constants import CONFIG_FILENAME, DEFAULT_VENDOR_DIR, KNOWN_TOOLS
from skillcheck.exceptions import ConfigNotFoundError, ConfigParseError, ConfigValidationError

logger = logging.getLogger(__name__)

SEVERITIES = ("error", "warning")


def _str_list(section: str, key: str, value: Any) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigValidationError(f"[{section}] '{key}' must be a list of strings")
    return list(value)


def _table(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key, {})
    if not isinstance(value, dict):
        raise ConfigValidationError(f"[{key}] must be a table")
    return value


@dataclass
class LintSettings:
    """Settings from the [lint] table.

    Example:
        [lint]
        exclude = ["node_modules/**"]
        ignore = ["unknown-fields"]
        severity = { name-format = "error" }
    """

    exclude: list[str] = field(default_factory=list)
    select: list[str] = field(default_factory=list)
    ignore: list[str] = field(default_factory=list)
    strict: bool = False
    severity: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LintSettings":
        """Create LintSettings from a TOML dict entry."""
        strict = data.get("strict", False)
        if not isinstance(strict, bool):
            raise ConfigValidationError("[lint] 'strict' must be a boolean")

        severity = data.get("severity", {})
        if not isinstance(severity, dict):
            raise ConfigValidationError("[lint] 'severity' must be a table")
        for rule_id, level in severity.items():
            if level not in SEVERITIES:
                raise ConfigValidationError(
                    f"[lint.severity] '{rule_id}' has invalid severity '{level}'. "
                    "Must be 'error' or 'warning'"
                )

        return cls(
            exclude=_str_list("lint", "exclude", data.get("exclude", [])),
            select=_str_list("lint", "select", data.get("select", [])),
            ignore=_str_list("lint", "ignore", data.get("ignore", [])),
            strict=strict,
            severity=dict(severity),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a TOML-serializable dict."""
        result: dict[str, Any] = {}
        if self.exclude:
            result["exclude"] = self.exclude
        if self.select:
            result["select"] = self.select
        if self.ignore:
            result["ignore"] = self.ignore
        if self.strict:
            result["strict"] = True
        if self.severity:
            result["severity"] = self.severity
        return result


@dataclass
class VendoredSkill:
    """A skill copied from an external repository.

    Example:
        [vendor.hono]
        source = "yusukebe/hono-skills/skills/hono"
        vendored_at = "2026-01-12T08:30:00+00:00"
    """

    name: str
    source: str
    vendored_at: str = ""

    @classmethod
    def from_dict(cls, name: str, data: dict[str, Any]) -> "VendoredSkill":
        """Create a VendoredSkill from a TOML dict entry."""
        if "source" not in data:
            raise ConfigValidationError(f"Vendored skill '{name}' missing required 'source' field")
        return cls(
            name=name,
            source=str(data["source"]),
            vendored_at=str(data.get("vendored_at", "")),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a TOML-serializable dict."""
        result: dict[str, Any] = {"source": self.source}
        if self.vendored_at:
            result["vendored_at"] = self.vendored_at
        return result


@dataclass
class SkillcheckConfig:
    """Configuration from skillcheck.toml."""

    path: Path
    lint: LintSettings = field(default_factory=LintSettings)
    default_context_limit: int | None = None
    allowed_tools: tuple[str, ...] = KNOWN_TOOLS
    vendor_dir: str = DEFAULT_VENDOR_DIR
    vendored: dict[str, VendoredSkill] = field(default_factory=dict)

    @property
    def root(self) -> Path:
        """Corpus root: the directory holding skillcheck.toml."""
        return self.path.parent

    @property
    def vendor_path(self) -> Path:
        return self.root / self.vendor_dir

    @classmethod
    def load(cls, path: Path) -> "SkillcheckConfig":
        """Load configuration from skillcheck.toml.

        Args:
            path: Path to the skillcheck.toml file

        Returns:
            Parsed SkillcheckConfig

        Raises:
            ConfigNotFoundError: If the file doesn't exist
            ConfigParseError: If the file cannot be parsed
            ConfigValidationError: If the configuration is invalid
        """
        if not path.exists():
            raise ConfigNotFoundError(f"Config file not found: {path}")

        try:
            with open(path, "rb") as f:
                data = tomli.load(f)
        except tomli.TOMLDecodeError as e:
            raise ConfigParseError(f"Failed to parse {path}: {e}")

        logger.debug("Loaded config from %s", path)
        return cls._from_dict(path, data)

    @classmethod
    def _from_dict(cls, path: Path, data: dict[str, Any]) -> "SkillcheckConfig":
        """Create a SkillcheckConfig from a parsed TOML dict."""
        config = cls(path=path)

        config.lint = LintSettings.from_dict(_table(data, "lint"))

        context_data = _table(data, "context")
        limit = context_data.get("default_limit", 0)
        if not isinstance(limit, int) or isinstance(limit, bool) or limit < 0:
            raise ConfigValidationError("[context] 'default_limit' must be a non-negative integer")
        config.default_context_limit = limit or None

        tools_data = _table(data, "tools")
        if "allowed" in tools_data:
            config.allowed_tools = tuple(_str_list("tools", "allowed", tools_data["allowed"]))

        paths_data = _table(data, "paths")
        vendor_dir = paths_data.get("vendor", DEFAULT_VENDOR_DIR)
        if not isinstance(vendor_dir, str) or not vendor_dir:
            raise ConfigValidationError("[paths] 'vendor' must be a non-empty string")
        config.vendor_dir = vendor_dir

        vendor_data = _table(data, "vendor")
        for name, entry in vendor_data.items():
            if not isinstance(entry, dict):
                raise ConfigValidationError(
                    f"Vendored skill '{name}' must be a table, got {type(entry).__name__}"
                )
            config.vendored[name] = VendoredSkill.from_dict(name, entry)

        return config

    def save(self) -> None:
        """Save configuration to skillcheck.toml."""
        with open(self.path, "wb") as f:
            tomli_w.dump(self._to_dict(), f)
        logger.debug("Saved config to %s", self.path)

    def _to_dict(self) -> dict[str, Any]:
        """Convert to a TOML-serializable dict."""
        data: dict[str, Any] = {}

        lint = self.lint.to_dict()
        if lint:
            data["lint"] = lint

        if self.default_context_limit:
            data["context"] = {"default_limit": self.default_context_limit}

        if tuple(self.allowed_tools) != KNOWN_TOOLS:
            data["tools"] = {"allowed": list(self.allowed_tools)}

        if self.vendor_dir != DEFAULT_VENDOR_DIR:
            data["paths"] = {"vendor": self.vendor_dir}

        if self.vendored:
            data["vendor"] = {
                name: entry.to_dict() for name, entry in self.vendored.items()
            }

        return data

    def record_vendored(self, name: str, source: str, vendored_at: str) -> None:
        """Record (or replace) the origin of a vendored skill."""
        self.vendored[name] = VendoredSkill(name=name, source=source, vendored_at=vendored_at)


def find_config(start_path: Path | None = None) -> Path | None:
    """Find skillcheck.toml by walking up the directory tree.

    Args:
        start_path: Starting directory (defaults to current working directory)

    Returns:
        Path to skillcheck.toml if found, None otherwise
    """
    if start_path is None:
        start_path = Path.cwd()

    current = start_path.resolve()

    while True:
        config_path = current / CONFIG_FILENAME
        if config_path.exists():
            return config_path

        parent = current.parent
        if parent == current:
            # Reached filesystem root
            return None
        current = parent


def load_config(start_path: Path | None = None) -> SkillcheckConfig:
    """Load the nearest skillcheck.toml, or defaults rooted at start_path.

    The returned default config is not written to disk; call save() to
    persist it.

    Args:
        start_path: Starting directory (defaults to current working directory)

    Returns:
        Loaded or default SkillcheckConfig
    """
    existing = find_config(start_path)
    if existing:
        return SkillcheckConfig.load(existing)

    root = (start_path or Path.cwd()).resolve()
    return SkillcheckConfig(path=root / CONFIG_FILENAME)
