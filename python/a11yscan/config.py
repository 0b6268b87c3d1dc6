# SPDX-License-Identifier: AGPL-3.0-only OR LicenseRef-Fullbleed-Commercial
from pathlib import Path
from typing import Dict, List, Optional, Any
try:
    import tomllib
except ImportError:
    import tomli as tomllib

from .types import WcagLevel

CONFIG_FILENAME = "a11yscan.toml"

# Default configuration structure
DEFAULT_CONFIG = {
    "check": {
        "level": "AA",
        "format": "text",
        "verbose": False,
        "fail_on_warnings": False,
        "disabled_rules": [],
    },
}

FORMATS = ("text", "json")


class ConfigError(ValueError):
    pass


class Config:
    def __init__(self, data: Dict[str, Any], path: Optional[Path] = None):
        self.data = data
        self.path = path
        self.root = path.parent if path is not None else Path.cwd()
        self._validate()

    @classmethod
    def default(cls) -> "Config":
        return cls({"check": dict(DEFAULT_CONFIG["check"])})

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Config":
        """Load configuration from a11yscan.toml or pyproject.toml [tool.a11yscan]."""
        if path is not None:
            path = Path(path)
            if not path.exists():
                raise ConfigError(f"Config file not found: {path}")
            data = cls._read(path)
            if path.name == "pyproject.toml":
                data = data.get("tool", {}).get("a11yscan", {})
            return cls(data, path)

        cwd = Path.cwd()
        candidate = cwd / CONFIG_FILENAME
        if candidate.exists():
            return cls(cls._read(candidate), candidate)
        pyproject = cwd / "pyproject.toml"
        if pyproject.exists():
            table = cls._read(pyproject).get("tool", {}).get("a11yscan")
            if table is not None:
                return cls(table, pyproject)
        # No config on disk; defaults are enough to run a check.
        return cls.default()

    @staticmethod
    def _read(path: Path) -> Dict[str, Any]:
        try:
            with open(path, "rb") as f:
                return tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"Failed to parse {path}: {e}") from e

    def _validate(self) -> None:
        check = self.check
        if not isinstance(check, dict):
            raise ConfigError("[check] must be a table")
        WcagLevel.parse(check.get("level", "AA"))
        if self.format not in FORMATS:
            raise ConfigError(f"Unsupported format {self.format!r} (expected text or json)")
        rules = check.get("disabled_rules", [])
        if not isinstance(rules, list) or not all(isinstance(r, str) for r in rules):
            raise ConfigError("disabled_rules must be a list of rule ids")

    @property
    def check(self) -> Dict[str, Any]:
        return self.data.get("check", {})

    @property
    def level(self) -> WcagLevel:
        return WcagLevel.parse(self.check.get("level", "AA"))

    @property
    def format(self) -> str:
        return str(self.check.get("format", "text")).strip().lower()

    @property
    def verbose(self) -> bool:
        return bool(self.check.get("verbose", False))

    @property
    def fail_on_warnings(self) -> bool:
        return bool(self.check.get("fail_on_warnings", False))

    @property
    def disabled_rules(self) -> List[str]:
        return list(self.check.get("disabled_rules", []))
