"""Configuration Management Package"""

import json
import os
import sys
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Optional

VALID_PROVIDERS = {"auto", "ollama", "claude", "claude-cli"}

# Environment variable -> (field, converter)
ENV_OVERRIDES = {
    "GH_HELPER_PROVIDER": ("provider", str),
    "GH_HELPER_ANALYSIS_MODEL": ("analysis_model", str),
    "GH_HELPER_SYNTHESIS_MODEL": ("synthesis_model", str),
    "GH_HELPER_TIMEOUT": ("timeout", int),
    "OLLAMA_HOST": ("ollama_host", str),
}


@dataclass
class Config:
    """User configuration with sensible defaults.

    analysis_model is the fast model used once per file, synthesis_model the
    quality model used for the final message. None means the backend default.
    """
    provider: str = "auto"
    analysis_model: Optional[str] = None
    synthesis_model: Optional[str] = None
    ollama_host: Optional[str] = None
    timeout: int = 60  # seconds, per backend call
    max_diff_chars: int = 5000
    max_subject_length: int = 72
    trivial_collapse_threshold: int = 5
    auto_stage: bool = True
    confirm_push: bool = True

    def to_dict(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}

    def validate(self) -> list[str]:
        """Validate config values and return list of warnings.

        Invalid values are replaced with defaults after warning.
        """
        warnings = []
        defaults = Config()

        if self.provider not in VALID_PROVIDERS:
            warnings.append(f"Invalid provider '{self.provider}', using '{defaults.provider}'")
            self.provider = defaults.provider

        for name in ("timeout", "max_diff_chars", "max_subject_length", "trivial_collapse_threshold"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                default = getattr(defaults, name)
                warnings.append(f"Invalid {name} '{value}', using {default}")
                setattr(self, name, default)

        for name in ("auto_stage", "confirm_push"):
            if not isinstance(getattr(self, name), bool):
                default = getattr(defaults, name)
                warnings.append(f"Invalid {name} '{getattr(self, name)}', using {str(default).lower()}")
                setattr(self, name, default)

        return warnings

    def apply_env(self, environ=None) -> 'Config':
        """Apply GH_HELPER_* environment overrides in place."""
        environ = os.environ if environ is None else environ
        for var, (name, convert) in ENV_OVERRIDES.items():
            raw = environ.get(var)
            if not raw:
                continue
            try:
                setattr(self, name, convert(raw))
            except ValueError:
                print(f"Config warning: Ignoring {var}={raw!r}", file=sys.stderr)
        for warning in self.validate():
            print(f"Config warning: {warning}", file=sys.stderr)
        return self

    @classmethod
    def from_dict(cls, data: dict) -> 'Config':
        valid_keys = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        config = cls(**filtered)
        for warning in config.validate():
            print(f"Config warning: {warning}", file=sys.stderr)
        return config


class ConfigManager:
    """Manages loading and saving configuration."""

    CONFIG_FILENAME = ".ghhelperrc"

    def __init__(self):
        self._config: Optional[Config] = None
        self._config_path: Optional[Path] = None

    def load(self) -> Config:
        if self._config is not None:
            return self._config

        for path in (Path.cwd() / self.CONFIG_FILENAME, Path.home() / self.CONFIG_FILENAME):
            if path.exists():
                self._config = self._load_from_file(path)
                self._config_path = path
                return self._config

        self._config = Config()
        return self._config

    def _load_from_file(self, path: Path) -> Config:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("expected a JSON object")
            return Config.from_dict(data)
        except (json.JSONDecodeError, ValueError, IOError) as e:
            print(f"Config warning: Could not load {path}: {e}", file=sys.stderr)
            return Config()

    def save(self, config: Config, global_config: bool = True) -> Path:
        path = Path.home() / self.CONFIG_FILENAME if global_config else Path.cwd() / self.CONFIG_FILENAME
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(config.to_dict(), f, indent=2)
        return path

    def get_config_path(self) -> Optional[Path]:
        return self._config_path


_manager = ConfigManager()


def load_config() -> Config:
    return _manager.load()


def get_config_path() -> Optional[Path]:
    return _manager.get_config_path()


__all__ = [
    "Config",
    "ConfigManager",
    "load_config",
    "get_config_path",
    "VALID_PROVIDERS",
    "ENV_OVERRIDES",
]
