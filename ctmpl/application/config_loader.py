from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from ctmpl.domain.models.engine_config import EngineConfig


class ConfigLoadError(Exception):
    def __init__(self, message: str, *, path: Path | None = None, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path
        self.cause = cause

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.message}: {self.path}"


def _defaults() -> dict[str, Any]:
    return EngineConfig().model_dump()


def _deep_merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """
    Deep-merge mapping keys. For non-dict values, overlay wins.
    """
    merged: dict[str, Any] = dict(base)
    for k, v in overlay.items():
        if isinstance(v, dict) and isinstance(merged.get(k), dict):
            merged[k] = _deep_merge(merged[k], v)  # type: ignore[arg-type]
        else:
            merged[k] = v
    return merged


def load_yaml_mapping(path: Path, *, error_cls: type[ConfigLoadError] = ConfigLoadError) -> dict[str, Any]:
    """
    Load YAML file and ensure root is a mapping. A missing file is an empty mapping.
    """
    # Protect against TOCTOU race conditions.
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except Exception as e:  # pragma: no cover
        raise error_cls("Failed to read file", path=path, cause=e) from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise error_cls("Malformed YAML", path=path, cause=e) from e

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise error_cls("YAML root must be a mapping", path=path)

    return data


def load_config(*, project_root: Path | None = None, user_home: Path | None = None) -> EngineConfig:
    """
    Load and merge config with precedence (highest wins):
    project > user > defaults.

    Files:
      - user:    user_home/.ctmpl/config.yml
      - project: project_root/.ctmpl/config.yml
    """
    project_root = project_root or Path.cwd()
    user_home = user_home or Path.home()

    cfg: dict[str, Any] = _defaults()

    user_path = user_home / ".ctmpl" / "config.yml"
    cfg = _deep_merge(cfg, load_yaml_mapping(user_path))

    project_path = project_root / ".ctmpl" / "config.yml"
    cfg = _deep_merge(cfg, load_yaml_mapping(project_path))

    try:
        return EngineConfig.model_validate(cfg)
    except ValidationError as e:
        raise ConfigLoadError(f"Invalid engine config ({e.error_count()} errors)", cause=e) from e
