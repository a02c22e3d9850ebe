from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from .errors import ConfigError

CONFIG_DIR = ".cursor"
IGNORE_FILE = ".cursorignore"
README_FILE = "README.md"
SETTINGS_FILE = ".cursor-deploy.yml"

SOURCE_ENVVAR = "CURSOR_DEPLOY_SOURCE"

# Never copied by the top-level file pass.
EXCLUDED_NAMES = frozenset(
    {
        "deploy.sh",
        "deploy.py",
        ".git",
        CONFIG_DIR,
        IGNORE_FILE,
        README_FILE,
        SETTINGS_FILE,
    }
)


@dataclass(frozen=True)
class DeploySettings:
    exclude: frozenset[str] = frozenset()


def templates_root() -> Path:
    return Path(__file__).resolve().parent / "template"


def load_settings(source_root: Path) -> DeploySettings:
    marker = source_root / SETTINGS_FILE
    if not marker.is_file():
        return DeploySettings()

    try:
        data = yaml.safe_load(marker.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as error:
        raise ConfigError(f"Invalid YAML in {marker}: {error}") from error

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping in {marker}")

    exclude = data.get("exclude") or []
    if not isinstance(exclude, list) or not all(isinstance(item, str) for item in exclude):
        raise ConfigError(f"'exclude' must be a list of file names in {marker}")

    return DeploySettings(exclude=frozenset(item.strip() for item in exclude if item.strip()))
