from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from .config import (
    CONFIG_DIR,
    EXCLUDED_NAMES,
    IGNORE_FILE,
    README_FILE,
    DeploySettings,
    load_settings,
    templates_root,
)
from .errors import CopyError, DeployError, TemplateError
from .git import has_repository, init_repository

LOG = logging.getLogger(__name__)

ConfirmOverwrite = Callable[[Path], bool]


class GitStatus(str, Enum):
    initialized = "initialized"
    exists = "exists"
    skipped = "skipped"
    not_run = "not_run"


@dataclass(frozen=True)
class DeployOptions:
    destination: Path
    source_root: Path = templates_root()
    force: bool = False
    init_git: bool = True


@dataclass(frozen=True)
class DeployReport:
    source_root: Path
    destination: Path
    created: bool
    cancelled: bool
    copied: tuple[str, ...]
    git: GitStatus


def resolve_destination(raw: str | Path) -> Path:
    """
    Turn a user-supplied destination into an absolute path.

    The parent is resolved when it exists so the final component is kept
    as typed; otherwise the whole path is resolved best-effort.
    """
    path = Path(raw).expanduser()
    parent = path.parent
    if parent.is_dir():
        return parent.resolve() / path.name
    try:
        return path.resolve()
    except OSError:
        return Path(os.path.abspath(path))


def _validate_source(source_root: Path) -> Path:
    root = source_root.resolve()
    if not root.exists() or not root.is_dir():
        raise TemplateError(f"Template source does not exist: {root}")
    return root


def _extra_files(source: Path, settings: DeploySettings) -> list[Path]:
    # Dot files are left out, matching a shell `*` glob.
    excluded = EXCLUDED_NAMES | settings.exclude
    return sorted(
        path
        for path in source.iterdir()
        if path.is_file() and not path.name.startswith(".") and path.name not in excluded
    )


def _copy_entry(source: Path, destination: Path) -> None:
    target = destination / source.name
    try:
        if source.is_dir():
            shutil.copytree(source, target, dirs_exist_ok=True)
        else:
            shutil.copy2(source, target)
    except (OSError, shutil.Error) as error:
        raise CopyError(f"Failed to copy {source} to {target}: {error}") from error
    LOG.info("Copied %s", source.name)


def copy_template(source: Path, destination: Path, settings: DeploySettings) -> tuple[str, ...]:
    copied: list[str] = []

    config_dir = source / CONFIG_DIR
    if config_dir.is_dir():
        _copy_entry(config_dir, destination)
        copied.append(CONFIG_DIR)

    for name in (IGNORE_FILE, README_FILE):
        path = source / name
        if path.is_file():
            _copy_entry(path, destination)
            copied.append(name)

    for path in _extra_files(source, settings):
        _copy_entry(path, destination)
        copied.append(path.name)

    return tuple(copied)


def deploy_template(
    options: DeployOptions,
    confirm_overwrite: Optional[ConfirmOverwrite] = None,
) -> DeployReport:
    source = _validate_source(options.source_root)
    settings = load_settings(source)
    destination = options.destination

    created = not destination.exists()
    if not created:
        if not destination.is_dir():
            raise DeployError(f"Destination exists and is not a directory: {destination}")
        if not options.force:
            if confirm_overwrite is None:
                raise DeployError(f"Destination already exists: {destination}")
            if not confirm_overwrite(destination):
                LOG.info("Deployment to %s cancelled", destination)
                return DeployReport(
                    source_root=source,
                    destination=destination,
                    created=False,
                    cancelled=True,
                    copied=(),
                    git=GitStatus.not_run,
                )
    else:
        LOG.info("Creating destination directory %s", destination)
        try:
            destination.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            raise CopyError(f"Failed to create {destination}: {error}") from error

    copied = copy_template(source, destination, settings)

    if not options.init_git:
        git_status = GitStatus.skipped
    elif has_repository(destination):
        LOG.info("Git repository already exists in %s", destination)
        git_status = GitStatus.exists
    else:
        init_repository(destination)
        git_status = GitStatus.initialized

    return DeployReport(
        source_root=source,
        destination=destination,
        created=created,
        cancelled=False,
        copied=copied,
        git=git_status,
    )
