"""
Exception types raised by cursor-deploy.

The CLI maps each subclass to a stable error code; anything else is a bug.
"""

from __future__ import annotations


class DeployError(RuntimeError):
    """Base class for deployment failures."""


class TemplateError(DeployError):
    """Raised when the template source tree is missing or unusable."""


class ConfigError(DeployError):
    """Raised when the template settings file cannot be used."""


class CopyError(DeployError):
    """Raised when creating the destination or copying a template entry fails."""


class GitError(DeployError):
    """Raised when git repository initialization fails."""
