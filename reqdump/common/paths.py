"""Shared filesystem helpers for configuration storage."""

from pathlib import Path


def get_app_dir() -> Path:
    """Return the reqdump configuration directory under the user's home."""

    return Path.home() / '.reqdump'


__all__ = ['get_app_dir']
