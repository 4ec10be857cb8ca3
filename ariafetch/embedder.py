"""Locate, validate and install the bundled aria2c executable."""

from __future__ import annotations

import os
import platform
from pathlib import Path

BINARY_DIR = Path(__file__).resolve().parent / "binaries"
APP_DIR_NAME = "aria2"

_INSTALLED_NAMES = {
    "windows": "aria2c.exe",
    "linux": "aria2c",
    "darwin": "aria2c",
}

_BUNDLED_FILES = {
    "windows": "aria2c.exe",
    "linux": "aria2c-linux",
    "darwin": "aria2c-darwin",
}


class UnsupportedPlatformError(RuntimeError):
    """Raised for an operating system with no bundled aria2c."""

    def __init__(self, system: str) -> None:
        super().__init__(f"unsupported platform: {system}")
        self.system = system


class BinaryMissingError(FileNotFoundError):
    """Raised when the bundled aria2c is absent or only a placeholder."""


def _platform_key(system: str | None) -> str:
    return (system or platform.system()).lower()


def get_embedded_binary_data(system: str | None = None) -> bytes:
    """Return the bundled aria2c bytes for *system* (empty if not shipped)."""
    key = _platform_key(system)
    try:
        filename = _BUNDLED_FILES[key]
    except KeyError:
        raise UnsupportedPlatformError(key) from None
    try:
        return (BINARY_DIR / filename).read_bytes()
    except FileNotFoundError:
        return b""


def get_embedded_binary_name(system: str | None = None) -> str:
    """Return the file name aria2c is installed under on *system*."""
    key = _platform_key(system)
    try:
        return _INSTALLED_NAMES[key]
    except KeyError:
        raise UnsupportedPlatformError(key) from None


def check_binary_exists(system: str | None = None) -> None:
    """Raise BinaryMissingError unless a real aria2c binary is bundled."""
    if len(get_embedded_binary_data(system)) <= 2:
        raise BinaryMissingError(
            "aria2c binary not found - run the download script first"
        )


def get_app_data_dir(system: str | None = None) -> Path:
    """Return the per-user directory that holds the installed aria2c."""
    key = _platform_key(system)
    if key == "windows":
        local = os.environ.get("LOCALAPPDATA", "")
        base = Path(local) if local else Path.home() / "AppData" / "Local"
    elif key == "darwin":
        base = Path.home() / "Library" / "Application Support"
    elif key == "linux":
        xdg = os.environ.get("XDG_DATA_HOME", "")
        base = Path(xdg) if xdg else Path.home() / ".local" / "share"
    else:
        raise UnsupportedPlatformError(key)
    return base / APP_DIR_NAME


def extract_binary(system: str | None = None) -> Path:
    """Install the bundled aria2c into the app data directory and return its path.

    An already installed binary is reused as is.
    """
    name = get_embedded_binary_name(system)
    app_dir = get_app_data_dir(system)
    binary_path = app_dir / name
    if binary_path.exists():
        return binary_path

    check_binary_exists(system)
    app_dir.mkdir(mode=0o755, parents=True, exist_ok=True)
    binary_path.write_bytes(get_embedded_binary_data(system))
    binary_path.chmod(0o755)
    return binary_path