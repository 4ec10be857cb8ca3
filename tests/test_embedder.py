from pathlib import Path

import pytest

from ariafetch import embedder
from ariafetch.embedder import (
    BinaryMissingError,
    UnsupportedPlatformError,
    check_binary_exists,
    extract_binary,
    get_app_data_dir,
    get_embedded_binary_data,
    get_embedded_binary_name,
)


@pytest.fixture
def home(tmp_path, monkeypatch):
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    monkeypatch.setenv("HOME", str(home_dir))
    monkeypatch.setenv("USERPROFILE", str(home_dir))
    monkeypatch.delenv("XDG_DATA_HOME", raising=False)
    monkeypatch.delenv("LOCALAPPDATA", raising=False)
    return home_dir


@pytest.mark.parametrize(
    "system, name",
    [("windows", "aria2c.exe"), ("linux", "aria2c"), ("darwin", "aria2c"), ("Linux", "aria2c")],
)
def test_binary_name_per_platform(system, name):
    assert get_embedded_binary_name(system) == name


@pytest.mark.parametrize(
    "func",
    [get_embedded_binary_name, get_embedded_binary_data, get_app_data_dir, check_binary_exists],
)
def test_unsupported_platform(func):
    with pytest.raises(UnsupportedPlatformError) as info:
        func("plan9")
    assert info.value.system == "plan9"


def test_embedded_data_matches_bundle_directory():
    bundled = embedder.BINARY_DIR / "aria2c-linux"
    expected = bundled.read_bytes() if bundled.exists() else b""
    assert get_embedded_binary_data("linux") == expected


def test_linux_uses_xdg_data_home(home, tmp_path, monkeypatch):
    xdg = tmp_path / "xdg"
    monkeypatch.setenv("XDG_DATA_HOME", str(xdg))
    assert get_app_data_dir("linux") == xdg / "aria2"


def test_linux_defaults_to_local_share(home):
    assert get_app_data_dir("linux") == Path(home) / ".local" / "share" / "aria2"


def test_darwin_application_support(home):
    assert get_app_data_dir("darwin") == Path(home) / "Library" / "Application Support" / "aria2"


def test_windows_uses_localappdata(home, tmp_path, monkeypatch):
    local = tmp_path / "local"
    monkeypatch.setenv("LOCALAPPDATA", str(local))
    assert get_app_data_dir("windows") == local / "aria2"


def test_windows_falls_back_to_home(home):
    assert get_app_data_dir("windows") == Path(home) / "AppData" / "Local" / "aria2"


def test_extract_reuses_installed_binary(home, tmp_path, monkeypatch):
    xdg = tmp_path / "xdg"
    monkeypatch.setenv("XDG_DATA_HOME", str(xdg))
    installed = xdg / "aria2" / "aria2c"
    installed.parent.mkdir(parents=True)
    installed.write_bytes(b"already here")

    assert extract_binary("linux") == installed
    assert installed.read_bytes() == b"already here"


def test_extract_without_bundled_binary(home, tmp_path, monkeypatch):
    if len(get_embedded_binary_data("linux")) > 2:
        xdg = tmp_path / "xdg"
        monkeypatch.setenv("XDG_DATA_HOME", str(xdg))
        path = extract_binary("linux")
        assert path.read_bytes() == get_embedded_binary_data("linux")
    else:
        with pytest.raises(BinaryMissingError):
            extract_binary("linux")
        assert not (Path(home) / ".local" / "share" / "aria2" / "aria2c").exists()