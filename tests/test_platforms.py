from unittest.mock import patch

import pytest

from deno_bridge.binaries.platforms import (
    get_binary_extension,
    get_binary_name,
    get_platform_info,
)


@pytest.mark.parametrize(
    "system,machine,target",
    [
        ("Linux", "x86_64", "x86_64-unknown-linux-gnu"),
        ("Linux", "aarch64", "aarch64-unknown-linux-gnu"),
        ("Darwin", "arm64", "aarch64-apple-darwin"),
        ("Darwin", "x86_64", "x86_64-apple-darwin"),
        ("Windows", "AMD64", "x86_64-pc-windows-msvc"),
    ],
)
def test_get_platform_info(system, machine, target):
    """Test platform maps to the release target triple"""
    with patch("platform.system", return_value=system), \
         patch("platform.machine", return_value=machine):
        info = get_platform_info()

    assert info.target == target
    assert info.os_name == system.lower()


def test_get_platform_info_unsupported_os():
    with patch("platform.system", return_value="Plan9"), \
         patch("platform.machine", return_value="x86_64"):
        with pytest.raises(RuntimeError, match="Unsupported operating system"):
            get_platform_info()


def test_get_platform_info_unsupported_arch():
    with patch("platform.system", return_value="Linux"), \
         patch("platform.machine", return_value="mips"):
        with pytest.raises(RuntimeError, match="Unsupported architecture"):
            get_platform_info()


def test_get_binary_extension():
    """Test executable suffix per platform"""
    assert get_binary_extension("Windows") == ".exe"
    assert get_binary_extension("Linux") == ""
    assert get_binary_extension("Darwin") == ""
    assert get_binary_name("deno", "Windows") == "deno.exe"
    assert get_binary_name("deno", "Linux") == "deno"
