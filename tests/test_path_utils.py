"""Tests for path mapping."""

import sys
from pathlib import Path

import pytest

from dynhelp.path_utils import get_app_root, map_path


def test_map_path_tilde_with_subpath():
    """Test mapping tilde with subpath."""
    result = map_path("~/test/path")
    expected = str(Path.home().resolve() / "test/path")
    assert result == expected


def test_map_path_tilde_alone():
    result = map_path("~")
    assert result == str(Path.home().resolve())


def test_map_path_at_points_at_bundled_catalog():
    """Test mapping @ into the package directory."""
    result = map_path("@/catalog/builtin.json")
    assert result == str(get_app_root() / "catalog" / "builtin.json")
    assert Path(result).is_file()


def test_map_path_at_alone():
    assert map_path("@") == str(get_app_root())


def test_map_path_absolute(tmp_path):
    abs_path = str(tmp_path / "profile.json")
    assert map_path(abs_path) == str(Path(abs_path).resolve())


def test_map_path_relative_error():
    """Test relative paths without prefix are rejected."""
    with pytest.raises(ValueError, match="Relative paths without prefix"):
        map_path("relative/path.json")


@pytest.mark.parametrize("path", ["~/../outside", "@/../../outside"])
def test_map_path_rejects_escaping_prefix_root(path):
    with pytest.raises(ValueError, match="escapes"):
        map_path(path)


def test_map_path_rejects_nul_character():
    with pytest.raises(ValueError, match="NUL"):
        map_path("~/bad\x00name")


@pytest.mark.skipif(sys.platform == "win32", reason="Windows paths are valid on Windows")
def test_map_path_rejects_windows_paths_on_posix():
    with pytest.raises(ValueError, match="Windows absolute paths"):
        map_path("C:\\Users\\me\\profile.json")
