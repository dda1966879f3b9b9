"""Tests for outbound and inbound path sanitization."""
import os

import pytest

from core.utils.paths import (
    is_within,
    sanitize_directory_name,
    sanitize_extract_path,
    sanitize_tar_path,
)


def native(*parts):
    return os.path.join(*parts)


class TestSanitizeTarPath:

    def test_plain_relative_path_is_kept(self):
        assert sanitize_tar_path("docs/report.txt") == "docs/report.txt"

    def test_drive_letter_and_backslashes(self):
        assert sanitize_tar_path("C:\\Users\\me\\file.txt") == "Users/me/file.txt"

    def test_leading_separators_are_removed(self):
        assert sanitize_tar_path("///etc/hosts") == "etc/hosts"
        assert sanitize_tar_path("\\\\server\\share") == "server/share"

    def test_invalid_characters_are_replaced(self):
        assert sanitize_tar_path('dir/a<b>c:d"e|f?g*h') == "dir/a_b_c_d_e_f_g_h"


class TestSanitizeExtractPath:

    @pytest.mark.parametrize("name", [
        "../../etc/passwd",
        "..\\..\\x",
        "a/../../b",
        "a/..",
        "C:\\..\\x",
    ])
    def test_traversal_is_rejected(self, name):
        assert sanitize_extract_path(name) is None

    def test_nul_byte_is_rejected(self):
        assert sanitize_extract_path("dir/a\x00b.txt") is None

    @pytest.mark.parametrize("name", ["/etc/passwd", "\\Windows\\x.txt"])
    def test_rooted_names_are_rejected(self, name):
        assert sanitize_extract_path(name) is None

    @pytest.mark.parametrize("name", ["", ".", "...", "C:", "C:\\"])
    def test_empty_or_dot_names_are_rejected(self, name):
        assert sanitize_extract_path(name) is None

    def test_drive_letter_is_stripped(self):
        assert sanitize_extract_path("C:\\Windows\\x.txt") == native("Windows", "x.txt")
        assert sanitize_extract_path("d:/data/y.bin") == native("data", "y.bin")

    def test_dot_segments_and_trailing_slash(self):
        assert sanitize_extract_path("./a//b/./c/") == native("a", "b", "c")

    def test_dots_inside_names_are_not_traversal(self):
        assert sanitize_extract_path("archive..old/v1...txt") == native("archive..old", "v1...txt")

    def test_restrictive_charset_replaces_characters(self):
        assert sanitize_extract_path("a:b*c.txt", restrictive=True) == "a_b_c.txt"
        assert sanitize_extract_path("dir/q?.txt", restrictive=True) == native("dir", "q_.txt")

    def test_permissive_charset_keeps_characters(self):
        assert sanitize_extract_path("a:b*c.txt", restrictive=False) == "a:b*c.txt"


class TestIsWithin:

    def test_child_is_within(self, tmp_path):
        assert is_within(str(tmp_path), str(tmp_path / "a" / "b"))

    def test_root_itself_is_not_within(self, tmp_path):
        assert not is_within(str(tmp_path), str(tmp_path))

    def test_sibling_with_common_prefix(self, tmp_path):
        assert not is_within(str(tmp_path / "out"), str(tmp_path / "out-evil" / "x"))

    def test_escaping_join(self, tmp_path):
        assert not is_within(str(tmp_path / "out"), os.path.join(str(tmp_path / "out"), "..", "x"))


class TestSanitizeDirectoryName:

    def test_separators_and_invalid_characters(self):
        assert sanitize_directory_name("my/dir:name") == "my_dir_name"

    def test_trims_spaces_and_dots(self):
        assert sanitize_directory_name("  ..backup.. ") == "backup"

    def test_empty_falls_back(self):
        assert sanitize_directory_name(" ... ") == "extracted"

    def test_length_is_limited(self):
        assert len(sanitize_directory_name("x" * 300)) == 100
