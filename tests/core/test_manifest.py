"""Tests for core/manifest.py - Bundle manifest reader."""

import zipfile
from unittest.mock import patch

import pytest

from dropins_manager.core.manifest import (
    InvalidBundleError,
    parse_main_attributes,
    read_bundle_info,
    read_manifest,
    strip_directives,
)


# ===========================================================================
# Manifest parsing
# ===========================================================================
class TestParseMainAttributes:

    def test_parses_headers(self):
        text = "Manifest-Version: 1.0\nBundle-SymbolicName: org.example.a\nBundle-Version: 1.0.0\n"
        attrs = parse_main_attributes(text)
        assert attrs == {
            "Manifest-Version": "1.0",
            "Bundle-SymbolicName": "org.example.a",
            "Bundle-Version": "1.0.0",
        }

    def test_handles_crlf(self):
        attrs = parse_main_attributes("Bundle-Version: 2.0\r\nBundle-SymbolicName: b\r\n\r\n")
        assert attrs["Bundle-Version"] == "2.0"
        assert attrs["Bundle-SymbolicName"] == "b"

    def test_joins_continuation_lines(self):
        text = "Bundle-SymbolicName: org.example.very.long.sym\n bolic.name\nBundle-Version: 1\n"
        attrs = parse_main_attributes(text)
        assert attrs["Bundle-SymbolicName"] == "org.example.very.long.symbolic.name"

    def test_stops_at_first_blank_line(self):
        text = "Bundle-Version: 1\n\nName: org/example/\nBundle-SymbolicName: per.entry\n"
        attrs = parse_main_attributes(text)
        assert attrs == {"Bundle-Version": "1"}

    def test_empty_text(self):
        assert parse_main_attributes("") == {}

    def test_ignores_lines_without_separator(self):
        attrs = parse_main_attributes("junk line\nBundle-Version: 1\n")
        assert attrs == {"Bundle-Version": "1"}


class TestStripDirectives:

    def test_strips_singleton(self):
        assert strip_directives("com.example.acme;singleton:=true") == "com.example.acme"

    def test_plain_name_unchanged(self):
        assert strip_directives("com.example.acme") == "com.example.acme"

    def test_multiple_parameters(self):
        assert strip_directives("a.b; singleton:=true; fragment-attachment:=never") == "a.b"


# ===========================================================================
# Archive reading
# ===========================================================================
class TestReadManifest:

    def test_reads_main_attributes(self, tmp_path, make_bundle):
        jar = make_bundle(tmp_path / "a.jar", symbolic_name="a", version="1.0")
        attrs = read_manifest(jar)
        assert attrs["Bundle-SymbolicName"] == "a"
        assert attrs["Bundle-Version"] == "1.0"

    def test_missing_manifest(self, tmp_path, make_bundle):
        jar = make_bundle(tmp_path / "a.jar", with_manifest=False)
        with pytest.raises(InvalidBundleError, match="Invalid bundle"):
            read_manifest(jar)

    def test_empty_manifest(self, tmp_path):
        jar = tmp_path / "empty.jar"
        with zipfile.ZipFile(jar, "w") as archive:
            archive.writestr("META-INF/MANIFEST.MF", "\r\n")
        with pytest.raises(InvalidBundleError):
            read_manifest(jar)

    def test_not_a_zip(self, tmp_path):
        jar = tmp_path / "broken.jar"
        jar.write_bytes(b"this is not a zip archive")
        with pytest.raises(InvalidBundleError, match="Not a valid bundle archive"):
            read_manifest(jar)

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            read_manifest(tmp_path / "missing.jar")


# ===========================================================================
# BundleInfo extraction
# ===========================================================================
class TestReadBundleInfo:

    def test_builds_bundle_info(self, tmp_path, make_bundle):
        jar = make_bundle(tmp_path / "acme-1.0.jar", symbolic_name="com.example.acme", version="1.0.0")
        info = read_bundle_info(jar)
        assert info.symbolic_name == "com.example.acme"
        assert info.version == "1.0.0"
        assert info.location == "../../dropins/acme-1.0.jar"
        assert info.start_level == 4
        assert info.is_fragment is False

    def test_strips_symbolic_name_parameters(self, tmp_path, make_bundle):
        jar = make_bundle(tmp_path / "a.jar", symbolic_name="com.example.acme;singleton:=true")
        assert read_bundle_info(jar).symbolic_name == "com.example.acme"

    def test_detects_fragment(self, tmp_path, make_bundle):
        jar = make_bundle(tmp_path / "f.jar", fragment_host="com.example.host")
        assert read_bundle_info(jar).is_fragment is True

    def test_header_names_ignore_case(self, tmp_path, make_bundle):
        jar = make_bundle(
            tmp_path / "f.jar",
            symbolic_name=None,
            version=None,
            extra_headers={"bundle-symbolicname": "com.example.frag", "BUNDLE-VERSION": "2.0", "fragment-host": "H"},
        )
        info = read_bundle_info(jar)
        assert info.symbolic_name == "com.example.frag"
        assert info.version == "2.0"
        assert info.is_fragment is True

    def test_custom_prefix_and_start_level(self, tmp_path, make_bundle):
        jar = make_bundle(tmp_path / "a.jar")
        info = read_bundle_info(jar, location_prefix="../ext/", start_level=7)
        assert info.location == "../ext/a.jar"
        assert info.start_level == 7

    def test_non_jar_is_not_applicable(self, tmp_path):
        readme = tmp_path / "README.txt"
        readme.write_text("not a bundle")
        assert read_bundle_info(readme) is None

    def test_missing_symbolic_name_is_not_applicable(self, tmp_path, make_bundle):
        jar = make_bundle(tmp_path / "a.jar", symbolic_name=None)
        with patch("dropins_manager.core.manifest.message") as mock_message:
            assert read_bundle_info(jar) is None
        assert "Required bundle manifest headers" in mock_message.call_args[0][0]

    def test_missing_version_is_not_applicable(self, tmp_path, make_bundle):
        jar = make_bundle(tmp_path / "a.jar", version=None)
        with patch("dropins_manager.core.manifest.message"):
            assert read_bundle_info(jar) is None

    def test_plain_jar_is_not_applicable(self, tmp_path, make_bundle):
        jar = make_bundle(tmp_path / "lib.jar", symbolic_name=None, version=None)
        with patch("dropins_manager.core.manifest.message"):
            assert read_bundle_info(jar) is None

    def test_missing_manifest_raises(self, tmp_path, make_bundle):
        jar = make_bundle(tmp_path / "a.jar", with_manifest=False)
        with pytest.raises(InvalidBundleError):
            read_bundle_info(jar)

    def test_archive_closed_after_failure(self, tmp_path):
        with patch("dropins_manager.core.manifest.zipfile.ZipFile") as mock_zip:
            archive = mock_zip.return_value.__enter__.return_value
            archive.read.side_effect = KeyError("META-INF/MANIFEST.MF")
            with pytest.raises(InvalidBundleError):
                read_manifest(tmp_path / "a.jar")
        mock_zip.return_value.__exit__.assert_called_once()
