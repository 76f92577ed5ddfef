"""Tests for core/bundle_info.py - bundles.info line model."""

import pytest

from dropins_manager.core.bundle_info import (
    DEFAULT_START_LEVEL,
    BundleInfo,
    BundleInfoFormatError,
    format_lines,
    is_comment,
)


class TestFromLine:

    def test_parses_regular_bundle(self):
        info = BundleInfo.from_line("org.example.a,1.0.0,../../dropins/a.jar,4,true")
        assert info.symbolic_name == "org.example.a"
        assert info.version == "1.0.0"
        assert info.location == "../../dropins/a.jar"
        assert info.start_level == 4
        assert info.is_fragment is False

    def test_not_started_means_fragment(self):
        info = BundleInfo.from_line("org.example.f,1.0.0,plugins/f.jar,4,false")
        assert info.is_fragment is True

    def test_trims_whitespace(self):
        info = BundleInfo.from_line(" org.example.a , 1.0 , plugins/a.jar , 2 , true ")
        assert info.symbolic_name == "org.example.a"
        assert info.location == "plugins/a.jar"
        assert info.start_level == 2

    @pytest.mark.parametrize("line", [
        "org.example.a,1.0.0,plugins/a.jar,4",
        "org.example.a,1.0.0,plugins/a.jar,4,true,extra",
        "garbage",
        "",
    ])
    def test_wrong_field_count(self, line):
        with pytest.raises(BundleInfoFormatError):
            BundleInfo.from_line(line)

    def test_non_integer_start_level(self):
        with pytest.raises(BundleInfoFormatError, match="start level"):
            BundleInfo.from_line("org.example.a,1.0.0,plugins/a.jar,four,true")

    def test_non_boolean_started_flag(self):
        with pytest.raises(BundleInfoFormatError, match="started flag"):
            BundleInfo.from_line("A,1.0,../plugins/a.jar,4,garbage")

    def test_started_flag_ignores_case(self):
        assert BundleInfo.from_line("a,1.0,plugins/a.jar,4,FALSE").is_fragment is True
        assert BundleInfo.from_line("a,1.0,plugins/a.jar,4,True").is_fragment is False

    def test_empty_symbolic_name(self):
        with pytest.raises(BundleInfoFormatError):
            BundleInfo.from_line(",1.0.0,plugins/a.jar,4,true")


class TestToLine:

    def test_regular_bundle_is_started(self):
        info = BundleInfo("a", "1.0", "../../dropins/a.jar")
        assert info.to_line() == "a,1.0,../../dropins/a.jar,4,true"

    def test_fragment_is_not_started(self):
        info = BundleInfo("f", "1.0", "../../dropins/f.jar", is_fragment=True)
        assert info.to_line() == "f,1.0,../../dropins/f.jar,4,false"

    def test_default_start_level(self):
        assert BundleInfo("a", "1.0", "x.jar").start_level == DEFAULT_START_LEVEL == 4

    def test_line_survives_parsing(self):
        line = "org.eclipse.osgi,3.10.2,plugins/org.eclipse.osgi.jar,1,true"
        assert BundleInfo.from_line(line).to_line() == line

    def test_str_is_line(self):
        info = BundleInfo("a", "1.0", "x.jar")
        assert str(info) == info.to_line()

    def test_format_lines_keeps_order(self):
        bundles = [BundleInfo("b", "1", "b.jar"), BundleInfo("a", "1", "a.jar")]
        assert format_lines(bundles) == ["b,1,b.jar,4,true", "a,1,a.jar,4,true"]


class TestIsFromDropins:

    def test_dropins_location(self):
        assert BundleInfo("a", "1", "../../dropins/a.jar").is_from_dropins()

    def test_plugins_location(self):
        assert not BundleInfo("a", "1", "../plugins/a.jar").is_from_dropins()

    def test_similar_prefix_is_not_dropins(self):
        assert not BundleInfo("a", "1", "../../dropins-old/a.jar").is_from_dropins()

    def test_custom_prefix(self):
        info = BundleInfo("a", "1", "extensions/a.jar")
        assert info.is_from_dropins("extensions")
        assert info.is_from_dropins("extensions/")
        assert not info.is_from_dropins()


class TestMatches:

    def test_same_identity_different_location(self):
        a = BundleInfo("a", "1.0", "one.jar")
        b = BundleInfo("a", "1.0", "two.jar", start_level=6)
        assert a.matches(b)

    def test_different_version(self):
        assert not BundleInfo("a", "1.0", "a.jar").matches(BundleInfo("a", "2.0", "a.jar"))

    def test_different_fragmentness(self):
        assert not BundleInfo("a", "1.0", "a.jar").matches(BundleInfo("a", "1.0", "a.jar", is_fragment=True))


class TestHelpers:

    def test_display_name(self):
        assert BundleInfo("org.example.a", "1.2.3", "x.jar").display_name == "org.example.a_1.2.3.jar"

    def test_is_comment(self):
        assert is_comment("#version=1")
        assert not is_comment("a,1,a.jar,4,true")
        assert not is_comment(" #indented")
