"""Tests for the PKGBUILD parser."""

import pytest

from aurkit.core.errors import (
    EmptyInputError,
    ErrorKind,
    MalformedDependencyError,
    UnbalancedDelimiterError,
)
from aurkit.parsers.depends import Comparator
from aurkit.parsers.pkgbuild import extract_fields, parse_pkgbuild, unquote_bash


# ═══════════════════════════════════════════
# Value Unquoting
# ═══════════════════════════════════════════


class TestUnquoteBash:
    def test_single_quoted(self):
        assert unquote_bash("'firefox'") == "firefox"

    def test_double_quoted(self):
        assert unquote_bash('"firefox"') == "firefox"

    def test_unquoted(self):
        assert unquote_bash("128.0") == "128.0"

    def test_strips_one_layer_only(self):
        assert unquote_bash("\"'x'\"") == "'x'"

    def test_empty_quotes(self):
        assert unquote_bash('""') == ""

    def test_mismatched_quotes_untouched(self):
        assert unquote_bash("'x\"") == "'x\""

    def test_no_escape_interpretation(self):
        assert unquote_bash(r'"a\tb"') == r"a\tb"

    def test_bare_array(self):
        assert unquote_bash("(a b c)") == ["a", "b", "c"]

    def test_array_words_unquoted(self):
        assert unquote_bash("('glib2' \"gtk3>=3.24\" cairo)") == ["glib2", "gtk3>=3.24", "cairo"]

    def test_array_splits_quoted_word_on_whitespace(self):
        assert unquote_bash("('a b' c)") == ["'a", "b'", "c"]
        assert unquote_bash("('hunspell: spell checking' 'x')") == [
            "'hunspell:",
            "spell",
            "checking'",
            "x",
        ]

    def test_multiline_array(self):
        assert unquote_bash("(\n    'cmake'\n    'meson'\n)") == ["cmake", "meson"]

    def test_empty_array(self):
        assert unquote_bash("()") == []


# ═══════════════════════════════════════════
# Field Extraction
# ═══════════════════════════════════════════


class TestExtractFields:
    def test_basic_fields(self):
        content = "pkgname=foo\npkgver=1.0\ndepends=('bar' 'baz>=2')"
        fields = extract_fields(content)
        assert fields["pkgname"] == "foo"
        assert fields["pkgver"] == "1.0"
        assert fields["depends"] == ["bar", "baz>=2"]

    def test_quoted_form_wins_over_bare(self):
        content = "pkgdesc=bare\npkgdesc='quoted description'\n"
        assert extract_fields(content)["pkgdesc"] == "quoted description"

    def test_quoted_form_wins_regardless_of_order(self):
        content = "pkgdesc='quoted description'\npkgdesc=bare\n"
        assert extract_fields(content)["pkgdesc"] == "quoted description"

    def test_array_wins_over_quoted(self):
        content = "license='MIT'\nlicense=('GPL' 'MIT')\n"
        assert extract_fields(content)["license"] == ["GPL", "MIT"]

    def test_unrecognized_fields_ignored(self):
        content = "_pkgname=foo\nfoo=bar\nmyvar='x'\npkgname=real"
        fields = extract_fields(content)
        assert "foo" not in fields
        assert "myvar" not in fields
        assert fields["pkgname"] == "real"

    def test_depends_and_conflicts_default_empty(self):
        fields = extract_fields("pkgname=minimal\npkgver=1.0")
        assert fields["depends"] == []
        assert fields["conflicts"] == []

    def test_nested_parentheses_balanced(self):
        content = "source=('foo(bar).tar.gz' 'x')\npkgrel=2"
        fields = extract_fields(content)
        assert fields["source"] == ["foo(bar).tar.gz", "x"]
        assert fields["pkgrel"] == "2"

    def test_bare_value_starting_with_symbol_skipped(self):
        fields = extract_fields("pkgname=$_name\n")
        assert "pkgname" not in fields

    def test_source_url_with_equals(self):
        content = 'url="https://example.org/?a=b"\nsource=("$pkgname.tar.gz::https://x.org/dl?id=3")'
        fields = extract_fields(content)
        assert fields["url"] == "https://example.org/?a=b"
        assert fields["source"] == ["$pkgname.tar.gz::https://x.org/dl?id=3"]

    def test_unbalanced_recognized_field_raises(self):
        with pytest.raises(UnbalancedDelimiterError) as exc_info:
            extract_fields("pkgname=foo\ndepends=('bar'\n")
        assert exc_info.value.field == "depends"
        assert exc_info.value.kind is ErrorKind.UNBALANCED_DELIMITER

    def test_unbalanced_quote_raises(self):
        with pytest.raises(UnbalancedDelimiterError):
            extract_fields('pkgdesc="never closed\n')

    def test_unbalanced_unrecognized_field_ignored(self):
        fields = extract_fields("pkgname=foo\nbuild() {\n  local x=(\n}\n")
        assert fields["pkgname"] == "foo"


# ═══════════════════════════════════════════
# Full PKGBUILD Parse
# ═══════════════════════════════════════════


class TestParsePkgbuild:
    def test_complete_pkgbuild(self):
        content = """
# Maintainer: Someone <someone@example.org>
pkgname='firefox'
pkgver=128.0
pkgrel=1
pkgdesc='Standalone web browser from mozilla.org'
arch=('x86_64')
url="https://www.mozilla.org/firefox/"
license=('MPL-2.0')
depends=('glib2' 'gtk3>=3.24' 'libx11')
makedepends=('cmake' 'python' 'nasm')
optdepends=('hunspell: spell checking')
conflicts=('firefox-bin')
sha256sums=('SKIP')

build() {
  cd "$srcdir/$pkgname-$pkgver"
  make
}
        """
        info = parse_pkgbuild(content)
        assert info.pkgname == "firefox"
        assert info.pkgver == "128.0"
        assert info.pkgrel == "1"
        assert info["pkgdesc"] == "Standalone web browser from mozilla.org"
        assert info.arch == ["x86_64"]
        assert info["url"] == "https://www.mozilla.org/firefox/"
        assert info["makedepends"] == ["cmake", "python", "nasm"]
        assert info["optdepends"] == ["'hunspell:", "spell", "checking'"]
        assert info.conflicts == ["firefox-bin"]
        assert [spec.package for spec in info.depends] == ["glib2", "gtk3", "libx11"]
        assert info.depends[1].comparator is Comparator.GE
        assert info.depends[1].version == "3.24"

    def test_raw_depends_kept_in_fields(self):
        info = parse_pkgbuild("pkgname=a\ndepends=('b>=1')")
        assert info.fields["depends"] == ["b>=1"]
        assert info["depends"][0].package == "b"

    def test_minimal_pkgbuild(self):
        info = parse_pkgbuild("pkgname='minimal'\npkgver=1.0\n")
        assert info.pkgname == "minimal"
        assert info.depends == []
        assert info.conflicts == []
        assert info.get("makedepends") is None

    def test_scalar_depends(self):
        info = parse_pkgbuild("pkgname=a\ndepends=glibc")
        assert [spec.package for spec in info.depends] == ["glibc"]

    def test_malformed_dependency_raises(self):
        with pytest.raises(MalformedDependencyError):
            parse_pkgbuild("pkgname=a\ndepends=('Foo' 'bar')")

    def test_malformed_dependency_skipped_when_lenient(self):
        info = parse_pkgbuild("pkgname=a\ndepends=('Foo' 'bar')", strict=False)
        assert [spec.package for spec in info.depends] == ["bar"]

    @pytest.mark.parametrize("content", ["", "   \n\t", None])
    def test_empty_input(self, content):
        with pytest.raises(EmptyInputError):
            parse_pkgbuild(content)

    def test_to_dict(self):
        info = parse_pkgbuild("pkgname=a\ndepends=('b=2')")
        data = info.to_dict()
        assert data["pkgname"] == "a"
        assert data["depends"] == [{"package": "b", "comparator": "=", "version": "2", "raw": "b=2"}]
