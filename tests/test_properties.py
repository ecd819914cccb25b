"""Tests for the application.properties parser."""

import pytest

from workflowproj import ValidationError, parse_properties


class TestSeparators:
    """Tests for the three key/value separator forms."""

    def test_equals(self):
        assert parse_properties("a=b") == {"a": "b"}

    def test_colon(self):
        assert parse_properties("a: b") == {"a": "b"}

    def test_whitespace(self):
        assert parse_properties("a   b") == {"a": "b"}

    def test_spaces_around_equals(self):
        assert parse_properties("key = value with spaces") == {"key": "value with spaces"}

    def test_key_without_value(self):
        assert parse_properties("flag") == {"flag": ""}

    def test_value_keeps_later_separators(self):
        assert parse_properties("url=http://host:8080/a=b") == {"url": "http://host:8080/a=b"}


class TestLines:
    """Tests for comments, blank lines and continuations."""

    def test_comments_and_blank_lines(self):
        text = "# comment\n\n! bang comment\n   \nname=value\n"
        assert parse_properties(text) == {"name": "value"}

    def test_continuation(self):
        text = "origins=a,\\\n    b,\\\n    c\n"
        assert parse_properties(text) == {"origins": "a,b,c"}

    def test_escaped_backslash_is_not_continuation(self):
        text = "path=C:\\\\\nnext=1\n"
        assert parse_properties(text) == {"path": "C:\\", "next": "1"}

    def test_later_key_overrides(self):
        assert parse_properties("a=1\nb=2\na=3") == {"a": "3", "b": "2"}

    def test_fixture_file(self, workflow_properties):
        entries = parse_properties(workflow_properties.read_text(encoding="utf-8"))
        assert entries["quarkus.rest-client.greet.url"] == "http://localhost:8080"
        assert entries["quarkus.http.cors.origins"] == "http://localhost:3000,http://localhost:4000"
        assert len(entries) == 4


class TestEscapes:
    """Tests for escape sequences."""

    def test_escaped_separator_in_key(self):
        assert parse_properties("a\\=b=c") == {"a=b": "c"}

    def test_control_escapes(self):
        assert parse_properties("msg=line1\\nline2\\tend") == {"msg": "line1\nline2\tend"}

    def test_unicode_escape(self):
        assert parse_properties("greeting=caf\\u00e9") == {"greeting": "caf\u00e9"}

    def test_malformed_unicode_escape(self):
        with pytest.raises(ValidationError, match="line 1"):
            parse_properties("bad=\\u12")


def test_empty_key_is_rejected():
    with pytest.raises(ValidationError, match="empty key"):
        parse_properties("ok=1\n=orphan\n")
