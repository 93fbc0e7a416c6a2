"""
Tests for record-driven credential maps.
"""
import logging

import pytest

from recordhttp.credentials import CredentialMap, resolve
from recordhttp.errors import ConfigurationError


class TestCredentialMap:
    """Parsing of the configured JSON maps."""

    def test_parse_object(self):
        usernames = CredentialMap.parse("Username", '{"291":"u1","415":"u2"}')
        assert dict(usernames) == {"291": "u1", "415": "u2"}
        assert usernames.kind == "Username"

    def test_unset_is_none(self):
        assert CredentialMap.parse("Username", None) is None
        assert CredentialMap.parse("Username", "   ") is None

    def test_malformed_json(self):
        with pytest.raises(ConfigurationError) as exc_info:
            CredentialMap.parse("Password", "{'291': 'x'")
        assert "Password is not a valid JSON" in str(exc_info.value)

    @pytest.mark.parametrize("text", ['"just a string"', "[1, 2]", "42"])
    def test_non_object_rejected(self, text):
        with pytest.raises(ConfigurationError):
            CredentialMap.parse("Username", text)

    def test_values_become_strings_and_nulls_drop(self):
        tokens = CredentialMap.parse("Authorization token", '{"1": 12345, "2": null}')
        assert dict(tokens) == {"1": "12345"}

    def test_repr_hides_secrets(self):
        passwords = CredentialMap.parse("Password", '{"291":"s3cret"}')
        assert "s3cret" not in repr(passwords)
        assert "291" in repr(passwords)


class TestResolve:
    """Per-record lookup."""

    @pytest.fixture
    def usernames(self):
        return CredentialMap.parse("Username", '{"291":"u1","415":"u2"}')

    def test_found(self, usernames):
        assert resolve(usernames, "291") == "u1"
        assert resolve(usernames, "415") == "u2"

    def test_missing_key_is_absent_and_warned(self, usernames, caplog):
        with caplog.at_level(logging.WARNING, logger="recordhttp.credentials"):
            assert resolve(usernames, "999") is None
        assert "Unable to find Username" in caplog.text
        assert "999" in caplog.text

    def test_missing_lookup_value(self, usernames):
        assert resolve(usernames, None) is None

    def test_unused_kind(self):
        assert resolve(None, "291") is None
