"""Tests for upload link parsing."""
import pytest

from catupload.links import (
    InvalidLinkError,
    build_upload_target,
    extract_identifier,
    is_valid_identifier,
    resolve_upload_target,
)
from catupload.models import DEFAULT_BASE_URL

IDENTIFIER = "0f8fad5b-d9cb-469f-a165-70867728950e"


def test_is_valid_identifier():
    assert is_valid_identifier(IDENTIFIER) is True
    assert is_valid_identifier(IDENTIFIER.upper()) is True
    assert is_valid_identifier("0f8fad5b-d9cb-469f-a165") is False
    assert is_valid_identifier(IDENTIFIER + "0") is False
    assert is_valid_identifier("zzzzzzzz-d9cb-469f-a165-70867728950e") is False
    assert is_valid_identifier("") is False
    assert is_valid_identifier(IDENTIFIER + "\n") is False


class TestExtractIdentifier:
    def test_bare_identifier(self):
        assert extract_identifier(f"  {IDENTIFIER} ") == IDENTIFIER

    def test_full_link(self):
        link = f"https://upload.example.com/{IDENTIFIER}"
        assert extract_identifier(link) == IDENTIFIER

    def test_trailing_slash_query_and_fragment(self):
        link = f"https://upload.example.com/{IDENTIFIER}/?ref=mail#top"
        assert extract_identifier(link) == IDENTIFIER

    def test_relative_path(self):
        assert extract_identifier(f"/{IDENTIFIER}?x=1") == IDENTIFIER

    @pytest.mark.parametrize("link", ["", "   ", "https://upload.example.com/", "/"])
    def test_no_identifier(self, link):
        with pytest.raises(InvalidLinkError):
            extract_identifier(link)


class TestBuildUploadTarget:
    def test_default_base_url(self):
        assert build_upload_target(IDENTIFIER) == f"{DEFAULT_BASE_URL}/{IDENTIFIER}"

    def test_custom_base_url(self):
        target = build_upload_target(IDENTIFIER, "https://api.example.com/upload/")
        assert target == f"https://api.example.com/upload/{IDENTIFIER}"

    def test_malformed_identifier(self):
        with pytest.raises(InvalidLinkError, match="invalid or malformed"):
            build_upload_target("not-a-uuid")

    def test_identifier_with_trailing_newline(self):
        with pytest.raises(InvalidLinkError, match="invalid or malformed"):
            build_upload_target(IDENTIFIER + "\n")

    def test_invalid_link_is_value_error(self):
        with pytest.raises(ValueError):
            resolve_upload_target("https://upload.example.com/abc")


def test_resolve_upload_target():
    link = f"https://upload.example.com/{IDENTIFIER}"
    assert resolve_upload_target(link, "http://api.test") == f"http://api.test/{IDENTIFIER}"
