"""Unit tests for authorization code extraction."""

import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../src"))

from md2gslides.auth.code_extractor import extract_code
from md2gslides.utils.errors import (
    AuthorizationError,
    AuthorizationErrorKind,
    InputError,
    InputErrorReason,
)


class TestExtractFromUrl:
    """Tests for pasted callback URLs."""

    def test_decodes_code_parameter_once(self):
        assert extract_code("https://example.com/cb?code=abc%2Bdef") == "abc+def"

    def test_google_callback_with_extra_params(self):
        url = (
            "http://localhost:3000/oauth/callback?state=xyz"
            "&code=4/0AbCdEf%2Fghi&scope=https://www.googleapis.com/auth/drive"
        )
        assert extract_code(url) == "4/0AbCdEf/ghi"

    def test_url_without_path(self):
        assert extract_code("https://example.com?code=XYZ") == "XYZ"

    def test_surrounding_whitespace_is_ignored(self):
        assert extract_code("  https://example.com/cb?code=XYZ \n") == "XYZ"

    def test_missing_code_parameter(self):
        with pytest.raises(InputError) as exc_info:
            extract_code("https://example.com/cb")
        assert exc_info.value.reason == InputErrorReason.MISSING_CODE_PARAM

    def test_empty_code_parameter_is_missing(self):
        with pytest.raises(InputError) as exc_info:
            extract_code("https://example.com/cb?code=&state=1")
        assert exc_info.value.reason == InputErrorReason.MISSING_CODE_PARAM

    def test_malformed_url(self):
        with pytest.raises(InputError) as exc_info:
            extract_code("http://[::1/cb?code=abc")
        assert exc_info.value.reason == InputErrorReason.MALFORMED_URL

    def test_invalid_utf8_in_code_parameter_is_malformed(self):
        with pytest.raises(InputError) as exc_info:
            extract_code("https://example.com/cb?code=ab%FFcd")
        assert exc_info.value.reason == InputErrorReason.MALFORMED_URL

    def test_url_without_host_is_malformed(self):
        with pytest.raises(InputError) as exc_info:
            extract_code("https://")
        assert exc_info.value.reason == InputErrorReason.MALFORMED_URL


class TestExtractRawCode:
    """Tests for bare authorization codes."""

    def test_trims_whitespace(self):
        assert extract_code("  abc123  ") == "abc123"

    def test_decodes_percent_encoded_code(self):
        assert extract_code("4/0AbCd%2Fxyz") == "4/0AbCd/xyz"

    def test_plus_is_kept_literally(self):
        assert extract_code("abc+def") == "abc+def"

    def test_free_text_is_returned_unchanged(self):
        assert extract_code("not a url, not a code??") == "not a url, not a code??"

    def test_invalid_escape_returns_input_unchanged(self):
        assert extract_code("abc%zz%41") == "abc%zz%41"

    def test_invalid_utf8_returns_input_unchanged(self):
        assert extract_code("abc%E0%A4") == "abc%E0%A4"

    def test_empty_input(self):
        with pytest.raises(InputError) as exc_info:
            extract_code("")
        assert exc_info.value.reason == InputErrorReason.EMPTY

    def test_whitespace_only_input(self):
        with pytest.raises(InputError) as exc_info:
            extract_code("   \t ")
        assert exc_info.value.reason == InputErrorReason.EMPTY

    def test_input_error_is_an_authorization_error(self):
        with pytest.raises(AuthorizationError) as exc_info:
            extract_code("")
        assert exc_info.value.kind == AuthorizationErrorKind.INVALID_INPUT
