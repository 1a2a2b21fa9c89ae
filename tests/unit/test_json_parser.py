"""Tests for extracting JSON from free-form model output."""

from __future__ import annotations

import pytest

from consult_ai.exceptions import JSONParseError
from consult_ai.providers.json_parser import extract_json_array, extract_json_object, first_balanced_object


class TestFirstBalancedObject:
    def test_ignores_braces_in_strings(self) -> None:
        text = 'prefix {"a": "}{", "b": {"c": 1}} suffix {"d": 2}'
        assert first_balanced_object(text) == '{"a": "}{", "b": {"c": 1}}'

    def test_escaped_quote_inside_string(self) -> None:
        text = '{"a": "say \\"hi\\" }"}'
        assert first_balanced_object(text) == text

    def test_unbalanced(self) -> None:
        assert first_balanced_object('{"a": 1') is None

    def test_no_object(self) -> None:
        assert first_balanced_object("no json here") is None


class TestExtractJsonObject:
    def test_plain_object(self) -> None:
        assert extract_json_object('{"a": 1}') == {"a": 1}

    def test_strips_code_fences(self) -> None:
        assert extract_json_object('```json\n{"tests": ["CBC"]}\n```') == {"tests": ["CBC"]}

    def test_surrounding_prose(self) -> None:
        content = 'Here is the report: {"summary": "ok"} Hope this helps.'
        assert extract_json_object(content) == {"summary": "ok"}

    def test_trailing_comma_repaired(self) -> None:
        assert extract_json_object('{"a": [1, 2,], "b": 3,}') == {"a": [1, 2], "b": 3}

    def test_empty_raises(self) -> None:
        with pytest.raises(JSONParseError, match="Empty"):
            extract_json_object("   ")

    def test_no_object_raises(self) -> None:
        with pytest.raises(JSONParseError, match="No JSON object"):
            extract_json_object("I cannot help with that.")

    def test_invalid_json_keeps_raw_response(self) -> None:
        with pytest.raises(JSONParseError) as exc_info:
            extract_json_object("{'single': 'quotes'}")
        assert exc_info.value.raw_response == "{'single': 'quotes'}"


class TestExtractJsonArray:
    def test_array(self) -> None:
        assert extract_json_array('```json\n[{"id": 1}, {"id": 2}]\n```') == [{"id": 1}, {"id": 2}]

    def test_no_array_raises(self) -> None:
        with pytest.raises(JSONParseError):
            extract_json_array('{"id": 1}')

    def test_invalid_array_raises(self) -> None:
        with pytest.raises(JSONParseError):
            extract_json_array("[1, 2")
